"""
Pydantic-based configuration for regenerating the TUV reaction files.

This module provides validated configuration handling with clear defaults,
type checking, and automatic documentation generation.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .database import REQUIRED_COLUMNS
from .flags import FlagPolicy


class DatabaseConfig(BaseModel):
    """Location and layout of one external reaction database."""

    file: Path = Field(..., description="Path to the database file")
    separator: str = Field(default="|", description="Column separator")
    header_skip: int = Field(default=1, ge=0, description="Header lines to skip")
    columns: List[str] = Field(
        default=list(REQUIRED_COLUMNS),
        description="Column names in file order, optionally including scaling_factor",
    )

    model_config = {"extra": "forbid"}

    @field_validator("columns")
    @classmethod
    def check_required_columns(cls, v):
        missing = [column for column in REQUIRED_COLUMNS if column not in v]
        if missing:
            raise ValueError(f"Database columns must include {missing}")
        return v


def _default_databases() -> Dict[str, DatabaseConfig]:
    return {
        "MCMv32": DatabaseConfig(
            file=Path("MCMv32.db"), columns=["number", "scaling_factor", "label"]
        ),
        "MCMv331": DatabaseConfig(file=Path("MCMv331.db")),
        "MCM-GECKO-A": DatabaseConfig(file=Path("MCM-GECKO-A.db")),
    }


class SetrxnsConfig(BaseModel):
    """
    Configuration for regenerating the TUV input files, the DSMACC include files
    and the wiki tables from the TUV reaction sources.

    All file paths are resolved relative to the configuration file location.

    Example:
        >>> config = SetrxnsConfig.from_yaml("user_settings.yaml")
        >>> print(config.tuv_directory)
    """

    # ============================================================================
    # REQUIRED PARAMETERS
    # ============================================================================

    tuv_directory: Path = Field(
        ...,
        description="Main directory of the TUV version whose reactions are used",
    )

    # ============================================================================
    # OPTIONAL PARAMETERS - TUV layout
    # ============================================================================

    rxn_directory: Path = Field(
        default=Path("SRC/RXN"),
        description="Directory with rxn files and subroutine calls, relative to tuv_directory",
    )

    input_directory: Path = Field(
        default=Path("INPUTS"),
        description="Directory with the TUV input files, relative to tuv_directory",
    )

    rxn_file_prefix: str = Field(
        default="rxn",
        description="Files starting with this prefix define reaction subroutines, all others call them",
    )

    special_label_file: str = Field(
        default="swchem.f",
        description="File in rxn_directory whose first reaction label opens the reaction list (O2 photolysis)",
    )

    input_files: Optional[List[Path]] = Field(
        default=None,
        description=(
            "TUV input files to rewrite, relative to input_directory. "
            "If not specified, all (non-hidden) files in input_directory are rewritten."
        ),
    )

    # ============================================================================
    # OPTIONAL PARAMETERS - Flags
    # ============================================================================

    flag_policy: FlagPolicy = Field(
        default=FlagPolicy.PRESERVE_EXISTING,
        description=(
            "How the reaction flags in the input files are set: PRESERVE_EXISTING (-1, keep the "
            "flags of each input file), ALL_FALSE (0), ALL_TRUE (1), MATCH_DB_A (2, reactions "
            "used in MCM/GECKO-A) or MATCH_DB_B (3, reactions used in MCMv3.3.1)"
        ),
    )

    # ============================================================================
    # OPTIONAL PARAMETERS - Databases
    # ============================================================================

    database_directory: Path = Field(
        default=Path("data"),
        description="Directory holding the database files",
    )

    databases: Dict[str, DatabaseConfig] = Field(
        default_factory=_default_databases,
        description="External reaction databases by name, relative to database_directory",
    )

    flag_databases: Dict[str, str] = Field(
        default={"MATCH_DB_A": "MCM-GECKO-A", "MATCH_DB_B": "MCMv331"},
        description="Database used by each MATCH_DB_* flag policy",
    )

    linkage_databases: List[str] = Field(
        default=["MCMv32", "MCMv331", "MCM-GECKO-A"],
        description="Databases for which a DSMACC include file <name>.inc is written",
    )

    output_directory: Optional[Path] = Field(
        default=None,
        description="Directory for the include files. If not specified, tuv_directory is used.",
    )

    # ============================================================================
    # OPTIONAL PARAMETERS - Documentation
    # ============================================================================

    wiki_templates: List[Path] = Field(
        default=[],
        description="Markdown templates whose J(<n>) rows are annotated with TUV numbers",
    )

    wiki_outputs: List[Path] = Field(
        default=[],
        description="Output file for each wiki template",
    )

    wiki_databases: List[str] = Field(
        default=[],
        description="Database for each wiki template",
    )

    wiki_column_width: Union[int, List[int]] = Field(
        default=10,
        description="Width of the J(<n>) column, for all templates or one per template",
    )

    params_file: Optional[Path] = Field(
        default=None,
        description="parameters.csv from MCMphotolysis. If not specified, no parameter table is written.",
    )

    params_output: Path = Field(
        default=Path("params.md"),
        description="Markdown file for the parameter table",
    )

    params_header: Optional[Path] = Field(
        default=None,
        description="Markdown header of the parameter table. Defaults to the packaged header.",
    )

    # ============================================================================
    # Internal fields (not set by user)
    # ============================================================================

    _config_dir: Optional[Path] = None  # Set during from_yaml, used for path resolution

    model_config = {
        "extra": "forbid",  # Catch typos in config files
        "validate_assignment": True,  # Validate on attribute changes
        "arbitrary_types_allowed": True,  # Allow Path objects
    }

    # ============================================================================
    # VALIDATORS
    # ============================================================================

    @field_validator(
        "input_files", "wiki_templates", "wiki_outputs", "wiki_databases", mode="before"
    )
    @classmethod
    def normalize_to_list(cls, v):
        """Convert single values to lists for consistent handling."""
        if v is None:
            return v
        if isinstance(v, (str, Path)):
            return [v]
        return v

    @field_validator("flag_policy", mode="before")
    @classmethod
    def parse_flag_policy(cls, v):
        return FlagPolicy.parse(v)

    @field_validator("flag_databases")
    @classmethod
    def check_flag_policies(cls, v):
        for policy in v:
            if not FlagPolicy.parse(policy).uses_database():
                raise ValueError(f"{policy} is not a database flag policy")
        return {FlagPolicy.parse(policy).name: name for policy, name in v.items()}

    @model_validator(mode="after")
    def check_database_names(self):
        """Ensure every referenced database is defined."""
        referenced = (
            list(self.flag_databases.values())
            + self.linkage_databases
            + self.wiki_databases
        )
        unknown = sorted(set(name for name in referenced if name not in self.databases))
        if unknown:
            raise ValueError(
                f"Databases {unknown} are used but not defined in databases "
                f"(defined: {sorted(self.databases)})"
            )
        return self

    # ============================================================================
    # CLASS METHODS
    # ============================================================================

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "SetrxnsConfig":
        """
        Load and validate configuration from a YAML file.

        All relative paths in the config file are resolved relative to the
        directory containing the YAML file.

        Args:
            yaml_path: Path to the YAML configuration file

        Returns:
            Validated SetrxnsConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If config file doesn't exist
        """
        yaml_path = Path(yaml_path).resolve()

        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        logging.info(f"Reading configuration from: {yaml_path}")

        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        config = cls(**data)
        config._config_dir = yaml_path.parent

        return config

    @classmethod
    def generate_template(
        cls, output_path: Union[str, Path] = "user_settings_template.yaml"
    ):
        """
        Generate a template configuration file with all parameters documented.

        Args:
            output_path: Where to write the template file
        """
        output_path = Path(output_path)

        template = """# ============================================================================
# TUV reaction list configuration template
# ============================================================================
# Lines starting with # are comments. Uncomment and modify as needed.
# All relative paths are resolved against the directory of this file.
# ============================================================================

# Main directory of the TUV version
tuv_directory: "../TUV5.2.x"

# ============================================================================
# OPTIONAL PARAMETERS - TUV layout
# ============================================================================

# rxn_directory: "SRC/RXN"
# input_directory: "INPUTS"
# rxn_file_prefix: "rxn"
# special_label_file: "swchem.f"

# Input files to rewrite (default: all files in input_directory)
# input_files:
#   - "usrinp"
#   - "defin1"

# ============================================================================
# OPTIONAL PARAMETERS - Flags
# ============================================================================

# PRESERVE_EXISTING (-1), ALL_FALSE (0), ALL_TRUE (1),
# MATCH_DB_A (2, MCM/GECKO-A) or MATCH_DB_B (3, MCMv3.3.1)
# flag_policy: PRESERVE_EXISTING

# ============================================================================
# OPTIONAL PARAMETERS - Databases
# ============================================================================

# database_directory: "data"
# databases:
#   MCMv32:
#     file: "MCMv32.db"
#     columns: ["number", "scaling_factor", "label"]
#   MCMv331:
#     file: "MCMv331.db"
#   MCM-GECKO-A:
#     file: "MCM-GECKO-A.db"
# flag_databases:
#   MATCH_DB_A: "MCM-GECKO-A"
#   MATCH_DB_B: "MCMv331"
# linkage_databases: ["MCMv32", "MCMv331", "MCM-GECKO-A"]
# output_directory: "dsmacc"

# ============================================================================
# OPTIONAL PARAMETERS - Documentation
# ============================================================================

# wiki_templates: ["wiki/MCMv331.md", "wiki/MCM-GECKO-A.md"]
# wiki_outputs: ["wiki/MCMv331-TUV.md", "wiki/MCM-GECKO-A-TUV.md"]
# wiki_databases: ["MCMv331", "MCM-GECKO-A"]
# wiki_column_width: 10
# params_file: "parameters.csv"
# params_output: "wiki/params.md"
"""

        with open(output_path, "w") as f:
            f.write(template)

        print(f"Template configuration written to: {output_path}")
        print(
            f"  Edit this file and use it with: python SetRxns.py {output_path}"
        )

    @classmethod
    def print_help(cls):
        """Print detailed help about all configuration parameters."""
        print("=" * 80)
        print("TUV REACTION LIST CONFIGURATION PARAMETERS")
        print("=" * 80)
        print()

        for field_name, field_info in cls.model_fields.items():
            if field_name.startswith("_"):
                continue

            is_required = field_info.is_required()
            req_text = (
                "REQUIRED"
                if is_required
                else f"Optional (default: {field_info.get_default(call_default_factory=True)})"
            )
            type_text = str(field_info.annotation).replace("typing.", "")

            print(f"{field_name}")
            print(f"  Status: {req_text}")
            print(f"  Type: {type_text}")
            print(f"  Description: {field_info.description}")
            print()

        print("=" * 80)
        print("For a template configuration file, run:")
        print("  python SetRxns.py --generate-template")
        print("=" * 80)

    # ============================================================================
    # INSTANCE METHODS
    # ============================================================================

    def resolve_path(self, path: Union[str, Path]) -> Path:
        """
        Resolve a path relative to the configuration file directory.

        Args:
            path: Path to resolve (can be absolute or relative)

        Returns:
            Resolved absolute Path
        """
        path = Path(path)
        if path.is_absolute():
            return path
        elif self._config_dir:
            return (self._config_dir / path).resolve()
        else:
            return path.resolve()

    @property
    def tuv_path(self) -> Path:
        return self.resolve_path(self.tuv_directory)

    @property
    def rxn_path(self) -> Path:
        return self.tuv_path / self.rxn_directory

    @property
    def input_path(self) -> Path:
        return self.tuv_path / self.input_directory

    @property
    def output_path(self) -> Path:
        if self.output_directory is None:
            return self.tuv_path
        return self.resolve_path(self.output_directory)

    def get_database_file(self, name: str) -> Path:
        """Absolute path of a named database file."""
        file = self.databases[name].file
        if file.is_absolute():
            return file
        return self.resolve_path(self.database_directory) / file

    def get_input_files(self) -> Optional[List[Path]]:
        """Absolute paths of the configured input files, None if all files are used."""
        if self.input_files is None:
            return None
        return [
            path if path.is_absolute() else self.input_path / path
            for path in self.input_files
        ]

    def get_flag_database(self) -> Optional[str]:
        """Name of the database the flag policy matches against, if any."""
        if not self.flag_policy.uses_database():
            return None
        return self.flag_databases.get(self.flag_policy.name)

    def log_configuration(self):
        """Log the current configuration for debugging."""
        logging.info("Configuration loaded successfully:")
        for field_name, field_info in self.__class__.model_fields.items():
            if field_name.startswith("_"):
                continue
            value = getattr(self, field_name)
            if value != field_info.get_default(call_default_factory=True):
                logging.info(f"  {field_name}: {value}")
