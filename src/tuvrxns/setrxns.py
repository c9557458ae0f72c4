import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import numpy as np

from . import emitters
from . import io_functions as io
from .catalog import build_catalog, get_call_order
from .config import SetrxnsConfig
from .database import ReactionDatabase, load_database
from .errors import ConfigurationMismatchError
from .flags import FlagPolicy, compute_flags
from .params import write_params
from .registry import ReactionRegistry, assemble_registry, extract_special_label
from .report import SetrxnsReport


@dataclass
class SetrxnsResult:
    """Everything a run produced: the registry, the flags written to each input
    file and the report of all warnings."""

    registry: ReactionRegistry
    flags: dict[str, np.ndarray] = field(default_factory=dict)
    report: SetrxnsReport = field(default_factory=SetrxnsReport)
    written: list[Path] = field(default_factory=list)


def get_registry(
    tuv_directory: Union[str, Path],
    rxn_directory: Union[str, Path] = "SRC/RXN",
    rxn_file_prefix: str = "rxn",
    special_label_file: str = "swchem.f",
) -> ReactionRegistry:
    """Build the reaction registry of a TUV version without writing any file.

    Args:
        tuv_directory (Union[str, Path]): Main directory of TUV.
        rxn_directory (Union[str, Path], optional): Reaction sources relative to
            tuv_directory. Defaults to "SRC/RXN".
        rxn_file_prefix (str, optional): Prefix of the rxn files. Defaults to "rxn".
        special_label_file (str, optional): File with the O2 label. Defaults to "swchem.f".

    Returns:
        ReactionRegistry: All TUV reactions in input file order.
    """
    rxn_dir = Path(tuv_directory) / rxn_directory
    rxn_files, call_files = io.get_rxn_files(rxn_dir, rxn_file_prefix)
    catalog = build_catalog(io.read_source_files(rxn_files))
    call_order = get_call_order(io.read_source_files(call_files))
    special_file = rxn_dir / special_label_file
    special_label = extract_special_label(io.read_lines(special_file), special_file.name)
    return assemble_registry(catalog, call_order, special_label)


class _DatabaseCache:
    """Loads every database at most once per run."""

    def __init__(self, config: SetrxnsConfig):
        self.config = config
        self._databases = {}

    def __getitem__(self, name: str) -> ReactionDatabase:
        if name not in self._databases:
            settings = self.config.databases[name]
            self._databases[name] = load_database(
                self.config.get_database_file(name),
                name=name,
                separator=settings.separator,
                header_skip=settings.header_skip,
                columns=settings.columns,
            )
        return self._databases[name]


def run_setrxns(
    configuration: Union[SetrxnsConfig, str, Path] = "user_settings.yaml",
    write_files: bool = True,
    flag_policy: Optional[Union[FlagPolicy, str, int]] = None,
) -> SetrxnsResult:
    """The main run wrapper: builds the reaction registry from the TUV sources and
    regenerates the TUV input files, the DSMACC include files and the wiki tables.

    Args:
        configuration (Union[SetrxnsConfig, str, Path], optional): A configuration or the
            path to its YAML file. Defaults to "user_settings.yaml".
        write_files (bool, optional): Whether to write any file. Defaults to True.
        flag_policy (optional): Overrides the flag policy of the configuration.

    Returns:
        SetrxnsResult: The registry, the flags per input file and the warning report.
    """
    if isinstance(configuration, SetrxnsConfig):
        config = configuration
    else:
        config = SetrxnsConfig.from_yaml(configuration)
    if flag_policy is not None:
        config = config.model_copy()
        config.flag_policy = flag_policy
    config.log_configuration()

    logging.info(
        "\n################################################\n"
        + "Reading TUV reaction sources\n"
        + "################################################\n"
    )
    registry = get_registry(
        config.tuv_path,
        config.rxn_directory,
        config.rxn_file_prefix,
        config.special_label_file,
    )
    result = SetrxnsResult(registry)
    if not write_files:
        return result

    logging.info(
        "\n################################################\n"
        + "Registry complete, writing output files\n"
        + "################################################\n"
    )
    databases = _DatabaseCache(config)
    report = result.report

    input_files = config.get_input_files()
    if input_files is None:
        input_files = io.get_input_files(config.input_path)

    policy = config.flag_policy
    if policy is FlagPolicy.PRESERVE_EXISTING:
        shared_flags = None
    else:
        flag_database = config.get_flag_database()
        shared_flags = compute_flags(
            policy,
            registry,
            database=databases[flag_database] if flag_database else None,
            report=report,
        )

    def flags_for(lines, artifact):
        if shared_flags is not None:
            flags = shared_flags
        else:
            flags = compute_flags(
                policy, registry, existing_lines=lines, artifact=artifact, report=report
            )
        result.flags[artifact] = flags
        return flags

    result.written += emitters.write_input_decks(input_files, registry, flags_for, report)

    if config.linkage_databases:
        result.written += emitters.write_linkage_tables(
            registry,
            [databases[name] for name in config.linkage_databases],
            config.output_path,
            report,
        )

    if config.wiki_templates or config.wiki_outputs:
        try:
            result.written += emitters.write_documentation(
                [config.resolve_path(path) for path in config.wiki_templates],
                [config.resolve_path(path) for path in config.wiki_outputs],
                config.wiki_column_width,
                [databases[name] for name in config.wiki_databases],
                registry,
                report,
            )
        except ConfigurationMismatchError as error:
            logging.error(f"Wiki files not written: {error.log_message()}")
            report.skipped_operations["documentation"] = error.log_message()

    if config.params_file is not None:
        output = config.resolve_path(config.params_output)
        header = config.resolve_path(config.params_header) if config.params_header else None
        write_params(config.resolve_path(config.params_file), output, header)
        result.written.append(output)

    report.log_summary()
    logging.info(f"Number of reactions = {len(registry)}")
    return result

