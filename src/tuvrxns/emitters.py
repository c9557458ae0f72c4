##########################################################################################
"""
Regenerate the files that depend on the TUV reaction numbering:

- the reaction section of the TUV input files
- the DSMACC include files linking MCM photolysis numbers to TUV reaction numbers
- the wiki tables listing MCM and TUV numbers side by side

Reaction numbers are always re-derived from the position in the registry, numbers
stored in the inputs are never trusted. Each artifact is assembled in memory and
written only when it is complete.
"""
##########################################################################################

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

from . import io_functions as io
from .database import ReactionDatabase
from .errors import ConfigurationMismatchError, StructuralParseError
from .flags import flag_char
from .parsing import COUNT_WIDTH, locate_count_line, locate_mechanism_section
from .registry import ReactionRegistry
from .report import SetrxnsReport

SEVAL_CALL = "seval(szabin,theta,tmp,tmp2,b,c,d)"


def format_reaction_line(flag: bool, index: int, label: str) -> str:
    return f"{flag_char(flag)}{index:3d} {label}"


def regenerate_input_deck(
    lines: Sequence[str],
    registry: ReactionRegistry,
    flags: np.ndarray,
    artifact: str = "",
) -> list[str]:
    """Rewrite the reaction section and the output reaction count of a TUV input file.

    Everything up to and including the ``photolysis reactions`` line and everything
    from the last ``===`` line onwards is kept as is.

    Args:
        lines (Sequence[str]): Content of the input file.
        registry (ReactionRegistry): The reaction registry.
        flags (np.ndarray): One flag per registry entry.
        artifact (str, optional): File name used in error messages.

    Raises:
        StructuralParseError: The section markers or the ``nmj`` line are missing.
        ValueError: The flags do not match the registry length.

    Returns:
        list[str]: The new content of the input file.
    """
    if len(flags) != len(registry):
        raise ValueError(f"Got {len(flags)} flags for {len(registry)} reactions")
    start, end = locate_mechanism_section(lines, artifact)
    count_line = locate_count_line(lines, artifact)

    lines = list(lines)
    n_active = int(np.count_nonzero(flags))
    lines[count_line] = f"{lines[count_line][:-COUNT_WIDTH]}{n_active:{COUNT_WIDTH}d}"

    reactions = [
        format_reaction_line(flag, index, label)
        for flag, (index, label) in zip(flags, registry.numbered())
    ]
    return lines[: start + 1] + reactions + lines[end:]


def build_linkage_table(
    registry: ReactionRegistry,
    database: ReactionDatabase,
    report: Optional[SetrxnsReport] = None,
    artifact: str = "",
) -> list[str]:
    """Build the Fortran SELECT CASE block mapping TUV numbers to MCM numbers.

    Every TUV reaction used by the database gets one CASE, with one assignment per
    MCM number sharing that reaction. Scaling factors other than 1 multiply the rate.

    Args:
        registry (ReactionRegistry): The reaction registry.
        database (ReactionDatabase): MCM numbers with TUV labels.
        report (SetrxnsReport, optional): Collects labels missing in TUV.
        artifact (str, optional): Name of the include file for messages.

    Returns:
        list[str]: Lines of the include file.
    """
    lines = ["  SELECT CASE (jl)"]
    for label in database.unique_labels():
        result = registry.index_of(label)
        if not result.found:
            logging.warning(
                f"Reaction {label} not found in TUV. Reaction ignored in {artifact or database.name}."
            )
            if report is not None:
                report.add_miss(label, database.name, artifact)
            continue
        lines.append(f"    CASE({result.index}) ! {label}")
        for entry in database.entries_for(label):
            if entry.is_scaled():
                lines.append(
                    f"      j({entry.number}) = {SEVAL_CALL}*{entry.scaling_factor:.3f}"
                )
            else:
                lines.append(f"      j({entry.number}) = {SEVAL_CALL}")
    lines.append("  END SELECT")
    return lines


def annotate_documentation(
    template: Sequence[str],
    registry: ReactionRegistry,
    database: ReactionDatabase,
    column_width: int,
    report: Optional[SetrxnsReport] = None,
    artifact: str = "",
) -> tuple[list[str], int]:
    """Prefix the wiki rows of a template with the MCM and TUV reaction numbers.

    The row of a reaction is the first line starting with its anchor ``J(<mcm number>)``.
    The row becomes ``<anchor padded to column_width> | <tuv number> | <row>``.
    Reactions without a row in the template or without a TUV number are skipped.

    Returns:
        tuple[list[str], int]: The annotated lines and the number of annotated rows.
    """
    wiki = list(template)
    counter = 0
    annotated = set()
    for label in database.unique_labels():
        anchor = f"J({database.entries_for(label)[0].number})"
        row = next((i for i, line in enumerate(wiki) if line.startswith(anchor)), None)
        result = registry.index_of(label)
        if not result.found:
            logging.warning(f"Reaction {label} not found in TUV. Row {anchor} not annotated.")
            if report is not None:
                report.add_miss(label, database.name, artifact)
            continue
        if row is None:
            logging.debug(f"No wiki row starting with {anchor} ({label})")
            continue
        if row in annotated:
            logging.debug(f"Wiki row {anchor} already annotated, {label} skipped")
            continue
        annotated.add(row)
        wiki[row] = f"{anchor.ljust(column_width)} | {result.index:3d} | {wiki[row]}"
        counter += 1
    return wiki, counter


def write_input_decks(
    file_names: Sequence[Union[str, Path]],
    registry: ReactionRegistry,
    flags_for,
    report: SetrxnsReport,
) -> list[Path]:
    """Regenerate every TUV input file in ``file_names``.

    ``flags_for(lines, artifact)`` returns the flags of one input file. A file with
    missing markers or that cannot be read is reported and left untouched, the other files are still written.

    Returns:
        list[Path]: The files that were rewritten.
    """
    written = []
    for file_name in file_names:
        file_name = Path(file_name)
        artifact = file_name.name
        try:
            lines = io.read_lines(file_name)
        except OSError as error:
            logging.error(f"Input file {artifact} not readable: {error}")
            report.failures[artifact] = str(error)
            continue
        try:
            flags = flags_for(lines, artifact)
            new_lines = regenerate_input_deck(lines, registry, flags, artifact)
        except StructuralParseError as error:
            logging.error(f"Input file {artifact} not regenerated: {error.log_message()}")
            report.failures[artifact] = error.log_message()
            continue
        io.write_lines(file_name, new_lines)
        written.append(file_name)
        logging.info(
            f"{artifact}: {len(registry)} reactions written, "
            f"{int(np.count_nonzero(flags))} active"
        )
    return written


def write_linkage_tables(
    registry: ReactionRegistry,
    databases: Sequence[ReactionDatabase],
    output_dir: Union[str, Path],
    report: SetrxnsReport,
) -> list[Path]:
    """Write one ``<database>.inc`` include file per database to ``output_dir``."""
    written = []
    for database in databases:
        file_name = Path(output_dir) / f"{database.name}.inc"
        lines = build_linkage_table(registry, database, report, file_name.name)
        io.write_lines(file_name, lines)
        written.append(file_name)
        logging.info(f"Linkage table for {database.name} written to {file_name}")
    return written


def write_documentation(
    templates: Sequence[Union[str, Path]],
    outputs: Sequence[Union[str, Path]],
    column_widths: Union[int, Sequence[int]],
    databases: Sequence[ReactionDatabase],
    registry: ReactionRegistry,
    report: SetrxnsReport,
) -> list[Path]:
    """Annotate every wiki template and write it to the matching output file.

    Raises:
        ConfigurationMismatchError: Templates, outputs, column widths and databases
            are not given in equal numbers.
    """
    if isinstance(column_widths, int):
        column_widths = [column_widths] * len(templates)
    counts = {
        "templates": len(templates),
        "outputs": len(outputs),
        "column widths": len(column_widths),
        "databases": len(databases),
    }
    if len(set(counts.values())) > 1:
        raise ConfigurationMismatchError(
            "Different number of wiki input and output files specified", counts
        )

    written = []
    for template, output, width, database in zip(templates, outputs, column_widths, databases):
        output = Path(output)
        try:
            wiki = io.read_lines(template)
        except OSError as error:
            logging.error(f"Wiki template {template} not readable: {error}")
            report.failures[output.name] = str(error)
            continue
        wiki, counter = annotate_documentation(
            wiki, registry, database, width, report, output.name
        )
        io.write_lines(output, wiki)
        report.annotations[output.name] = counter
        written.append(output)
        logging.info(f"Reaction numbers for {counter} reactions written to {output.name}.")
    return written
