##########################################################################################
"""
Functions to locate and read the TUV source files and write regenerated artifacts
"""
##########################################################################################

import logging
import os
from pathlib import Path
from typing import Iterable, Union

PathLike = Union[str, os.PathLike]


def read_lines(file_name: PathLike) -> list[str]:
    """Read a text file into a list of lines without line endings.

    Args:
        file_name (PathLike): path to the file

    Returns:
        list[str]: The lines of the file in order
    """
    with open(file_name, "r", encoding="utf-8", errors="surrogateescape") as f:
        return f.read().splitlines()


def write_lines(file_name: PathLike, lines: Iterable[str]) -> None:
    """Write a fully assembled artifact in one go, one newline per line."""
    content = "".join(f"{line}\n" for line in lines)
    with open(file_name, "w", encoding="utf-8", errors="surrogateescape") as f:
        f.write(content)
    logging.debug(f"Wrote {file_name}")


def read_source_files(file_names: Iterable[PathLike]) -> dict[str, list[str]]:
    """Read several files into a mapping of base name to lines."""
    return {Path(name).name: read_lines(name) for name in file_names}


def get_rxn_files(
    rxn_dir: PathLike, rxn_prefix: str = "rxn"
) -> tuple[list[Path], list[Path]]:
    """Split the files of the TUV reaction source directory into catalog files
    (subroutines with reaction labels) and call-site files (subroutine calls).

    Object files and hidden files are ignored.

    Args:
        rxn_dir (PathLike): The TUV ``SRC/RXN`` directory
        rxn_prefix (str, optional): Prefix of the catalog files. Defaults to "rxn".

    Returns:
        tuple[list[Path], list[Path]]: catalog files and call-site files, sorted by name
    """
    rxn_dir = Path(rxn_dir)
    if not rxn_dir.is_dir():
        raise FileNotFoundError(f"TUV reaction directory not found: {rxn_dir}")
    tuv_files = sorted(
        path
        for path in rxn_dir.iterdir()
        if path.is_file()
        and not path.name.startswith(".")
        and not path.name.endswith(".o")
    )
    rxn_files = [path for path in tuv_files if path.name.startswith(rxn_prefix)]
    call_files = [path for path in tuv_files if not path.name.startswith(rxn_prefix)]
    logging.info(
        f"Found {len(rxn_files)} reaction files and {len(call_files)} files with subroutine calls"
    )
    return rxn_files, call_files


def get_input_files(input_dir: PathLike) -> list[Path]:
    """All non-hidden files in the TUV input directory."""
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        raise FileNotFoundError(f"TUV input directory not found: {input_dir}")
    return sorted(
        path
        for path in input_dir.iterdir()
        if path.is_file() and not path.name.startswith(".")
    )
