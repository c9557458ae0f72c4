"""
Recover the reaction subroutines of TUV and the order in which they are called.

The catalog maps every reaction subroutine to the labels it defines; the call
sequence lists the subroutines in the order TUV invokes them. Together they fix
the order of the reactions in the TUV input files.
"""

import logging
from typing import Callable, Iterable, Mapping, Sequence

from .errors import DuplicateSubroutineError, StructuralParseError
from .parsing import LineKind, tokenize

SubroutineCatalog = dict[str, list[str]]
FileOrder = Callable[[Iterable[str]], list[str]]


def descending_filename_order(file_names: Iterable[str]) -> list[str]:
    """TUV calls its dispatch files in reverse alphabetical order of their names."""
    return sorted(file_names, reverse=True)


def find_rxn_labels(lines: Sequence[str], source: str = "") -> SubroutineCatalog:
    """Assign every reaction label of a file to the closest preceding subroutine declaration.

    Args:
        lines (Sequence[str]): Content of one rxn file.
        source (str, optional): File name used in error messages.

    Raises:
        StructuralParseError: A label appears before the first subroutine declaration.

    Returns:
        dict[str, list[str]]: Subroutine names with their labels in source order.
    """
    labels = {}
    current = None
    for token in tokenize(lines, (LineKind.SUBROUTINE, LineKind.LABEL), source):
        if token.kind is LineKind.SUBROUTINE:
            current = token.token
            if current in labels:
                raise DuplicateSubroutineError(
                    f"Subroutine {current} is declared more than once",
                    {"file": source, "line_number": token.number},
                )
            labels[current] = []
        elif current is None:
            raise StructuralParseError(
                "Reaction label outside of any subroutine",
                {"file": source, "line_number": token.number, "label": token.token},
            )
        else:
            labels[current].append(token.token)
    return labels


def build_catalog(rxn_files: Mapping[str, Sequence[str]]) -> SubroutineCatalog:
    """Merge the subroutines of all rxn files into one namespace.

    Args:
        rxn_files (Mapping[str, Sequence[str]]): File names mapped to their lines.

    Raises:
        DuplicateSubroutineError: A subroutine name is declared in two files.

    Returns:
        dict[str, list[str]]: Subroutine names with their ordered reaction labels.
    """
    catalog = {}
    origin = {}
    for file_name, lines in rxn_files.items():
        for name, labels in find_rxn_labels(lines, file_name).items():
            if name in catalog:
                raise DuplicateSubroutineError(
                    f"Subroutine {name} is declared more than once",
                    {"first": origin[name], "second": file_name},
                )
            catalog[name] = labels
            origin[name] = file_name
    logging.info(
        f"Found {len(catalog)} reaction subroutines with "
        f"{sum(len(labels) for labels in catalog.values())} labels"
    )
    return catalog


def get_call_order(
    call_files: Mapping[str, Sequence[str]],
    order: FileOrder = descending_filename_order,
) -> list[str]:
    """Find the order in which the reaction subroutines are called.

    Files are processed in the order given by ``order`` and their calls concatenated.
    Repeated calls are kept, each one adds the labels of the subroutine again.

    Args:
        call_files (Mapping[str, Sequence[str]]): File names mapped to their lines.
        order (FileOrder, optional): Sorts the file names into processing order.
            Defaults to descending_filename_order.

    Returns:
        list[str]: Called subroutine names in invocation order.
    """
    call_order = []
    for file_name in order(call_files):
        calls = tokenize(call_files[file_name], (LineKind.CALL,), file_name)
        logging.debug(f"{file_name}: {len(calls)} subroutine calls")
        call_order.extend(call.token for call in calls)
    return call_order
