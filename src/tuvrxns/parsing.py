##########################################################################################
"""
Line classifier and token extractor for the TUV Fortran sources and input decks.

Three kinds of structural line are recognised in the reaction sources:

- ``SUBROUTINE``: ``subroutine r01(nw,wl,wc,...)`` declares a reaction routine
- ``LABEL``: ``jlabel(j) = 'O3 -> O2 + O(1D)'`` declares a reaction label
- ``CALL``: ``CALL r01(nw,wl,wc,...)`` invokes a reaction routine

Keywords are matched case-insensitively at the start of the line (after blanks),
so Fortran comment lines never match.
"""
##########################################################################################

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from .errors import StructuralParseError

# Input deck structure
MECHANISM_START_MARKER = "photolysis reactions"
SECTION_END_PREFIX = "==="
COUNT_MARKER = "nmj"
COUNT_WIDTH = 3


class LineKind(Enum):
    SUBROUTINE = "subroutine"
    LABEL = "label"
    CALL = "call"
    OTHER = "other"


_LINE_PATTERNS = {
    LineKind.SUBROUTINE: re.compile(r"^[ \t]*subroutine\b", re.IGNORECASE),
    LineKind.LABEL: re.compile(r"^[ \t]*jlabel", re.IGNORECASE),
    LineKind.CALL: re.compile(r"^[ \t]*call\b", re.IGNORECASE),
}

_SUBROUTINE_NAME = re.compile(r"subroutine(.*?)\(", re.IGNORECASE)
_CALL_TARGET = re.compile(r"^[ \t]*call[ \t]+(.*)$", re.IGNORECASE)
_QUOTED = re.compile(r"([\"'])(.*?)\1")


@dataclass(frozen=True)
class SourceLine:
    """A recognised structural line and the token extracted from it."""

    number: int
    kind: LineKind
    token: str
    text: str


def classify_line(line: str) -> LineKind:
    """Return the structural category of a single source line."""
    for kind, pattern in _LINE_PATTERNS.items():
        if pattern.match(line):
            return kind
    return LineKind.OTHER


def extract_subroutine_name(line: str) -> str:
    """Name between the ``subroutine`` keyword and the next open-parenthesis."""
    found = _SUBROUTINE_NAME.search(line)
    if found is None or not found.group(1).strip():
        raise StructuralParseError(
            "Subroutine declaration without argument list", {"line": line.strip()}
        )
    return found.group(1).strip()


def extract_label(line: str) -> str:
    """First quoted substring of a label-assignment line."""
    found = _QUOTED.search(line)
    if found is None:
        raise StructuralParseError(
            "Reaction label line without quoted label", {"line": line.strip()}
        )
    return found.group(2)


def extract_call_target(line: str) -> str:
    """First token after ``call``, stripped of its argument list."""
    found = _CALL_TARGET.match(line)
    target = ""
    if found is not None:
        target = found.group(1).split("(", 1)[0].strip()
    if not target:
        raise StructuralParseError("Call statement without target", {"line": line.strip()})
    return target.split()[0]


_EXTRACTORS = {
    LineKind.SUBROUTINE: extract_subroutine_name,
    LineKind.LABEL: extract_label,
    LineKind.CALL: extract_call_target,
}


def tokenize(
    lines: Sequence[str], kinds: Optional[Iterable[LineKind]] = None, source: str = ""
) -> list[SourceLine]:
    """Classify every line and extract the tokens of the structural ones.

    Args:
        lines (Sequence[str]): File content, one entry per line.
        kinds (Iterable[LineKind], optional): Only keep these categories. Defaults to all
            structural categories.
        source (str, optional): File name used in error messages.

    Raises:
        StructuralParseError: A recognised line whose token cannot be extracted.

    Returns:
        list[SourceLine]: Structural lines in source order, with 1-based line numbers.
    """
    wanted = set(kinds) if kinds is not None else set(_EXTRACTORS)
    tokens = []
    for number, line in enumerate(lines, start=1):
        kind = classify_line(line)
        if kind not in wanted:
            continue
        try:
            token = _EXTRACTORS[kind](line)
        except StructuralParseError as error:
            error.context.update({"file": source, "line_number": number})
            raise
        tokens.append(SourceLine(number, kind, token, line))
    return tokens


def locate_mechanism_section(lines: Sequence[str], artifact: str = "") -> tuple[int, int]:
    """Find the bounds of the reaction section of an input deck.

    The section starts after the first line containing the start marker and ends
    before the *last* line beginning with the section-end prefix.

    Returns:
        tuple[int, int]: 0-based indices of the start-marker and end-marker lines.
    """
    start = next(
        (i for i, line in enumerate(lines) if MECHANISM_START_MARKER in line), None
    )
    if start is None:
        raise StructuralParseError(
            f"No '{MECHANISM_START_MARKER}' marker found", {"file": artifact}
        )
    end = None
    for i, line in enumerate(lines):
        if line.startswith(SECTION_END_PREFIX):
            end = i
    if end is None or end <= start:
        raise StructuralParseError(
            f"No line starting with '{SECTION_END_PREFIX}' after the reaction section",
            {"file": artifact},
        )
    return start, end


def locate_count_line(lines: Sequence[str], artifact: str = "") -> int:
    """Index of the first line holding the active-reaction count."""
    for i, line in enumerate(lines):
        if COUNT_MARKER in line:
            return i
    raise StructuralParseError(f"No '{COUNT_MARKER}' count line found", {"file": artifact})
