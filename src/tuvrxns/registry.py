"""
The reaction registry: the ordered list of TUV reaction labels.

The 1-based position of a label in the registry is its TUV reaction number in the
input files, the DSMACC include files and the wiki tables.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Optional, Sequence

from .errors import RegistryLookupError, StructuralParseError
from .parsing import LineKind, tokenize


@dataclass(frozen=True)
class LookupResult:
    """Outcome of looking up a label: either a 1-based index or the reason it failed."""

    label: str
    index: Optional[int] = None
    reason: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.index is not None


class ReactionRegistry:
    """Immutable, ordered sequence of reaction labels.

    Labels may repeat when a subroutine is called twice; a label then resolves to
    its first position.
    """

    def __init__(self, labels: Iterable[str]):
        self._labels = tuple(labels)
        self._first_index = {}
        for i, label in enumerate(self._labels, start=1):
            self._first_index.setdefault(label, i)

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __getitem__(self, item):
        return self._labels[item]

    def __contains__(self, label) -> bool:
        return label in self._first_index

    def __eq__(self, other) -> bool:
        if isinstance(other, ReactionRegistry):
            return self._labels == other._labels
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._labels)

    def __repr__(self) -> str:
        return f"ReactionRegistry({len(self)} reactions)"

    def index_of(self, label: str) -> LookupResult:
        """Look up the TUV reaction number of a label by exact string match."""
        index = self._first_index.get(label)
        if index is None:
            return LookupResult(label, reason="label not found in TUV")
        return LookupResult(label, index=index)

    def numbered(self) -> Iterator[tuple[int, str]]:
        """Iterate over (1-based index, label) pairs."""
        return enumerate(self._labels, start=1)


def extract_special_label(lines: Sequence[str], source: str = "") -> str:
    """Return the first reaction label of a file, stripped of surrounding blanks.

    TUV defines the O2 photolysis outside of the rxn files, in ``swchem.f``; it is
    always the first reaction.
    """
    labels = tokenize(lines, (LineKind.LABEL,), source)
    if not labels:
        raise StructuralParseError("No reaction label found", {"file": source})
    return labels[0].token.strip()


def assemble_registry(
    catalog: Mapping[str, Sequence[str]],
    call_order: Sequence[str],
    special_label: str,
) -> ReactionRegistry:
    """Build the registry from the special label followed by the labels of every
    called subroutine in call order.

    Args:
        catalog (Mapping[str, Sequence[str]]): Subroutine names with their labels.
        call_order (Sequence[str]): Called subroutines in invocation order.
        special_label (str): Label of the reaction defined outside the rxn files.

    Raises:
        RegistryLookupError: A called subroutine is not in the catalog.

    Returns:
        ReactionRegistry: The authoritative reaction list.
    """
    labels = [special_label]
    for position, subroutine in enumerate(call_order, start=1):
        try:
            labels.extend(catalog[subroutine])
        except KeyError as error:
            raise RegistryLookupError(
                f"Subroutine {subroutine} is called but not defined in any rxn file",
                {"call_position": position},
            ) from error
    logging.info(f"Reaction registry holds {len(labels)} reactions")
    return ReactionRegistry(labels)
