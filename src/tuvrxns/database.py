"""
Loader for the external reaction databases (MCM/GECKO-A numbering of TUV reactions).

The database files are ``|``-separated tables with a single header line, e.g.::

    MCM|TUV label
      1|O3 -> O2 + O(1D)
      2|O3 -> O2 + O(3P)

Several MCM numbers may point to the same TUV label. An optional ``scaling_factor``
column scales the TUV photolysis rate before it is handed to the MCM number.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import pandas as pd

REQUIRED_COLUMNS = ("number", "label")


@dataclass(frozen=True)
class ExternalDatabaseEntry:
    number: int
    label: str
    scaling_factor: Optional[float] = None

    def is_scaled(self) -> bool:
        """True unless the entry carries no scaling factor or the identity."""
        return self.scaling_factor is not None and self.scaling_factor != 1


@dataclass(frozen=True)
class ReactionDatabase:
    """Read-only snapshot of one external database."""

    name: str
    entries: tuple[ExternalDatabaseEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def unique_labels(self) -> list[str]:
        """Labels in order of first appearance."""
        return list(dict.fromkeys(entry.label for entry in self.entries))

    def entries_for(self, label: str) -> list[ExternalDatabaseEntry]:
        return [entry for entry in self.entries if entry.label == label]


def load_database(
    file_name: Union[str, os.PathLike],
    name: Optional[str] = None,
    separator: str = "|",
    header_skip: int = 1,
    columns: Sequence[str] = REQUIRED_COLUMNS,
) -> ReactionDatabase:
    """Read a delimited reaction database into an immutable snapshot.

    Args:
        file_name (str): Path to the database file.
        name (str, optional): Name of the database in log messages. Defaults to the file stem.
        separator (str, optional): Column separator. Defaults to "|".
        header_skip (int, optional): Number of header lines to skip. Defaults to 1.
        columns (Sequence[str], optional): Column names in file order. Must contain
            "number" and "label", may contain "scaling_factor".

    Raises:
        ValueError: A required column is missing from ``columns``.

    Returns:
        ReactionDatabase: The entries of the database in file order.
    """
    missing = [column for column in REQUIRED_COLUMNS if column not in columns]
    if missing:
        raise ValueError(f"Database columns must include {missing}, got {list(columns)}")
    if name is None:
        name = os.path.splitext(os.path.basename(file_name))[0]

    table = pd.read_csv(
        file_name,
        sep=separator,
        skiprows=header_skip,
        header=None,
        names=list(columns),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    for column in table.columns:
        table[column] = table[column].str.strip()
    table = table[table["label"] != ""]

    has_scaling = "scaling_factor" in table.columns
    entries = []
    for row in table.itertuples(index=False):
        scaling_factor = None
        if has_scaling and row.scaling_factor != "":
            scaling_factor = float(row.scaling_factor)
        entries.append(ExternalDatabaseEntry(int(row.number), row.label, scaling_factor))
    logging.debug(f"Loaded {len(entries)} entries from {name} ({file_name})")
    return ReactionDatabase(name, tuple(entries))
