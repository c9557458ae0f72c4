"""
Activation flags of the TUV reactions.

Each reaction in a TUV input file carries a ``T``/``F`` flag deciding whether its
photolysis rate is output. The flags are either set from scratch according to a
policy or read back from an existing input file.
"""

import logging
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np

from .database import ReactionDatabase
from .parsing import locate_mechanism_section
from .registry import ReactionRegistry
from .report import FlagCountMismatch, SetrxnsReport


class FlagPolicy(Enum):
    """How flags are set.

    The integer codes of the original ``setflags`` option are kept as aliases.
    """

    PRESERVE_EXISTING = -1
    ALL_FALSE = 0
    ALL_TRUE = 1
    MATCH_DB_A = 2
    MATCH_DB_B = 3

    @classmethod
    def parse(cls, value: Union["FlagPolicy", str, int]) -> "FlagPolicy":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.lstrip("-").isdigit():
                return cls(int(stripped))
            try:
                return cls[stripped.upper()]
            except KeyError as error:
                raise ValueError(f"Unknown flag policy: {value}") from error
        return cls(value)

    def uses_database(self) -> bool:
        return self in (FlagPolicy.MATCH_DB_A, FlagPolicy.MATCH_DB_B)


def flag_char(flag: bool) -> str:
    return "T" if flag else "F"


def match_database(
    registry: ReactionRegistry,
    database: ReactionDatabase,
    report: Optional[SetrxnsReport] = None,
    artifact: str = "",
) -> np.ndarray:
    """Set the flags of all reactions used by the database, all others to False.

    Labels that are missing in TUV are skipped and reported once the whole database
    has been processed.
    """
    flags = np.zeros(len(registry), dtype=bool)
    fail = []
    for label in database.unique_labels():
        result = registry.index_of(label)
        if result.found:
            flags[result.index - 1] = True
        else:
            fail.append(label)
    if fail:
        logging.warning(
            f"{len(fail)} reactions of {database.name} not found in TUV:\n" + "\n".join(fail)
        )
        if report is not None:
            for label in fail:
                report.add_miss(label, database.name, artifact)
    return flags


def read_existing_flags(
    lines: Sequence[str],
    n_reactions: int,
    artifact: str = "",
    report: Optional[SetrxnsReport] = None,
) -> np.ndarray:
    """Read the flags from the reaction section of an existing TUV input file.

    Missing flags at the end are set to True, surplus flags at the end are dropped.

    Args:
        lines (Sequence[str]): Content of the input file.
        n_reactions (int): Number of reactions in the registry.
        artifact (str, optional): Name of the input file for messages.
        report (SetrxnsReport, optional): Collects the count mismatch.

    Returns:
        np.ndarray: One boolean per registry entry.
    """
    start, end = locate_mechanism_section(lines, artifact)
    flags = [line[:1] in ("T", "t") for line in lines[start + 1 : end] if line.strip()]
    found = len(flags)
    if found < n_reactions:
        flags.extend([True] * (n_reactions - found))
        logging.warning(
            f"Less flags in {artifact or 'input file'} defined than needed for current "
            f"mechanism. Last {n_reactions - found} flags set to true."
        )
    elif found > n_reactions:
        del flags[n_reactions:]
        logging.warning(
            f"More flags in {artifact or 'input file'} defined than needed for current "
            f"mechanism. Last {found - n_reactions} flags ignored."
        )
    if found != n_reactions and report is not None:
        report.flag_adjustments.append(FlagCountMismatch(artifact, n_reactions, found))
    return np.array(flags, dtype=bool)


def compute_flags(
    policy: Union[FlagPolicy, str, int],
    registry: ReactionRegistry,
    database: Optional[ReactionDatabase] = None,
    existing_lines: Optional[Sequence[str]] = None,
    artifact: str = "",
    report: Optional[SetrxnsReport] = None,
) -> np.ndarray:
    """Compute the flag of every reaction in the registry.

    Args:
        policy (FlagPolicy): How to set the flags.
        registry (ReactionRegistry): The reaction registry.
        database (ReactionDatabase, optional): Required for the MATCH_DB_* policies.
        existing_lines (Sequence[str], optional): Input file content, required for
            PRESERVE_EXISTING.
        artifact (str, optional): Name of the input file for messages.
        report (SetrxnsReport, optional): Collects lookup misses and count mismatches.

    Raises:
        ValueError: The input required by the policy was not supplied.

    Returns:
        np.ndarray: Boolean flag vector aligned with the registry.
    """
    policy = FlagPolicy.parse(policy)
    if policy is FlagPolicy.ALL_FALSE:
        return np.zeros(len(registry), dtype=bool)
    if policy is FlagPolicy.ALL_TRUE:
        return np.ones(len(registry), dtype=bool)
    if policy.uses_database():
        if database is None:
            raise ValueError(f"Flag policy {policy.name} requires a reaction database")
        return match_database(registry, database, report, artifact)
    if existing_lines is None:
        raise ValueError("Flag policy PRESERVE_EXISTING requires an existing input file")
    return read_existing_flags(existing_lines, len(registry), artifact, report)
