"""Structured record of every non-fatal discrepancy found during a run."""

import logging
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class LookupMiss:
    label: str
    database: str
    artifact: str = ""


@dataclass(frozen=True)
class FlagCountMismatch:
    artifact: str
    expected: int
    found: int

    @property
    def adjusted(self) -> int:
        return abs(self.expected - self.found)

    @property
    def action(self) -> str:
        return "defaulted" if self.found < self.expected else "dropped"


@dataclass
class SetrxnsReport:
    """Warnings collected while regenerating artifacts.

    Nothing in here stopped the run: lookup misses are skipped, flag count
    mismatches are padded or truncated, and failed artifacts are left
    untouched while their siblings are still written.
    """

    lookup_misses: list[LookupMiss] = field(default_factory=list)
    flag_adjustments: list[FlagCountMismatch] = field(default_factory=list)
    annotations: dict[str, int] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    skipped_operations: dict[str, str] = field(default_factory=dict)

    def add_miss(self, label: str, database: str, artifact: str = "") -> None:
        self.lookup_misses.append(LookupMiss(label, database, artifact))

    def misses_for(self, database: str, artifact: Optional[str] = None) -> list[str]:
        return [
            miss.label
            for miss in self.lookup_misses
            if miss.database == database
            and (artifact is None or miss.artifact == artifact)
        ]

    def has_warnings(self) -> bool:
        return bool(
            self.lookup_misses
            or self.flag_adjustments
            or self.failures
            or self.skipped_operations
        )

    def log_summary(self) -> None:
        logging.info(f"{len(self.lookup_misses)} database labels not found in TUV")
        for adjustment in self.flag_adjustments:
            logging.info(
                f"{adjustment.artifact}: {adjustment.adjusted} flags {adjustment.action}"
            )
        for artifact, count in self.annotations.items():
            logging.info(f"{artifact}: {count} reactions annotated")
        for artifact, reason in self.failures.items():
            logging.error(f"{artifact} was not regenerated: {reason}")
        for operation, reason in self.skipped_operations.items():
            logging.error(f"{operation} skipped: {reason}")
