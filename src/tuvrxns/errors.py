"""Exceptions raised while building the reaction registry and its artifacts."""

from typing import Any, Mapping, Optional


class SetrxnsError(Exception):
    """Base exception for tuvrxns failures."""

    def __init__(self, message: str, context: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self} ({details})"


class StructuralParseError(SetrxnsError):
    """A marker, declaration or label line required by the grammar is missing or malformed."""


class RegistryLookupError(SetrxnsError):
    """A called subroutine has no entry in the subroutine catalog."""


class DuplicateSubroutineError(SetrxnsError):
    """The same subroutine name is declared in more than one catalog file."""


class ConfigurationMismatchError(SetrxnsError):
    """Declared input and output artifact lists have different lengths."""
