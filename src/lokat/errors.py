"""
Exception hierarchy for lokat.

Runtime lookups never raise: a missing key or an out-of-range id is a
fallback, not an error. Loader failures are not wrapped either; callers
awaiting a load see the exact exception their loader raised.

Only code generation has fatal errors of its own.
"""

from pathlib import Path

__all__ = [
    "LokatError",
    "GenerationError",
    "ReferenceLocaleMissingError",
    "MalformedInputError",
]


class LokatError(Exception):
    """Base error for lokat."""


class GenerationError(LokatError):
    """Fatal error that aborts a generation run. No partial output is produced."""


class ReferenceLocaleMissingError(GenerationError):
    """The reference locale is not present in the loaded layout."""

    def __init__(self, locale: str) -> None:
        self.locale = locale
        super().__init__(f"Reference locale '{locale}' not found in input")


class MalformedInputError(GenerationError):
    """A locale file (or the input directory) could not be read or decoded."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")
