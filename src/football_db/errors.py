"""Exception taxonomy shared by the loaders and the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class FootballDBError(Exception):
    """Base class for every error raised by the loaders."""


class SkippableInputError(FootballDBError):
    """A single input file cannot be used; the run continues without it."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class InvalidFilenameError(SkippableInputError):
    pass


class CorruptFileError(SkippableInputError):
    pass


class MissingParentError(SkippableInputError):
    """The file belongs to a match that has not been loaded."""


class PreconditionError(FootballDBError):
    """A dimension table required by a loader is empty."""


class UnresolvedKeyError(FootballDBError, LookupError):
    """A natural key could not be resolved after reconciliation."""

    def __init__(self, table: str, key: Any) -> None:
        super().__init__(
            f"No row in '{table}' for key {key!r}; it was not collected before reconciliation"
        )
        self.table = table
        self.key = key


__all__ = [
    "FootballDBError",
    "SkippableInputError",
    "InvalidFilenameError",
    "CorruptFileError",
    "MissingParentError",
    "PreconditionError",
    "UnresolvedKeyError",
]
