from __future__ import annotations

from pathlib import Path


class AutoClearError(Exception):
    pass


class InputError(AutoClearError):
    """Target directory is missing or cannot be listed."""


class SkippedEntryError(AutoClearError):
    """An entry left out of the scan; the run continues without it."""

    action = "read"

    def __init__(self, path: Path, cause: Exception) -> None:
        super().__init__(f"cannot {self.action} '{path}': {cause}")
        self.path = path
        self.cause = cause


class TimestampError(SkippedEntryError):
    """An entry's modification time could not be read or represented."""

    action = "read modification time of"


class ListingError(SkippedEntryError):
    """A nested directory could not be listed during a recursive scan."""

    action = "list directory"


class DeletionError(AutoClearError):
    """A selected file could not be removed."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"cannot remove file '{path}': {cause}")
        self.path = path
        self.cause = cause
