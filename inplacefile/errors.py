"""Error kinds for opening, saving and discarding an in-place edit."""

from __future__ import annotations

import enum
from pathlib import Path


class OpenErrorKind(enum.Enum):
    CANONICALIZE = "failed to canonicalize path"
    CURRENT_DIR = "failed to fetch current directory"
    EMPTY_BACKUP = "backup path is empty"
    NO_FILENAME = "path does not have a filename"
    NO_PARENT = "path does not have a parent directory"
    GET_METADATA = "failed to get metadata for file"
    SET_METADATA = "failed to set metadata on temporary file"
    MKTEMP = "failed to create temporary file"
    OPEN = "failed to open file for reading"
    SAME_FILE = "path and backup path point to same file"

    @property
    def message(self) -> str:
        return self.value


class SaveErrorKind(enum.Enum):
    SAVE_BACKUP = "failed to move file to backup path"
    PERSIST_TEMP = "failed to save temporary file at path"

    @property
    def message(self) -> str:
        return self.value


class DiscardErrorKind(enum.Enum):
    RMTEMP = "failed to delete temporary file"

    @property
    def message(self) -> str:
        return self.value


class InPlaceError(Exception):
    """Base exception for in-place editing errors."""

    kind: enum.Enum

    def __init__(self, kind: enum.Enum, path: Path | None = None, os_error: OSError | None = None) -> None:
        self.kind = kind
        self.path = path
        self.os_error = os_error
        super().__init__(self._format())

    def _format(self) -> str:
        msg = self.kind.value
        if self.path is not None:
            msg = f"{msg}: {self.path}"
        if self.os_error is not None:
            msg = f"{msg} ({self.os_error.strerror or self.os_error})"
        return msg

    def format_user_message(self) -> str:
        return str(self)


class OpenError(InPlaceError):
    """Raised while opening a file for editing. No file has been modified."""

    kind: OpenErrorKind


class SaveError(InPlaceError):
    """Raised while committing an edit.

    The target may already have been moved to the backup path; check there
    before assuming data loss. ``rollback_error`` is set when moving the
    backup back into place also failed.
    """

    kind: SaveErrorKind

    def __init__(
        self,
        kind: SaveErrorKind,
        path: Path | None = None,
        os_error: OSError | None = None,
        *,
        rollback_error: OSError | None = None,
    ) -> None:
        self.rollback_error = rollback_error
        super().__init__(kind, path, os_error)

    def format_user_message(self) -> str:
        msg = str(self)
        if self.rollback_error is not None:
            msg += f"\n  restoring backup also failed: {self.rollback_error}"
        return msg


class DiscardError(InPlaceError):
    """Raised when the temporary file could not be removed.

    The original file is intact but a stray temporary file may remain.
    """

    kind: DiscardErrorKind
