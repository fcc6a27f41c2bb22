"""Open/save/discard protocol for editing a file in place.

Nothing is ever written to the original file. New content goes to a temp
file in the same directory which is renamed over the target on save. With a
backup configured, the original is first renamed to the backup path.
"""

from __future__ import annotations

import codecs
import enum
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import IO, Any

from .errors import (
    DiscardError,
    DiscardErrorKind,
    OpenError,
    OpenErrorKind,
    SaveError,
    SaveErrorKind,
)
from .paths import BackupSpec, ResolvedPaths, StrPath, resolve_paths
from .tempfiles import (
    apply_permissions,
    create_temp,
    permissions_to_copy,
    read_metadata,
    remove_temp,
    remove_temp_quietly,
)

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    OPEN = "open"
    SAVED = "saved"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class EditRequest:
    """What to edit and how. Each ``open()`` returns an independent session.

    With ``encoding`` unset the session hands out binary handles; otherwise
    text handles with that encoding and untranslated line endings.
    """

    path: StrPath
    backup: BackupSpec | None = None
    follow_symlinks: bool = True
    encoding: str | None = None

    def __post_init__(self) -> None:
        if self.encoding is not None:
            codecs.lookup(self.encoding)

    def with_backup(self, backup: BackupSpec) -> EditRequest:
        return replace(self, backup=backup)

    def no_backup(self) -> EditRequest:
        return replace(self, backup=None)

    def follow(self, flag: bool = True) -> EditRequest:
        return replace(self, follow_symlinks=flag)

    def resolve(self) -> ResolvedPaths:
        return resolve_paths(self.path, self.backup, follow_symlinks=self.follow_symlinks)

    def open(self) -> EditSession:
        paths = self.resolve()
        st = read_metadata(paths.path, follow_symlinks=self.follow_symlinks)
        mode = permissions_to_copy(st, follow_symlinks=self.follow_symlinks)

        fd, tmp = create_temp(paths.path)
        try:
            apply_permissions(fd, tmp, mode)
        except OpenError:
            os.close(fd)
            remove_temp_quietly(tmp)
            raise
        if self.encoding is None:
            writer: IO[Any] = os.fdopen(fd, "wb")
        else:
            writer = os.fdopen(fd, "w", encoding=self.encoding, newline="")

        try:
            if self.encoding is None:
                reader: IO[Any] = open(paths.path, "rb")
            else:
                reader = open(paths.path, "r", encoding=self.encoding, newline="")
        except OSError as exc:
            writer.close()
            remove_temp_quietly(tmp)
            raise OpenError(OpenErrorKind.OPEN, paths.path, exc) from exc

        logger.debug("opened %s for editing (backup=%s)", paths.path, paths.backup_path)
        return EditSession(reader, writer, paths, tmp)


class EditSession:
    """A file opened for in-place editing.

    Read the original content from ``reader``, write the replacement to
    ``writer``, then call exactly one of ``save()`` or ``discard()``. Used as a
    context manager, leaving the block without either discards the edit and
    ignores any error doing so.
    """

    def __init__(self, reader: IO[Any], writer: IO[Any], paths: ResolvedPaths, temp_path: Path) -> None:
        self.reader = reader
        self.writer = writer
        self._paths = paths
        self._temp_path = temp_path
        self._state = SessionState.OPEN

    @property
    def path(self) -> Path:
        return self._paths.path

    @property
    def backup_path(self) -> Path | None:
        return self._paths.backup_path

    @property
    def temp_path(self) -> Path:
        return self._temp_path

    @property
    def state(self) -> SessionState:
        return self._state

    def __repr__(self) -> str:
        return f"EditSession(path={str(self.path)!r}, backup_path={self.backup_path!r}, state={self._state.value})"

    def __enter__(self) -> EditSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._state is SessionState.OPEN:
            self._discard_quietly()

    def __del__(self) -> None:
        if getattr(self, "_state", None) is SessionState.OPEN:
            self._discard_quietly()

    def _ensure_open(self, action: str) -> None:
        if self._state is not SessionState.OPEN:
            raise ValueError(f"cannot {action} {self.path}: session already {self._state.value}")

    def _abandon(self) -> None:
        self._state = SessionState.DISCARDED
        remove_temp_quietly(self._temp_path)

    def save(self) -> None:
        """Install the written content at ``path``, moving the original to ``backup_path`` first if set."""
        self._ensure_open("save")
        self.reader.close()
        try:
            self.writer.close()
        except OSError as exc:
            self._abandon()
            raise SaveError(SaveErrorKind.PERSIST_TEMP, self._temp_path, exc) from exc

        backup = self.backup_path
        if backup is not None:
            try:
                os.replace(self.path, backup)
            except OSError as exc:
                self._abandon()
                raise SaveError(SaveErrorKind.SAVE_BACKUP, backup, exc) from exc
            logger.debug("moved %s to backup %s", self.path, backup)

        # os.replace overwrites an existing target on Windows too, but is not
        # guaranteed atomic there.
        try:
            os.replace(self._temp_path, self.path)
        except OSError as exc:
            rollback_error = self._restore_backup(backup) if backup is not None else None
            self._abandon()
            raise SaveError(
                SaveErrorKind.PERSIST_TEMP, self.path, exc, rollback_error=rollback_error
            ) from exc

        self._state = SessionState.SAVED
        logger.debug("saved %s", self.path)

    def _restore_backup(self, backup: Path) -> OSError | None:
        try:
            os.replace(backup, self.path)
        except OSError as exc:
            logger.warning(
                "could not restore %s from backup %s; original content is kept at the backup path",
                self.path,
                backup,
                exc_info=True,
            )
            return exc
        logger.debug("restored %s from backup %s", self.path, backup)
        return None

    def _close_handles(self) -> None:
        self.reader.close()
        try:
            self.writer.close()
        except OSError:
            # content is being thrown away
            logger.debug("error closing discarded temp file %s", self._temp_path, exc_info=True)

    def discard(self) -> None:
        """Delete the temp file and leave the original untouched."""
        self._ensure_open("discard")
        self._state = SessionState.DISCARDED
        self._close_handles()
        try:
            remove_temp(self._temp_path)
        except OSError as exc:
            raise DiscardError(DiscardErrorKind.RMTEMP, self._temp_path, exc) from exc

    def _discard_quietly(self) -> None:
        try:
            self.discard()
        except DiscardError as exc:
            logger.warning("%s", exc)
