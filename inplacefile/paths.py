"""Target and backup path resolution."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .errors import OpenError, OpenErrorKind

logger = logging.getLogger(__name__)

StrPath = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class FileIdentity:
    """Device and inode of a file, compared instead of path strings."""

    device: int
    inode: int

    @classmethod
    def of(cls, path: Path) -> FileIdentity | None:
        """Identity of the file *path* refers to, or None if it cannot be stat'ed."""
        try:
            st = os.stat(path)
        except OSError:
            return None
        return cls(st.st_dev, st.st_ino)


def same_file(a: Path, b: Path) -> bool:
    ida = FileIdentity.of(a)
    if ida is None:
        return False
    return ida == FileIdentity.of(b)


def absolutize(path: Path) -> Path:
    """Prefix relative paths with the current directory, without touching the filesystem."""
    if path.is_absolute():
        return path
    try:
        cwd = Path.cwd()
    except OSError as exc:
        raise OpenError(OpenErrorKind.CURRENT_DIR, path, exc) from exc
    return cwd / path


def resolve_target(path: StrPath, *, follow_symlinks: bool) -> Path:
    p = Path(path)
    if not follow_symlinks:
        return absolutize(p)
    try:
        return p.resolve(strict=True)
    except OSError as exc:
        raise OpenError(OpenErrorKind.CANONICALIZE, p, exc) from exc
    except RuntimeError as exc:
        # symlink loop on interpreters that do not raise OSError(ELOOP)
        raise OpenError(OpenErrorKind.CANONICALIZE, p) from exc


def _has_filename(path: Path) -> bool:
    return path.name not in ("", "..")


class BackupSpec:
    """How to derive the backup path from the resolved target path."""

    def candidate(self, target: Path) -> Path:
        raise NotImplementedError


@dataclass(frozen=True)
class ExplicitPath(BackupSpec):
    path: StrPath

    def candidate(self, target: Path) -> Path:
        if os.fspath(self.path) == "":
            raise OpenError(OpenErrorKind.EMPTY_BACKUP, target)
        return Path(self.path)


@dataclass(frozen=True)
class ReplaceFileName(BackupSpec):
    name: str

    def candidate(self, target: Path) -> Path:
        if self.name == "":
            raise OpenError(OpenErrorKind.EMPTY_BACKUP, target)
        return target.parent / self.name


@dataclass(frozen=True)
class ReplaceExtension(BackupSpec):
    """Same stem, new extension. An empty extension strips the current one."""

    ext: str

    def candidate(self, target: Path) -> Path:
        if not _has_filename(target):
            return target
        ext = self.ext[1:] if self.ext.startswith(".") else self.ext
        stem = target.stem
        return target.with_name(f"{stem}.{ext}" if ext else stem)


@dataclass(frozen=True)
class AppendSuffix(BackupSpec):
    suffix: str

    def candidate(self, target: Path) -> Path:
        if self.suffix == "":
            raise OpenError(OpenErrorKind.EMPTY_BACKUP, target)
        if not _has_filename(target):
            raise OpenError(OpenErrorKind.NO_FILENAME, target)
        return target.with_name(target.name + self.suffix)


@dataclass(frozen=True)
class ResolvedPaths:
    path: Path
    backup_path: Path | None = None


def resolve_backup(spec: BackupSpec, target: Path) -> Path | None:
    """Absolute backup path for *target*, or None when no backup will be made.

    A ReplaceExtension that maps the target onto itself means "no backup".
    Any other backup naming the same file as the target is rejected.
    """
    candidate = spec.candidate(target)
    if isinstance(spec, ReplaceExtension) and candidate == target:
        logger.debug("backup extension %r leaves %s unchanged; not backing up", spec.ext, target)
        return None
    backup = absolutize(candidate)
    if same_file(target, backup):
        raise OpenError(OpenErrorKind.SAME_FILE, backup)
    return backup


def resolve_paths(path: StrPath, backup: BackupSpec | None, *, follow_symlinks: bool) -> ResolvedPaths:
    target = resolve_target(path, follow_symlinks=follow_symlinks)
    if backup is None:
        return ResolvedPaths(target)
    return ResolvedPaths(target, resolve_backup(backup, target))
