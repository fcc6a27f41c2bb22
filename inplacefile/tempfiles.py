"""Temporary file next to the target, carrying over the target's permissions."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from .errors import OpenError, OpenErrorKind

logger = logging.getLogger(__name__)

TEMP_PREFIX = ".tmp"


def permissions_to_copy(st: os.stat_result, *, follow_symlinks: bool) -> int | None:
    """Permission bits to apply to the temp file, or None to leave its defaults.

    The own mode of a symlink (only seen when not following) is not transferable.
    """
    if not follow_symlinks and stat.S_ISLNK(st.st_mode):
        return None
    return stat.S_IMODE(st.st_mode)


def read_metadata(target: Path, *, follow_symlinks: bool) -> os.stat_result:
    try:
        return os.stat(target) if follow_symlinks else os.lstat(target)
    except OSError as exc:
        raise OpenError(OpenErrorKind.GET_METADATA, target, exc) from exc


def create_temp(target: Path) -> tuple[int, Path]:
    """Create an empty, uniquely named file in the target's directory.

    Returns the open descriptor and the temp path. Same directory means the
    final rename never crosses filesystems. The name does not grow with the
    target name, so targets at the filesystem name limit still work.
    """
    parent = target.parent
    if parent == target or not target.name:
        raise OpenError(OpenErrorKind.NO_PARENT, target)
    try:
        fd, tmp = tempfile.mkstemp(dir=parent, prefix=TEMP_PREFIX)
    except OSError as exc:
        raise OpenError(OpenErrorKind.MKTEMP, target, exc) from exc
    logger.debug("created temp file %s for %s", tmp, target)
    return fd, Path(tmp)


def apply_permissions(fd: int, tmp: Path, mode: int | None) -> None:
    if mode is None:
        return
    try:
        if os.chmod in os.supports_fd:
            os.chmod(fd, mode)
        else:
            os.chmod(tmp, mode)
    except OSError as exc:
        raise OpenError(OpenErrorKind.SET_METADATA, tmp, exc) from exc


def remove_temp(tmp: Path) -> None:
    os.unlink(tmp)
    logger.debug("removed temp file %s", tmp)


def remove_temp_quietly(tmp: Path) -> None:
    try:
        remove_temp(tmp)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("could not remove temp file %s", tmp, exc_info=True)
