"""Edit files in place: write to a temp file, then atomically replace the original."""

from .errors import (
    DiscardError,
    DiscardErrorKind,
    InPlaceError,
    OpenError,
    OpenErrorKind,
    SaveError,
    SaveErrorKind,
)
from .paths import (
    AppendSuffix,
    BackupSpec,
    ExplicitPath,
    FileIdentity,
    ReplaceExtension,
    ReplaceFileName,
    ResolvedPaths,
)
from .session import EditRequest, EditSession, SessionState

__version__ = "0.1.0"

__all__ = [
    "AppendSuffix",
    "BackupSpec",
    "DiscardError",
    "DiscardErrorKind",
    "EditRequest",
    "EditSession",
    "ExplicitPath",
    "FileIdentity",
    "InPlaceError",
    "OpenError",
    "OpenErrorKind",
    "ReplaceExtension",
    "ReplaceFileName",
    "ResolvedPaths",
    "SaveError",
    "SaveErrorKind",
    "SessionState",
    "__version__",
]
