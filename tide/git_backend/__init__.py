"""Git backend for reading repository history and state"""

from tide.git_backend.branches import list_branches
from tide.git_backend.errors import (
    BranchError,
    DiffError,
    ErrorKind,
    InvalidPath,
    NoRepositoryOpen,
    RemoteError,
    RepoNotFound,
    StatusError,
    TideError,
    TraversalError,
)
from tide.git_backend.history import build_history
from tide.git_backend.repository import TideRepository
from tide.git_backend.status import snapshot_status
from tide.git_backend.types import (
    BranchInfo,
    CommitKind,
    CommitRecord,
    CommitStats,
    FileStatus,
    FileStatusKind,
    RepoStatus,
)

__all__ = [
    "BranchError",
    "BranchInfo",
    "CommitKind",
    "CommitRecord",
    "CommitStats",
    "DiffError",
    "ErrorKind",
    "FileStatus",
    "FileStatusKind",
    "InvalidPath",
    "NoRepositoryOpen",
    "RemoteError",
    "RepoNotFound",
    "RepoStatus",
    "StatusError",
    "TideError",
    "TideRepository",
    "TraversalError",
    "build_history",
    "list_branches",
    "snapshot_status",
]
