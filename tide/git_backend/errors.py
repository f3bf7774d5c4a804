"""
Error taxonomy for repository queries.

Errors keep their kind all the way up to the command boundary, where they
are flattened into strings for the UI.
"""

from enum import Enum


class ErrorKind(Enum):
    """Kinds of failure a repository query can report"""

    NO_REPOSITORY_OPEN = "no_repository_open"
    INVALID_PATH = "invalid_path"
    REPO_NOT_FOUND = "repo_not_found"
    TRAVERSAL = "traversal"
    DIFF = "diff"
    BRANCH = "branch"
    REMOTE = "remote"
    STATUS = "status"


class TideError(Exception):
    """Base class for all repository query errors"""

    kind: ErrorKind


class NoRepositoryOpen(TideError):
    kind = ErrorKind.NO_REPOSITORY_OPEN

    def __init__(self, message: str = "No repository is open") -> None:
        super().__init__(message)


class InvalidPath(TideError):
    kind = ErrorKind.INVALID_PATH


class RepoNotFound(TideError):
    kind = ErrorKind.REPO_NOT_FOUND


class TraversalError(TideError):
    kind = ErrorKind.TRAVERSAL


class DiffError(TideError):
    kind = ErrorKind.DIFF


class BranchError(TideError):
    kind = ErrorKind.BRANCH


class RemoteError(TideError):
    kind = ErrorKind.REMOTE


class StatusError(TideError):
    kind = ErrorKind.STATUS
