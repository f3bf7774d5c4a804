"""Working tree status of the open repository."""

import logging

import pygit2

from tide.constants import DETACHED_HEAD
from tide.git_backend.errors import StatusError
from tide.git_backend.repository import TideRepository
from tide.git_backend.types import FileStatus, FileStatusKind, RepoStatus

log = logging.getLogger(__name__)

# First matching flag wins
STATUS_PRIORITY = [
    (pygit2.GIT_STATUS_INDEX_NEW, FileStatusKind.NEW),
    (pygit2.GIT_STATUS_INDEX_MODIFIED, FileStatusKind.MODIFIED),
    (pygit2.GIT_STATUS_INDEX_DELETED, FileStatusKind.DELETED),
    (pygit2.GIT_STATUS_INDEX_RENAMED, FileStatusKind.RENAMED),
    (pygit2.GIT_STATUS_WT_MODIFIED, FileStatusKind.MODIFIED),
    (pygit2.GIT_STATUS_WT_DELETED, FileStatusKind.DELETED),
    (pygit2.GIT_STATUS_IGNORED, FileStatusKind.IGNORED),
]


def classify_status(flags: int) -> FileStatusKind:
    """Map pygit2 status flags of one path to a single status kind"""
    for flag, kind in STATUS_PRIORITY:
        if flags & flag:
            return kind
    return FileStatusKind.UNKNOWN


def current_branch_name(repo: TideRepository) -> str:
    branch = repo.get_checked_out_branch()
    return branch if branch is not None else DETACHED_HEAD


def snapshot_status(repo: TideRepository, include_ignored: bool = False) -> RepoStatus:
    """Current branch plus every changed path, ordered by path"""
    branch = current_branch_name(repo)

    if repo.repo.is_bare:
        return RepoStatus(path=repo.path, branch=branch)

    try:
        entries = repo.repo.status(ignored=include_ignored)
    except (KeyError, ValueError, pygit2.GitError) as e:
        raise StatusError(f"Failed to read working tree status: {e}") from e

    files = tuple(
        FileStatus(path=path, status=classify_status(flags))
        for path, flags in sorted(entries.items())
    )

    log.debug("Status of %s: %d changed paths", repo.path, len(files))
    return RepoStatus(path=repo.path, branch=branch, files=files)
