"""Local branches and their divergence from upstream."""

import logging

import pygit2

from tide.git_backend.errors import BranchError, RemoteError
from tide.git_backend.repository import TideRepository
from tide.git_backend.types import BranchInfo

log = logging.getLogger(__name__)


def resolve_upstream(branch: pygit2.Branch) -> pygit2.Branch | None:
    """Get the configured upstream of a branch, or None if it has none"""
    try:
        return branch.upstream
    except (KeyError, ValueError, pygit2.GitError) as e:
        raise RemoteError(f"Cannot resolve upstream of '{branch.branch_name}': {e}") from e


def ahead_behind(repo: TideRepository, branch: pygit2.Branch, upstream: pygit2.Branch) -> tuple[int, int]:
    """Commits on branch but not upstream, and on upstream but not branch"""
    local_tip = branch.peel(pygit2.Commit).id
    upstream_tip = upstream.peel(pygit2.Commit).id
    ahead, behind = repo.repo.ahead_behind(local_tip, upstream_tip)
    return ahead, behind


def branch_info(repo: TideRepository, name: str, head_branch: str | None) -> BranchInfo:
    """
    Build the BranchInfo for one local branch.

    Problems with the upstream or the tips only zero out ahead/behind;
    branches are independent, so one bad branch shouldn't hide the others.
    """
    try:
        branch = repo.repo.branches.local[name]
    except (KeyError, pygit2.GitError) as e:
        raise BranchError(f"Cannot load branch '{name}': {e}") from e

    is_head = name == head_branch

    try:
        upstream = resolve_upstream(branch)
    except RemoteError as e:
        log.warning("%s", e)
        return BranchInfo(name=name, is_head=is_head)

    if upstream is None:
        return BranchInfo(name=name, is_head=is_head)

    try:
        ahead, behind = ahead_behind(repo, branch, upstream)
    except (KeyError, ValueError, pygit2.GitError) as e:
        log.warning("Cannot compare '%s' with '%s': %s", name, upstream.shorthand, e)
        ahead, behind = 0, 0

    return BranchInfo(
        name=name,
        is_head=is_head,
        upstream=upstream.shorthand,
        ahead=ahead,
        behind=behind,
    )


def list_branches(repo: TideRepository) -> list[BranchInfo]:
    """All local branches, sorted by name"""
    head_branch = repo.get_checked_out_branch()
    branches = [branch_info(repo, name, head_branch) for name in sorted(repo.local_branch_names())]
    log.debug("Listed %d branches", len(branches))
    return branches
