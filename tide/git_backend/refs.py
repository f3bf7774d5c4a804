"""Reference labels for commits in the history graph."""

import pygit2

from tide.git_backend.errors import TraversalError
from tide.git_backend.repository import TideRepository


def build_ref_index(repo: TideRepository) -> dict[str, list[str]]:
    """
    Map commit id -> display names of every reference pointing at it.

    A commit can carry several refs (branch tips, remote branches and tags
    that coincide); all of them are kept in enumeration order. Symbolic refs
    and refs that don't peel to a commit are skipped.
    """
    try:
        ref_names = list(repo.repo.references)
    except pygit2.GitError as e:
        raise TraversalError(f"Cannot list references: {e}") from e

    index: dict[str, list[str]] = {}
    for ref_name in ref_names:
        ref = repo.repo.references.get(ref_name)
        if ref is None or isinstance(ref.target, str):
            continue

        try:
            commit = ref.peel(pygit2.Commit)
        except (KeyError, ValueError, pygit2.GitError):
            # Tags on trees/blobs, or dangling refs
            continue

        index.setdefault(str(commit.id), []).append(ref.shorthand)

    return index
