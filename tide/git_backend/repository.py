"""
Git repository access using pygit2
"""

import logging
from pathlib import Path

import pygit2

from tide.git_backend.errors import BranchError, InvalidPath, RepoNotFound, TraversalError

log = logging.getLogger(__name__)


class TideRepository:
    """Read-only view of a git repository for Tide"""

    def __init__(self, repo_path: str | Path) -> None:
        """Open the repository containing repo_path.

        Raises InvalidPath if the path is not an existing directory, and
        RepoNotFound if no repository can be discovered from it.
        """
        path = Path(repo_path).expanduser()
        if not path.is_dir():
            raise InvalidPath(f"Not a directory: {path}")

        try:
            gitdir = pygit2.discover_repository(str(path))
        except (KeyError, pygit2.GitError):
            gitdir = None
        if gitdir is None:
            raise RepoNotFound(f"No git repository found at {path}")

        try:
            self.repo = pygit2.Repository(gitdir)
        except pygit2.GitError as e:
            raise RepoNotFound(f"Cannot open repository at {path}: {e}") from e

        log.info("Opened repository %s", self.path)

    @property
    def path(self) -> str:
        """Worktree path, or the git directory for bare repositories"""
        return self.repo.workdir or self.repo.path

    def head_commit(self) -> pygit2.Commit:
        """Get the commit HEAD points at"""
        if self.repo.head_is_unborn:
            raise TraversalError("Repository has no commits yet")
        try:
            return self.repo.head.peel(pygit2.Commit)
        except (KeyError, ValueError, pygit2.GitError) as e:
            raise TraversalError(f"Cannot resolve HEAD: {e}") from e

    def get_branch_head(self, branch_name: str) -> pygit2.Commit:
        """Get the head commit of a local branch"""
        branch = self.repo.branches.local[branch_name]
        return branch.peel(pygit2.Commit)

    def get_checked_out_branch(self) -> str | None:
        """Name of the branch HEAD points to, or None when detached.

        An unborn branch (fresh repository) still reports its name.
        """
        if self.repo.head_is_detached:
            return None
        head_ref = self.repo.references.get("HEAD")
        if head_ref is None:
            return None
        target = head_ref.target
        if not isinstance(target, str):
            return None
        return target.removeprefix("refs/heads/")

    def local_branch_names(self) -> list[str]:
        """Local branch names in enumeration order"""
        try:
            return list(self.repo.branches.local)
        except pygit2.GitError as e:
            raise BranchError(f"Cannot list branches: {e}") from e

    def branch_tips(self) -> dict[str, str]:
        """Map of tip commit id to the first local branch pointing at it"""
        tips: dict[str, str] = {}
        for branch_name in self.local_branch_names():
            try:
                tip = self.get_branch_head(branch_name)
            except (KeyError, ValueError, pygit2.GitError) as e:
                log.warning("Skipping branch %s: %s", branch_name, e)
                continue
            tips.setdefault(str(tip.id), branch_name)
        return tips
