"""Shared fixtures: real git repositories built with pygit2 under tmp_path."""

from pathlib import Path

import pygit2
import pytest

from tide.config.settings import Settings

BASE_TIME = 1_700_000_000


class RepoBuilder:
    """Builds commits directly into a repository without touching the worktree."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.repo = pygit2.init_repository(str(path), initial_head="main")
        self._clock = BASE_TIME

    def signature(self, time: int | None = None) -> pygit2.Signature:
        if time is None:
            self._clock += 60
            time = self._clock
        return pygit2.Signature("Test User", "test@example.com", time, 0)

    def _tree(self, base_tree: pygit2.Tree | None, files: dict[str, str | None]) -> pygit2.Oid:
        builder = self.repo.TreeBuilder(base_tree) if base_tree else self.repo.TreeBuilder()
        for name, content in files.items():
            if content is None:
                builder.remove(name)
            else:
                blob_oid = self.repo.create_blob(content.encode("utf-8"))
                builder.insert(name, blob_oid, pygit2.GIT_FILEMODE_BLOB)
        return builder.write()

    def commit(
        self,
        message: str,
        files: dict[str, str | None] | None = None,
        branch: str = "main",
        parents: list[pygit2.Oid] | None = None,
        time: int | None = None,
    ) -> pygit2.Oid:
        """Commit onto a branch; parents default to the branch's current tip"""
        ref_name = f"refs/heads/{branch}"
        if parents is None:
            ref = self.repo.references.get(ref_name)
            parents = [ref.peel(pygit2.Commit).id] if ref is not None else []

        base_tree = self.repo[parents[0]].peel(pygit2.Tree) if parents else None
        tree_oid = self._tree(base_tree, files or {})
        sig = self.signature(time)
        return self.repo.create_commit(ref_name, sig, sig, message, tree_oid, parents)

    def branch(self, name: str, target: pygit2.Oid) -> pygit2.Branch:
        return self.repo.branches.local.create(name, self.repo[target])

    def checkout(self) -> None:
        """Make index and worktree match HEAD"""
        self.repo.checkout_head(strategy=pygit2.GIT_CHECKOUT_FORCE)

    def corrupt_index(self) -> None:
        """Overwrite the index file with bytes libgit2 can't parse"""
        (self.path / ".git" / "index").write_bytes(b"not an index file")


@pytest.fixture
def builder(tmp_path: Path) -> RepoBuilder:
    return RepoBuilder(tmp_path / "repo")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(config_path=tmp_path / "config" / "settings.json")


@pytest.fixture
def make_builder(tmp_path: Path):
    """Factory for additional repositories in the same test"""

    def _make(name: str) -> RepoBuilder:
        return RepoBuilder(tmp_path / name)

    return _make
