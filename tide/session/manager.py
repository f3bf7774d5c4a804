"""
Repository session - owns the single open repository.

Every request goes through the session lock, so at most one request reads
or replaces the repository at a time. pygit2 repository objects are not
safe to share across threads, and a request that arrives while another is
running simply waits its turn.
"""

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tide.config.settings import Settings

from tide.git_backend.branches import list_branches
from tide.git_backend.errors import NoRepositoryOpen
from tide.git_backend.history import build_history
from tide.git_backend.repository import TideRepository
from tide.git_backend.status import snapshot_status
from tide.git_backend.types import BranchInfo, CommitRecord, RepoStatus

log = logging.getLogger(__name__)


class RepositorySession:
    """Holds at most one open repository and answers queries against it"""

    def __init__(self, settings: "Settings") -> None:
        self.settings = settings
        self._lock = threading.Lock()
        self._repo: TideRepository | None = None

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._repo is not None

    def open(self, path: str | Path) -> RepoStatus:
        """
        Open the repository at path, replacing any open one.

        The previous repository stays open if the new one can't be opened.
        """
        with self._lock:
            repo = TideRepository(path)
            status = snapshot_status(repo, self.settings.get_include_ignored())
            self._repo = repo
            return status

    def close(self) -> None:
        with self._lock:
            self._repo = None

    def _require_repo(self) -> TideRepository:
        """Get the open repository. Callers must hold the lock."""
        if self._repo is None:
            raise NoRepositoryOpen()
        return self._repo

    def status(self) -> RepoStatus:
        with self._lock:
            repo = self._require_repo()
            return snapshot_status(repo, self.settings.get_include_ignored())

    def list_branches(self) -> list[BranchInfo]:
        with self._lock:
            repo = self._require_repo()
            return list_branches(repo)

    def list_history(self, now: float | None = None) -> list[CommitRecord]:
        """Recompute the history window from scratch"""
        with self._lock:
            repo = self._require_repo()
            return build_history(
                repo,
                max_commits=self.settings.get_max_commits(),
                all_branches=self.settings.get_all_branches(),
                label_mode=self.settings.get_label_mode(),
                palette=self.settings.get_lane_colors(),
                now=now,
            )
