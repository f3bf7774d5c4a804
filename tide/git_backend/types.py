"""Records returned by repository queries."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CommitKind(Enum):
    """Node shape of a commit in the history graph"""

    COMMIT = "commit"
    MERGE = "merge"


def commit_kind_for(parent_count: int) -> CommitKind:
    """Merge commits are the ones with two or more parents"""
    return CommitKind.MERGE if parent_count > 1 else CommitKind.COMMIT


class FileStatusKind(Enum):
    """Status of a changed path in the working tree or index"""

    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    IGNORED = "ignored"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CommitStats:
    """Change counts of a commit against its first parent."""

    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "files_changed": self.files_changed,
            "insertions": self.insertions,
            "deletions": self.deletions,
        }


@dataclass(frozen=True)
class CommitRecord:
    """A commit with its lane layout, ready for rendering."""

    id: str
    short_id: str
    message: str
    author_name: str
    author_email: str
    committer_name: str
    committer_email: str
    branch: str
    timestamp: str
    commit_time: int
    parents: tuple[str, ...]
    color: str
    position: int
    kind: CommitKind
    stats: CommitStats = field(default_factory=CommitStats)
    refs: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for UI."""
        return {
            "id": self.id,
            "short_id": self.short_id,
            "message": self.message,
            "author": {"name": self.author_name, "email": self.author_email},
            "committer": {"name": self.committer_name, "email": self.committer_email},
            "branch": self.branch,
            "timestamp": self.timestamp,
            "commit_time": self.commit_time,
            "parents": list(self.parents),
            "color": self.color,
            "position": self.position,
            "type": self.kind.value,
            "stats": self.stats.to_dict(),
            "refs": list(self.refs),
        }


@dataclass(frozen=True)
class BranchInfo:
    """A local branch and its divergence from its upstream."""

    name: str
    is_head: bool
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "is_head": self.is_head,
            "upstream": self.upstream,
            "ahead": self.ahead,
            "behind": self.behind,
        }


@dataclass(frozen=True)
class FileStatus:
    path: str
    status: FileStatusKind

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "status": self.status.value}


@dataclass(frozen=True)
class RepoStatus:
    """Current branch and working tree state of the open repository."""

    path: str
    branch: str
    files: tuple[FileStatus, ...] = ()

    @property
    def clean(self) -> bool:
        return not self.files

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "branch": self.branch,
            "clean": self.clean,
            "files": [f.to_dict() for f in self.files],
        }
