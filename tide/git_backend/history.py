"""
History graph builder.

Walks the most recent commits from HEAD in topological + time order and
lays them out for rendering:

- each commit gets a branch label and a lane (one lane per distinct label,
  numbered in the order labels are first seen)
- each lane gets a color from a fixed cyclic palette
- each commit gets its diff stats against its first parent
- each commit lists the refs pointing at it
"""

import logging
import time
from collections.abc import Sequence

import pygit2

from tide.constants import (
    DETACHED_LABEL,
    LABEL_MODE_INHERIT,
    LABEL_MODE_TIP,
    LANE_COLORS,
    MAX_COMMITS,
    SHORT_ID_LENGTH,
)
from tide.git_backend.errors import DiffError, TraversalError
from tide.git_backend.refs import build_ref_index
from tide.git_backend.repository import TideRepository
from tide.git_backend.types import CommitRecord, CommitStats, commit_kind_for

log = logging.getLogger(__name__)

# Largest unit first
_RELATIVE_UNITS = [
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
]


def lane_color(position: int, palette: Sequence[str] = LANE_COLORS) -> str:
    """Get color for a lane."""
    return palette[position % len(palette)]


def format_relative_time(timestamp: int, now: float | None = None) -> str:
    """Render an epoch timestamp as e.g. '3 hours ago'."""
    if now is None:
        now = time.time()

    elapsed = int(now - timestamp)
    for unit, seconds in _RELATIVE_UNITS:
        count = elapsed // seconds
        if count >= 1:
            plural = "" if count == 1 else "s"
            return f"{count} {unit}{plural} ago"

    # Under a minute, or clock skew putting the commit in the future
    return "just now"


class BranchLaneAssigner:
    """
    Resolves branch labels for commits and assigns each label a lane.

    In "tip" mode a commit is labeled with the local branch whose tip is
    exactly that commit, and every other commit is "detached". In "inherit"
    mode a commit that is not a tip takes the label of the first visited
    child that reached it through its first parent.

    Lanes are handed out 0, 1, 2, ... the first time each label is seen, so
    the left-to-right lane order matches discovery order during traversal.
    """

    def __init__(self, branch_tips: dict[str, str], label_mode: str = LABEL_MODE_TIP) -> None:
        if label_mode not in (LABEL_MODE_TIP, LABEL_MODE_INHERIT):
            raise ValueError(f"Unknown label mode: {label_mode}")
        self._branch_tips = branch_tips
        self._label_mode = label_mode
        self._lanes: dict[str, int] = {}
        self._inherited: dict[str, str] = {}

    def resolve_label(self, commit_id: str, parent_ids: Sequence[str]) -> str:
        label = self._branch_tips.get(commit_id)

        if self._label_mode == LABEL_MODE_INHERIT:
            if label is None:
                label = self._inherited.get(commit_id)
            if label is not None and parent_ids:
                self._inherited.setdefault(parent_ids[0], label)

        return label if label is not None else DETACHED_LABEL

    def lane_for(self, label: str) -> int:
        if label not in self._lanes:
            self._lanes[label] = len(self._lanes)
        return self._lanes[label]

    def assign(self, commit_id: str, parent_ids: Sequence[str]) -> tuple[str, int]:
        """Resolve the label of a commit and the lane it goes in"""
        label = self.resolve_label(commit_id, parent_ids)
        return label, self.lane_for(label)

    @property
    def lanes(self) -> dict[str, int]:
        return dict(self._lanes)


def walk_revisions(
    repo: TideRepository,
    limit: int = MAX_COMMITS,
    all_branches: bool = False,
) -> list[pygit2.Commit]:
    """
    Most recent commits reachable from HEAD, at most `limit` of them.

    Children always come before their parents; unrelated commits are
    ordered newest first. With all_branches, every local branch tip is
    walked as well.
    """
    start = repo.head_commit()

    extra_tips: list[pygit2.Oid] = []
    if all_branches:
        for branch_name in repo.local_branch_names():
            try:
                extra_tips.append(repo.get_branch_head(branch_name).id)
            except (KeyError, ValueError, pygit2.GitError) as e:
                log.warning("Not walking branch %s: %s", branch_name, e)

    commits: list[pygit2.Commit] = []
    if limit < 1:
        return commits

    try:
        walker = repo.repo.walk(start.id, pygit2.GIT_SORT_TOPOLOGICAL | pygit2.GIT_SORT_TIME)  # type: ignore[arg-type]
        for tip in extra_tips:
            walker.push(tip)

        for commit in walker:
            commits.append(commit)
            if len(commits) >= limit:
                break
    except (KeyError, ValueError, pygit2.GitError) as e:
        raise TraversalError(f"Failed to walk history: {e}") from e

    return commits


def compute_commit_stats(repo: TideRepository, commit: pygit2.Commit) -> CommitStats:
    """Diff stats of a commit against its first parent (zero for root commits)"""
    if not commit.parent_ids:
        return CommitStats()

    try:
        parent = repo.repo[commit.parent_ids[0]]
        stats = repo.repo.diff(parent, commit).stats
    except (KeyError, ValueError, pygit2.GitError) as e:
        raise DiffError(f"Cannot diff {commit.id} against its first parent: {e}") from e

    return CommitStats(
        files_changed=stats.files_changed,
        insertions=stats.insertions,
        deletions=stats.deletions,
    )


def build_history(
    repo: TideRepository,
    max_commits: int = MAX_COMMITS,
    all_branches: bool = False,
    label_mode: str = LABEL_MODE_TIP,
    palette: Sequence[str] = LANE_COLORS,
    now: float | None = None,
) -> list[CommitRecord]:
    """
    Build the render-ready commit graph for the most recent commits.

    A commit whose diff can't be computed is kept with zero stats rather
    than failing the whole history.
    """
    if now is None:
        now = time.time()

    ref_index = build_ref_index(repo)
    assigner = BranchLaneAssigner(repo.branch_tips(), label_mode)
    commits = walk_revisions(repo, max_commits, all_branches)

    records: list[CommitRecord] = []
    for commit in commits:
        commit_id = str(commit.id)
        parents = tuple(str(oid) for oid in commit.parent_ids)
        label, position = assigner.assign(commit_id, parents)

        try:
            stats = compute_commit_stats(repo, commit)
        except DiffError as e:
            log.warning("%s", e)
            stats = CommitStats()

        records.append(
            CommitRecord(
                id=commit_id,
                short_id=commit_id[:SHORT_ID_LENGTH],
                message=commit.message.strip(),
                author_name=commit.author.name,
                author_email=commit.author.email,
                committer_name=commit.committer.name,
                committer_email=commit.committer.email,
                branch=label,
                timestamp=format_relative_time(commit.commit_time, now),
                commit_time=commit.commit_time,
                parents=parents,
                color=lane_color(position, palette),
                position=position,
                kind=commit_kind_for(len(parents)),
                stats=stats,
                refs=tuple(ref_index.get(commit_id, ())),
            )
        )

    log.debug("Built history: %d commits in %d lanes", len(records), len(assigner.lanes))
    return records
