#!/usr/bin/env python3
"""
Tide - repository history graph for a desktop git client
"""

import argparse
import json
import logging
import sys
from typing import Any

from tide.config.settings import Settings
from tide.constants import LABEL_MODE_INHERIT
from tide.git_backend.errors import TideError
from tide.git_backend.types import BranchInfo, CommitKind, CommitRecord, RepoStatus
from tide.session.manager import RepositorySession


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="tide",
        description="Tide - inspect a git repository's history graph, branches and status",
    )
    parser.add_argument("path", help="Path inside the repository to open")
    parser.add_argument("--status", action="store_true", help="Show working tree status")
    parser.add_argument("--branches", action="store_true", help="Show local branches")
    parser.add_argument("--history", action="store_true", help="Show the commit graph")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--max-commits", type=int, help="Override history.max_commits")
    parser.add_argument(
        "--all-branches", action="store_true", help="Also walk branches not merged into HEAD"
    )
    parser.add_argument(
        "--inherit-labels", action="store_true", help="Label commits below a branch tip too"
    )
    parser.add_argument("--ignored", action="store_true", help="Report ignored files")
    return parser.parse_args(argv)


def format_status(status: RepoStatus) -> list[str]:
    lines = [f"On branch {status.branch}"]
    if status.clean:
        lines.append("Working tree clean")
    for f in status.files:
        lines.append(f"  {f.status.value:<9} {f.path}")
    return lines


def format_branches(branches: list[BranchInfo]) -> list[str]:
    lines = []
    for b in branches:
        marker = "*" if b.is_head else " "
        line = f"{marker} {b.name}"
        if b.upstream:
            line += f" [{b.upstream}: ahead {b.ahead}, behind {b.behind}]"
        lines.append(line)
    return lines


def format_history(commits: list[CommitRecord]) -> list[str]:
    lines = []
    for c in commits:
        lane = "| " * c.position + ("M" if c.kind is CommitKind.MERGE else "*")
        summary = c.message.split("\n", 1)[0]
        refs = f" ({', '.join(c.refs)})" if c.refs else ""
        stats = f"+{c.stats.insertions} -{c.stats.deletions}"
        lines.append(f"{lane} {c.short_id}{refs} {summary} [{stats}] {c.timestamp}")
    return lines


def load_settings(args: argparse.Namespace) -> Settings:
    """Settings file values, with command line flags taking precedence"""
    settings = Settings()
    if args.max_commits is not None:
        settings.set("history.max_commits", args.max_commits)
    if args.all_branches:
        settings.set("history.all_branches", True)
    if args.inherit_labels:
        settings.set("history.label_mode", LABEL_MODE_INHERIT)
    if args.ignored:
        settings.set("status.include_ignored", True)
    return settings


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    show_status = args.status or not (args.branches or args.history)
    session = RepositorySession(load_settings(args))

    result: dict[str, Any] = {}
    lines: list[str] = []
    try:
        status = session.open(args.path)
        if show_status:
            result["status"] = status.to_dict()
            lines.extend(format_status(status))
        if args.branches:
            branches = session.list_branches()
            result["branches"] = [b.to_dict() for b in branches]
            lines.extend(format_branches(branches))
        if args.history:
            commits = session.list_history()
            result["history"] = [c.to_dict() for c in commits]
            lines.extend(format_history(commits))
    except TideError as e:
        print(f"tide: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print("\n".join(lines))
    return 0


if __name__ == "__main__":
    sys.exit(main())
