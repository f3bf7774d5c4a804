"""
Settings management for Tide
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

from tide.constants import LABEL_MODE_INHERIT, LABEL_MODE_TIP, LANE_COLORS, MAX_COMMITS

log = logging.getLogger(__name__)


class Settings:
    """Read-only view of the user's settings file, plus in-memory overrides"""

    DEFAULT_SETTINGS: dict[str, Any] = {
        "history": {
            "max_commits": MAX_COMMITS,  # Size of the history window
            "all_branches": False,  # Also walk local branches not merged into HEAD
            "label_mode": LABEL_MODE_TIP,  # "tip" or "inherit"
        },
        "graph": {
            "lane_colors": list(LANE_COLORS),
        },
        "status": {"include_ignored": False},
    }

    def __init__(self, config_path: Path | None = None) -> None:
        if config_path is None:
            config_path = Path.home() / ".config" / "tide" / "settings.json"

        self.config_path = config_path
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        self.load()

    def load(self) -> None:
        """Overlay the settings file, if there is one, on the defaults"""
        if not self.config_path.exists():
            return
        with open(self.config_path) as f:
            loaded = json.load(f)
        if isinstance(loaded, dict):
            _overlay(self.settings, loaded)
        else:
            log.warning("Ignoring %s: top level is not an object", self.config_path)

    def get(self, path: str, default: Any = None) -> Any:
        """Get a setting by dot-separated path (e.g., 'history.max_commits')"""
        node: Any = self.settings
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, path: str, value: Any) -> None:
        """Override a setting for this process; the file is never rewritten"""
        *sections, key = path.split(".")
        node = self.settings
        for part in sections:
            node = node.setdefault(part, {})
        node[key] = value

    def get_max_commits(self) -> int:
        """Get the number of most recent commits shown in the history graph."""
        value = self.get("history.max_commits", MAX_COMMITS)
        try:
            max_commits = int(value)
        except (TypeError, ValueError):
            log.warning("Invalid history.max_commits %r, using %d", value, MAX_COMMITS)
            return MAX_COMMITS
        return max(1, max_commits)  # At least 1

    def get_all_branches(self) -> bool:
        """Whether local branches not reachable from HEAD are walked too."""
        return bool(self.get("history.all_branches", False))

    def get_label_mode(self) -> str:
        """Get how commits that aren't branch tips are labeled.

        "tip" labels only exact branch tips and leaves everything else
        detached. "inherit" passes a branch label down its first-parent line.
        Unknown values fall back to "tip".
        """
        mode = str(self.get("history.label_mode", LABEL_MODE_TIP))
        if mode not in (LABEL_MODE_TIP, LABEL_MODE_INHERIT):
            return LABEL_MODE_TIP
        return mode

    def get_lane_colors(self) -> list[str]:
        """Get the lane color palette, falling back to the default when unusable."""
        colors = self.get("graph.lane_colors")
        if not isinstance(colors, list) or not colors:
            return list(LANE_COLORS)
        if not all(isinstance(c, str) and c.startswith("#") for c in colors):
            return list(LANE_COLORS)
        return list(colors)

    def get_include_ignored(self) -> bool:
        return bool(self.get("status.include_ignored", False))


def _overlay(base: dict[str, Any], updates: dict[str, Any]) -> None:
    # Sections merge key by key so a partial file keeps the other defaults
    for key, value in updates.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _overlay(current, value)
        else:
            base[key] = value
