"""
Centralized constants for Tide.

This module contains hardcoded strings and magic numbers that are used
across the codebase. Centralizing them here makes them easier to find
and modify.
"""

# History window
MAX_COMMITS = 100

# Branch labels
DETACHED_LABEL = "detached"
DETACHED_HEAD = "HEAD (detached)"

# Label resolution modes for the history graph
LABEL_MODE_TIP = "tip"
LABEL_MODE_INHERIT = "inherit"

# Colors for different lanes (branches)
LANE_COLORS = [
    "#4CAF50",  # Green
    "#2196F3",  # Blue
    "#FF9800",  # Orange
    "#9C27B0",  # Purple
    "#F44336",  # Red
    "#00BCD4",  # Cyan
    "#E91E63",  # Pink
    "#795548",  # Brown
]

SHORT_ID_LENGTH = 7
