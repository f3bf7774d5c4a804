"""Session management for Tide"""

from tide.session.commands import execute
from tide.session.manager import RepositorySession

__all__ = [
    "RepositorySession",
    "execute",
]
