"""
Command boundary for the UI.

Each command runs one session operation and returns a plain dict. Errors
are flattened to text here and nowhere else; the error kind travels with
the message so the UI can tell "no repository open" from a broken one.
"""

import logging
from collections.abc import Callable
from typing import Any

from tide.git_backend.errors import InvalidPath, TideError
from tide.session.manager import RepositorySession

log = logging.getLogger(__name__)

# Kind reported for failures outside the TideError taxonomy
INTERNAL_ERROR_KIND = "internal"


def _open_repository(session: RepositorySession, args: dict[str, Any]) -> Any:
    path = args.get("path")
    if not isinstance(path, str) or not path:
        raise InvalidPath("path must be a non-empty string")
    return session.open(path).to_dict()


def _get_branches(session: RepositorySession, args: dict[str, Any]) -> Any:
    return [b.to_dict() for b in session.list_branches()]


def _get_git_history(session: RepositorySession, args: dict[str, Any]) -> Any:
    return [c.to_dict() for c in session.list_history()]


def _get_status(session: RepositorySession, args: dict[str, Any]) -> Any:
    return session.status().to_dict()


COMMANDS: dict[str, Callable[[RepositorySession, dict[str, Any]], Any]] = {
    "open_repository": _open_repository,
    "get_branches": _get_branches,
    "get_git_history": _get_git_history,
    "get_status": _get_status,
}


def execute(session: RepositorySession, command: str, args: dict[str, Any] | None = None) -> dict[str, Any]:
    """Run a command against the session"""
    handler = COMMANDS.get(command)
    if handler is None:
        return {"success": False, "error": f"Unknown command: {command}", "kind": "unknown_command"}

    try:
        data = handler(session, args or {})
    except TideError as e:
        return {"success": False, "error": str(e), "kind": e.kind.value}
    except Exception as e:
        log.exception("Command %s failed unexpectedly", command)
        return {"success": False, "error": str(e), "kind": INTERNAL_ERROR_KIND}

    return {"success": True, "data": data}
