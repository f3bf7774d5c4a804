"""
Background worker for repository requests.

The worker is a QObject meant to be moved to a QThread so that long history
walks don't block the UI. It runs a single command against the session and
reports through signals; the session lock still serializes it against any
other request.
"""

import logging
from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QObject, Signal

from tide.git_backend.errors import TideError
from tide.session.commands import COMMANDS, INTERNAL_ERROR_KIND

if TYPE_CHECKING:
    from tide.session.manager import RepositorySession

log = logging.getLogger(__name__)


class RepositoryWorker(QObject):
    """Worker for running one repository command in a background thread"""

    finished = Signal(object)  # Emitted with the command's data
    error = Signal(str, str)  # Emitted on error (kind, message)

    def __init__(
        self,
        session: "RepositorySession",
        command: str,
        args: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        if command not in COMMANDS:
            raise ValueError(f"Unknown command: {command}")
        self.session = session
        self.command = command
        self.args = args or {}

    def run(self) -> None:
        """Run the command"""
        try:
            data = COMMANDS[self.command](self.session, self.args)
        except TideError as e:
            log.debug("%s failed: %s", self.command, e)
            self.error.emit(e.kind.value, str(e))
            return
        except Exception as e:
            log.exception("%s failed unexpectedly", self.command)
            self.error.emit(INTERNAL_ERROR_KIND, str(e))
            return
        self.finished.emit(data)
