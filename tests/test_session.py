"""Tests for the repository session and the command boundary."""

import threading
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from tide.git_backend.errors import (
    InvalidPath,
    NoRepositoryOpen,
    RepoNotFound,
    StatusError,
    TraversalError,
)
from tide.session import RepositorySession, execute


class TestRepositorySession:
    """Session lifecycle: open, replace, query."""

    def test_queries_without_repository_fail(self, settings):
        session = RepositorySession(settings)

        assert not session.is_open
        with pytest.raises(NoRepositoryOpen):
            session.list_history()
        with pytest.raises(NoRepositoryOpen):
            session.list_branches()
        with pytest.raises(NoRepositoryOpen):
            session.status()

    def test_open_returns_status(self, builder, settings):
        builder.commit("root", {"a.txt": "a\n"})
        builder.checkout()
        session = RepositorySession(settings)

        status = session.open(str(builder.path))

        assert session.is_open
        assert status.branch == "main"
        assert status.clean

    def test_open_missing_path(self, tmp_path, settings):
        session = RepositorySession(settings)
        with pytest.raises(InvalidPath):
            session.open(tmp_path / "does-not-exist")

    def test_open_file_path(self, tmp_path, settings):
        path = tmp_path / "file.txt"
        path.write_text("not a dir")
        with pytest.raises(InvalidPath):
            RepositorySession(settings).open(path)

    def test_open_non_repository(self, tmp_path, settings):
        plain = tmp_path / "plain"
        plain.mkdir()
        with pytest.raises(RepoNotFound):
            RepositorySession(settings).open(plain)

    def test_reopen_replaces_repository(self, builder, make_builder, settings):
        builder.commit("first repo", {"a.txt": "a\n"})
        other = make_builder("other")
        other.commit("second repo", {"b.txt": "b\n"})

        session = RepositorySession(settings)
        session.open(builder.path)
        session.open(other.path)

        assert [c.message for c in session.list_history()] == ["second repo"]
        assert Path(session.status().path).resolve() == other.path.resolve()

    def test_failed_open_keeps_previous_repository(self, tmp_path, builder, settings):
        builder.commit("root", {"a.txt": "a\n"})
        session = RepositorySession(settings)
        session.open(builder.path)

        with pytest.raises(InvalidPath):
            session.open(tmp_path / "missing")

        assert [c.message for c in session.list_history()] == ["root"]

    def test_unreadable_status_keeps_previous_repository(self, builder, make_builder, settings):
        builder.commit("good", {"a.txt": "a\n"})
        broken = make_builder("broken")
        broken.commit("broken", {"b.txt": "b\n"})
        broken.checkout()
        broken.corrupt_index()
        session = RepositorySession(settings)
        session.open(builder.path)

        with pytest.raises(StatusError):
            session.open(broken.path)

        assert [c.message for c in session.list_history()] == ["good"]

    def test_close(self, builder, settings):
        builder.commit("root", {"a.txt": "a\n"})
        session = RepositorySession(settings)
        session.open(builder.path)
        session.close()

        with pytest.raises(NoRepositoryOpen):
            session.list_branches()

    def test_empty_repository_opens_but_history_fails(self, builder, settings):
        session = RepositorySession(settings)
        status = session.open(builder.path)

        assert status.branch == "main"
        assert session.list_branches() == []
        with pytest.raises(TraversalError):
            session.list_history()

    def test_history_tolerates_bad_window_setting(self, builder, settings):
        builder.commit("root", {"a.txt": "a\n"})
        settings.set("history.max_commits", "abc")
        session = RepositorySession(settings)
        session.open(builder.path)

        assert [c.message for c in session.list_history()] == ["root"]

    def test_history_uses_settings(self, builder, settings):
        for i in range(10):
            builder.commit(f"commit {i}", {"a.txt": f"{i}\n"})
        settings.set("history.max_commits", 4)
        settings.set("graph.lane_colors", ["#123456"])

        session = RepositorySession(settings)
        session.open(builder.path)
        history = session.list_history()

        assert len(history) == 4
        assert {c.color for c in history} == {"#123456"}

    def test_requests_are_serialized(self, builder, settings):
        builder.commit("root", {"a.txt": "a\n"})
        session = RepositorySession(settings)
        session.open(builder.path)

        active = 0
        max_active = 0
        counter_lock = threading.Lock()

        def slow(*args, **kwargs):
            nonlocal active, max_active
            with counter_lock:
                active += 1
                max_active = max(max_active, active)
            time.sleep(0.02)
            with counter_lock:
                active -= 1
            return []

        with (
            patch("tide.session.manager.build_history", side_effect=slow),
            patch("tide.session.manager.list_branches", side_effect=slow),
        ):
            threads = [
                threading.Thread(target=session.list_history),
                threading.Thread(target=session.list_branches),
                threading.Thread(target=session.list_history),
                threading.Thread(target=session.list_branches),
            ]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert max_active == 1


class TestExecute:
    """Errors are flattened to text only at the command boundary."""

    def test_no_repository_open(self, settings):
        session = RepositorySession(settings)

        for command in ("get_branches", "get_git_history", "get_status"):
            result = execute(session, command)
            assert result["success"] is False
            assert result["kind"] == "no_repository_open"
            assert result["error"] == "No repository is open"

    def test_open_and_query(self, builder, settings):
        builder.commit("root", {"a.txt": "a\n"})
        builder.checkout()
        session = RepositorySession(settings)

        opened = execute(session, "open_repository", {"path": str(builder.path)})
        assert opened["success"] is True
        assert opened["data"]["branch"] == "main"
        assert opened["data"]["clean"] is True

        branches = execute(session, "get_branches")
        assert branches["data"] == [
            {"name": "main", "is_head": True, "upstream": None, "ahead": 0, "behind": 0}
        ]

        history = execute(session, "get_git_history")
        assert len(history["data"]) == 1
        assert history["data"][0]["type"] == "commit"
        assert history["data"][0]["branch"] == "main"

    def test_open_requires_path(self, settings):
        result = execute(RepositorySession(settings), "open_repository", {})
        assert result["success"] is False
        assert result["kind"] == "invalid_path"

    def test_open_failure_kind(self, tmp_path, settings):
        plain = tmp_path / "plain"
        plain.mkdir()
        result = execute(RepositorySession(settings), "open_repository", {"path": str(plain)})
        assert result == {
            "success": False,
            "error": f"No git repository found at {plain}",
            "kind": "repo_not_found",
        }

    def test_unreadable_index_is_reported(self, builder, settings):
        builder.commit("root", {"a.txt": "a\n"})
        builder.checkout()
        builder.corrupt_index()
        session = RepositorySession(settings)

        result = execute(session, "open_repository", {"path": str(builder.path)})

        assert result["success"] is False
        assert result["kind"] == "status"
        assert result["error"].startswith("Failed to read working tree status")
        assert not session.is_open

    def test_unexpected_failure_is_reported(self, builder, settings):
        builder.commit("root", {"a.txt": "a\n"})
        session = RepositorySession(settings)
        session.open(builder.path)

        with patch("tide.session.manager.list_branches", side_effect=RuntimeError("boom")):
            result = execute(session, "get_branches")

        assert result == {"success": False, "error": "boom", "kind": "internal"}

    def test_unknown_command(self, settings):
        result = execute(RepositorySession(settings), "push")
        assert result["success"] is False
        assert result["kind"] == "unknown_command"
