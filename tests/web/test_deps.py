"""Tests for web middleware and deps edge cases."""

import asyncio
from unittest.mock import MagicMock

from fastapi import BackgroundTasks

from web.deps import BackgroundTasksDispatcher, DBConnectionMiddleware, success


class TestDBConnectionMiddlewareNonHTTP:
    def test_non_http_scope_passes_through(self):
        called = False

        async def inner_app(scope, receive, send):
            nonlocal called
            called = True

        middleware = DBConnectionMiddleware(inner_app)
        asyncio.run(middleware({"type": "websocket"}, None, None))
        assert called


class TestBackgroundTasksDispatcher:
    def test_submit_queues_task(self):
        background_tasks = BackgroundTasks()
        func = MagicMock()

        BackgroundTasksDispatcher(background_tasks).submit(func, "a@x.com", inviter="Olivia")

        assert len(background_tasks.tasks) == 1
        task = background_tasks.tasks[0]
        assert task.func is func
        assert task.args == ("a@x.com",)
        assert task.kwargs == {"inviter": "Olivia"}
        func.assert_not_called()


class TestSuccess:
    def test_without_data(self):
        assert success() == {"success": True}

    def test_with_data(self):
        assert success({"a": 1}) == {"success": True, "data": {"a": 1}}


class TestRequestConnection:
    def test_connection_closed_after_request(self, auth_client, test_engine, monkeypatch):
        import web.deps as deps_module

        conn = MagicMock(wraps=test_engine.connect())
        engine = MagicMock()
        engine.connect.return_value = conn
        monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

        auth_client.get("/api/team")

        engine.connect.assert_called_once()
        conn.close.assert_called_once()
