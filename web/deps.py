from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import BackgroundTasks, Request
from starlette.types import ASGIApp, Receive, Scope, Send

from terrain.db import get_engine
from terrain.models.account import Account
from terrain.notifications.dispatcher import NotificationDispatcher
from terrain.repositories.sqlalchemy import (
    SQLAlchemyAccountRepository,
    SQLAlchemyInvitationRepository,
    SQLAlchemySubscriptionRepository,
)
from terrain.services.account_service import AccountService
from terrain.services.subscription_service import SubscriptionService
from terrain.services.team_service import TeamService

logger = logging.getLogger(__name__)

SESSION_ACCOUNT_KEY = "account_id"


class DBConnectionMiddleware:
    """Opens at most one DB connection per request and closes it afterwards."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


class BackgroundTasksDispatcher(NotificationDispatcher):
    """Queues notifications to run after the response has been sent."""

    def __init__(self, background_tasks: BackgroundTasks) -> None:
        self.background_tasks = background_tasks

    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self.background_tasks.add_task(func, *args, **kwargs)


def _get_conn(request: Request):
    """Per-request connection, opened on first use."""
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def get_account_service(request: Request) -> AccountService:
    conn = _get_conn(request)
    return AccountService(
        SQLAlchemyAccountRepository(conn),
        SQLAlchemySubscriptionRepository(conn),
        SQLAlchemyInvitationRepository(conn),
    )


def get_subscription_service(request: Request) -> SubscriptionService:
    return SubscriptionService(SQLAlchemySubscriptionRepository(_get_conn(request)))


def get_team_service(request: Request, background_tasks: BackgroundTasks) -> TeamService:
    conn = _get_conn(request)
    return TeamService(
        SQLAlchemyAccountRepository(conn),
        SQLAlchemyInvitationRepository(conn),
        SQLAlchemySubscriptionRepository(conn),
        BackgroundTasksDispatcher(background_tasks),
    )


def get_current_account(request: Request) -> Account | None:
    """Resolve the session to an account, or None when signed out."""
    account_id = request.session.get(SESSION_ACCOUNT_KEY)
    if not account_id:
        return None
    account = SQLAlchemyAccountRepository(_get_conn(request)).get_by_id(account_id)
    if account is None:
        logger.info("Session references missing account=%s, clearing", account_id)
        request.session.clear()
    return account


def success(data: Any = None) -> dict:
    if data is None:
        return {"success": True}
    return {"success": True, "data": data}
