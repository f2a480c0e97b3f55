"""Web test fixtures: TestClient over a shared in-memory SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, event, text
from sqlalchemy.pool import StaticPool

from terrain.models.account import Account
from terrain.repositories.sqlalchemy import (
    SQLAlchemyAccountRepository,
    SQLAlchemyInvitationRepository,
    SQLAlchemySubscriptionRepository,
)
from tests.conftest import PASSWORD, PASSWORD_HASH, SCHEMA_DDL

OWNER_EMAIL = "owner@example.com"


def _make_test_engine():
    """Create a fresh in-memory SQLite engine with shared connection pool."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    with engine.connect() as conn:
        for statement in SCHEMA_DDL.strip().split(";"):
            stmt = statement.strip()
            if stmt:
                conn.execute(text(stmt))
        conn.commit()

    return engine


def create_account_in_db(engine, email, plan="free", display_name="") -> Account:
    """Create an account with the shared fixture password and the given plan."""
    with engine.connect() as conn:
        account = SQLAlchemyAccountRepository(conn).create(
            Account(email=email, display_name=display_name, password_hash=PASSWORD_HASH)
        )
        SQLAlchemySubscriptionRepository(conn).upsert(account.id, plan)
    return account


def set_plan_in_db(engine, email, plan) -> None:
    with engine.connect() as conn:
        account = SQLAlchemyAccountRepository(conn).get_by_email(email)
        SQLAlchemySubscriptionRepository(conn).upsert(account.id, plan)


def get_account(engine, email) -> Account | None:
    with engine.connect() as conn:
        return SQLAlchemyAccountRepository(conn).get_by_email(email)


def get_invitations(engine, inviter_email):
    with engine.connect() as conn:
        inviter = SQLAlchemyAccountRepository(conn).get_by_email(inviter_email)
        return SQLAlchemyInvitationRepository(conn).list_by_inviter(inviter.id)


def login(client, email):
    response = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200
    return response


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch):
    """Set up in-memory DB and patch the web app to use it."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)

    yield engine

    engine.dispose()


@pytest.fixture()
def test_engine(web_test_db):
    """Expose the test engine for helpers that need direct DB access."""
    return web_test_db


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)


@pytest.fixture()
def auth_client(client, test_engine):
    """Client logged in as an owner on the team plan."""
    create_account_in_db(test_engine, OWNER_EMAIL, plan="team", display_name="Olivia Owner")
    login(client, OWNER_EMAIL)
    return client
