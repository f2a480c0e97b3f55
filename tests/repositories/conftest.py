import pytest
from sqlalchemy import Connection

from terrain.repositories.sqlalchemy import (
    SQLAlchemyAccountRepository,
    SQLAlchemyInvitationRepository,
    SQLAlchemySubscriptionRepository,
)


@pytest.fixture()
def account_repo(db_connection: Connection) -> SQLAlchemyAccountRepository:
    return SQLAlchemyAccountRepository(db_connection)


@pytest.fixture()
def invitation_repo(db_connection: Connection) -> SQLAlchemyInvitationRepository:
    return SQLAlchemyInvitationRepository(db_connection)


@pytest.fixture()
def subscription_repo(db_connection: Connection) -> SQLAlchemySubscriptionRepository:
    return SQLAlchemySubscriptionRepository(db_connection)
