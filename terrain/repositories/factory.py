from terrain.repositories.base import (
    AccountRepository,
    InvitationRepository,
    SubscriptionRepository,
)


def get_account_repository() -> AccountRepository:
    from terrain.db import get_connection
    from terrain.repositories.sqlalchemy import SQLAlchemyAccountRepository

    return SQLAlchemyAccountRepository(get_connection())


def get_subscription_repository() -> SubscriptionRepository:
    from terrain.db import get_connection
    from terrain.repositories.sqlalchemy import SQLAlchemySubscriptionRepository

    return SQLAlchemySubscriptionRepository(get_connection())


def get_invitation_repository() -> InvitationRepository:
    from terrain.db import get_connection
    from terrain.repositories.sqlalchemy import SQLAlchemyInvitationRepository

    return SQLAlchemyInvitationRepository(get_connection())
