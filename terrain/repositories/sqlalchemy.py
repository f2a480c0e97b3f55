from __future__ import annotations

import functools
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TypeVar

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError
from ulid import ULID

from terrain.constants import normalize_email
from terrain.models.account import Account
from terrain.models.invitation import Invitation, InvitationStatus
from terrain.models.subscription import Subscription
from terrain.repositories.base import (
    AccountRepository,
    InvitationRepository,
    RepositoryError,
    SubscriptionRepository,
)

F = TypeVar("F", bound=Callable)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _translate_errors(method: F) -> F:
    """Roll back and re-raise driver failures as ``RepositoryError``."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            self.conn.rollback()
            raise RepositoryError(f"{type(self).__name__}.{method.__name__} failed") from exc

    return wrapper  # type: ignore[return-value]


class SQLAlchemyAccountRepository(AccountRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_account(row: RowMapping) -> Account:
        return Account(
            id=row["id"],
            uuid=row["uuid"],
            email=row["email"],
            display_name=row.get("display_name", ""),
            password_hash=row["password_hash"],
            team_owner_id=row.get("team_owner_id"),
            created_at=row["created_at"],
        )

    def _fetch_one(self, where: str, params: dict) -> Account | None:
        row = self.conn.execute(text(f"SELECT * FROM accounts WHERE {where}"), params).mappings().fetchone()
        if row is None:
            return None
        return self._row_to_account(row)

    @_translate_errors
    def create(self, account: Account) -> Account:
        account_uuid = str(ULID())
        self.conn.execute(
            text(
                "INSERT INTO accounts (uuid, email, display_name, password_hash, created_at) "
                "VALUES (:uuid, :email, :display_name, :password_hash, :created_at)"
            ),
            {
                "uuid": account_uuid,
                "email": normalize_email(account.email),
                "display_name": account.display_name,
                "password_hash": account.password_hash,
                "created_at": _now(),
            },
        )
        self.conn.commit()
        created = self.get_by_uuid(account_uuid)
        if created is None:
            raise RuntimeError(f"Failed to retrieve account after create (email={account.email})")
        return created

    @_translate_errors
    def get_by_id(self, account_id: int) -> Account | None:
        return self._fetch_one("id = :id", {"id": account_id})

    @_translate_errors
    def get_by_uuid(self, uuid: str) -> Account | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    @_translate_errors
    def get_by_email(self, email: str) -> Account | None:
        return self._fetch_one("email = :email", {"email": normalize_email(email)})

    @_translate_errors
    def list_all(self) -> list[Account]:
        rows = self.conn.execute(text("SELECT * FROM accounts ORDER BY created_at DESC")).mappings().fetchall()
        return [self._row_to_account(row) for row in rows]

    @_translate_errors
    def list_by_team_owner(self, owner_id: int) -> list[Account]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM accounts WHERE team_owner_id = :owner_id ORDER BY created_at"),
                {"owner_id": owner_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_account(row) for row in rows]

    @_translate_errors
    def count_by_team_owner(self, owner_id: int) -> int:
        result = (
            self.conn.execute(
                text("SELECT COUNT(*) AS cnt FROM accounts WHERE team_owner_id = :owner_id"),
                {"owner_id": owner_id},
            )
            .mappings()
            .fetchone()
        )
        return result["cnt"] if result else 0

    @_translate_errors
    def set_team_owner(self, account_id: int, owner_id: int) -> None:
        if account_id == owner_id:
            raise ValueError("An account cannot lead its own team as a member")
        self.conn.execute(
            text("UPDATE accounts SET team_owner_id = :owner_id WHERE id = :id"),
            {"owner_id": owner_id, "id": account_id},
        )
        self.conn.commit()

    @_translate_errors
    def clear_team_owner(self, account_id: int, owner_id: int) -> bool:
        result = self.conn.execute(
            text("UPDATE accounts SET team_owner_id = NULL WHERE id = :id AND team_owner_id = :owner_id"),
            {"id": account_id, "owner_id": owner_id},
        )
        self.conn.commit()
        return result.rowcount > 0


class SQLAlchemySubscriptionRepository(SubscriptionRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_subscription(row: RowMapping) -> Subscription:
        return Subscription(
            id=row["id"],
            account_id=row["account_id"],
            plan=row["plan"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @_translate_errors
    def get_by_account(self, account_id: int) -> Subscription | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM subscriptions WHERE account_id = :account_id"),
                {"account_id": account_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_subscription(row)

    @_translate_errors
    def upsert(self, account_id: int, plan: str) -> Subscription:
        now = _now()
        existing = self.get_by_account(account_id)
        if existing is None:
            self.conn.execute(
                text(
                    "INSERT INTO subscriptions (account_id, plan, created_at, updated_at) "
                    "VALUES (:account_id, :plan, :created_at, :updated_at)"
                ),
                {"account_id": account_id, "plan": plan, "created_at": now, "updated_at": now},
            )
        else:
            self.conn.execute(
                text("UPDATE subscriptions SET plan = :plan, updated_at = :updated_at WHERE account_id = :account_id"),
                {"plan": plan, "updated_at": now, "account_id": account_id},
            )
        self.conn.commit()
        result = self.get_by_account(account_id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve subscription after upsert (account_id={account_id})")
        return result


class SQLAlchemyInvitationRepository(InvitationRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_invitation(row: RowMapping) -> Invitation:
        return Invitation(
            id=row["id"],
            uuid=row["uuid"],
            inviter_id=row["inviter_id"],
            email=row["email"],
            role=row["role"],
            status=row["status"],
            created_at=row["created_at"],
            accepted_at=row.get("accepted_at"),
        )

    def _get_by_id(self, invitation_id: int) -> Invitation | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM team_invitations WHERE id = :id"),
                {"id": invitation_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_invitation(row)

    @_translate_errors
    def create(self, invitation: Invitation) -> Invitation:
        invitation_uuid = str(ULID())
        self.conn.execute(
            text(
                "INSERT INTO team_invitations (uuid, inviter_id, email, role, status, created_at) "
                "VALUES (:uuid, :inviter_id, :email, :role, :status, :created_at)"
            ),
            {
                "uuid": invitation_uuid,
                "inviter_id": invitation.inviter_id,
                "email": normalize_email(invitation.email),
                "role": invitation.role,
                "status": invitation.status,
                "created_at": _now(),
            },
        )
        self.conn.commit()
        created = self.get_by_uuid(invitation_uuid)
        if created is None:
            raise RuntimeError("Failed to retrieve invitation after create")
        return created

    @_translate_errors
    def get_by_uuid(self, uuid: str) -> Invitation | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM team_invitations WHERE uuid = :uuid"),
                {"uuid": uuid},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_invitation(row)

    @_translate_errors
    def get_by_inviter_and_email(self, inviter_id: int, email: str) -> Invitation | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM team_invitations WHERE inviter_id = :inviter_id AND email = :email"),
                {"inviter_id": inviter_id, "email": normalize_email(email)},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_invitation(row)

    @_translate_errors
    def list_by_inviter(self, inviter_id: int) -> list[Invitation]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM team_invitations WHERE inviter_id = :inviter_id ORDER BY created_at DESC, id DESC"),
                {"inviter_id": inviter_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_invitation(row) for row in rows]

    @_translate_errors
    def list_pending_by_email(self, email: str) -> list[Invitation]:
        rows = (
            self.conn.execute(
                text(
                    "SELECT * FROM team_invitations WHERE email = :email AND status = 'pending' "
                    "ORDER BY created_at DESC, id DESC"
                ),
                {"email": normalize_email(email)},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_invitation(row) for row in rows]

    @_translate_errors
    def count_pending_by_inviter(self, inviter_id: int) -> int:
        result = (
            self.conn.execute(
                text("SELECT COUNT(*) AS cnt FROM team_invitations WHERE inviter_id = :inviter_id AND status = 'pending'"),
                {"inviter_id": inviter_id},
            )
            .mappings()
            .fetchone()
        )
        return result["cnt"] if result else 0

    @_translate_errors
    def reopen(self, invitation_id: int) -> Invitation:
        self.conn.execute(
            text(
                "UPDATE team_invitations SET status = :pending, accepted_at = NULL, created_at = :created_at "
                "WHERE id = :id AND status != :pending"
            ),
            {"pending": InvitationStatus.PENDING.value, "created_at": _now(), "id": invitation_id},
        )
        self.conn.commit()
        result = self._get_by_id(invitation_id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve invitation after reopen (id={invitation_id})")
        return result

    @_translate_errors
    def mark_accepted(self, invitation_id: int) -> None:
        self.conn.execute(
            text("UPDATE team_invitations SET status = :status, accepted_at = :accepted_at WHERE id = :id"),
            {"status": InvitationStatus.ACCEPTED.value, "accepted_at": _now(), "id": invitation_id},
        )
        self.conn.commit()

    @_translate_errors
    def revoke_pending(self, uuid: str, inviter_id: int) -> bool:
        result = self.conn.execute(
            text(
                "UPDATE team_invitations SET status = :revoked "
                "WHERE uuid = :uuid AND inviter_id = :inviter_id AND status = :pending"
            ),
            {
                "revoked": InvitationStatus.REVOKED.value,
                "pending": InvitationStatus.PENDING.value,
                "uuid": uuid,
                "inviter_id": inviter_id,
            },
        )
        self.conn.commit()
        return result.rowcount > 0

    @_translate_errors
    def revoke_for_email(self, inviter_id: int, email: str) -> int:
        result = self.conn.execute(
            text("UPDATE team_invitations SET status = :revoked WHERE inviter_id = :inviter_id AND email = :email"),
            {"revoked": InvitationStatus.REVOKED.value, "inviter_id": inviter_id, "email": normalize_email(email)},
        )
        self.conn.commit()
        return result.rowcount
