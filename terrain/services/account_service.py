from __future__ import annotations

import logging

import bcrypt

from terrain.constants import is_valid_email, normalize_email
from terrain.models.account import Account
from terrain.models.subscription import Plan
from terrain.repositories.base import AccountRepository, InvitationRepository, SubscriptionRepository
from terrain.services.errors import ValidationError

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(
        self,
        repo: AccountRepository,
        subscription_repo: SubscriptionRepository,
        invitation_repo: InvitationRepository,
    ) -> None:
        self.repo = repo
        self.subscription_repo = subscription_repo
        self.invitation_repo = invitation_repo

    def register(self, email: str, password: str, display_name: str = "") -> Account:
        """Create an account on the free plan and join the newest team that invited it."""
        email = normalize_email(email)
        if not is_valid_email(email):
            raise ValidationError()
        if not password:
            raise ValidationError("Password required.")
        if self.repo.get_by_email(email) is not None:
            logger.warning("Signup rejected: duplicate email=%s", email)
            raise ValidationError("An account with this email already exists.")

        password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()
        account = self.repo.create(Account(email=email, display_name=display_name.strip(), password_hash=password_hash))
        self.subscription_repo.upsert(account.id, Plan.FREE.value)
        logger.info("Account registered: id=%s email=%s", account.id, email)

        return self._claim_pending_invitation(account)

    def _claim_pending_invitation(self, account: Account) -> Account:
        pending = self.invitation_repo.list_pending_by_email(account.email)
        if not pending:
            return account
        invitation = pending[0]
        self.repo.set_team_owner(account.id, invitation.inviter_id)
        self.invitation_repo.mark_accepted(invitation.id)
        logger.info(
            "Invitation claimed at signup: account=%s owner=%s invitation=%s",
            account.id,
            invitation.inviter_id,
            invitation.uuid,
        )
        return account.model_copy(update={"team_owner_id": invitation.inviter_id})

    def authenticate(self, email: str, password: str) -> Account | None:
        account = self.repo.get_by_email(normalize_email(email))
        if account is None:
            return None
        if bcrypt.checkpw(password.encode(), account.password_hash.encode()):
            return account
        return None

    def get_by_id(self, account_id: int) -> Account | None:
        return self.repo.get_by_id(account_id)

    def get_by_email(self, email: str) -> Account | None:
        return self.repo.get_by_email(email)

    def list_accounts(self) -> list[Account]:
        return self.repo.list_all()
