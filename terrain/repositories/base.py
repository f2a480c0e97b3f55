from abc import ABC, abstractmethod

from terrain.models.account import Account
from terrain.models.invitation import Invitation
from terrain.models.subscription import Subscription


class RepositoryError(Exception):
    """Raised when the underlying store rejects a read or write."""


class AccountRepository(ABC):
    @abstractmethod
    def create(self, account: Account) -> Account: ...

    @abstractmethod
    def get_by_id(self, account_id: int) -> Account | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Account | None: ...

    @abstractmethod
    def get_by_email(self, email: str) -> Account | None: ...

    @abstractmethod
    def list_all(self) -> list[Account]: ...

    @abstractmethod
    def list_by_team_owner(self, owner_id: int) -> list[Account]: ...

    @abstractmethod
    def count_by_team_owner(self, owner_id: int) -> int: ...

    @abstractmethod
    def set_team_owner(self, account_id: int, owner_id: int) -> None: ...

    @abstractmethod
    def clear_team_owner(self, account_id: int, owner_id: int) -> bool:
        """Unlink the account only if it currently belongs to ``owner_id``."""
        ...


class SubscriptionRepository(ABC):
    @abstractmethod
    def get_by_account(self, account_id: int) -> Subscription | None: ...

    @abstractmethod
    def upsert(self, account_id: int, plan: str) -> Subscription: ...


class InvitationRepository(ABC):
    @abstractmethod
    def create(self, invitation: Invitation) -> Invitation: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Invitation | None: ...

    @abstractmethod
    def get_by_inviter_and_email(self, inviter_id: int, email: str) -> Invitation | None: ...

    @abstractmethod
    def list_by_inviter(self, inviter_id: int) -> list[Invitation]: ...

    @abstractmethod
    def list_pending_by_email(self, email: str) -> list[Invitation]: ...

    @abstractmethod
    def count_pending_by_inviter(self, inviter_id: int) -> int: ...

    @abstractmethod
    def reopen(self, invitation_id: int) -> Invitation:
        """Move a non-pending invitation back to pending, keeping its id."""
        ...

    @abstractmethod
    def mark_accepted(self, invitation_id: int) -> None: ...

    @abstractmethod
    def revoke_pending(self, uuid: str, inviter_id: int) -> bool: ...

    @abstractmethod
    def revoke_for_email(self, inviter_id: int, email: str) -> int: ...
