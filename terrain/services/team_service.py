from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from terrain.constants import MEMBER_ROLE, SEAT_LIMIT, TEAM_PLAN, is_valid_email, normalize_email
from terrain.models.account import Account
from terrain.models.invitation import Invitation
from terrain.models.team import InviteResult, Team, TeamInvitation, TeamMember
from terrain.notifications.dispatcher import NotificationDispatcher
from terrain.notifications.mailer import send_team_invite
from terrain.repositories.base import (
    AccountRepository,
    InvitationRepository,
    RepositoryError,
    SubscriptionRepository,
)
from terrain.services.errors import (
    AuthenticationError,
    AuthorizationError,
    CapacityError,
    ConflictError,
    PersistenceError,
    RevocationError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@contextmanager
def _store_call(operation: str, public_message: str, **context: object) -> Iterator[None]:
    try:
        yield
    except RepositoryError as exc:
        details = " ".join(f"{key}={value}" for key, value in context.items())
        logger.exception("Store call failed: op=%s %s", operation, details)
        raise PersistenceError(public_message) from exc


class TeamService:
    """Team membership and invitation lifecycle for a single owner.

    Holds no state of its own; build one per request around the caller's
    repositories and dispatcher. Every repository write commits on its own,
    so multi-step operations (invite then auto-link, unlink then revoke) are
    not atomic.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        invitation_repo: InvitationRepository,
        subscription_repo: SubscriptionRepository,
        dispatcher: NotificationDispatcher,
        seat_limit: int = SEAT_LIMIT,
    ) -> None:
        self.account_repo = account_repo
        self.invitation_repo = invitation_repo
        self.subscription_repo = subscription_repo
        self.dispatcher = dispatcher
        self.seat_limit = seat_limit

    @staticmethod
    def _require_owner(owner: Account | None) -> Account:
        if owner is None or owner.id is None:
            logger.info("Team request rejected: no authenticated account")
            raise AuthenticationError()
        return owner

    def list_team(self, owner: Account | None) -> Team:
        owner = self._require_owner(owner)
        with _store_call("list_team", "Failed to load team.", owner=owner.id):
            members = self.account_repo.list_by_team_owner(owner.id)
            invitations = self.invitation_repo.list_by_inviter(owner.id)
        logger.debug(
            "Listed team for owner=%s: %d members, %d invitations",
            owner.id,
            len(members),
            len(invitations),
        )
        return Team(
            members=[TeamMember.from_account(m) for m in members],
            invitations=[TeamInvitation.from_invitation(i) for i in invitations],
        )

    def seats_used(self, owner_id: int) -> int:
        with _store_call("seats_used", "Failed to count team seats.", owner=owner_id):
            members = self.account_repo.count_by_team_owner(owner_id)
            pending = self.invitation_repo.count_pending_by_inviter(owner_id)
        return 1 + members + pending

    def invite_member(self, owner: Account | None, raw_email: str | None) -> InviteResult:
        owner = self._require_owner(owner)

        with _store_call("get_subscription", "Failed to create invitation.", owner=owner.id):
            subscription = self.subscription_repo.get_by_account(owner.id)
        if subscription is None or subscription.plan != TEAM_PLAN:
            logger.warning(
                "Invite rejected: owner=%s plan=%s",
                owner.id,
                subscription.plan if subscription else None,
            )
            raise AuthorizationError()

        email = normalize_email(raw_email)
        if not is_valid_email(email):
            logger.warning("Invite rejected: owner=%s invalid email=%r", owner.id, email)
            raise ValidationError()

        if email == normalize_email(owner.email):
            logger.warning("Invite rejected: owner=%s tried to invite themselves", owner.id)
            raise ValidationError("You cannot invite yourself.")

        # Read-then-write with no isolation: two concurrent invites from the
        # same owner can both see one free seat and both insert.
        seats = self.seats_used(owner.id)
        if seats >= self.seat_limit:
            logger.warning("Invite rejected: owner=%s seats=%d limit=%d", owner.id, seats, self.seat_limit)
            raise CapacityError(
                f"Team seat limit reached ({self.seat_limit} seats). Remove a member to invite someone new."
            )

        invitation = self._upsert_invitation(owner, email)

        with _store_call("get_account_by_email", "Failed to create invitation.", owner=owner.id, email=email):
            account = self.account_repo.get_by_email(email)
        if account is not None:
            self._auto_link(owner, account, invitation)
            return InviteResult(email=email, auto_linked=True)

        try:
            self.dispatcher.submit(send_team_invite, email, owner.display_name, owner.email)
        except Exception:
            # The invitation row is already committed.
            logger.exception("Invite email not queued: owner=%s email=%s", owner.id, email)
        else:
            logger.info("Invite email queued: owner=%s email=%s", owner.id, email)
        return InviteResult(email=email, auto_linked=False)

    def _upsert_invitation(self, owner: Account, email: str) -> Invitation:
        with _store_call("get_invitation", "Failed to create invitation.", owner=owner.id, email=email):
            existing = self.invitation_repo.get_by_inviter_and_email(owner.id, email)
        if existing is not None and existing.is_pending:
            logger.warning("Invite rejected: owner=%s email=%s already pending", owner.id, email)
            raise ConflictError()

        with _store_call("upsert_invitation", "Failed to create invitation.", owner=owner.id, email=email):
            if existing is None:
                invitation = self.invitation_repo.create(
                    Invitation(inviter_id=owner.id, email=email, role=MEMBER_ROLE)
                )
                logger.info("Invitation created: owner=%s email=%s uuid=%s", owner.id, email, invitation.uuid)
            else:
                invitation = self.invitation_repo.reopen(existing.id)
                logger.info(
                    "Invitation reopened: owner=%s email=%s uuid=%s previous=%s",
                    owner.id,
                    email,
                    invitation.uuid,
                    existing.status,
                )
        return invitation

    def _auto_link(self, owner: Account, account: Account, invitation: Invitation) -> None:
        with _store_call(
            "auto_link",
            "Failed to add member.",
            owner=owner.id,
            member=account.id,
            invitation=invitation.uuid,
        ):
            self.account_repo.set_team_owner(account.id, owner.id)
            self.invitation_repo.mark_accepted(invitation.id)
        logger.info("Team member auto-linked: owner=%s member=%s", owner.id, account.id)

    def remove_member(self, owner: Account | None, member_uuid: str) -> None:
        owner = self._require_owner(owner)
        with _store_call("get_member", "Failed to remove member.", owner=owner.id, member=member_uuid):
            member = self.account_repo.get_by_uuid(member_uuid)
        if member is None:
            logger.info("Remove member no-op: owner=%s member=%s not found", owner.id, member_uuid)
            return

        with _store_call("remove_member", "Failed to remove member.", owner=owner.id, member=member.id):
            unlinked = self.account_repo.clear_team_owner(member.id, owner.id)
            revoked = self.invitation_repo.revoke_for_email(owner.id, member.email)
        logger.info(
            "Team member removed: owner=%s member=%s unlinked=%s invitations_revoked=%d",
            owner.id,
            member.id,
            unlinked,
            revoked,
        )

    def revoke_invitation(self, owner: Account | None, invitation_uuid: str) -> None:
        owner = self._require_owner(owner)
        with _store_call(
            "revoke_invitation",
            "Failed to revoke invitation.",
            owner=owner.id,
            invitation=invitation_uuid,
        ):
            revoked = self.invitation_repo.revoke_pending(invitation_uuid, owner.id)
        if not revoked:
            logger.warning("Revoke failed: owner=%s invitation=%s matched no pending row", owner.id, invitation_uuid)
            raise RevocationError()
        logger.info("Invitation revoked: owner=%s invitation=%s", owner.id, invitation_uuid)
