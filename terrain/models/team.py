from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from terrain.models.account import Account
from terrain.models.invitation import Invitation


class TeamMember(BaseModel):
    id: str
    email: str
    display_name: str = ""
    created_at: datetime | None = None

    @classmethod
    def from_account(cls, account: Account) -> TeamMember:
        return cls(
            id=account.uuid,
            email=account.email,
            display_name=account.display_name,
            created_at=account.created_at,
        )


class TeamInvitation(BaseModel):
    id: str
    email: str
    role: str
    status: str
    created_at: datetime | None = None
    accepted_at: datetime | None = None

    @classmethod
    def from_invitation(cls, invitation: Invitation) -> TeamInvitation:
        return cls(
            id=invitation.uuid,
            email=invitation.email,
            role=invitation.role,
            status=invitation.status,
            created_at=invitation.created_at,
            accepted_at=invitation.accepted_at,
        )


class Team(BaseModel):
    members: list[TeamMember] = Field(default_factory=list)
    invitations: list[TeamInvitation] = Field(default_factory=list)


class InviteResult(BaseModel):
    email: str
    auto_linked: bool = Field(default=False, serialization_alias="autoLinked")
