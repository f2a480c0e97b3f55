from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REVOKED = "revoked"


class Invitation(BaseModel):
    id: int | None = None
    uuid: str = ""
    inviter_id: int = 0
    email: str = ""
    role: str = "member"
    status: str = InvitationStatus.PENDING.value
    created_at: datetime | None = None
    accepted_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING.value
