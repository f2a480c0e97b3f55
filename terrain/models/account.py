from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Account(BaseModel):
    id: int | None = None
    uuid: str = ""
    email: str
    display_name: str = ""
    password_hash: str = ""
    team_owner_id: int | None = None
    created_at: datetime | None = None

    @property
    def name_or_email(self) -> str:
        return self.display_name or self.email
