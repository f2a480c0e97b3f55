from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class Plan(str, Enum):
    FREE = "free"
    PRO = "pro"
    TEAM = "team"


PLAN_LABELS = {Plan.FREE: "Free", Plan.PRO: "Pro", Plan.TEAM: "Team"}


class Subscription(BaseModel):
    id: int | None = None
    account_id: int = 0
    plan: str = Plan.FREE.value
    created_at: datetime | None = None
    updated_at: datetime | None = None
