from __future__ import annotations

import logging

from terrain.models.subscription import Plan, Subscription
from terrain.repositories.base import SubscriptionRepository

logger = logging.getLogger(__name__)


class SubscriptionService:
    def __init__(self, repo: SubscriptionRepository) -> None:
        self.repo = repo

    def get_plan(self, account_id: int) -> Plan:
        subscription = self.repo.get_by_account(account_id)
        if subscription is None:
            return Plan.FREE
        return Plan(subscription.plan)

    def set_plan(self, account_id: int, plan: Plan | str) -> Subscription:
        plan = Plan(plan)
        result = self.repo.upsert(account_id, plan.value)
        logger.info("Plan changed: account=%s plan=%s", account_id, plan.value)
        return result
