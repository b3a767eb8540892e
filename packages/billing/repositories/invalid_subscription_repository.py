"""
Repository for the invalid-subscription audit log.
"""

from typing import List, Optional

from sqlalchemy import select

from common.core.otel_axiom_exporter import trace_span
from common.db.session import Database
from packages.billing.account_keys import account_storage_key
from packages.billing.models.database.invalid_subscription import (
    InvalidSubscriptionEntity,
)
from packages.billing.models.domain.account import InvalidSubscriptionEntry
from packages.billing.repositories.base import BillingRepository


class InvalidSubscriptionRepository(
    BillingRepository[InvalidSubscriptionEntity, InvalidSubscriptionEntry]
):
    """Append-only record of purchases rejected by reconciliation."""

    def __init__(self, db: Database):
        super().__init__(InvalidSubscriptionEntity, InvalidSubscriptionEntry, db)

    @trace_span
    async def record(
        self,
        account_id: str,
        subscription_id: str,
        plan_id: Optional[str],
        customer_id: Optional[str],
    ) -> InvalidSubscriptionEntry:
        entity = InvalidSubscriptionEntity(
            account_id=account_storage_key(account_id),
            subscription_id=subscription_id,
            plan_id=plan_id,
            customer_id=customer_id,
        )
        async with self._get_session() as session:
            session.add(entity)
            await session.flush()
            await session.refresh(entity)
            return self._entity_to_domain(entity)

    @trace_span
    async def list_for_account(self, account_id: str) -> List[InvalidSubscriptionEntry]:
        """Entries for an account, oldest first."""
        async with self._get_session() as session:
            result = await session.execute(
                select(InvalidSubscriptionEntity)
                .where(
                    InvalidSubscriptionEntity.account_id
                    == account_storage_key(account_id)
                )
                .order_by(InvalidSubscriptionEntity.id)
            )
            return self._entities_to_domain(result.scalars().all())
