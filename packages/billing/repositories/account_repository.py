"""
Repository for billing account records.
"""

from typing import Optional, Tuple

from sqlalchemy import func, select

from common.core.otel_axiom_exporter import trace_span
from common.db.session import Database
from packages.billing.account_keys import account_storage_key
from packages.billing.models.database.account import BillingAccountEntity
from packages.billing.models.domain.account import AccountRecord
from packages.billing.repositories.base import BillingRepository


class AccountRepository(BillingRepository[BillingAccountEntity, AccountRecord]):
    """
    One row per account holding its recognized subscription.

    Methods take the raw external account reference and apply the storage
    key themselves.
    """

    def __init__(self, db: Database):
        super().__init__(BillingAccountEntity, AccountRecord, db)

    @trace_span
    async def exists(self, account_id: str) -> Tuple[bool, Optional[str]]:
        """Return whether the account exists and its recognized subscription id."""
        key = account_storage_key(account_id)
        async with self._get_session() as session:
            result = await session.execute(
                select(BillingAccountEntity.subscription_id).where(
                    BillingAccountEntity.account_id == key
                )
            )
            row = result.first()
            if row is None:
                return False, None
            return True, row[0] or None

    @trace_span
    async def get(self, account_id: str) -> Optional[AccountRecord]:
        key = account_storage_key(account_id)
        async with self._get_session() as session:
            entity = await session.get(BillingAccountEntity, key)
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def upsert(
        self,
        account_id: str,
        subscription_id: Optional[str],
        plan_id: Optional[str],
        customer_id: Optional[str],
    ) -> AccountRecord:
        """Insert the account or overwrite its recognized identifiers."""
        key = account_storage_key(account_id)
        values = {
            "subscription_id": subscription_id,
            "plan_id": plan_id,
            "customer_id": customer_id,
        }
        async with self._get_session() as session:
            stmt = self._insert().values(account_id=key, **values)
            # ON CONFLICT DO UPDATE skips Python-side onupdate hooks
            stmt = stmt.on_conflict_do_update(
                index_elements=[BillingAccountEntity.account_id],
                set_={**values, "updated_at": func.now()},
            )
            await session.execute(stmt)

            entity = await session.get(
                BillingAccountEntity, key, populate_existing=True
            )
            return self._entity_to_domain(entity)

    @trace_span
    async def ensure_exists(self, account_id: str) -> None:
        """Create the account with empty subscription fields unless it exists."""
        key = account_storage_key(account_id)
        async with self._get_session() as session:
            stmt = (
                self._insert()
                .values(account_id=key)
                .on_conflict_do_nothing(index_elements=[BillingAccountEntity.account_id])
            )
            await session.execute(stmt)
