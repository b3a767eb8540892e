"""
Repository for the usage ledger.
"""

import time
from typing import Dict, List

from sqlalchemy import select, func

from common.core.otel_axiom_exporter import trace_span, get_logger
from common.db.session import Database
from packages.billing.account_keys import account_storage_key
from packages.billing.models.database.usage_unit import UsageUnitEntity
from packages.billing.models.domain.usage import SpendingUnit
from packages.billing.repositories.base import BillingRepository

logger = get_logger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class UsageUnitRepository(BillingRepository[UsageUnitEntity, SpendingUnit]):
    """Append-only usage units, de-duplicated by external id."""

    def __init__(self, db: Database):
        super().__init__(UsageUnitEntity, SpendingUnit, db)

    @trace_span
    async def add_units(self, items: List[SpendingUnit]) -> int:
        """
        Insert units whose external id is not stored yet.

        Duplicates, within the batch or against stored rows, are skipped.

        Returns:
            Number of rows actually inserted
        """
        if not items:
            return 0

        stamp = now_ms()
        rows: Dict[str, dict] = {}
        for item in items:
            # First occurrence of an external id wins
            if item.external_id in rows:
                continue
            rows[item.external_id] = {
                "external_id": item.external_id,
                "account_id": account_storage_key(item.account_id),
                "created_at_ms": (
                    item.created_at_ms if item.created_at_ms is not None else stamp
                ),
            }

        stmt = (
            self._insert()
            .values(list(rows.values()))
            .on_conflict_do_nothing(index_elements=[UsageUnitEntity.external_id])
            .returning(UsageUnitEntity.id)
        )
        async with self._get_session() as session:
            result = await session.execute(stmt)
            inserted = len(result.all())

        logger.debug(
            f"Added {inserted} usage units",
            extra={"received": len(items), "inserted": inserted},
        )
        return inserted

    @trace_span
    async def count_units_between(
        self, account_id: str, start_ms: int, end_ms: int
    ) -> int:
        """Count the account's units created in [start_ms, end_ms], both inclusive."""
        async with self._get_session() as session:
            result = await session.execute(
                select(func.count(UsageUnitEntity.id)).where(
                    UsageUnitEntity.account_id == account_storage_key(account_id),
                    UsageUnitEntity.created_at_ms >= start_ms,
                    UsageUnitEntity.created_at_ms <= end_ms,
                )
            )
            return result.scalar_one()
