"""
Repository for per-account free allowances.
"""

from sqlalchemy import select

from common.core.otel_axiom_exporter import trace_span, get_logger
from common.db.session import Database
from packages.billing.account_keys import account_storage_key
from packages.billing.models.database.free_allowance import FreeAllowanceEntity
from packages.billing.repositories.account_repository import AccountRepository
from packages.billing.repositories.base import BillingRepository

logger = get_logger(__name__)


class FreeAllowanceRepository(BillingRepository[FreeAllowanceEntity, int]):
    """Remaining free credit per account."""

    def __init__(self, db: Database, accounts: AccountRepository):
        super().__init__(FreeAllowanceEntity, int, db)
        self.accounts = accounts

    @trace_span
    async def get_or_initialize(self, account_id: str, default: int) -> int:
        """
        Read the account's remaining free credit, seeding it on first access.

        The account row is created (empty subscription fields) when missing,
        then the allowance is inserted only if absent, all in one transaction:
        no reader can observe an allowance without its account, and an
        existing allowance is never reset.
        """
        key = account_storage_key(account_id)
        async with self._transaction() as session:
            await self.accounts.ensure_exists(account_id)

            stmt = (
                self._insert()
                .values(account_id=key, credit=default)
                .on_conflict_do_nothing(index_elements=[FreeAllowanceEntity.account_id])
            )
            result = await session.execute(stmt)
            if result.rowcount:
                logger.info(
                    "Initialized free allowance",
                    extra={"account_key": key, "credit": default},
                )

            credit = await session.execute(
                select(FreeAllowanceEntity.credit).where(
                    FreeAllowanceEntity.account_id == key
                )
            )
            return credit.scalar_one()
