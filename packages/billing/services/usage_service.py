"""
Service for the usage ledger's administrative surface.
"""

from typing import List

from common.core.exceptions import ValidationError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.usage import SpendingUnit
from packages.billing.repositories.usage_unit_repository import UsageUnitRepository

logger = get_logger(__name__)


class UsageService:
    """Bulk appends of consumed units."""

    def __init__(self, usage_units: UsageUnitRepository):
        self.usage_units = usage_units

    @trace_span
    async def add_spending_units(self, items: List[SpendingUnit]) -> int:
        """
        Append units to the ledger. Units whose external id is already
        stored are skipped.

        Returns:
            Number of units newly inserted

        Raises:
            ValidationError: Empty batch, or a blank account or external id
        """
        if not items:
            raise ValidationError("At least one spending unit is required")

        for index, item in enumerate(items):
            if not item.account_id.strip() or not item.external_id.strip():
                raise ValidationError(
                    f"Spending unit {index} needs a non-blank account id and external id"
                )

        inserted = await self.usage_units.add_units(items)
        logger.info(
            f"Recorded {inserted} of {len(items)} spending units",
            extra={"received": len(items), "inserted": inserted},
        )
        return inserted
