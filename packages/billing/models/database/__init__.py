"""Database models for billing."""

from packages.billing.models.database.account import BillingAccountEntity
from packages.billing.models.database.free_allowance import FreeAllowanceEntity
from packages.billing.models.database.invalid_subscription import (
    InvalidSubscriptionEntity,
)
from packages.billing.models.database.usage_unit import UsageUnitEntity

__all__ = [
    "BillingAccountEntity",
    "FreeAllowanceEntity",
    "InvalidSubscriptionEntity",
    "UsageUnitEntity",
]
