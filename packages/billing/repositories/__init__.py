"""Billing repositories."""

from packages.billing.repositories.account_repository import AccountRepository
from packages.billing.repositories.free_allowance_repository import (
    FreeAllowanceRepository,
)
from packages.billing.repositories.invalid_subscription_repository import (
    InvalidSubscriptionRepository,
)
from packages.billing.repositories.usage_unit_repository import UsageUnitRepository

__all__ = [
    "AccountRepository",
    "FreeAllowanceRepository",
    "InvalidSubscriptionRepository",
    "UsageUnitRepository",
]
