"""Domain models for billing."""

from packages.billing.models.domain.enums import (
    InvalidityType,
    ValidityType,
    SubscriptionStatus,
    ReconciliationOutcome,
)
from packages.billing.models.domain.account import (
    AccountRecord,
    InvalidSubscriptionEntry,
)
from packages.billing.models.domain.subscription import (
    SubscriptionPlan,
    SubscriptionSnapshot,
    BillingCustomer,
)
from packages.billing.models.domain.verdict import Verdict
from packages.billing.models.domain.notification import CheckoutNotification
from packages.billing.models.domain.usage import SpendingUnit

__all__ = [
    # Enums
    "InvalidityType",
    "ValidityType",
    "SubscriptionStatus",
    "ReconciliationOutcome",
    # Accounts
    "AccountRecord",
    "InvalidSubscriptionEntry",
    # Billing provider resources
    "SubscriptionPlan",
    "SubscriptionSnapshot",
    "BillingCustomer",
    # Verdicts and inputs
    "Verdict",
    "CheckoutNotification",
    "SpendingUnit",
]
