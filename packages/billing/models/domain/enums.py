"""
Billing enums - strongly typed enumerations for entitlement verdicts and
billing provider states.
"""

from enum import Enum


class InvalidityType(str, Enum):
    """Why an account is not entitled to the metered service."""

    NO_SUBSCRIPTION = "noSubscription"  # No account or no recognized subscription
    CANCELLED = "cancelled"  # Canceled, or scheduled cancellation has passed
    EXHAUSTED = "exhausted"  # Usage this period exceeds the purchased budget
    OTHER = "other"  # Any non-active provider status (past_due, unpaid, ...)


class ValidityType(str, Enum):
    """Why an account is entitled to the metered service."""

    FREE_TIER = "freeTier"
    PAYING_CUSTOMER = "payingCustomer"


class SubscriptionStatus(str, Enum):
    """Stripe subscription status values."""

    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    UNPAID = "unpaid"
    PAUSED = "paused"


class ReconciliationOutcome(str, Enum):
    """Which merge rule a checkout notification took."""

    CREATED = "created"  # Unknown account, first purchase recorded
    ASSIGNED = "assigned"  # Account existed without a subscription
    SUPERSEDED = "superseded"  # Prior subscription cancelled, replaced
    REJECTED = "rejected"  # Prior subscription active, purchase logged as invalid
    REDELIVERED = "redelivered"  # Subscription already recognized, nothing to write
