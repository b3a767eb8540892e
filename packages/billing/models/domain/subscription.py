"""
Domain models for billing provider resources.

These are read from the Billing Gateway and never persisted.
"""

from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import SubscriptionStatus


class SubscriptionPlan(BaseModel):
    """Pricing of a subscription. ``amount`` is the unit price in minor units."""

    id: Optional[str] = None
    amount: Optional[int] = None


class SubscriptionSnapshot(BaseModel):
    """
    A subscription as the billing provider reports it.

    Timestamps are epoch seconds. ``cancel_at`` of 0 means no cancellation
    is scheduled.
    """

    id: str
    status: SubscriptionStatus
    customer_id: Optional[str] = None
    cancel_at: int = 0
    current_period_start: int = 0
    current_period_end: int = 0
    plan: Optional[SubscriptionPlan] = None
    quantity: int = 0

    @property
    def period_start_ms(self) -> int:
        return self.current_period_start * 1000

    @property
    def period_end_ms(self) -> int:
        return self.current_period_end * 1000


class BillingCustomer(BaseModel):
    """A billing provider customer."""

    id: str
    email: Optional[str] = None
