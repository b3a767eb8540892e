"""
API schemas for billing operations.

Request and response models for billing endpoints. Field names are
camelCase on the wire.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from packages.billing.models.domain.account import InvalidSubscriptionEntry
from packages.billing.models.domain.usage import SpendingUnit
from packages.billing.models.domain.verdict import Verdict


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Entitlement Schemas
# ============================================================================


class VerifySubscriptionRequest(CamelModel):
    """Request to check whether an account may use the metered service."""

    account_id: str = Field(..., min_length=1)


class VerifySubscriptionResponse(CamelModel):
    """
    Entitlement verdict.

    Absent types and an unresolved email are sent as empty strings.
    """

    is_valid_subscription: bool
    invalidity_type: str = ""
    validity_type: str = ""
    stripe_customer_email: str = ""

    @classmethod
    def from_verdict(cls, verdict: Verdict) -> "VerifySubscriptionResponse":
        return cls(
            is_valid_subscription=verdict.is_valid_subscription,
            invalidity_type=(
                verdict.invalidity_type.value if verdict.invalidity_type else ""
            ),
            validity_type=verdict.validity_type.value if verdict.validity_type else "",
            stripe_customer_email=verdict.stripe_customer_email or "",
        )


# ============================================================================
# Administrative Schemas
# ============================================================================


class CancelSubscriptionRequest(CamelModel):
    """Request to cancel a subscription at the billing provider."""

    subscription_id: str = Field(..., min_length=1)


class CancelSubscriptionResponse(CamelModel):
    status: str = "cancelled"
    subscription_id: str


class SpendingUnitItem(CamelModel):
    """One consumed unit, de-duplicated by ``external_id``."""

    account_id: str = Field(..., min_length=1)
    external_id: str = Field(..., min_length=1)

    def to_domain(self) -> SpendingUnit:
        return SpendingUnit(account_id=self.account_id, external_id=self.external_id)


class SpendingUnitsRequest(CamelModel):
    items: List[SpendingUnitItem] = Field(..., min_length=1)


class SpendingUnitsResponse(CamelModel):
    inserted: int = Field(..., description="Units newly written; duplicates excluded")


class RejectedPurchasesRequest(CamelModel):
    account_id: str = Field(..., min_length=1)


class RejectedPurchase(CamelModel):
    """A purchase rejected because another subscription was live."""

    subscription_id: str
    plan_id: Optional[str] = None
    customer_id: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: InvalidSubscriptionEntry) -> "RejectedPurchase":
        return cls(
            subscription_id=entry.subscription_id,
            plan_id=entry.plan_id,
            customer_id=entry.customer_id,
            created_at=entry.created_at,
        )


class RejectedPurchasesResponse(CamelModel):
    entries: List[RejectedPurchase]


# ============================================================================
# Webhook Schemas
# ============================================================================


class WebhookAckResponse(BaseModel):
    status: str = "success"
