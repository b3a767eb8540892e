"""
Domain models for Stripe webhook payloads.

Strongly-typed Pydantic models for the parts of Stripe events we consume.
"""

from typing import Optional, Any, Dict, Union
from enum import Enum
from pydantic import BaseModel, Field


class StripeWebhookType(str, Enum):
    """Stripe webhook event types we act on."""

    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


class StripeExpandableRef(BaseModel):
    """An expanded Stripe object; only its id is needed."""

    id: str


class StripeCheckoutSessionData(BaseModel):
    """Stripe checkout session object."""

    id: str
    client_reference_id: Optional[str] = None
    # Either an id or the expanded object, depending on the event's expand
    customer: Optional[Union[str, StripeExpandableRef]] = None
    subscription: Optional[Union[str, StripeExpandableRef]] = None
    mode: Optional[str] = None
    payment_status: Optional[str] = None
    status: Optional[str] = None
    customer_email: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)

    @staticmethod
    def _ref_id(ref: Optional[Union[str, StripeExpandableRef]]) -> Optional[str]:
        if isinstance(ref, StripeExpandableRef):
            return ref.id
        return ref

    @property
    def customer_id(self) -> Optional[str]:
        return self._ref_id(self.customer)

    @property
    def subscription_id(self) -> Optional[str]:
        return self._ref_id(self.subscription)


class StripeEventData(BaseModel):
    """Stripe event data wrapper."""

    object: Dict[str, Any]  # The actual object (checkout session, invoice, ...)


class StripeWebhookPayload(BaseModel):
    """Complete Stripe webhook payload."""

    id: str
    # Kept as a plain string: unknown event types are acknowledged, not rejected
    type: str
    data: StripeEventData
    created: int
    livemode: bool = False
