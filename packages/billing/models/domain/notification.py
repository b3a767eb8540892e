from typing import Optional
from pydantic import BaseModel


class CheckoutNotification(BaseModel):
    """
    A completed checkout, already authenticated by the transport layer.

    Fields are optional here so that a missing one reaches the
    Reconciliation Engine and is rejected there as malformed.
    """

    account_ref: Optional[str] = None
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None
    plan_id: Optional[str] = None
