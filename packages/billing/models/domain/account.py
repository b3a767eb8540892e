"""
Domain models for billing accounts and their audit trail.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class AccountRecord(BaseModel):
    """
    The subscription currently recognized for an account.

    ``account_id`` is the storage key, never the raw external reference.
    """

    account_id: str
    subscription_id: Optional[str] = None
    plan_id: Optional[str] = None
    customer_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    def has_subscription(self) -> bool:
        return bool(self.subscription_id)


class InvalidSubscriptionEntry(BaseModel):
    """A purchase rejected because another subscription was active."""

    id: int
    account_id: str
    subscription_id: str
    plan_id: Optional[str] = None
    customer_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
