"""
Database entity for billing accounts.
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from common.db.base import Base


class BillingAccountEntity(Base):
    """
    One row per account: the subscription currently recognized for it.

    ``account_id`` holds the storage key (hashed external reference).
    Empty subscription fields mean the account exists without a purchase.
    """

    __tablename__ = "billing_accounts"

    account_id = Column(String(64), primary_key=True)

    # Recognized Stripe identifiers
    subscription_id = Column(String(255), nullable=True, index=True)
    plan_id = Column(String(255), nullable=True)
    customer_id = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
