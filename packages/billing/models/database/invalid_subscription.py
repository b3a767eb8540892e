"""
Database entity for rejected subscriptions.
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class InvalidSubscriptionEntity(Base):
    """
    Audit row for a purchase rejected because another subscription was
    already active on the account. Append-only.
    """

    __tablename__ = "invalid_subscriptions"

    id = Column(BigIntegerType, primary_key=True, autoincrement=True)
    account_id = Column(String(64), nullable=False, index=True)
    subscription_id = Column(String(255), nullable=False)
    plan_id = Column(String(255), nullable=True)
    customer_id = Column(String(255), nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
