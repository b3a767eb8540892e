"""
Database entity for free allowances.
"""

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.sql import func

from common.db.base import Base


class FreeAllowanceEntity(Base):
    """Remaining free credit per account, seeded once on first read."""

    __tablename__ = "free_allowances"

    account_id = Column(
        String(64),
        ForeignKey("billing_accounts.account_id", ondelete="CASCADE"),
        primary_key=True,
    )
    credit = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
