"""
Database entity for metered usage units.
"""

from sqlalchemy import Column, String, Index

from common.db.base import Base, BigIntegerType


class UsageUnitEntity(Base):
    """
    One consumed unit of the metered service.

    ``external_id`` is assigned by the metering source and de-duplicates
    redelivered units. ``created_at_ms`` is a millisecond epoch.
    High volume, append-only.
    """

    __tablename__ = "usage_units"

    id = Column(BigIntegerType, primary_key=True, autoincrement=True)
    external_id = Column(String(255), nullable=False, unique=True)
    account_id = Column(String(64), nullable=False, index=True)
    created_at_ms = Column(BigIntegerType, nullable=False)

    # Windowed counts filter by account then time range
    __table_args__ = (
        Index("idx_usage_units_account_created", "account_id", "created_at_ms"),
    )
