"""
Domain models for the usage ledger.
"""

from typing import Optional
from pydantic import BaseModel, Field


class SpendingUnit(BaseModel):
    """
    One consumed unit reported by the metering source.

    ``created_at_ms`` is stamped by the server when omitted.
    """

    account_id: str = Field(min_length=1)
    external_id: str = Field(min_length=1)
    created_at_ms: Optional[int] = None
