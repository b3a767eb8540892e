from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import InvalidityType, ValidityType


class Verdict(BaseModel):
    """Outcome of an entitlement check. Computed per request, never stored."""

    is_valid_subscription: bool
    invalidity_type: Optional[InvalidityType] = None
    validity_type: Optional[ValidityType] = None
    stripe_customer_email: Optional[str] = None

    @classmethod
    def valid(
        cls, validity_type: ValidityType, email: Optional[str] = None
    ) -> "Verdict":
        return cls(
            is_valid_subscription=True,
            validity_type=validity_type,
            stripe_customer_email=email,
        )

    @classmethod
    def invalid(
        cls, invalidity_type: InvalidityType, email: Optional[str] = None
    ) -> "Verdict":
        return cls(
            is_valid_subscription=False,
            invalidity_type=invalidity_type,
            stripe_customer_email=email,
        )
