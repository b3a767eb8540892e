"""
Pure entitlement rules shared by the Validity and Reconciliation engines.
"""

import re

from packages.billing.exceptions import ConfigurationError
from packages.billing.models.domain.enums import SubscriptionStatus
from packages.billing.models.domain.subscription import SubscriptionSnapshot

# Grouping characters operators use when writing large numbers
_GROUPING = re.compile(r"[_,\s']")
_DIGITS = re.compile(r"[0-9]+")


def is_subscription_cancelled(snapshot: SubscriptionSnapshot, now: float) -> bool:
    """
    A subscription is cancelled when the provider reports it canceled, or
    when a cancellation was scheduled and that time has already passed.
    """
    if snapshot.status == SubscriptionStatus.CANCELED:
        return True
    return snapshot.cancel_at != 0 and now > snapshot.cancel_at


def parse_units_per_dollar(raw: str) -> int:
    """
    Parse the units-per-dollar pricing constant, e.g. ``"2_000_000"``.

    Raises:
        ConfigurationError: Missing, non-numeric or not positive
    """
    cleaned = _GROUPING.sub("", raw or "")
    if not _DIGITS.fullmatch(cleaned):
        raise ConfigurationError(
            f"CREDIT_UNITS_PER_DOLLAR must be a positive integer, got {raw!r}"
        )
    value = int(cleaned)
    if value <= 0:
        raise ConfigurationError(
            f"CREDIT_UNITS_PER_DOLLAR must be a positive integer, got {raw!r}"
        )
    return value


def compute_unit_budget(snapshot: SubscriptionSnapshot, units_per_dollar: int) -> int:
    """
    Units the subscription may consume in its current billing period:
    whole currency units of the plan price, times quantity, times
    ``units_per_dollar``.

    Raises:
        ConfigurationError: No plan, zero unit price or zero quantity
    """
    context = {"subscription_id": snapshot.id}
    if snapshot.plan is None:
        raise ConfigurationError("Subscription has no plan", context)
    if not snapshot.plan.amount or snapshot.plan.amount <= 0:
        raise ConfigurationError("Subscription plan has no unit price", context)
    if snapshot.quantity <= 0:
        raise ConfigurationError("Subscription has no purchased quantity", context)

    return (snapshot.plan.amount // 100) * snapshot.quantity * units_per_dollar
