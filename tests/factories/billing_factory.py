from typing import Optional

from packages.billing.models.domain.enums import SubscriptionStatus
from packages.billing.models.domain.notification import CheckoutNotification
from packages.billing.models.domain.subscription import (
    BillingCustomer,
    SubscriptionPlan,
    SubscriptionSnapshot,
)

# Fixed "now" for every engine test: 2023-11-14T22:13:20Z
NOW = 1_700_000_000
PERIOD_START = NOW - 10 * 24 * 3600
PERIOD_END = NOW + 20 * 24 * 3600


class FrozenClock:
    """Callable clock returning a settable epoch second."""

    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now


class BillingFactory:
    """Factory for creating billing test objects."""

    @staticmethod
    def create_subscription(
        subscription_id: str = "sub_first",
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        customer_id: Optional[str] = "cus_first",
        cancel_at: int = 0,
        amount: Optional[int] = 1400,
        quantity: int = 1,
        with_plan: bool = True,
        period_start: int = PERIOD_START,
        period_end: int = PERIOD_END,
    ) -> SubscriptionSnapshot:
        """Create a SubscriptionSnapshot whose period contains NOW by default."""
        return SubscriptionSnapshot(
            id=subscription_id,
            status=status,
            customer_id=customer_id,
            cancel_at=cancel_at,
            current_period_start=period_start,
            current_period_end=period_end,
            plan=(
                SubscriptionPlan(id="price_metered", amount=amount)
                if with_plan
                else None
            ),
            quantity=quantity,
        )

    @staticmethod
    def create_customer(
        customer_id: str = "cus_first", email: Optional[str] = "first@example.com"
    ) -> BillingCustomer:
        return BillingCustomer(id=customer_id, email=email)

    @staticmethod
    def create_notification(
        account_ref: Optional[str] = "acct-1",
        customer_id: Optional[str] = "cus_first",
        subscription_id: Optional[str] = "sub_first",
        plan_id: Optional[str] = "price_metered",
    ) -> CheckoutNotification:
        return CheckoutNotification(
            account_ref=account_ref,
            customer_id=customer_id,
            subscription_id=subscription_id,
            plan_id=plan_id,
        )
