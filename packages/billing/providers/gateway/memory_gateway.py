"""
In-memory billing gateway for tests and local development.
"""

from typing import Dict, Optional

from common.core.otel_axiom_exporter import get_logger
from packages.billing.exceptions import BillingResourceNotFoundError
from packages.billing.models.domain.enums import SubscriptionStatus
from packages.billing.models.domain.subscription import (
    BillingCustomer,
    SubscriptionSnapshot,
)
from packages.billing.providers.gateway.interface import BillingGatewayInterface

logger = get_logger(__name__)


class InMemoryBillingGateway(BillingGatewayInterface):
    """Dictionary-backed billing gateway."""

    def __init__(
        self,
        subscriptions: Optional[Dict[str, SubscriptionSnapshot]] = None,
        customers: Optional[Dict[str, BillingCustomer]] = None,
    ):
        self.subscriptions: Dict[str, SubscriptionSnapshot] = dict(subscriptions or {})
        self.customers: Dict[str, BillingCustomer] = dict(customers or {})
        logger.info("Memory billing gateway initialized")

    def add_subscription(self, snapshot: SubscriptionSnapshot) -> None:
        self.subscriptions[snapshot.id] = snapshot

    def add_customer(self, customer: BillingCustomer) -> None:
        self.customers[customer.id] = customer

    async def get_subscription(self, subscription_id: str) -> SubscriptionSnapshot:
        snapshot = self.subscriptions.get(subscription_id)
        if snapshot is None:
            raise BillingResourceNotFoundError(
                "Subscription not found",
                {"subscription_id": subscription_id},
            )
        return snapshot.model_copy(deep=True)

    async def get_customer(self, customer_id: str) -> BillingCustomer:
        customer = self.customers.get(customer_id)
        if customer is None:
            raise BillingResourceNotFoundError(
                "Customer not found", {"customer_id": customer_id}
            )
        return customer.model_copy()

    async def cancel_subscription(self, subscription_id: str) -> None:
        snapshot = self.subscriptions.get(subscription_id)
        if snapshot is None:
            raise BillingResourceNotFoundError(
                "Subscription not found",
                {"subscription_id": subscription_id},
            )
        self.subscriptions[subscription_id] = snapshot.model_copy(
            update={"status": SubscriptionStatus.CANCELED}
        )
        logger.info(
            "Cancelled subscription in memory",
            extra={"subscription_id": subscription_id},
        )
