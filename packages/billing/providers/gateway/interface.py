"""
Interface for billing gateways.

Abstracts the billing provider (Stripe) away from the entitlement engines so
an in-memory implementation can stand in for it in tests and local runs.
"""

from abc import ABC, abstractmethod

from packages.billing.models.domain.subscription import (
    BillingCustomer,
    SubscriptionSnapshot,
)


class BillingGatewayInterface(ABC):
    """Abstract interface for billing gateways.

    Implementations raise ``BillingResourceNotFoundError`` for unknown
    resources and ``GatewayError`` for any other provider failure.
    Callers bound every call with their own timeout.
    """

    @abstractmethod
    async def get_subscription(self, subscription_id: str) -> SubscriptionSnapshot:
        """
        Fetch the current state of a subscription.

        Args:
            subscription_id: Provider subscription ID

        Returns:
            SubscriptionSnapshot: Status, schedule, period and pricing
        """
        pass

    @abstractmethod
    async def get_customer(self, customer_id: str) -> BillingCustomer:
        """
        Fetch a customer.

        Args:
            customer_id: Provider customer ID

        Returns:
            BillingCustomer: Customer with email when the provider has one
        """
        pass

    @abstractmethod
    async def cancel_subscription(self, subscription_id: str) -> None:
        """
        Cancel a subscription immediately.

        Args:
            subscription_id: Provider subscription ID
        """
        pass
