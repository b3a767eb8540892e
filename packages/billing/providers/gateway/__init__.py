"""Billing gateways - read and cancel access to billing provider resources."""

from packages.billing.providers.gateway.interface import BillingGatewayInterface
from packages.billing.providers.gateway.factory import create_billing_gateway
from packages.billing.providers.gateway.memory_gateway import InMemoryBillingGateway
from packages.billing.providers.gateway.stripe_gateway import StripeBillingGateway

__all__ = [
    "BillingGatewayInterface",
    "create_billing_gateway",
    "InMemoryBillingGateway",
    "StripeBillingGateway",
]
