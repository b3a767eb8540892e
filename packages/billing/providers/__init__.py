"""Billing providers - abstracted external platform integrations."""

from packages.billing.providers.gateway.factory import create_billing_gateway

__all__ = [
    "create_billing_gateway",
]
