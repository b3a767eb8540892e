"""
Factory for the billing gateway.
"""

from common.core.config import Settings
from common.core.constants import BillingGatewayProvider
from common.core.otel_axiom_exporter import get_logger
from packages.billing.exceptions import ConfigurationError
from packages.billing.providers.gateway.interface import BillingGatewayInterface
from packages.billing.providers.gateway.memory_gateway import InMemoryBillingGateway
from packages.billing.providers.gateway.stripe_gateway import StripeBillingGateway

logger = get_logger(__name__)


def create_billing_gateway(settings: Settings) -> BillingGatewayInterface:
    """
    Build the billing gateway selected by ``settings.billing_gateway_provider``.

    Raises:
        ConfigurationError: Stripe is selected but no secret key is configured
    """
    if settings.billing_gateway_provider == BillingGatewayProvider.MEMORY:
        logger.info("Using in-memory billing gateway")
        return InMemoryBillingGateway()

    if not settings.stripe_secret_key:
        raise ConfigurationError(
            "STRIPE_SECRET_KEY is required for the stripe billing gateway"
        )
    logger.info("Using Stripe billing gateway")
    return StripeBillingGateway(api_key=settings.stripe_secret_key)
