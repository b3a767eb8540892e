from enum import Enum


class Environment(str, Enum):
    """Environment profiles."""

    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class LockProviderType(str, Enum):
    """Lock provider backends."""

    MEMORY = "memory"
    REDIS = "redis"


class BillingGatewayProvider(str, Enum):
    """Billing gateway backends."""

    STRIPE = "stripe"
    MEMORY = "memory"
