from functools import lru_cache
from typing import Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.core.constants import (
    Environment,
    BillingGatewayProvider,
    LockProviderType,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Environment Profile
    environment: Environment = Environment.LOCAL

    # API Settings
    app_name: str = "metered-entitlements"
    api_version: str = "v1"
    debug: bool = False

    # Database Components
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "entitlements"
    db_use_nullpool: bool = False
    db_pool_size: int = 10
    db_pool_overflow: int = 5

    @property
    def database_url(self) -> str:
        """Construct database URL from components."""
        return f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    # Locking (per-account reconciliation serialization)
    # Unset means redis everywhere but LOCAL; memory only serializes one process
    lock_provider: Optional[LockProviderType] = None
    reconciliation_lock_ttl_seconds: int = 30
    reconciliation_lock_wait_seconds: float = 5.0

    # Rate limiting
    rate_limit_storage_uri: str = "memory://"

    # OpenTelemetry
    otel_service_name: str = "metered-entitlements"
    otel_service_version: str = "0.1.0"

    # Axiom (exporters are attached only when a token is configured)
    axiom_token: str = ""
    axiom_dataset: str = ""

    # Billing - gateway
    billing_gateway_provider: BillingGatewayProvider = BillingGatewayProvider.STRIPE
    billing_gateway_timeout_seconds: float = 10.0

    # Billing - Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""

    # Billing - entitlement pricing
    # Kept as a raw string: operators write it with grouping characters (2_000_000)
    credit_units_per_dollar: str = ""
    initial_free_credit: int = 5

    # Shared key for service-to-service calls on the billing routes
    service_api_key: str = ""

    @model_validator(mode="after")
    def _select_lock_provider(self) -> "Settings":
        """Auto-select the lock provider based on environment."""
        if self.lock_provider is None:
            self.lock_provider = (
                LockProviderType.MEMORY
                if self.environment == Environment.LOCAL
                else LockProviderType.REDIS
            )
        return self

    @property
    def docs_enabled(self) -> bool:
        """Only expose OpenAPI docs in local development."""
        return self.environment == Environment.LOCAL


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
