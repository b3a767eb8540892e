"""
Typed billing errors.

Every error carries a message and a ``context`` dict with the identifiers
needed to diagnose it (account_id, subscription_id, customer_id ...).
The API layer maps each class to an HTTP status; nothing here is swallowed.
"""

from typing import Any, Dict, Optional

from common.core.exceptions import AppException


class BillingError(AppException):
    """Base class for billing failures."""

    code = "billing_error"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = {
            k: v for k, v in (context or {}).items() if v is not None
        }

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} ({details})"


class MalformedNotificationError(BillingError):
    """A checkout notification is missing a required field. Not retryable."""

    code = "malformed_notification"


class StoreError(BillingError):
    """Persistence failure. Retryable with backoff."""

    code = "store_error"


class LockUnavailableError(StoreError):
    """The per-account reconciliation lock could not be acquired in time."""

    code = "lock_unavailable"


class GatewayError(BillingError):
    """Billing provider unreachable, timed out, or returned bad data. Retryable."""

    code = "gateway_error"


class BillingResourceNotFoundError(GatewayError):
    """The billing provider does not know the subscription or customer."""

    code = "billing_resource_not_found"


class ConfigurationError(BillingError):
    """Missing pricing constant or malformed pricing data. Fatal to the request."""

    code = "configuration_error"
