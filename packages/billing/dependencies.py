"""
FastAPI dependencies for the billing routes.
"""

import hmac
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from packages.billing.context import BillingContext
from packages.billing.services import (
    ReconciliationService,
    UsageService,
    ValidityService,
)


def get_billing_context(request: Request) -> BillingContext:
    """The container the lifespan stored on the application."""
    return request.app.state.billing


def require_service_key(
    context: Annotated[BillingContext, Depends(get_billing_context)],
    x_api_key: Annotated[Optional[str], Header()] = None,
) -> None:
    """Service-to-service auth: ``X-API-Key`` must match SERVICE_API_KEY."""
    expected = context.settings.service_api_key
    if not x_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required",
        )
    # An unset key rejects every caller
    if not expected or not hmac.compare_digest(
        x_api_key.encode("utf-8"), expected.encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )


def get_validity_service(
    context: Annotated[BillingContext, Depends(get_billing_context)],
) -> ValidityService:
    return context.validity


def get_reconciliation_service(
    context: Annotated[BillingContext, Depends(get_billing_context)],
) -> ReconciliationService:
    return context.reconciliation


def get_usage_service(
    context: Annotated[BillingContext, Depends(get_billing_context)],
) -> UsageService:
    return context.usage
