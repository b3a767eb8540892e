"""
Webhook endpoints for billing events.

Public endpoints (no API key) for Stripe webhooks.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from common.providers.rate_limiter.limiter import limiter
from packages.billing.context import BillingContext
from packages.billing.dependencies import (
    get_billing_context,
    get_reconciliation_service,
)
from packages.billing.models.schemas.billing import WebhookAckResponse
from packages.billing.services import ReconciliationService
from packages.billing.webhooks.stripe_webhook import handle_stripe_webhook

router = APIRouter()


@router.post("/webhooks/stripe", response_model=WebhookAckResponse)
@limiter.limit("100/minute")
async def stripe_webhook(
    request: Request,
    context: Annotated[BillingContext, Depends(get_billing_context)],
    reconciliation: Annotated[
        ReconciliationService, Depends(get_reconciliation_service)
    ],
) -> dict[str, str]:
    """
    Receive webhook events from Stripe.

    No API key - the webhook signature is validated internally.
    """
    return await handle_stripe_webhook(
        request, reconciliation, context.settings.stripe_webhook_secret
    )
