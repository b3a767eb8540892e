"""
Stripe webhook handler.

Verifies the Stripe-Signature header, parses the event into typed models and
turns completed checkouts into reconciliation requests. Every other event
type is acknowledged without action.
"""

import json

import stripe
from fastapi import Request, HTTPException, status
from pydantic import ValidationError

from common.core.otel_axiom_exporter import get_logger
from packages.billing.exceptions import ConfigurationError
from packages.billing.models.domain.notification import CheckoutNotification
from packages.billing.models.domain.stripe_webhooks import (
    StripeCheckoutSessionData,
    StripeWebhookPayload,
    StripeWebhookType,
)
from packages.billing.services.reconciliation_service import ReconciliationService

logger = get_logger(__name__)


def notification_from_checkout(
    session: StripeCheckoutSessionData,
) -> CheckoutNotification:
    """Map a checkout session to the notification the engine consumes."""
    return CheckoutNotification(
        account_ref=session.client_reference_id,
        customer_id=session.customer_id,
        subscription_id=session.subscription_id,
        plan_id=session.metadata.get("plan_id"),
    )


async def handle_stripe_webhook(
    request: Request,
    reconciliation: ReconciliationService,
    webhook_secret: str,
) -> dict[str, str]:
    """
    Handle incoming webhook from Stripe.

    Signature and payload problems are 400s. Reconciliation errors propagate
    to the API exception handlers so Stripe retries the retryable ones.
    """
    if not webhook_secret:
        raise ConfigurationError("STRIPE_WEBHOOK_SECRET is not configured")

    # Raw body for signature verification
    payload_bytes = await request.body()
    sig_header = request.headers.get("stripe-signature")

    if not sig_header:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing stripe-signature header",
        )

    try:
        stripe.Webhook.construct_event(payload_bytes, sig_header, webhook_secret)
    except stripe.SignatureVerificationError as e:
        logger.error(f"Stripe webhook signature verification failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid signature"
        )
    except ValueError as e:
        logger.error(f"Stripe webhook body is not valid JSON: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook payload"
        )

    try:
        payload = StripeWebhookPayload.model_validate(json.loads(payload_bytes))
        if payload.type != StripeWebhookType.CHECKOUT_SESSION_COMPLETED.value:
            logger.info(
                f"Unhandled Stripe webhook type: {payload.type}",
                extra={"event_id": payload.id, "event_type": payload.type},
            )
            return {"status": "success"}

        session = StripeCheckoutSessionData.model_validate(payload.data.object)
    except ValidationError as e:
        logger.error(
            "Invalid Stripe webhook payload", extra={"validation_errors": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook payload"
        )

    logger.info(
        f"Received Stripe webhook: {payload.type}",
        extra={
            "event_id": payload.id,
            "event_type": payload.type,
            "livemode": payload.livemode,
            "session_id": session.id,
        },
    )

    await reconciliation.reconcile(notification_from_checkout(session))
    return {"status": "success"}
