"""
Stripe implementation of the billing gateway.
"""

import asyncio
from typing import Any, Dict, Mapping, Optional

import stripe
from pydantic import ValidationError

from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.exceptions import BillingResourceNotFoundError, GatewayError
from packages.billing.models.domain.subscription import (
    BillingCustomer,
    SubscriptionPlan,
    SubscriptionSnapshot,
)
from packages.billing.providers.gateway.interface import BillingGatewayInterface

logger = get_logger(__name__)


def _first_item(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    items = payload.get("items") or {}
    data = items.get("data") or []
    return data[0] if data else {}


def snapshot_from_stripe(payload: Mapping[str, Any]) -> SubscriptionSnapshot:
    """
    Map a Stripe subscription payload to a SubscriptionSnapshot.

    Newer API versions report the billing period, plan and quantity on the
    subscription items only, so each falls back to the first item when the
    subscription itself does not carry it.

    Raises:
        GatewayError: The payload is missing the id or status, or has bad values
    """
    item = _first_item(payload)

    def pick(key: str) -> Any:
        value = payload.get(key)
        return value if value is not None else item.get(key)

    plan_payload = pick("plan")
    plan: Optional[SubscriptionPlan] = None
    if plan_payload:
        plan = SubscriptionPlan(
            id=plan_payload.get("id"), amount=plan_payload.get("amount")
        )

    customer = payload.get("customer")
    if isinstance(customer, Mapping):
        customer = customer.get("id")

    try:
        return SubscriptionSnapshot(
            id=payload["id"],
            status=payload["status"],
            customer_id=customer,
            cancel_at=payload.get("cancel_at") or 0,
            current_period_start=pick("current_period_start") or 0,
            current_period_end=pick("current_period_end") or 0,
            plan=plan,
            quantity=pick("quantity") or 0,
        )
    except (KeyError, ValidationError) as e:
        raise GatewayError(
            f"Malformed subscription payload from Stripe: {e}",
            {"subscription_id": payload.get("id")},
        ) from e


class StripeBillingGateway(BillingGatewayInterface):
    """Stripe-backed billing gateway.

    The SDK is blocking, so each call runs in a worker thread. The API key is
    passed per request instead of being set on the ``stripe`` module.
    """

    def __init__(self, api_key: str):
        self.api_key = api_key

    def _translate(
        self, error: stripe.StripeError, context: Dict[str, str]
    ) -> GatewayError:
        if (
            isinstance(error, stripe.InvalidRequestError)
            and error.code == "resource_missing"
        ):
            return BillingResourceNotFoundError(
                f"Stripe resource not found: {error.user_message or error}", context
            )
        return GatewayError(f"Stripe request failed: {error}", context)

    @trace_span
    async def get_subscription(self, subscription_id: str) -> SubscriptionSnapshot:
        context = {"subscription_id": subscription_id}
        try:
            subscription = await asyncio.to_thread(
                stripe.Subscription.retrieve, subscription_id, api_key=self.api_key
            )
        except stripe.StripeError as e:
            logger.error(
                f"Failed to retrieve Stripe subscription: {str(e)}",
                extra={"subscription_id": subscription_id, "error": str(e)},
            )
            raise self._translate(e, context) from e

        return snapshot_from_stripe(subscription.to_dict())

    @trace_span
    async def get_customer(self, customer_id: str) -> BillingCustomer:
        context = {"customer_id": customer_id}
        try:
            customer = await asyncio.to_thread(
                stripe.Customer.retrieve, customer_id, api_key=self.api_key
            )
        except stripe.StripeError as e:
            logger.error(
                f"Failed to retrieve Stripe customer: {str(e)}",
                extra={"customer_id": customer_id, "error": str(e)},
            )
            raise self._translate(e, context) from e

        payload = customer.to_dict()
        if payload.get("deleted"):
            raise BillingResourceNotFoundError("Stripe customer was deleted", context)
        return BillingCustomer(
            id=payload.get("id") or customer_id, email=payload.get("email")
        )

    @trace_span
    async def cancel_subscription(self, subscription_id: str) -> None:
        context = {"subscription_id": subscription_id}
        try:
            await asyncio.to_thread(
                stripe.Subscription.cancel, subscription_id, api_key=self.api_key
            )
        except stripe.StripeError as e:
            logger.error(
                f"Failed to cancel Stripe subscription: {str(e)}",
                extra={"subscription_id": subscription_id, "error": str(e)},
            )
            raise self._translate(e, context) from e

        logger.info(
            "Cancelled Stripe subscription",
            extra={"subscription_id": subscription_id},
        )
