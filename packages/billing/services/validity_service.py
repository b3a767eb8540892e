"""
Validity Engine: decides whether an account may use the metered service.

The checks run in a fixed order and the first decisive one wins:
free credit, recognized subscription, cancellation, provider status,
then usage against the period budget.
"""

import time
from typing import Callable, Optional

from common.core.config import Settings
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.exceptions import GatewayError
from packages.billing.models.domain.enums import (
    InvalidityType,
    SubscriptionStatus,
    ValidityType,
)
from packages.billing.models.domain.verdict import Verdict
from packages.billing.providers.gateway.interface import BillingGatewayInterface
from packages.billing.repositories.account_repository import AccountRepository
from packages.billing.repositories.free_allowance_repository import (
    FreeAllowanceRepository,
)
from packages.billing.repositories.usage_unit_repository import UsageUnitRepository
from packages.billing.services.entitlement_rules import (
    compute_unit_budget,
    is_subscription_cancelled,
    parse_units_per_dollar,
)
from packages.billing.services.gateway_calls import bounded_gateway_call

logger = get_logger(__name__)


class ValidityService:
    """Entitlement checks for accounts."""

    def __init__(
        self,
        settings: Settings,
        accounts: AccountRepository,
        allowances: FreeAllowanceRepository,
        usage_units: UsageUnitRepository,
        gateway: BillingGatewayInterface,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.accounts = accounts
        self.allowances = allowances
        self.usage_units = usage_units
        self.gateway = gateway
        self.clock = clock

    def _timeout(self, timeout: Optional[float]) -> float:
        if timeout is None:
            return self.settings.billing_gateway_timeout_seconds
        return timeout

    @trace_span
    async def verify(self, account_id: str, timeout: Optional[float] = None) -> Verdict:
        """
        Produce the entitlement verdict for an account.

        Raises:
            StoreError: A store read failed
            GatewayError: The billing provider failed or timed out
            ConfigurationError: Pricing constant or subscription pricing is invalid
        """
        timeout = self._timeout(timeout)

        # 1. Free allowance masks everything else
        credit = await self.allowances.get_or_initialize(
            account_id, self.settings.initial_free_credit
        )
        if credit > 0:
            logger.info(
                f"Account {account_id} valid on free tier",
                extra={"account_id": account_id, "credit": credit},
            )
            return Verdict.valid(ValidityType.FREE_TIER)

        # 2. A recognized subscription is required past the free tier
        account = await self.accounts.get(account_id)
        if account is None or not account.has_subscription():
            logger.info(
                f"Account {account_id} has no subscription",
                extra={"account_id": account_id},
            )
            return Verdict.invalid(InvalidityType.NO_SUBSCRIPTION)

        subscription_id = account.subscription_id
        context = {"account_id": account_id, "subscription_id": subscription_id}

        # 3. Provider state; the email lookup is part of the decisive read
        snapshot = await bounded_gateway_call(
            self.gateway.get_subscription(subscription_id),
            timeout,
            "get_subscription",
            context,
        )
        customer_id = account.customer_id or snapshot.customer_id
        if not customer_id:
            raise GatewayError("Subscription has no billing customer", context)
        customer = await bounded_gateway_call(
            self.gateway.get_customer(customer_id),
            timeout,
            "get_customer",
            {**context, "customer_id": customer_id},
        )
        email = customer.email

        # 4. Cancelled, or scheduled cancellation already passed
        if is_subscription_cancelled(snapshot, self.clock()):
            logger.info(
                f"Subscription {subscription_id} is cancelled",
                extra={**context, "status": snapshot.status.value},
            )
            return Verdict.invalid(InvalidityType.CANCELLED, email)

        # 5. Anything but active (past_due, unpaid, trialing ...)
        if snapshot.status != SubscriptionStatus.ACTIVE:
            logger.info(
                f"Subscription {subscription_id} is {snapshot.status.value}",
                extra={**context, "status": snapshot.status.value},
            )
            return Verdict.invalid(InvalidityType.OTHER, email)

        # 6-8. Usage in the current period against the purchased budget
        units_per_dollar = parse_units_per_dollar(self.settings.credit_units_per_dollar)
        budget = compute_unit_budget(snapshot, units_per_dollar)
        used = await self.usage_units.count_units_between(
            account_id, snapshot.period_start_ms, snapshot.period_end_ms
        )

        if used > budget:
            logger.info(
                f"Subscription {subscription_id} exhausted",
                extra={**context, "used": used, "budget": budget},
            )
            return Verdict.invalid(InvalidityType.EXHAUSTED, email)

        logger.info(
            f"Account {account_id} valid as paying customer",
            extra={**context, "used": used, "budget": budget},
        )
        return Verdict.valid(ValidityType.PAYING_CUSTOMER, email)

    @trace_span
    async def cancel_subscription(
        self, subscription_id: str, timeout: Optional[float] = None
    ) -> None:
        """Cancel at the billing provider; local state is left untouched."""
        await bounded_gateway_call(
            self.gateway.cancel_subscription(subscription_id),
            self._timeout(timeout),
            "cancel_subscription",
            {"subscription_id": subscription_id},
        )
        logger.info(
            f"Cancelled subscription {subscription_id}",
            extra={"subscription_id": subscription_id},
        )
