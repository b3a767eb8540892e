"""
Reconciliation Engine: merges completed checkouts into account state.

This is the only writer of account records. Reconciliations for one account
are serialized through the lock provider, the prior subscription is read
from the billing provider before anything is written, and all writes of one
reconciliation commit together.
"""

import time
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from common.core.config import Settings
from common.core.otel_axiom_exporter import trace_span, get_logger, log_span_event
from common.db.session import Database
from common.providers.locking.interface import DistributedLockInterface
from packages.billing.account_keys import account_lock_key
from packages.billing.exceptions import (
    LockUnavailableError,
    MalformedNotificationError,
    StoreError,
)
from packages.billing.models.domain.account import InvalidSubscriptionEntry
from packages.billing.models.domain.enums import ReconciliationOutcome
from packages.billing.models.domain.notification import CheckoutNotification
from packages.billing.providers.gateway.interface import BillingGatewayInterface
from packages.billing.repositories.account_repository import AccountRepository
from packages.billing.repositories.free_allowance_repository import (
    FreeAllowanceRepository,
)
from packages.billing.repositories.invalid_subscription_repository import (
    InvalidSubscriptionRepository,
)
from packages.billing.services.entitlement_rules import is_subscription_cancelled
from packages.billing.services.gateway_calls import bounded_gateway_call

logger = get_logger(__name__)

# Outcomes that make the notification's subscription the recognized one
_RECOGNIZING = (
    ReconciliationOutcome.CREATED,
    ReconciliationOutcome.ASSIGNED,
    ReconciliationOutcome.SUPERSEDED,
)


class ReconciliationService:
    """Applies checkout notifications to account records."""

    def __init__(
        self,
        settings: Settings,
        db: Database,
        accounts: AccountRepository,
        allowances: FreeAllowanceRepository,
        invalid_subscriptions: InvalidSubscriptionRepository,
        gateway: BillingGatewayInterface,
        locks: DistributedLockInterface,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.db = db
        self.accounts = accounts
        self.allowances = allowances
        self.invalid_subscriptions = invalid_subscriptions
        self.gateway = gateway
        self.locks = locks
        self.clock = clock

    def _validate(self, notification: CheckoutNotification) -> None:
        missing = [
            name
            for name in ("account_ref", "customer_id", "subscription_id")
            if not (getattr(notification, name) or "").strip()
        ]
        if missing:
            logger.error(
                "Rejecting malformed checkout notification",
                extra={
                    "missing_fields": ",".join(missing),
                    "account_id": notification.account_ref,
                    "subscription_id": notification.subscription_id,
                },
            )
            raise MalformedNotificationError(
                f"Checkout notification is missing {', '.join(missing)}",
                {
                    "account_id": notification.account_ref,
                    "customer_id": notification.customer_id,
                    "subscription_id": notification.subscription_id,
                },
            )

    @trace_span
    async def reconcile(
        self, notification: CheckoutNotification, timeout: Optional[float] = None
    ) -> ReconciliationOutcome:
        """
        Merge a completed checkout into the account record.

        Raises:
            MalformedNotificationError: Account, customer or subscription missing
            LockUnavailableError: Another reconciliation holds the account too long
            StoreError: Persistence failed; nothing from this call was written
            GatewayError: The prior subscription could not be read
        """
        self._validate(notification)
        if timeout is None:
            timeout = self.settings.billing_gateway_timeout_seconds

        account_id = notification.account_ref
        lock_key = account_lock_key(account_id)
        token = await self.locks.acquire_lock_with_retry(
            lock_key,
            lock_ttl_seconds=self.settings.reconciliation_lock_ttl_seconds,
            acquire_timeout_seconds=self.settings.reconciliation_lock_wait_seconds,
        )
        if not token:
            logger.error(
                f"Could not lock account {account_id} for reconciliation",
                extra={
                    "account_id": account_id,
                    "subscription_id": notification.subscription_id,
                },
            )
            raise LockUnavailableError(
                "Account is locked by another reconciliation",
                {
                    "account_id": account_id,
                    "subscription_id": notification.subscription_id,
                },
            )

        try:
            return await self._merge(notification, timeout)
        finally:
            await self.locks.release_lock(lock_key, token)

    @trace_span
    async def rejected_purchases(
        self, account_id: str
    ) -> List[InvalidSubscriptionEntry]:
        """Purchases rejected for an account because another subscription was live."""
        return await self.invalid_subscriptions.list_for_account(account_id)

    async def _decide(
        self, notification: CheckoutNotification, timeout: float
    ) -> ReconciliationOutcome:
        """Pick the merge rule. Reads only; the gateway read happens here."""
        account_id = notification.account_ref
        exists, current_subscription_id = await self.accounts.exists(account_id)

        if not exists:
            return ReconciliationOutcome.CREATED
        if not current_subscription_id:
            return ReconciliationOutcome.ASSIGNED
        if current_subscription_id == notification.subscription_id:
            return ReconciliationOutcome.REDELIVERED

        prior = await bounded_gateway_call(
            self.gateway.get_subscription(current_subscription_id),
            timeout,
            "get_subscription",
            {"account_id": account_id, "subscription_id": current_subscription_id},
        )
        if is_subscription_cancelled(prior, self.clock()):
            return ReconciliationOutcome.SUPERSEDED
        return ReconciliationOutcome.REJECTED

    async def _merge(
        self, notification: CheckoutNotification, timeout: float
    ) -> ReconciliationOutcome:
        account_id = notification.account_ref
        outcome = await self._decide(notification, timeout)

        try:
            async with self.db.transaction():
                if outcome in _RECOGNIZING:
                    await self.accounts.upsert(
                        account_id,
                        subscription_id=notification.subscription_id,
                        plan_id=notification.plan_id,
                        customer_id=notification.customer_id,
                    )
                elif outcome == ReconciliationOutcome.REJECTED:
                    await self.invalid_subscriptions.record(
                        account_id,
                        subscription_id=notification.subscription_id,
                        plan_id=notification.plan_id,
                        customer_id=notification.customer_id,
                    )

                # Every reconciled account gets an allowance row
                await self.allowances.get_or_initialize(
                    account_id, self.settings.initial_free_credit
                )
        except SQLAlchemyError as e:
            logger.error(
                f"Reconciliation commit failed for account {account_id}: {e}",
                extra={
                    "account_id": account_id,
                    "subscription_id": notification.subscription_id,
                },
            )
            raise StoreError(
                "Reconciliation could not be committed",
                {
                    "account_id": account_id,
                    "subscription_id": notification.subscription_id,
                },
            ) from e

        log_span_event(
            f"Reconciled checkout for account {account_id}: {outcome.value}",
            {
                "account_id": account_id,
                "subscription_id": notification.subscription_id,
                "customer_id": notification.customer_id,
                "outcome": outcome.value,
            },
        )
        return outcome
