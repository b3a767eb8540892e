"""
Dependency container for the billing package.

Built once by the process entry point (or by a test) and handed to the
routes through ``app.state``; nothing in the package reads configuration or
opens connections at import time.
"""

import time
from dataclasses import dataclass
from typing import Callable

from common.core.config import Settings
from common.db.session import Database
from common.providers.locking.factory import create_lock_provider
from common.providers.locking.interface import DistributedLockInterface
from packages.billing.providers.gateway.factory import create_billing_gateway
from packages.billing.providers.gateway.interface import BillingGatewayInterface
from packages.billing.repositories import (
    AccountRepository,
    FreeAllowanceRepository,
    InvalidSubscriptionRepository,
    UsageUnitRepository,
)
from packages.billing.services import (
    ReconciliationService,
    UsageService,
    ValidityService,
)


@dataclass
class BillingContext:
    settings: Settings
    db: Database
    gateway: BillingGatewayInterface
    locks: DistributedLockInterface
    accounts: AccountRepository
    allowances: FreeAllowanceRepository
    invalid_subscriptions: InvalidSubscriptionRepository
    usage_units: UsageUnitRepository
    validity: ValidityService
    reconciliation: ReconciliationService
    usage: UsageService

    @classmethod
    def build(
        cls,
        settings: Settings,
        db: Database,
        gateway: BillingGatewayInterface,
        locks: DistributedLockInterface,
        clock: Callable[[], float] = time.time,
    ) -> "BillingContext":
        """Wire repositories and services around the given collaborators."""
        accounts = AccountRepository(db)
        allowances = FreeAllowanceRepository(db, accounts)
        invalid_subscriptions = InvalidSubscriptionRepository(db)
        usage_units = UsageUnitRepository(db)

        return cls(
            settings=settings,
            db=db,
            gateway=gateway,
            locks=locks,
            accounts=accounts,
            allowances=allowances,
            invalid_subscriptions=invalid_subscriptions,
            usage_units=usage_units,
            validity=ValidityService(
                settings, accounts, allowances, usage_units, gateway, clock=clock
            ),
            reconciliation=ReconciliationService(
                settings,
                db,
                accounts,
                allowances,
                invalid_subscriptions,
                gateway,
                locks,
                clock=clock,
            ),
            usage=UsageService(usage_units),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "BillingContext":
        return cls.build(
            settings,
            Database.from_settings(settings),
            create_billing_gateway(settings),
            create_lock_provider(settings),
        )

    async def close(self) -> None:
        await self.locks.close()
        await self.db.dispose()
