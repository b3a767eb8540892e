import asyncio

import pytest
import pytest_asyncio
from testcontainers.redis import RedisContainer

from common.core.constants import LockProviderType
from common.providers.locking.factory import create_lock_provider
from packages.billing.context import BillingContext
from tests.factories.billing_factory import BillingFactory

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def redis_server():
    container = RedisContainer("redis:7-alpine")
    try:
        container.start()
    except Exception as e:  # Docker missing or not running
        pytest.skip(f"Redis container unavailable: {e}")
    yield container
    container.stop()


@pytest.fixture
def redis_settings(test_settings, redis_server):
    return test_settings.model_copy(
        update={
            "lock_provider": LockProviderType.REDIS,
            "redis_host": redis_server.get_container_host_ip(),
            "redis_port": int(redis_server.get_exposed_port(6379)),
            "reconciliation_lock_wait_seconds": 5.0,
        }
    )


@pytest_asyncio.fixture
async def worker_contexts(redis_settings, test_database, memory_gateway, clock):
    """Two API workers: one database, one gateway, a lock provider each."""
    contexts = [
        BillingContext.build(
            redis_settings,
            test_database,
            memory_gateway,
            create_lock_provider(redis_settings),
            clock=clock,
        )
        for _ in range(2)
    ]
    yield contexts
    for context in contexts:
        await context.locks.close()


async def test_competing_purchases_across_workers(worker_contexts, memory_gateway):
    """Each worker holds its own lock client; Redis still serializes the account."""
    memory_gateway.add_subscription(
        BillingFactory.create_subscription(subscription_id="sub_second")
    )
    first_worker, second_worker = worker_contexts

    outcomes = await asyncio.gather(
        first_worker.reconciliation.reconcile(BillingFactory.create_notification()),
        second_worker.reconciliation.reconcile(
            BillingFactory.create_notification(
                subscription_id="sub_second",
                customer_id="cus_second",
                plan_id="price_second",
            )
        ),
    )

    assert sorted(o.value for o in outcomes) == ["created", "rejected"]
    entries = await first_worker.invalid_subscriptions.list_for_account("acct-1")
    account = await second_worker.accounts.get("acct-1")
    assert len(entries) == 1
    assert {entries[0].subscription_id, account.subscription_id} == {
        "sub_first",
        "sub_second",
    }
