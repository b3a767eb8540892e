# Shared pytest configuration and fixtures for all test types
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

from api.main import create_app
from common.core.config import Settings
from common.core.constants import BillingGatewayProvider, LockProviderType
from common.db.session import Database
from common.providers.locking.memory_lock import InMemoryLock
from common.providers.rate_limiter.limiter import limiter
from packages.billing.context import BillingContext
from packages.billing.providers.gateway.memory_gateway import InMemoryBillingGateway
import packages.billing.models.database  # noqa: F401 - registers the tables
from tests.factories.billing_factory import BillingFactory, FrozenClock

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_SERVICE_KEY = "test-service-key"
TEST_WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture
def test_settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        billing_gateway_provider=BillingGatewayProvider.MEMORY,
        lock_provider=LockProviderType.MEMORY,
        credit_units_per_dollar="1_000",
        initial_free_credit=5,
        service_api_key=TEST_SERVICE_KEY,
        stripe_webhook_secret=TEST_WEBHOOK_SECRET,
        billing_gateway_timeout_seconds=1.0,
        reconciliation_lock_wait_seconds=0.2,
    )


@pytest_asyncio.fixture(scope="function")
async def test_database():
    """Fresh in-memory database per test, schema created from the entities."""
    db = Database.from_url(TEST_DATABASE_URL, poolclass=StaticPool)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def memory_gateway():
    """Billing gateway knowing one active subscription and its customer."""
    gateway = InMemoryBillingGateway()
    gateway.add_subscription(BillingFactory.create_subscription())
    gateway.add_customer(BillingFactory.create_customer())
    return gateway


@pytest.fixture
def lock_provider():
    return InMemoryLock()


@pytest_asyncio.fixture(scope="function")
async def billing_context(
    test_settings, test_database, memory_gateway, lock_provider, clock
):
    return BillingContext.build(
        test_settings, test_database, memory_gateway, lock_provider, clock=clock
    )


@pytest_asyncio.fixture(scope="function")
async def client(test_settings, billing_context):
    """Create a test client over an app using the test billing context."""
    app = create_app(test_settings)
    app.state.billing = billing_context
    limiter.reset()

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def service_headers():
    return {"X-API-Key": TEST_SERVICE_KEY}
