import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from packages.billing.providers.gateway.interface import BillingGatewayInterface


@pytest.fixture
def mock_lock_provider():
    """Create a mock lock provider instance for testing."""
    lock = AsyncMock()
    lock.acquire_lock = AsyncMock(return_value="test-lock-token")
    lock.acquire_lock_with_retry = AsyncMock(return_value="test-lock-token")
    lock.release_lock = AsyncMock(return_value=True)
    lock.is_locked = AsyncMock(return_value=False)
    return lock


@pytest.fixture
def mock_gateway():
    """Create a mock billing gateway for failure scenarios."""
    gateway = AsyncMock(spec=BillingGatewayInterface)
    gateway.get_subscription = AsyncMock()
    gateway.get_customer = AsyncMock()
    gateway.cancel_subscription = AsyncMock(return_value=None)
    return gateway


@pytest.fixture
def mock_span():
    """Create a mock span instance for testing telemetry."""
    span = MagicMock()
    span.__enter__ = MagicMock(return_value=span)
    span.__exit__ = MagicMock(return_value=None)
    return span


@pytest.fixture
def mock_start_span(mock_span):
    """Create a mock start_span function that returns mock_span."""
    with patch(
        "common.core.otel_axiom_exporter.axiom_tracer.start_as_current_span",
        return_value=mock_span,
    ) as mock:
        yield mock
