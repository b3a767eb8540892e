import asyncio

import pytest

from packages.billing.exceptions import BillingError, GatewayError
from packages.billing.services.gateway_calls import bounded_gateway_call


class TestBoundedGatewayCall:
    async def test_returns_result(self):
        async def fetch():
            return "snapshot"

        assert await bounded_gateway_call(fetch(), 1.0, "get_subscription") == (
            "snapshot"
        )

    async def test_timeout_becomes_gateway_error(self):
        async def hang():
            await asyncio.sleep(5)

        with pytest.raises(GatewayError) as exc_info:
            await bounded_gateway_call(
                hang(), 0.01, "get_subscription", {"subscription_id": "sub_1"}
            )

        assert exc_info.value.context == {"subscription_id": "sub_1"}
        assert "get_subscription" in exc_info.value.message

    async def test_gateway_errors_pass_through(self):
        async def fail():
            raise GatewayError("Stripe request failed")

        with pytest.raises(GatewayError) as exc_info:
            await bounded_gateway_call(fail(), 1.0, "get_customer")

        assert exc_info.value.message == "Stripe request failed"


class TestBillingError:
    def test_context_drops_empty_values(self):
        error = BillingError("Failed", {"account_id": "abc", "subscription_id": None})

        assert error.context == {"account_id": "abc"}
        assert str(error) == "Failed (account_id=abc)"

    def test_without_context(self):
        assert str(BillingError("Failed")) == "Failed"
