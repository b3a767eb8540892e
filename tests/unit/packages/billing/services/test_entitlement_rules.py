import pytest

from packages.billing.exceptions import ConfigurationError
from packages.billing.models.domain.enums import SubscriptionStatus
from packages.billing.services.entitlement_rules import (
    compute_unit_budget,
    is_subscription_cancelled,
    parse_units_per_dollar,
)
from tests.factories.billing_factory import BillingFactory, NOW


class TestIsSubscriptionCancelled:
    """Cancellation: provider status, or a scheduled time already passed."""

    def test_canceled_status(self):
        snapshot = BillingFactory.create_subscription(
            status=SubscriptionStatus.CANCELED
        )
        assert is_subscription_cancelled(snapshot, NOW) is True

    def test_active_without_schedule(self):
        snapshot = BillingFactory.create_subscription()
        assert is_subscription_cancelled(snapshot, NOW) is False

    def test_scheduled_in_future(self):
        snapshot = BillingFactory.create_subscription(cancel_at=NOW + 60)
        assert is_subscription_cancelled(snapshot, NOW) is False

    def test_scheduled_in_past(self):
        snapshot = BillingFactory.create_subscription(cancel_at=NOW - 60)
        assert is_subscription_cancelled(snapshot, NOW) is True

    def test_scheduled_exactly_now_is_not_yet_cancelled(self):
        snapshot = BillingFactory.create_subscription(cancel_at=NOW)
        assert is_subscription_cancelled(snapshot, NOW) is False

    def test_past_due_is_not_cancelled(self):
        snapshot = BillingFactory.create_subscription(
            status=SubscriptionStatus.PAST_DUE
        )
        assert is_subscription_cancelled(snapshot, NOW) is False


class TestParseUnitsPerDollar:
    """Parsing of the units-per-dollar pricing constant."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2000000", 2_000_000),
            ("2_000_000", 2_000_000),
            ("2,000,000", 2_000_000),
            ("2 000 000", 2_000_000),
            ("2'000'000", 2_000_000),
            (" 1000 ", 1000),
        ],
    )
    def test_grouping_characters_are_stripped(self, raw, expected):
        assert parse_units_per_dollar(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "1.5", "-100", "1e6", "٣٣", None])
    def test_invalid_values(self, raw):
        with pytest.raises(ConfigurationError):
            parse_units_per_dollar(raw)

    def test_zero_is_rejected(self):
        with pytest.raises(ConfigurationError):
            parse_units_per_dollar("0_000")


class TestComputeUnitBudget:
    """budget = (amount // 100) * quantity * units_per_dollar."""

    def test_budget(self):
        snapshot = BillingFactory.create_subscription(amount=1400, quantity=3)
        assert compute_unit_budget(snapshot, 1000) == 14 * 3 * 1000

    def test_minor_units_are_floored(self):
        snapshot = BillingFactory.create_subscription(amount=1499, quantity=1)
        assert compute_unit_budget(snapshot, 10) == 140

    def test_amount_below_one_dollar_gives_zero_budget(self):
        snapshot = BillingFactory.create_subscription(amount=99, quantity=1)
        assert compute_unit_budget(snapshot, 1000) == 0

    def test_missing_plan(self):
        snapshot = BillingFactory.create_subscription(with_plan=False)
        with pytest.raises(ConfigurationError) as exc_info:
            compute_unit_budget(snapshot, 1000)
        assert exc_info.value.context["subscription_id"] == "sub_first"

    @pytest.mark.parametrize("amount", [0, None])
    def test_zero_unit_price(self, amount):
        snapshot = BillingFactory.create_subscription(amount=amount)
        with pytest.raises(ConfigurationError):
            compute_unit_budget(snapshot, 1000)

    def test_zero_quantity(self):
        snapshot = BillingFactory.create_subscription(quantity=0)
        with pytest.raises(ConfigurationError):
            compute_unit_budget(snapshot, 1000)
