import pytest
from unittest.mock import AsyncMock

from common.core.exceptions import ValidationError
from packages.billing.models.domain.usage import SpendingUnit
from packages.billing.services.usage_service import UsageService


@pytest.fixture
def mock_usage_units():
    repository = AsyncMock()
    repository.add_units = AsyncMock(return_value=2)
    return repository


class TestUsageService:
    """Unit tests for UsageService."""

    async def test_add_spending_units(self, mock_usage_units):
        service = UsageService(mock_usage_units)
        items = [
            SpendingUnit(account_id="acct-1", external_id="u-1"),
            SpendingUnit(account_id="acct-1", external_id="u-2"),
        ]

        inserted = await service.add_spending_units(items)

        assert inserted == 2
        mock_usage_units.add_units.assert_awaited_once_with(items)

    async def test_empty_batch_is_rejected(self, mock_usage_units):
        service = UsageService(mock_usage_units)

        with pytest.raises(ValidationError):
            await service.add_spending_units([])

        mock_usage_units.add_units.assert_not_called()

    async def test_blank_identifiers_are_rejected(self, mock_usage_units):
        service = UsageService(mock_usage_units)

        with pytest.raises(ValidationError) as exc_info:
            await service.add_spending_units(
                [
                    SpendingUnit(account_id="acct-1", external_id="u-1"),
                    SpendingUnit(account_id="acct-1", external_id="   "),
                ]
            )

        assert "1" in str(exc_info.value)
        mock_usage_units.add_units.assert_not_called()

    async def test_duplicates_are_counted_once(self, billing_context):
        items = [SpendingUnit(account_id="acct-1", external_id="u-1")] * 3

        assert await billing_context.usage.add_spending_units(items) == 1
        assert await billing_context.usage.add_spending_units(items) == 0
