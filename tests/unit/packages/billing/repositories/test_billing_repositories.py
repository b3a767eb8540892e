import hashlib

import pytest
from unittest.mock import patch
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from packages.billing.account_keys import account_lock_key, account_storage_key
from packages.billing.exceptions import StoreError
from packages.billing.models.database import (
    BillingAccountEntity,
    FreeAllowanceEntity,
)
from packages.billing.models.domain.usage import SpendingUnit
from packages.billing.repositories import (
    AccountRepository,
    FreeAllowanceRepository,
    InvalidSubscriptionRepository,
    UsageUnitRepository,
)


@pytest.fixture
def accounts(test_database):
    return AccountRepository(test_database)


@pytest.fixture
def allowances(test_database, accounts):
    return FreeAllowanceRepository(test_database, accounts)


@pytest.fixture
def invalid_subscriptions(test_database):
    return InvalidSubscriptionRepository(test_database)


@pytest.fixture
def usage_units(test_database):
    return UsageUnitRepository(test_database)


def unit(external_id: str, created_at_ms: int, account_id: str = "acct-1"):
    return SpendingUnit(
        account_id=account_id, external_id=external_id, created_at_ms=created_at_ms
    )


class TestAccountKeys:
    """Storage keys pseudonymize external account references."""

    def test_storage_key_is_sha256_of_alphanumerics(self):
        expected = hashlib.sha256(b"org123").hexdigest()

        assert account_storage_key("org_123") == expected
        assert account_storage_key("org-123") == expected
        assert account_storage_key("org 1.2.3") == expected

    def test_storage_key_is_case_sensitive(self):
        assert account_storage_key("Org123") != account_storage_key("org123")

    def test_non_ascii_characters_are_dropped(self):
        assert account_storage_key("orgé123") == account_storage_key("org123")

    def test_lock_key(self):
        assert account_lock_key("org_123") == (
            f"account:{account_storage_key('org_123')}"
        )


class TestAccountRepository:
    async def test_exists_for_unknown_account(self, accounts):
        assert await accounts.exists("acct-1") == (False, None)

    async def test_upsert_then_get(self, accounts):
        record = await accounts.upsert(
            "acct-1", subscription_id="sub_1", plan_id="price_1", customer_id="cus_1"
        )

        assert record.account_id == account_storage_key("acct-1")
        assert record.subscription_id == "sub_1"
        assert record.has_subscription() is True
        assert await accounts.exists("acct-1") == (True, "sub_1")

    async def test_upsert_overwrites(self, accounts):
        await accounts.upsert("acct-1", "sub_1", "price_1", "cus_1")

        record = await accounts.upsert("acct-1", "sub_2", None, "cus_2")

        assert record.subscription_id == "sub_2"
        assert record.plan_id is None
        assert record.customer_id == "cus_2"

    async def test_ensure_exists_keeps_subscription(self, accounts):
        await accounts.upsert("acct-1", "sub_1", "price_1", "cus_1")

        await accounts.ensure_exists("acct-1")

        assert await accounts.exists("acct-1") == (True, "sub_1")

    async def test_ensure_exists_creates_empty_account(self, accounts):
        await accounts.ensure_exists("acct-1")

        record = await accounts.get("acct-1")
        assert record is not None
        assert record.has_subscription() is False

    async def test_raw_reference_is_never_stored(self, accounts, test_database):
        await accounts.upsert("org_123", "sub_1", None, None)

        async with test_database.session() as session:
            result = await session.execute(select(BillingAccountEntity.account_id))
            stored = result.scalars().all()

        assert stored == [account_storage_key("org_123")]

    async def test_storage_failure_is_store_error(self, accounts):
        failure = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch(
            "sqlalchemy.ext.asyncio.AsyncSession.execute", side_effect=failure
        ):
            with pytest.raises(StoreError) as exc_info:
                await accounts.exists("acct-1")

        assert "billing_accounts" in exc_info.value.message


class TestFreeAllowanceRepository:
    async def test_first_read_initializes(self, allowances):
        assert await allowances.get_or_initialize("acct-1", 5) == 5

    async def test_initialization_creates_account_first(self, allowances, accounts):
        await allowances.get_or_initialize("acct-1", 5)

        assert await accounts.exists("acct-1") == (True, None)

    async def test_existing_allowance_is_not_reset(self, allowances, test_database):
        await allowances.get_or_initialize("acct-1", 5)
        async with test_database.session() as session:
            allowance = await session.get(
                FreeAllowanceEntity, account_storage_key("acct-1")
            )
            allowance.credit = 2

        assert await allowances.get_or_initialize("acct-1", 5) == 2

    async def test_initialization_joins_outer_transaction(
        self, allowances, accounts, test_database
    ):
        with pytest.raises(RuntimeError):
            async with test_database.transaction():
                await allowances.get_or_initialize("acct-1", 5)
                raise RuntimeError("abort")

        assert await accounts.exists("acct-1") == (False, None)


class TestInvalidSubscriptionRepository:
    async def test_record_and_list_in_order(self, invalid_subscriptions):
        await invalid_subscriptions.record("acct-1", "sub_2", "price_2", "cus_2")
        await invalid_subscriptions.record("acct-1", "sub_3", None, "cus_3")
        await invalid_subscriptions.record("acct-2", "sub_9", None, None)

        entries = await invalid_subscriptions.list_for_account("acct-1")

        assert [e.subscription_id for e in entries] == ["sub_2", "sub_3"]
        assert entries[0].account_id == account_storage_key("acct-1")
        assert entries[0].created_at is not None


class TestUsageUnitRepository:
    """Append-only ledger with inclusive windowed counting."""

    async def test_window_is_inclusive(self, usage_units):
        await usage_units.add_units(
            [unit("u-1", 1000), unit("u-2", 1500), unit("u-3", 2000)]
        )

        assert await usage_units.count_units_between("acct-1", 1000, 2000) == 3
        assert await usage_units.count_units_between("acct-1", 1001, 1999) == 1
        assert await usage_units.count_units_between("acct-1", 2001, 3000) == 0

    async def test_single_instant_window(self, usage_units):
        await usage_units.add_units([unit("u-1", 1234)])

        assert await usage_units.count_units_between("acct-1", 1234, 1234) == 1

    async def test_counts_only_requested_account(self, usage_units):
        await usage_units.add_units(
            [unit("u-1", 1000), unit("u-2", 1000, account_id="acct-2")]
        )

        assert await usage_units.count_units_between("acct-1", 0, 5000) == 1

    async def test_account_reference_is_normalized(self, usage_units):
        await usage_units.add_units([unit("u-1", 1000, account_id="org_123")])

        assert await usage_units.count_units_between("org-123", 0, 5000) == 1

    async def test_duplicates_within_batch(self, usage_units):
        inserted = await usage_units.add_units(
            [unit("u-1", 1000), unit("u-1", 1001), unit("u-2", 1002)]
        )

        assert inserted == 2
        assert await usage_units.count_units_between("acct-1", 0, 5000) == 2

    async def test_duplicates_across_batches(self, usage_units):
        await usage_units.add_units([unit("u-1", 1000), unit("u-2", 1001)])

        inserted = await usage_units.add_units([unit("u-2", 1001), unit("u-3", 1002)])

        assert inserted == 1
        assert await usage_units.count_units_between("acct-1", 0, 5000) == 3

    async def test_empty_batch(self, usage_units):
        assert await usage_units.add_units([]) == 0

    async def test_server_stamps_missing_timestamp(self, usage_units):
        with patch(
            "packages.billing.repositories.usage_unit_repository.now_ms",
            return_value=42_000,
        ):
            await usage_units.add_units(
                [SpendingUnit(account_id="acct-1", external_id="u-1")]
            )

        assert await usage_units.count_units_between("acct-1", 42_000, 42_000) == 1
