"""Unit tests for the PointsLedger service

Tests cover:
- Credit/debit balance arithmetic and lifetime counters
- Locked account read before every mutation
- No-op on non-positive amounts
- Insufficient balance never writes
- Unknown account
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.points_ledger import PointsLedger
from src.domain.account import Account
from src.domain.errors import AccountNotFoundError, InsufficientPointsError
from src.domain.point_pool import PointPool
from src.domain.point_transaction import TransactionSource, TransactionType


@pytest.fixture
def account():
    return Account(
        id=7,
        regular_points=Decimal("50.00"),
        annual_points=Decimal("200.00"),
    )


@pytest.fixture
def mock_account_repo(account):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=account)
    repo.update_pool_balance = AsyncMock()
    return repo


@pytest.fixture
def mock_transaction_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda txn: txn)
    return repo


@pytest.fixture
def ledger(mock_account_repo, mock_transaction_repo):
    return PointsLedger(mock_account_repo, mock_transaction_repo)


@pytest.mark.asyncio
class TestCredit:

    async def test_credit_appends_earn_entry_and_updates_balance(
        self, ledger, mock_account_repo, mock_transaction_repo, account
    ):
        new_balance = await ledger.credit(
            7, PointPool.REGULAR, Decimal("10"), TransactionSource.CUSTOMER_BILLING,
            reference_id="inv-1", reference_type="invoice", description="Invoice INV-1",
            actor_id="user-9",
        )

        assert new_balance == Decimal("60.00")
        mock_account_repo.get_by_id.assert_called_once_with(7, for_update=True)

        txn = mock_transaction_repo.create.call_args[0][0]
        assert txn.transaction_type == TransactionType.EARN
        assert txn.amount == Decimal("10.00")
        assert txn.balance_after == Decimal("60.00")
        assert txn.source == TransactionSource.CUSTOMER_BILLING
        assert txn.reference_id == "inv-1"
        assert txn.created_by == "user-9"

        mock_account_repo.update_pool_balance.assert_called_once_with(
            account, PointPool.REGULAR, Decimal("60.00"), earned=Decimal("10.00")
        )

    async def test_credit_rounds_amount(self, ledger, mock_transaction_repo):
        new_balance = await ledger.credit(
            7, PointPool.ANNUAL, Decimal("2.345"), TransactionSource.ATTENDANCE
        )

        assert new_balance == Decimal("202.35")
        assert mock_transaction_repo.create.call_args[0][0].amount == Decimal("2.35")

    async def test_zero_credit_is_noop(self, ledger, mock_account_repo, mock_transaction_repo):
        new_balance = await ledger.credit(7, PointPool.REGULAR, Decimal("0"), TransactionSource.REFERRAL)

        assert new_balance == Decimal("50.00")
        mock_transaction_repo.create.assert_not_called()
        mock_account_repo.update_pool_balance.assert_not_called()
        mock_account_repo.get_by_id.assert_called_once_with(7)

    async def test_negative_credit_is_noop(self, ledger, mock_transaction_repo):
        await ledger.credit(7, PointPool.REGULAR, Decimal("-5"), TransactionSource.REFERRAL)

        mock_transaction_repo.create.assert_not_called()

    async def test_credit_unknown_account(self, ledger, mock_account_repo, mock_transaction_repo):
        mock_account_repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(AccountNotFoundError):
            await ledger.credit(99, PointPool.REGULAR, Decimal("1"), TransactionSource.ATTENDANCE)

        mock_transaction_repo.create.assert_not_called()


@pytest.mark.asyncio
class TestDebit:

    async def test_debit_appends_negative_entry(
        self, ledger, mock_account_repo, mock_transaction_repo, account
    ):
        new_balance = await ledger.debit(
            7, PointPool.ANNUAL, Decimal("60"), TransactionSource.CREDIT_DEBIT
        )

        assert new_balance == Decimal("140.00")
        txn = mock_transaction_repo.create.call_args[0][0]
        assert txn.transaction_type == TransactionType.DEBIT
        assert txn.amount == Decimal("-60.00")
        assert txn.balance_after == Decimal("140.00")
        mock_account_repo.update_pool_balance.assert_called_once_with(
            account, PointPool.ANNUAL, Decimal("140.00"), redeemed=Decimal("60.00")
        )

    async def test_debit_entire_balance(self, ledger):
        assert await ledger.debit(
            7, PointPool.REGULAR, Decimal("50"), TransactionSource.WITHDRAWAL
        ) == Decimal("0.00")

    async def test_insufficient_balance_writes_nothing(
        self, ledger, mock_account_repo, mock_transaction_repo
    ):
        with pytest.raises(InsufficientPointsError) as exc_info:
            await ledger.debit(7, PointPool.REGULAR, Decimal("60"), TransactionSource.WITHDRAWAL)

        assert exc_info.value.available == Decimal("50.00")
        assert exc_info.value.required == Decimal("60.00")
        assert "Available: 50.00, Required: 60.00" in str(exc_info.value)
        mock_transaction_repo.create.assert_not_called()
        mock_account_repo.update_pool_balance.assert_not_called()

    async def test_zero_debit_is_noop(self, ledger, mock_transaction_repo):
        new_balance = await ledger.debit(7, PointPool.REGULAR, Decimal("0"), TransactionSource.WITHDRAWAL)

        assert new_balance == Decimal("50.00")
        mock_transaction_repo.create.assert_not_called()
