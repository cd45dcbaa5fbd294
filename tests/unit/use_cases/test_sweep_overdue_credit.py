"""Unit tests for SweepOverdueCredit use case

Tests cover:
- Regular-then-annual recovery above the threshold
- Age persisted without debiting below the threshold
- Skipped pool on insufficient balance
- Per-account failure isolation
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.points.sweep_overdue_credit import SweepOverdueCredit
from src.domain.account import Account
from src.domain.errors import InsufficientPointsError
from src.domain.point_pool import PointPool
from src.domain.point_transaction import TransactionSource
from src.domain.processed_invoice import BillingType, ProcessedInvoice

AS_OF = date(2024, 4, 30)


def make_account(regular="40.00", annual="200.00", credit_used="100.00"):
    return Account(
        id=1,
        regular_points=Decimal(regular),
        annual_points=Decimal(annual),
        credit_enabled=True,
        credit_limit=Decimal("500.00"),
        credit_used=Decimal(credit_used),
    )


def self_billed_invoice(invoice_date):
    return ProcessedInvoice(
        id=1,
        account_id=1,
        external_invoice_id="ext-1",
        invoice_date=invoice_date,
        invoice_total=Decimal("100.00"),
        billing_type=BillingType.SELF,
    )


@pytest.fixture
def account():
    return make_account()


@pytest.fixture
def mock_account_repo(account):
    repo = MagicMock()
    repo.get_with_outstanding_credit = AsyncMock(return_value=[account])
    repo.get_by_id = AsyncMock(return_value=account)
    repo.update = AsyncMock(side_effect=lambda a: a)
    return repo


@pytest.fixture
def mock_processed_invoice_repo():
    repo = MagicMock()
    repo.get_oldest_self_billed = AsyncMock(return_value=self_billed_invoice(date(2024, 3, 1)))
    return repo


@pytest.fixture
def mock_ledger():
    ledger = MagicMock()
    ledger.debit = AsyncMock(return_value=Decimal("0"))
    return ledger


@pytest.fixture
def use_case(mock_uow, mock_ledger, mock_account_repo, mock_processed_invoice_repo):
    return SweepOverdueCredit(
        uow=mock_uow,
        ledger=mock_ledger,
        account_repo=mock_account_repo,
        processed_invoice_repo=mock_processed_invoice_repo,
        overdue_threshold_days=30,
    )


@pytest.mark.asyncio
class TestSweepOverdueCredit:

    async def test_recovers_regular_then_annual(self, use_case, mock_ledger, account, mock_uow):
        """credit 100, regular 40, annual 200 -> debit 40 regular + 60 annual"""
        result = await use_case.execute(as_of=AS_OF)

        assert result.is_ok()
        assert result.value.checked == 1
        assert result.value.processed == 1
        assert result.value.total_debited == Decimal("100.00")

        regular_call, annual_call = mock_ledger.debit.call_args_list
        assert regular_call.args == (1, PointPool.REGULAR, Decimal("40.00"), TransactionSource.CREDIT_DEBIT)
        assert annual_call.args == (1, PointPool.ANNUAL, Decimal("60.00"), TransactionSource.CREDIT_DEBIT)
        assert regular_call.kwargs["description"] == "Auto-debit for overdue credit (60 days)"

        assert account.credit_used == Decimal("0.00")
        assert account.credit_overdue_days == 60
        assert account.credit_settled_on == AS_OF
        mock_uow.commit.assert_called_once()

    async def test_below_threshold_only_records_age(self, use_case, mock_ledger, account, mock_account_repo):
        result = await use_case.execute(as_of=date(2024, 3, 21))

        assert result.value.processed == 0
        mock_ledger.debit.assert_not_called()
        assert account.credit_overdue_days == 20
        assert account.credit_used == Decimal("100.00")
        assert account.credit_settled_on is None
        mock_account_repo.update.assert_called_once_with(account)

    async def test_exactly_threshold_is_not_overdue(self, use_case, mock_ledger):
        await use_case.execute(as_of=date(2024, 3, 31))

        mock_ledger.debit.assert_not_called()

    async def test_uses_settlement_date_to_find_unsettled_invoice(
        self, use_case, account, mock_processed_invoice_repo
    ):
        account.credit_settled_on = date(2024, 2, 15)

        await use_case.execute(as_of=AS_OF)

        mock_processed_invoice_repo.get_oldest_self_billed.assert_called_once_with(
            1, after=date(2024, 2, 15)
        )

    async def test_skips_pool_that_cannot_cover_portion(self, use_case, mock_ledger, account):
        mock_ledger.debit = AsyncMock(
            side_effect=[
                InsufficientPointsError(1, PointPool.REGULAR, Decimal("0"), Decimal("40.00")),
                Decimal("140.00"),
            ]
        )

        result = await use_case.execute(as_of=AS_OF)

        # The annual pool covers what the regular pool could not
        assert result.value.total_debited == Decimal("100.00")
        assert mock_ledger.debit.call_args_list[1].args[1] == PointPool.ANNUAL
        assert mock_ledger.debit.call_args_list[1].args[2] == Decimal("100.00")
        assert account.credit_used == Decimal("0.00")
        assert account.credit_settled_on == AS_OF

    async def test_partial_recovery_when_points_run_out(self, mock_uow, mock_ledger, mock_processed_invoice_repo):
        account = make_account(regular="10.00", annual="5.00", credit_used="100.00")
        repo = MagicMock()
        repo.get_with_outstanding_credit = AsyncMock(return_value=[account])
        repo.get_by_id = AsyncMock(return_value=account)
        repo.update = AsyncMock()
        use_case = SweepOverdueCredit(mock_uow, mock_ledger, repo, mock_processed_invoice_repo)

        result = await use_case.execute(as_of=AS_OF)

        assert result.value.total_debited == Decimal("15.00")
        assert account.credit_used == Decimal("85.00")

    async def test_no_unsettled_invoice_means_not_overdue(
        self, use_case, mock_processed_invoice_repo, mock_ledger, account
    ):
        mock_processed_invoice_repo.get_oldest_self_billed = AsyncMock(return_value=None)

        result = await use_case.execute(as_of=AS_OF)

        assert result.value.processed == 0
        assert account.credit_overdue_days == 0
        mock_ledger.debit.assert_not_called()

    async def test_account_failure_is_isolated(self, use_case, mock_account_repo, mock_uow):
        mock_account_repo.get_by_id = AsyncMock(side_effect=Exception("lock timeout"))

        result = await use_case.execute(as_of=AS_OF)

        assert result.is_ok()
        assert result.value.failed == 1
        mock_uow.rollback.assert_called_once()

    async def test_listing_failure_returns_error(self, use_case, mock_account_repo):
        mock_account_repo.get_with_outstanding_credit = AsyncMock(side_effect=Exception("db down"))

        result = await use_case.execute(as_of=AS_OF)

        assert result.is_err()
        assert result.error.code == "CREDIT_SWEEP_FAILED"
