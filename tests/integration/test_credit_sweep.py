"""Integration tests for SweepOverdueCredit use case

Tests cover:
- Overdue credit recovered from regular first, then annual
- Account credit fields updated and ledger still reconciles
- Credit inside the threshold is left alone
- Rerun after full recovery debits nothing
"""

import pytest
from datetime import date
from decimal import Decimal

from src.app.use_cases.points import (
    AdjustPoints,
    GetBalance,
    ListPointTransactions,
    ReconcileLedger,
    SweepOverdueCredit,
)
from src.app.use_cases.points.dtos import AdjustPointsCommandDTO
from src.domain.account import Account
from src.domain.point_pool import PointPool
from src.domain.processed_invoice import BillingType, ProcessedInvoice


AS_OF = date(2024, 3, 1)


async def account_on_credit(db_session, repos, invoice_date, credit_used="100.00"):
    """Regular 40 / annual 200 funded through the ledger, with one self-billed invoice on credit"""
    account = Account(display_name="Contractor C", credit_enabled=True, credit_limit=Decimal("500.00"))
    db_session.add(account)
    await db_session.commit()
    await db_session.refresh(account)

    adjust = AdjustPoints(repos.uow, repos.ledger, repos.accounts)
    for pool, amount in ((PointPool.REGULAR, "40.00"), (PointPool.ANNUAL, "200.00")):
        result = await adjust.execute(
            AdjustPointsCommandDTO(account_id=account.id, pool=pool, amount=Decimal(amount))
        )
        assert result.is_ok()

    account = await repos.accounts.get_by_id(account.id)
    account.credit_used = Decimal(credit_used)
    db_session.add(
        ProcessedInvoice(
            account_id=account.id,
            external_invoice_id=f"self-{account.id}",
            invoice_date=invoice_date,
            invoice_total=Decimal(credit_used),
            billing_type=BillingType.SELF,
        )
    )
    await db_session.commit()
    return account.id


def sweep_use_case(repos, threshold_days=30):
    return SweepOverdueCredit(
        uow=repos.uow,
        ledger=repos.ledger,
        account_repo=repos.accounts,
        processed_invoice_repo=repos.processed_invoices,
        overdue_threshold_days=threshold_days,
    )


@pytest.mark.asyncio
class TestCreditSweepIntegration:

    async def test_overdue_credit_recovered_from_both_pools(self, db_session, repos):
        """100 owed, 60 days old -> regular 40 -> 0, annual 200 -> 140"""
        account_id = await account_on_credit(db_session, repos, invoice_date=date(2024, 1, 1))

        result = await sweep_use_case(repos).execute(as_of=AS_OF)

        assert result.is_ok()
        assert result.value.checked == 1
        assert result.value.processed == 1
        assert result.value.total_debited == Decimal("100.00")

        balance = (await GetBalance(repos.accounts).execute(account_id)).value
        assert balance.regular == Decimal("0.00")
        assert balance.annual == Decimal("140.00")

        account = await repos.accounts.get_by_id(account_id)
        await db_session.refresh(account)
        assert account.credit_used == Decimal("0.00")
        assert account.credit_overdue_days == 60
        assert account.credit_settled_on == AS_OF

        history = (await ListPointTransactions(repos.transactions).execute(account_id, limit=2)).value
        assert {t.source for t in history.transactions} == {"credit_debit"}
        assert sorted(t.amount for t in history.transactions) == [Decimal("-60.00"), Decimal("-40.00")]

        reconciliation = (await ReconcileLedger(repos.accounts, repos.transactions).execute()).value
        assert reconciliation.discrepancies_found == 0

    async def test_credit_within_threshold_untouched(self, db_session, repos):
        account_id = await account_on_credit(db_session, repos, invoice_date=date(2024, 2, 15))

        result = await sweep_use_case(repos).execute(as_of=AS_OF)

        assert result.value.checked == 1
        assert result.value.processed == 0
        balance = (await GetBalance(repos.accounts).execute(account_id)).value
        assert balance.regular == Decimal("40.00")
        assert balance.annual == Decimal("200.00")

        account = await repos.accounts.get_by_id(account_id)
        await db_session.refresh(account)
        assert account.credit_used == Decimal("100.00")
        assert account.credit_overdue_days == 15

    async def test_rerun_after_recovery_is_noop(self, db_session, repos):
        account_id = await account_on_credit(db_session, repos, invoice_date=date(2024, 1, 1))
        use_case = sweep_use_case(repos)

        await use_case.execute(as_of=AS_OF)
        second = await use_case.execute(as_of=AS_OF)

        assert second.value.checked == 0
        assert second.value.total_debited == Decimal("0")
        history = (await ListPointTransactions(repos.transactions).execute(account_id)).value
        assert history.total == 4
