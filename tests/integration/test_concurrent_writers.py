"""Integration tests for concurrent writers on one account

Tests cover:
- Cached balances match the transaction sum after interleaved credits and debits
- Duplicate attendance triggers award once
"""

import asyncio
import pytest
from decimal import Decimal

from src.app.use_cases.points import (
    AdjustPoints,
    AwardAttendancePoints,
    GetBalance,
    ListPointTransactions,
    ReconcileLedger,
)
from src.app.use_cases.points.dtos import AdjustPointsCommandDTO, AwardAttendanceCommandDTO
from src.domain.account import Account
from src.domain.point_pool import PointPool


async def new_account(db_session, repos, regular=None):
    account = Account(display_name="Painter P")
    db_session.add(account)
    await db_session.commit()
    await db_session.refresh(account)

    if regular:
        result = await AdjustPoints(repos.uow, repos.ledger, repos.accounts).execute(
            AdjustPointsCommandDTO(account_id=account.id, pool=PointPool.REGULAR, amount=Decimal(regular))
        )
        assert result.is_ok()
    return account.id


@pytest.mark.asyncio
class TestConcurrentWriters:

    async def test_interleaved_adjustments_keep_ledger_consistent(
        self, db_session, repos, session_factory, make_repos
    ):
        account_id = await new_account(db_session, repos, regular="50.00")

        async def adjust(amount):
            async with session_factory() as session:
                own = make_repos(session)
                return await AdjustPoints(own.uow, own.ledger, own.accounts).execute(
                    AdjustPointsCommandDTO(
                        account_id=account_id, pool=PointPool.REGULAR, amount=Decimal(amount)
                    )
                )

        amounts = ["1"] * 10 + ["-2"] * 5
        results = await asyncio.gather(*(adjust(amount) for amount in amounts))

        assert all(r.is_ok() for r in results)

        async with session_factory() as session:
            fresh = make_repos(session)
            balance = (await GetBalance(fresh.accounts).execute(account_id)).value
            reconciliation = (await ReconcileLedger(fresh.accounts, fresh.transactions).execute()).value
            history = (await ListPointTransactions(fresh.transactions).execute(account_id, limit=100)).value

        assert balance.regular == Decimal("50.00")
        assert balance.total_earned_regular == Decimal("60.00")
        assert balance.total_redeemed_regular == Decimal("10.00")
        assert reconciliation.discrepancies_found == 0
        assert history.total == 16
        # Every entry continues the running balance of the one before it
        entries = sorted(history.transactions, key=lambda t: t.id)
        for previous, entry in zip(entries, entries[1:]):
            assert entry.balance_after == previous.balance_after + entry.amount

    async def test_duplicate_attendance_triggers_award_once(
        self, db_session, repos, session_factory, make_repos
    ):
        account_id = await new_account(db_session, repos)

        async def award():
            async with session_factory() as session:
                own = make_repos(session)
                return await AwardAttendancePoints(own.uow, own.ledger, own.transactions).execute(
                    AwardAttendanceCommandDTO(account_id=account_id, attendance_record_id="att-1")
                )

        results = await asyncio.gather(*(award() for _ in range(5)))

        assert all(r.is_ok() for r in results)
        assert sum(1 for r in results if not r.value.already_awarded) == 1
        assert all(r.value.points_awarded == Decimal("5.00") for r in results)

        async with session_factory() as session:
            fresh = make_repos(session)
            balance = (await GetBalance(fresh.accounts).execute(account_id)).value
            history = (await ListPointTransactions(fresh.transactions).execute(account_id)).value

        assert balance.regular == Decimal("5.00")
        assert history.total == 1
