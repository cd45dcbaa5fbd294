"""Integration tests for the withdrawal lifecycle

Tests cover:
- Request rejected when the pool cannot cover it
- Approve debits once; a second process call is refused
- Reject leaves the ledger alone
- Failed debit on approval keeps the request pending
- Concurrent processors debit exactly once (PostgreSQL only)
"""

import asyncio
import pytest
from decimal import Decimal

from src.app.use_cases.points import (
    AdjustPoints,
    GetBalance,
    ListWithdrawals,
    ProcessWithdrawal,
    RequestWithdrawal,
)
from src.app.use_cases.points.dtos import (
    AdjustPointsCommandDTO,
    ProcessWithdrawalCommandDTO,
    RequestWithdrawalCommandDTO,
)
from src.domain.account import Account
from src.domain.point_pool import PointPool
from src.domain.withdrawal import WithdrawalAction, WithdrawalStatus


async def funded_account(db_session, repos, regular="50.00", annual="0"):
    """Account funded through the ledger so the reconciliation invariant holds"""
    account = Account(display_name="Painter W")
    db_session.add(account)
    await db_session.commit()
    await db_session.refresh(account)

    adjust = AdjustPoints(repos.uow, repos.ledger, repos.accounts)
    for pool, amount in ((PointPool.REGULAR, regular), (PointPool.ANNUAL, annual)):
        if Decimal(amount) > 0:
            result = await adjust.execute(
                AdjustPointsCommandDTO(account_id=account.id, pool=pool, amount=Decimal(amount))
            )
            assert result.is_ok()
    return account.id


async def request(repos, account_id, amount, pool=PointPool.REGULAR):
    return await RequestWithdrawal(repos.uow, repos.accounts, repos.withdrawals).execute(
        RequestWithdrawalCommandDTO(account_id=account_id, pool=pool, amount=Decimal(amount))
    )


async def process(repos, withdrawal_id, action, actor_id="admin-1"):
    return await ProcessWithdrawal(repos.uow, repos.ledger, repos.withdrawals).execute(
        ProcessWithdrawalCommandDTO(withdrawal_id=withdrawal_id, action=action, actor_id=actor_id)
    )


@pytest.mark.asyncio
class TestWithdrawalLifecycle:

    async def test_request_above_balance_rejected(self, db_session, repos):
        """50 regular available, 60 requested"""
        account_id = await funded_account(db_session, repos, regular="50.00")

        result = await request(repos, account_id, "60")

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_POINTS"
        listing = (await ListWithdrawals(repos.withdrawals).execute(account_id=account_id)).value
        assert listing.total == 0

    async def test_approve_debits_once(self, db_session, repos):
        account_id = await funded_account(db_session, repos, regular="50.00")
        withdrawal = (await request(repos, account_id, "40")).value

        approved = await process(repos, withdrawal.id, WithdrawalAction.APPROVE)
        again = await process(repos, withdrawal.id, WithdrawalAction.PAID)

        assert approved.is_ok()
        assert approved.value.status == "approved"
        assert approved.value.processed_by == "admin-1"
        assert again.error.code == "INVALID_WITHDRAWAL_STATE"

        balance = (await GetBalance(repos.accounts).execute(account_id)).value
        assert balance.regular == Decimal("10.00")
        assert balance.total_redeemed_regular == Decimal("40.00")

    async def test_reject_leaves_balance(self, db_session, repos):
        account_id = await funded_account(db_session, repos, regular="50.00")
        withdrawal = (await request(repos, account_id, "40")).value

        rejected = await process(repos, withdrawal.id, WithdrawalAction.REJECT)

        assert rejected.value.status == "rejected"
        balance = (await GetBalance(repos.accounts).execute(account_id)).value
        assert balance.regular == Decimal("50.00")

    async def test_failed_debit_keeps_request_pending(self, db_session, repos):
        account_id = await funded_account(db_session, repos, regular="50.00")
        withdrawal = (await request(repos, account_id, "40")).value

        # Balance drops after the request was accepted
        await AdjustPoints(repos.uow, repos.ledger, repos.accounts).execute(
            AdjustPointsCommandDTO(account_id=account_id, pool=PointPool.REGULAR, amount=Decimal("-20"))
        )

        result = await process(repos, withdrawal.id, WithdrawalAction.PAID)

        assert result.error.code == "INSUFFICIENT_POINTS"
        stored = await repos.withdrawals.get_by_id(withdrawal.id)
        assert stored.status == WithdrawalStatus.PENDING
        balance = (await GetBalance(repos.accounts).execute(account_id)).value
        assert balance.regular == Decimal("30.00")

    async def test_concurrent_approvals_debit_once(
        self, db_session, repos, session_factory, make_repos
    ):
        account_id = await funded_account(db_session, repos, regular="50.00")
        withdrawal = (await request(repos, account_id, "40")).value

        async def approve():
            async with session_factory() as session:
                return await process(make_repos(session), withdrawal.id, WithdrawalAction.APPROVE)

        results = await asyncio.gather(*(approve() for _ in range(5)))

        assert sum(1 for r in results if r.is_ok()) == 1
        assert all(r.error.code == "INVALID_WITHDRAWAL_STATE" for r in results if r.is_err())

        async with session_factory() as session:
            balance = (await GetBalance(make_repos(session).accounts).execute(account_id)).value
        assert balance.regular == Decimal("10.00")
