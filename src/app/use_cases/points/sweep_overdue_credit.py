"""SweepOverdueCredit Use Case

Recovers overdue self-billed credit by auto-debiting points.
"""

import logging
import time
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.processed_invoice_repository import ProcessedInvoiceRepository
from src.domain.account import Account
from src.domain.base import round_points
from src.domain.errors import InsufficientPointsError
from src.domain.point_pool import PointPool
from src.domain.point_transaction import TransactionSource
from .dtos import CreditSweepResultDTO

logger = logging.getLogger(__name__)

CREDIT_REFERENCE_TYPE = "credit"

# Pools drained in this order
_DEBIT_PRIORITY = (PointPool.REGULAR, PointPool.ANNUAL)


class SweepOverdueCredit:
    """
    Use Case: Auto-debit overdue credit

    Business Rules:
    1. Applies to credit-enabled accounts with credit_used > 0
    2. Overdue age = days since the oldest unsettled self-billed invoice;
       it is stored on the account on every sweep
    3. Above the threshold, credit_used is recovered from the regular pool
       first, then the annual pool
    4. A pool that cannot cover its portion is skipped; partial recovery stands
    5. credit_used only ever decreases here, by what was actually recovered
    6. Each account commits on its own
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: PointsLedger,
        account_repo: AccountRepository,
        processed_invoice_repo: ProcessedInvoiceRepository,
        overdue_threshold_days: int = 30,
    ):
        self.uow = uow
        self.ledger = ledger
        self.account_repo = account_repo
        self.processed_invoice_repo = processed_invoice_repo
        self.overdue_threshold_days = overdue_threshold_days

    async def execute(self, as_of: Optional[date] = None) -> Result[CreditSweepResultDTO]:
        """
        Execute the credit sweep

        Args:
            as_of: Day to measure invoice age against (defaults to today, UTC)

        Returns:
            Result[CreditSweepResultDTO]: Sweep summary
        """
        start_time = time.time()
        as_of = as_of or datetime.utcnow().date()

        checked = processed = failed = 0
        total_debited = Decimal("0")

        try:
            # Rollbacks expire loaded rows, so work from plain ids
            account_ids = [a.id for a in await self.account_repo.get_with_outstanding_credit()]
            logger.info(
                f"Credit sweep as of {as_of}: {len(account_ids)} accounts with outstanding credit, "
                f"threshold {self.overdue_threshold_days} days"
            )

            for account_id in account_ids:
                checked += 1
                try:
                    overdue, recovered = await self._sweep_account(account_id, as_of)
                    await self.uow.commit()
                except Exception as e:
                    await self.uow.rollback()
                    failed += 1
                    logger.error(f"Credit sweep failed for account {account_id}: {e}")
                    continue

                if overdue:
                    processed += 1
                    total_debited += recovered

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Credit sweep failed: {e}")
            return Return.err(
                Error(
                    code="CREDIT_SWEEP_FAILED",
                    message="Failed to sweep overdue credit",
                    reason=str(e),
                )
            )

        execution_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Credit sweep complete: checked={checked}, processed={processed}, "
            f"debited={total_debited}, failed={failed} in {execution_time_ms}ms"
        )

        return Return.ok(
            CreditSweepResultDTO(
                checked=checked,
                processed=processed,
                total_debited=total_debited,
                failed=failed,
                threshold_days=self.overdue_threshold_days,
                as_of=as_of,
                execution_time_ms=execution_time_ms,
            )
        )

    async def _sweep_account(self, account_id: int, as_of: date):
        """Returns (overdue, recovered) for one account. Nothing is committed."""
        account = await self.account_repo.get_by_id(account_id, for_update=True)
        if not account or not account.credit_enabled or account.credit_used <= 0:
            return False, Decimal("0")

        oldest = await self.processed_invoice_repo.get_oldest_self_billed(
            account.id, after=account.credit_settled_on
        )
        overdue_days = 0
        if oldest and oldest.invoice_date:
            overdue_days = max((as_of - oldest.invoice_date).days, 0)

        recovered = Decimal("0")
        overdue = overdue_days > self.overdue_threshold_days

        if overdue:
            recovered = await self._recover(account, overdue_days)

        # Ledger debits re-read the row, so account fields are set afterwards
        credit_used = round_points(Decimal(account.credit_used) - recovered)
        account.credit_overdue_days = overdue_days
        account.credit_used = credit_used
        if overdue and credit_used <= 0:
            account.credit_settled_on = as_of
        await self.account_repo.update(account)

        if overdue:
            logger.info(
                f"Account {account.id}: credit overdue {overdue_days} days, "
                f"recovered {recovered}, outstanding {credit_used}"
            )
        return overdue, recovered

    async def _recover(self, account: Account, overdue_days: int) -> Decimal:
        remaining = Decimal(account.credit_used)
        recovered = Decimal("0")

        for pool in _DEBIT_PRIORITY:
            if remaining <= 0:
                break
            portion = min(account.balance_for(pool), remaining)
            if portion <= 0:
                continue
            try:
                await self.ledger.debit(
                    account.id,
                    pool,
                    portion,
                    TransactionSource.CREDIT_DEBIT,
                    reference_id=str(account.id),
                    reference_type=CREDIT_REFERENCE_TYPE,
                    description=f"Auto-debit for overdue credit ({overdue_days} days)",
                )
            except InsufficientPointsError as e:
                logger.warning(f"Skipping {pool.value} portion for account {account.id}: {e}")
                continue
            recovered += portion
            remaining -= portion

        return recovered
