"""ReconcileLedger Use Case

Reconciles cached pool balances against the point transaction history.
"""

import logging
import time
from datetime import datetime
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.point_transaction_repository import PointTransactionRepository
from src.domain.point_pool import PointPool
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile point balances against transactions

    Business Rules:
    1. For every account and pool, the sum of signed transaction amounts
       must equal the cached balance
    2. Mismatches are reported and logged, never repaired
    3. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        transaction_repo: PointTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute ledger reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting points ledger reconciliation")

            accounts = await self.account_repo.get_all()
            total_accounts = len(accounts)

            logger.info(f"Found {total_accounts} accounts to reconcile")

            discrepancies: list[LedgerDiscrepancyDTO] = []

            for account in accounts:
                for pool in PointPool:
                    cached = account.balance_for(pool)
                    calculated = await self.transaction_repo.get_sum_by_account_pool(
                        account.id, pool
                    )

                    if cached != calculated:
                        discrepancy_amount = cached - Decimal(calculated)
                        discrepancies.append(
                            LedgerDiscrepancyDTO(
                                account_id=account.id,
                                pool=pool,
                                cached_balance=cached,
                                calculated_balance=calculated,
                                discrepancy=discrepancy_amount,
                            )
                        )
                        logger.warning(
                            f"Discrepancy found for account {account.id} ({pool.value}): "
                            f"cached_balance={cached}, "
                            f"transaction_sum={calculated}, "
                            f"discrepancy={discrepancy_amount}"
                        )

            execution_time_ms = int((time.time() - start_time) * 1000)

            response = ReconciliationResultDTO(
                total_accounts_checked=total_accounts,
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"across {total_accounts} accounts in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_accounts} accounts balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile points ledger",
                    reason=str(e),
                )
            )
