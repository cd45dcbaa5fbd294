"""Ledger Reconciliation Background Worker

Reconciles cached point balances against transaction history.
Run as a standalone script from an external scheduler (cron).
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.repositories.point_transaction_repository import SqlAlchemyPointTransactionRepository
from src.app.use_cases.points import ReconcileLedger, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class LedgerReconcilerWorker:
    """
    Background worker for points ledger reconciliation

    Features:
    - Compares both pool balances of every account against transaction sums
    - Logs discrepancies for investigation
    - Read-only

    Usage:
        worker = LedgerReconcilerWorker()
        result = await worker.run_once()
        await worker.shutdown()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        # Create engine and session factory
        self.engine = create_async_engine(self.db_uri, echo=ApplicationConfig.DB_ECHO, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("LedgerReconcilerWorker initialized")

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Run reconciliation once

        Returns:
            ReconciliationResultDTO with reconciliation results
        """
        if not (ApplicationConfig.LOYALTY_SYSTEM_ENABLED and ApplicationConfig.RECONCILIATION_ENABLED):
            logger.info("Ledger reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_accounts_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = ReconcileLedger(
                account_repo=SqlAlchemyAccountRepository(session),
                transaction_repo=SqlAlchemyPointTransactionRepository(session),
            )

            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Reconciliation failed: {result.error.message}")
                raise RuntimeError(f"Reconciliation failed: {result.error.message}")

            response = result.value

            if response.discrepancies_found > 0:
                logger.error(
                    f"ALERT: {response.discrepancies_found} ledger discrepancies found!"
                )
                for d in response.discrepancies:
                    logger.error(
                        f"  - Account {d.account_id} ({d.pool.value}): "
                        f"expected={d.calculated_balance}, actual={d.cached_balance}, "
                        f"diff={d.discrepancy}"
                    )

            return response

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("LedgerReconcilerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.ledger_reconciler
    """
    import argparse

    parser = argparse.ArgumentParser(description="Points Ledger Reconciliation Worker")
    parser.add_argument("--db-uri", default=None, help="Override DB_URI from env.yaml")
    args = parser.parse_args()

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    worker = LedgerReconcilerWorker(db_uri=args.db_uri)

    try:
        result = await worker.run_once()
        print("Reconciliation complete:")
        print(f"  Total accounts checked: {result.total_accounts_checked}")
        print(f"  Discrepancies found: {result.discrepancies_found}")
        print(f"  Execution time: {result.execution_time_ms}ms")
        if result.discrepancies:
            print("\nDiscrepancies:")
            for d in result.discrepancies:
                print(
                    f"  - Account {d.account_id} {d.pool.value}: "
                    f"expected={d.calculated_balance}, "
                    f"actual={d.cached_balance}, "
                    f"diff={d.discrepancy}"
                )
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


def cli():
    """Console script entry point"""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
