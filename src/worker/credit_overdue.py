"""Credit Overdue Background Worker

Auto-debits points from accounts whose self-billed credit is overdue.
Run as a standalone script from an external scheduler (cron), typically daily.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.repositories.point_transaction_repository import SqlAlchemyPointTransactionRepository
from src.adapter.repositories.processed_invoice_repository import SqlAlchemyProcessedInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.points_ledger import PointsLedger
from src.app.use_cases.points import SweepOverdueCredit, CreditSweepResultDTO

logger = logging.getLogger(__name__)


class CreditOverdueWorker:
    """
    Background worker for the credit overdue sweep

    Usage:
        worker = CreditOverdueWorker()
        result = await worker.run_once()

        # Measure ages against a fixed day
        result = await worker.run_once(as_of=date(2024, 4, 1))
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        overdue_threshold_days: Optional[int] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            overdue_threshold_days: Days before auto-debit (defaults to ApplicationConfig.CREDIT_OVERDUE_DAYS)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.overdue_threshold_days = (
            overdue_threshold_days
            if overdue_threshold_days is not None
            else ApplicationConfig.CREDIT_OVERDUE_DAYS
        )

        # Create engine and session factory
        self.engine = create_async_engine(self.db_uri, echo=ApplicationConfig.DB_ECHO, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info(
            f"CreditOverdueWorker initialized with threshold {self.overdue_threshold_days} days"
        )

    async def run_once(self, as_of: Optional[date] = None) -> CreditSweepResultDTO:
        """
        Run the sweep once

        Args:
            as_of: Day to measure invoice age against (defaults to today)

        Returns:
            CreditSweepResultDTO with summary
        """
        as_of = as_of or datetime.utcnow().date()

        if not (ApplicationConfig.LOYALTY_SYSTEM_ENABLED and ApplicationConfig.CREDIT_SWEEP_ENABLED):
            logger.info("Credit overdue sweep is disabled, skipping")
            return CreditSweepResultDTO(
                checked=0,
                processed=0,
                threshold_days=self.overdue_threshold_days,
                as_of=as_of,
            )

        async with self.async_session_factory() as session:
            account_repo = SqlAlchemyAccountRepository(session)
            use_case = SweepOverdueCredit(
                uow=SqlAlchemyUnitOfWork(session),
                ledger=PointsLedger(account_repo, SqlAlchemyPointTransactionRepository(session)),
                account_repo=account_repo,
                processed_invoice_repo=SqlAlchemyProcessedInvoiceRepository(session),
                overdue_threshold_days=self.overdue_threshold_days,
            )

            result = await use_case.execute(as_of=as_of)

        if result.is_err():
            logger.error(f"Credit sweep failed: {result.error.message}")
            raise RuntimeError(f"Credit sweep failed: {result.error.message}")

        return result.value

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("CreditOverdueWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.credit_overdue
        python -m src.worker.credit_overdue --as-of 2024-04-01
    """
    import argparse

    parser = argparse.ArgumentParser(description="Credit Overdue Sweep Worker")
    parser.add_argument(
        "--as-of", type=date.fromisoformat, default=None,
        help="Day to measure invoice age against, YYYY-MM-DD (default: today)"
    )
    parser.add_argument(
        "--threshold-days", type=int, default=None,
        help="Overdue threshold in days (default: CREDIT_OVERDUE_DAYS)"
    )
    parser.add_argument("--db-uri", default=None, help="Override DB_URI from env.yaml")
    args = parser.parse_args()

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    worker = CreditOverdueWorker(db_uri=args.db_uri, overdue_threshold_days=args.threshold_days)

    try:
        result = await worker.run_once(as_of=args.as_of)
        print(f"Credit sweep as of {result.as_of}:")
        print(f"  Accounts checked: {result.checked}")
        print(f"  Accounts overdue: {result.processed}")
        print(f"  Points debited: {result.total_debited}")
        print(f"  Failed: {result.failed}")
        print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


def cli():
    """Console script entry point"""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
