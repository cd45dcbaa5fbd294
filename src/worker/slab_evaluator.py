"""Slab Evaluation Background Worker

Awards monthly and quarterly value-slab bonuses once a period has closed.
Run as a standalone script from an external scheduler (cron), typically on
the first day of each month.
"""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.repositories.point_transaction_repository import SqlAlchemyPointTransactionRepository
from src.adapter.repositories.processed_invoice_repository import SqlAlchemyProcessedInvoiceRepository
from src.adapter.repositories.slab_repository import (
    SqlAlchemySlabDefinitionRepository,
    SqlAlchemySlabEvaluationRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.points_ledger import PointsLedger
from src.app.use_cases.points import EvaluateSlabs, SlabEvaluationResultDTO
from src.domain.period import PeriodType, previous_period_label

logger = logging.getLogger(__name__)


class SlabEvaluatorWorker:
    """
    Background worker for value slab evaluation

    Features:
    - Evaluates the previous month and/or quarter by default
    - Idempotent: safe to re-run, already evaluated accounts are skipped

    Usage:
        # Previous month and previous quarter
        worker = SlabEvaluatorWorker()
        results = await worker.run_once()

        # One explicit period
        results = await worker.run_once(PeriodType.QUARTERLY, "2024-Q1")
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

        logger.info("SlabEvaluatorWorker initialized")

    def _periods(self, period_type: Optional[PeriodType], label: Optional[str]):
        if period_type and label:
            return [(period_type, label)]

        today = datetime.utcnow().date()
        types = [period_type] if period_type else [PeriodType.MONTHLY, PeriodType.QUARTERLY]
        return [(t, previous_period_label(t, today)) for t in types]

    async def run_once(
        self,
        period_type: Optional[PeriodType] = None,
        label: Optional[str] = None,
    ) -> List[SlabEvaluationResultDTO]:
        """
        Run slab evaluation once

        Args:
            period_type: monthly or quarterly (optional, defaults to both)
            label: Period label (optional, defaults to the previous period)

        Returns:
            One SlabEvaluationResultDTO per evaluated period
        """
        if not (ApplicationConfig.LOYALTY_SYSTEM_ENABLED and ApplicationConfig.SLAB_EVALUATION_ENABLED):
            logger.info("Slab evaluation is disabled, skipping")
            return []

        results = []
        for p_type, p_label in self._periods(period_type, label):
            async with self.async_session_factory() as session:
                account_repo = SqlAlchemyAccountRepository(session)
                use_case = EvaluateSlabs(
                    uow=SqlAlchemyUnitOfWork(session),
                    ledger=PointsLedger(
                        account_repo, SqlAlchemyPointTransactionRepository(session)
                    ),
                    account_repo=account_repo,
                    processed_invoice_repo=SqlAlchemyProcessedInvoiceRepository(session),
                    slab_definition_repo=SqlAlchemySlabDefinitionRepository(session),
                    slab_evaluation_repo=SqlAlchemySlabEvaluationRepository(session),
                )

                result = await use_case.execute(p_type, p_label)

            if result.is_err():
                logger.error(
                    f"Slab evaluation {p_type.value} {p_label} failed: {result.error.message}"
                )
                raise RuntimeError(f"Slab evaluation failed: {result.error.message}")

            results.append(result.value)

        return results

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("SlabEvaluatorWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Previous month and previous quarter
        python -m src.worker.slab_evaluator

        # Specific period
        python -m src.worker.slab_evaluator --period-type monthly --label 2024-03
    """
    import argparse

    parser = argparse.ArgumentParser(description="Value Slab Evaluation Worker")
    parser.add_argument(
        "--period-type", choices=[t.value for t in PeriodType], default=None,
        help="Evaluate only this period type (default: both)"
    )
    parser.add_argument(
        "--label", default=None,
        help="Period label, YYYY-MM or YYYY-Qn (default: previous period)"
    )
    parser.add_argument("--db-uri", default=None, help="Override DB_URI from env.yaml")
    args = parser.parse_args()

    if args.label and not args.period_type:
        parser.error("--label requires --period-type")

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    worker = SlabEvaluatorWorker(db_uri=args.db_uri)
    period_type = PeriodType(args.period_type) if args.period_type else None

    try:
        results = await worker.run_once(period_type, args.label)
        for r in results:
            print(f"Slab evaluation {r.period_type.value} {r.period_label}:")
            print(f"  Period: {r.period_start} to {r.period_end}")
            print(f"  Evaluated: {r.evaluated}")
            print(f"  Awarded: {r.awarded} ({r.total_points_awarded} points)")
            print(f"  Skipped: {r.skipped}")
            print(f"  Failed: {r.failed}")
            print(f"  Execution time: {r.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


def cli():
    """Console script entry point"""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
