"""EvaluateSlabs Use Case

Awards purchase-volume slab bonuses for one monthly or quarterly period.
Run by the slab evaluator worker after the period closes.
"""

import logging
import time
from decimal import Decimal
from typing import Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.processed_invoice_repository import ProcessedInvoiceRepository
from src.app.repositories.slab_repository import SlabDefinitionRepository, SlabEvaluationRepository
from src.domain.period import PeriodType, period_bounds
from src.domain.point_pool import PointPool
from src.domain.point_transaction import TransactionSource
from src.domain.slab_evaluation import SlabEvaluation
from src.domain.value_slab import SlabDefinition
from .dtos import SlabEvaluationResultDTO

logger = logging.getLogger(__name__)

SLAB_REFERENCE_TYPE = "slab"

_SLAB_SOURCES = {
    PeriodType.MONTHLY: TransactionSource.MONTHLY_SLAB,
    PeriodType.QUARTERLY: TransactionSource.QUARTERLY_SLAB,
}


class EvaluateSlabs:
    """
    Use Case: Evaluate value slabs for a period

    Business Rules:
    1. At most one evaluation per (account, period type, period label)
    2. Purchase total = sum of invoice totals dated within the period (inclusive)
    3. Slabs are checked by descending min_amount; the first containing slab wins
    4. A positive bonus is credited to the annual pool
    5. Accounts without a matching slab are still recorded (zero points)
    6. Each account commits on its own; one failure does not stop the batch

    Flow:
    1. Resolve the period label to start/end dates
    2. Load active slabs (none = nothing to evaluate)
    3. For each active account not yet evaluated:
       a. Sum purchases in the period
       b. Match slab, credit bonus
       c. Record evaluation and commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: PointsLedger,
        account_repo: AccountRepository,
        processed_invoice_repo: ProcessedInvoiceRepository,
        slab_definition_repo: SlabDefinitionRepository,
        slab_evaluation_repo: SlabEvaluationRepository,
    ):
        self.uow = uow
        self.ledger = ledger
        self.account_repo = account_repo
        self.processed_invoice_repo = processed_invoice_repo
        self.slab_definition_repo = slab_definition_repo
        self.slab_evaluation_repo = slab_evaluation_repo

    async def execute(
        self, period_type: PeriodType, period_label: str
    ) -> Result[SlabEvaluationResultDTO]:
        """
        Execute slab evaluation

        Args:
            period_type: monthly or quarterly
            period_label: YYYY-MM or YYYY-Qn

        Returns:
            Result[SlabEvaluationResultDTO]: Batch summary

        Errors:
            INVALID_PERIOD_LABEL: Label does not match the period type
            SLAB_EVALUATION_FAILED: Could not load slabs or accounts
        """
        start_time = time.time()

        try:
            period_start, period_end = period_bounds(period_type, period_label)
        except ValueError as e:
            return Return.err(
                Error(code="INVALID_PERIOD_LABEL", message=str(e), reason=period_label)
            )

        evaluated = awarded = skipped = failed = 0
        total_points = Decimal("0")

        try:
            logger.info(
                f"Starting {period_type.value} slab evaluation for {period_label} "
                f"({period_start} to {period_end})"
            )

            slabs = await self.slab_definition_repo.get_active_by_period_type(period_type)
            if not slabs:
                logger.info(f"No active {period_type.value} slabs configured, nothing to evaluate")
            else:
                # Rollbacks expire loaded rows, so work from plain ids
                account_ids = [account.id for account in await self.account_repo.get_active()]
                already_evaluated = await self.slab_evaluation_repo.get_evaluated_account_ids(
                    period_type, period_label
                )

                for account_id in account_ids:
                    if account_id in already_evaluated:
                        skipped += 1
                        continue

                    try:
                        points = await self._evaluate_account(
                            account_id, slabs, period_type, period_label, period_start, period_end
                        )
                        await self.uow.commit()
                    except IntegrityError:
                        # Another run recorded this account first
                        await self.uow.rollback()
                        skipped += 1
                        slabs = await self._reload_slabs(period_type)
                        continue
                    except Exception as e:
                        await self.uow.rollback()
                        failed += 1
                        logger.error(
                            f"Slab evaluation failed for account {account_id} "
                            f"({period_label}): {e}"
                        )
                        slabs = await self._reload_slabs(period_type)
                        continue

                    evaluated += 1
                    if points > 0:
                        awarded += 1
                        total_points += points

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Slab evaluation for {period_label} failed: {e}")
            return Return.err(
                Error(
                    code="SLAB_EVALUATION_FAILED",
                    message=f"Failed to evaluate {period_type.value} slabs",
                    reason=str(e),
                )
            )

        execution_time_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"Slab evaluation {period_label} complete: evaluated={evaluated}, "
            f"awarded={awarded}, skipped={skipped}, failed={failed}, "
            f"points={total_points} in {execution_time_ms}ms"
        )

        return Return.ok(
            SlabEvaluationResultDTO(
                period_type=period_type,
                period_label=period_label,
                period_start=period_start,
                period_end=period_end,
                evaluated=evaluated,
                awarded=awarded,
                skipped=skipped,
                failed=failed,
                total_points_awarded=total_points,
                execution_time_ms=execution_time_ms,
            )
        )

    async def _evaluate_account(
        self,
        account_id: int,
        slabs,
        period_type: PeriodType,
        period_label: str,
        period_start,
        period_end,
    ) -> Decimal:
        total_purchase = await self.processed_invoice_repo.get_total_between(
            account_id, period_start, period_end
        )

        slab = self._match_slab(slabs, total_purchase)
        points = Decimal(slab.bonus_points) if slab else Decimal("0")

        if points > 0:
            await self.ledger.credit(
                account_id,
                PointPool.ANNUAL,
                points,
                _SLAB_SOURCES[period_type],
                reference_id=period_label,
                reference_type=SLAB_REFERENCE_TYPE,
                description=(
                    f"{period_type.value.capitalize()} slab bonus: {slab.label} "
                    f"({total_purchase} purchased)"
                ),
            )

        await self.slab_evaluation_repo.create(
            SlabEvaluation(
                account_id=account_id,
                period_type=period_type,
                period_label=period_label,
                period_start=period_start,
                period_end=period_end,
                total_purchase=total_purchase,
                slab_id=slab.id if slab else None,
                points_awarded=points,
            )
        )
        return points

    async def _reload_slabs(self, period_type: PeriodType):
        # Rollback expires the loaded definitions
        return await self.slab_definition_repo.get_active_by_period_type(period_type)

    @staticmethod
    def _match_slab(slabs, total_purchase: Decimal) -> Optional[SlabDefinition]:
        for slab in sorted(slabs, key=lambda s: s.min_amount, reverse=True):
            if slab.contains(total_purchase):
                return slab
        return None
