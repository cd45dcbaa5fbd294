"""SQLAlchemy implementations of the slab repositories"""

from typing import List, Set
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.slab_repository import SlabDefinitionRepository, SlabEvaluationRepository
from src.domain.period import PeriodType
from src.domain.slab_evaluation import SlabEvaluation
from src.domain.value_slab import SlabDefinition


class SqlAlchemySlabDefinitionRepository(SlabDefinitionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active_by_period_type(self, period_type: PeriodType) -> List[SlabDefinition]:
        stmt = (
            select(SlabDefinition)
            .where(SlabDefinition.period_type == period_type)
            .where(SlabDefinition.is_active == True)  # noqa: E712
            .order_by(SlabDefinition.min_amount.desc(), SlabDefinition.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class SqlAlchemySlabEvaluationRepository(SlabEvaluationRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_evaluated_account_ids(self, period_type: PeriodType, period_label: str) -> Set[int]:
        stmt = (
            select(SlabEvaluation.account_id)
            .where(SlabEvaluation.period_type == period_type)
            .where(SlabEvaluation.period_label == period_label)
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def create(self, evaluation: SlabEvaluation) -> SlabEvaluation:
        self.session.add(evaluation)
        await self.session.flush()
        await self.session.refresh(evaluation)
        return evaluation
