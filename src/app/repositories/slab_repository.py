"""Slab Repository Interfaces

Slab definitions (admin configuration) and slab evaluations (job
idempotency records).
"""

from abc import ABC, abstractmethod
from typing import List, Set
from src.domain.period import PeriodType
from src.domain.slab_evaluation import SlabEvaluation
from src.domain.value_slab import SlabDefinition


class SlabDefinitionRepository(ABC):

    @abstractmethod
    async def get_active_by_period_type(self, period_type: PeriodType) -> List[SlabDefinition]:
        """
        Retrieve active slabs for a period type

        Returns:
            Slabs ordered by min_amount descending (highest tier first)
        """
        pass


class SlabEvaluationRepository(ABC):

    @abstractmethod
    async def get_evaluated_account_ids(self, period_type: PeriodType, period_label: str) -> Set[int]:
        """IDs of accounts already evaluated for the period"""
        pass

    @abstractmethod
    async def create(self, evaluation: SlabEvaluation) -> SlabEvaluation:
        """
        Record an evaluation

        Raises:
            IntegrityError: If the account was already evaluated for the period
        """
        pass
