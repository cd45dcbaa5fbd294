"""Value Slab Domain Entity

Purchase-volume tiers awarding annual bonus points per period.
Maintained by admins; read-only to the points engine.
"""

from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, Numeric, String
from src.domain.base import BaseModel, BigIntId
from src.domain.period import PeriodType


class SlabDefinition(BaseModel, table=True):
    """
    Slab Definition - bonus for a purchase range within one period type

    Domain Rules:
    - The range [min_amount, max_amount] is inclusive; max_amount None = unbounded
    - When ranges overlap the slab with the highest min_amount wins
    - Inactive slabs are ignored
    """

    __tablename__ = "value_slabs"
    __table_args__ = (
        Index('ix_value_slabs_period', 'period_type', 'is_active'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
    )

    period_type: PeriodType = Field(
        description="Period type (monthly, quarterly)"
    )

    min_amount: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
    )

    max_amount: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(14, 2), nullable=True),
    )

    bonus_points: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
    )

    label: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
    )

    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
    )

    def contains(self, amount: Decimal) -> bool:
        if amount < self.min_amount:
            return False
        return self.max_amount is None or amount <= self.max_amount
