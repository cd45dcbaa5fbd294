"""Slab Evaluation Domain Entity

Idempotency record for the slab job: one row per account per period.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, BigIntId
from src.domain.period import PeriodType


class SlabEvaluation(BaseModel, table=True):
    """
    Slab Evaluation - outcome of evaluating one account for one period

    Domain Rules:
    - (account_id, period_type, period_label) is unique
    - Recorded even when no slab matched (slab_id None, points_awarded 0)
    """

    __tablename__ = "slab_evaluations"
    __table_args__ = (
        Index('ix_slab_evaluations_unique', 'account_id', 'period_type', 'period_label', unique=True),
        Index('ix_slab_evaluations_period', 'period_type', 'period_label'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
    )

    account_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("loyalty_accounts.id"), nullable=False),
    )

    period_type: PeriodType = Field()

    period_label: str = Field(
        sa_column=Column(String(20), nullable=False),
        description="YYYY-MM or YYYY-Qn"
    )

    period_start: date = Field(sa_column=Column(Date, nullable=False))

    period_end: date = Field(sa_column=Column(Date, nullable=False))

    total_purchase: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    slab_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, nullable=True),
        description="Matched slab (None when no slab matched)"
    )

    points_awarded: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    evaluated_at: datetime = Field(default_factory=datetime.utcnow)
