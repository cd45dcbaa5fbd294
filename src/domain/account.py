"""Loyalty Account Domain Entity

One account per participant. Holds the cached balance of both point pools,
lifetime counters and the credit settings read by the overdue sweep.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Boolean, Date, Integer, Numeric, String
from src.domain.base import BaseModel, BigIntId
from src.domain.point_pool import PointPool


class AccountStatus(str, Enum):
    """Account status types"""
    ACTIVE = "active"
    INACTIVE = "inactive"


class Account(BaseModel, table=True):
    """
    Account - Participant point balances and credit settings

    Domain Rules:
    - Pool balances are never negative
    - Balances change only through PointTransactions written by the ledger
    - Lifetime earned/redeemed counters only grow
    - Accounts are never deleted, only deactivated
    - credit_* fields are owned by the external admin flow; the overdue
      sweep reads them and only ever lowers credit_used
    """

    __tablename__ = "loyalty_accounts"
    __table_args__ = (
        CheckConstraint('regular_points >= 0', name='regular_points_non_negative'),
        CheckConstraint('annual_points >= 0', name='annual_points_non_negative'),
        CheckConstraint('credit_used >= 0', name='credit_used_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
        description="Unique account identifier (auto-increment)"
    )

    display_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Participant display name"
    )

    status: AccountStatus = Field(
        default=AccountStatus.ACTIVE,
        description="Account status (active, inactive)"
    )

    regular_points: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
        description="Cached regular pool balance"
    )

    annual_points: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
        description="Cached annual pool balance"
    )

    total_earned_regular: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    total_earned_annual: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    total_redeemed_regular: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    total_redeemed_annual: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    credit_enabled: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
        description="Whether self-billing on credit is allowed"
    )

    credit_limit: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    credit_used: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
        description="Outstanding self-billed credit"
    )

    credit_overdue_days: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Age in days of the oldest unsettled self-billed invoice (last sweep)"
    )

    credit_settled_on: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Self-billed invoices dated on or before this day count as settled"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last balance or settings update timestamp"
    )

    def balance_for(self, pool: PointPool) -> Decimal:
        if pool == PointPool.REGULAR:
            return Decimal(self.regular_points)
        return Decimal(self.annual_points)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "display_name": "Ravi Kumar",
                "status": "active",
                "regular_points": "120.00",
                "annual_points": "45.50",
                "credit_enabled": True,
                "credit_limit": "5000.00",
                "credit_used": "0.00",
                "credit_overdue_days": 0,
            }
        }
