"""Withdrawal Request Domain Entity

Redemption requests against one point pool.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, BigIntId
from src.domain.point_pool import PointPool


class WithdrawalStatus(str, Enum):
    """Withdrawal status types"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


class WithdrawalAction(str, Enum):
    """Admin actions on a pending withdrawal"""
    APPROVE = "approve"
    REJECT = "reject"
    PAID = "paid"

    @property
    def target_status(self) -> WithdrawalStatus:
        return {
            WithdrawalAction.APPROVE: WithdrawalStatus.APPROVED,
            WithdrawalAction.REJECT: WithdrawalStatus.REJECTED,
            WithdrawalAction.PAID: WithdrawalStatus.PAID,
        }[self]

    @property
    def debits_points(self) -> bool:
        return self != WithdrawalAction.REJECT


class WithdrawalRequest(BaseModel, table=True):
    """
    Withdrawal Request - participant redemption of points

    Domain Rules:
    - Status transitions: pending -> approved | paid | rejected (exactly once)
    - Points are debited once, on the transition to approved or paid
    - Rejection never touches the ledger
    - "paid" records the claim only; no funds move here
    """

    __tablename__ = "withdrawal_requests"
    __table_args__ = (
        Index('ix_withdrawal_requests_account', 'account_id'),
        Index('ix_withdrawal_requests_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
    )

    account_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("loyalty_accounts.id"), nullable=False),
    )

    pool: PointPool = Field()

    amount: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
    )

    status: WithdrawalStatus = Field(default=WithdrawalStatus.PENDING)

    requested_at: datetime = Field(default_factory=datetime.utcnow)

    processed_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
    )

    processed_at: Optional[datetime] = Field(default=None)

    payment_reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )
