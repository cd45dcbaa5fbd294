"""Point Transaction Domain Entity

Immutable append-only ledger of every point mutation.
Replaying an account's transactions for one pool reproduces its cached balance.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, Numeric, String, Text
from src.domain.base import BaseModel, BigIntId
from src.domain.point_pool import PointPool


class TransactionType(str, Enum):
    """Point transaction types"""
    EARN = "earn"    # Points credited to a pool
    DEBIT = "debit"  # Points removed from a pool


class TransactionSource(str, Enum):
    """What caused a point mutation"""
    SELF_BILLING = "self_billing"
    CUSTOMER_BILLING = "customer_billing"
    REFERRAL = "referral"
    ATTENDANCE = "attendance"
    MONTHLY_SLAB = "monthly_slab"
    QUARTERLY_SLAB = "quarterly_slab"
    WITHDRAWAL = "withdrawal"
    CREDIT_DEBIT = "credit_debit"
    ADMIN_ADJUSTMENT = "admin_adjustment"


class PointTransaction(BaseModel, table=True):
    """
    Point Transaction - Immutable audit trail of point mutations

    Domain Rules:
    - Transactions are immutable (append-only)
    - amount is signed: positive for EARN, negative for DEBIT
    - balance_after is the pool balance right after this entry
    - reference_type/reference_id link the cause (e.g., "invoice", "withdrawal")
    """

    __tablename__ = "point_transactions"
    __table_args__ = (
        Index('ix_point_transactions_account_pool', 'account_id', 'pool'),
        Index('ix_point_transactions_created_at', 'created_at'),
        Index('ix_point_transactions_reference', 'reference_type', 'reference_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment)"
    )

    account_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("loyalty_accounts.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Account"
    )

    pool: PointPool = Field(
        description="Pool the entry applies to (regular, annual)"
    )

    transaction_type: TransactionType = Field(
        description="Type of transaction (earn, debit)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
        description="Signed point amount"
    )

    balance_after: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
        description="Pool balance after this entry"
    )

    source: TransactionSource = Field(
        description="What caused the mutation"
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="ID of referenced entity (e.g., external invoice id, withdrawal id)"
    )

    reference_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Type of reference (e.g., 'invoice', 'withdrawal', 'slab')"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Actor who triggered the mutation (None for batch jobs)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Transaction timestamp (immutable)"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "account_id": 7,
                "pool": "regular",
                "transaction_type": "earn",
                "amount": "10.00",
                "balance_after": "110.00",
                "source": "customer_billing",
                "reference_type": "invoice",
                "reference_id": "INV-EXT-4411",
                "description": "Invoice INV-000123",
                "created_by": "42",
                "created_at": "2024-01-01T00:00:00Z"
            }
        }
