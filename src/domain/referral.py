"""Referral Relationship Domain Entity

Links a referrer to the participant they referred and tracks the referred
participant's billing so the referrer's bonus tier can grow.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, Integer, Numeric
from src.domain.base import BaseModel, BigIntId


class ReferralStatus(str, Enum):
    """Referral relationship status"""
    PENDING = "pending"
    APPROVED = "approved"
    ACTIVE = "active"  # Only active relationships earn bonuses


class ReferralRelationship(BaseModel, table=True):
    """
    Referral Relationship - referrer / referred pair

    Domain Rules:
    - Created by the registration flow (external)
    - (referrer_id, referred_id) is unique
    - total_bills, current_tier_pct and total_referral_points are updated
      only by invoice processing
    """

    __tablename__ = "referral_relationships"
    __table_args__ = (
        Index('ix_referral_relationships_pair', 'referrer_id', 'referred_id', unique=True),
        Index('ix_referral_relationships_referred', 'referred_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
    )

    referrer_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("loyalty_accounts.id"), nullable=False),
        description="Account that receives the bonus"
    )

    referred_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("loyalty_accounts.id"), nullable=False),
        description="Account whose invoices generate the bonus"
    )

    status: ReferralStatus = Field(default=ReferralStatus.PENDING)

    total_bills: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Cumulative processed invoices of the referred account"
    )

    current_tier_pct: Decimal = Field(
        default=Decimal("0.50"),
        sa_column=Column(Numeric(5, 2), nullable=False, default=Decimal("0.50")),
    )

    total_referral_points: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
        description="Total bonus paid to the referrer through this relationship"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)
