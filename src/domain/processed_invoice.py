"""Processed Invoice Domain Entity

Idempotency record for invoice point awards: one row per external invoice.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, BigIntId


class BillingType(str, Enum):
    """Who the invoice was billed to"""
    SELF = "self"          # Participant bought for themselves (may be on credit)
    CUSTOMER = "customer"  # Participant brought in a customer sale


class ProcessedInvoice(BaseModel, table=True):
    """
    Processed Invoice - points awarded for one finalized invoice

    Domain Rules:
    - external_invoice_id is unique (an invoice is awarded at most once)
    - Written in the same database transaction as the point credits
    - Never updated or deleted
    """

    __tablename__ = "processed_invoices"
    __table_args__ = (
        Index('ix_processed_invoices_account_date', 'account_id', 'invoice_date'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
    )

    account_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("loyalty_accounts.id"), nullable=False),
    )

    external_invoice_id: str = Field(
        sa_column=Column(String(100), nullable=False, unique=True, index=True),
        description="Invoice id in the invoicing system (idempotency key)"
    )

    invoice_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
    )

    invoice_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
    )

    invoice_total: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    billing_type: BillingType = Field(
        description="Billing type (self, customer)"
    )

    regular_points: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    annual_points: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    referral_points: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
        description="Bonus credited to the referrer for this invoice"
    )

    processed_at: datetime = Field(default_factory=datetime.utcnow)
