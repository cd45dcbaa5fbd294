"""Data Transfer Objects for Points Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.period import PeriodType
from src.domain.point_pool import PointPool
from src.domain.processed_invoice import BillingType
from src.domain.withdrawal import WithdrawalAction


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------

class BalanceResponseDTO(BaseModel):
    """
    Response DTO for get balance operation

    Returned by GetBalance and AdjustPoints.
    """

    account_id: int = Field(..., description="Account identifier")
    regular: Decimal = Field(..., description="Current regular pool balance")
    annual: Decimal = Field(..., description="Current annual pool balance")
    total_earned_regular: Decimal = Field(...)
    total_earned_annual: Decimal = Field(...)
    total_redeemed_regular: Decimal = Field(...)
    total_redeemed_annual: Decimal = Field(...)
    last_updated: datetime = Field(..., description="Timestamp of last balance update")

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": 7,
                "regular": "110.00",
                "annual": "42.50",
                "total_earned_regular": "160.00",
                "total_earned_annual": "42.50",
                "total_redeemed_regular": "50.00",
                "total_redeemed_annual": "0.00",
                "last_updated": "2024-01-01T00:00:00Z"
            }
        }


class PointTransactionDTO(BaseModel):
    """Single ledger entry for history listing"""

    id: int
    pool: str
    transaction_type: str
    amount: Decimal
    balance_after: Decimal
    source: str
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime


class ListPointTransactionsResponseDTO(BaseModel):
    """Paginated ledger history, newest first"""

    transactions: List[PointTransactionDTO]
    total: int
    limit: int
    offset: int


class AdjustPointsCommandDTO(BaseModel):
    """
    Command DTO for manual admin adjustment

    Positive amounts credit the pool, negative amounts debit it.
    """

    account_id: int = Field(..., description="Account identifier")
    pool: PointPool = Field(..., description="Pool to adjust")
    amount: Decimal = Field(..., description="Signed adjustment (must be non-zero)")
    description: Optional[str] = Field(default=None)
    actor_id: Optional[str] = Field(default=None, description="Admin performing the adjustment")


class AwardAttendanceCommandDTO(BaseModel):
    """Command DTO for the attendance subsystem's fixed award"""

    account_id: int = Field(..., description="Account identifier")
    attendance_record_id: str = Field(..., min_length=1, description="Attendance record (idempotency key)")
    amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Points to award (None = configured default)"
    )


class AttendanceAwardResponseDTO(BaseModel):
    account_id: int
    attendance_record_id: str
    points_awarded: Decimal
    already_awarded: bool = False


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------

class InvoiceLineItemDTO(BaseModel):
    """One finalized invoice line as supplied by the invoicing integration"""

    item_id: str = Field(..., description="Catalog item id")
    quantity: Decimal = Field(default=Decimal("0"), description="Units sold")
    line_revenue: Decimal = Field(default=Decimal("0"), description="Line item total")


class InvoiceDTO(BaseModel):
    """Finalized invoice as supplied by the invoicing integration"""

    external_id: str = Field(..., min_length=1, description="Invoice id in the invoicing system")
    number: Optional[str] = Field(default=None, description="Human-readable invoice number")
    invoice_date: Optional[date] = Field(default=None, description="Invoice date")
    total: Decimal = Field(default=Decimal("0"), description="Invoice grand total")
    line_items: List[InvoiceLineItemDTO] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "external_id": "4611483000001234567",
                "number": "INV-000123",
                "invoice_date": "2024-03-14",
                "total": "1180.00",
                "line_items": [
                    {"item_id": "4611483000000098765", "quantity": "5", "line_revenue": "1000.00"}
                ]
            }
        }


class ProcessInvoiceCommandDTO(BaseModel):
    """Command DTO for ProcessInvoice"""

    account_id: int = Field(..., description="Account credited for the invoice")
    invoice: InvoiceDTO
    billing_type: BillingType = Field(..., description="self or customer billing")
    actor_id: Optional[str] = Field(default=None, description="User who submitted the invoice")


class ProcessInvoiceResponseDTO(BaseModel):
    """
    Response DTO for ProcessInvoice

    already_processed=True means the invoice was awarded earlier and nothing changed.
    """

    external_invoice_id: str
    already_processed: bool = False
    regular_points: Decimal = Decimal("0")
    annual_points: Decimal = Decimal("0")
    referral_points: Decimal = Decimal("0")
    referrer_account_id: Optional[int] = None


class ProcessedInvoiceDTO(BaseModel):
    id: int
    external_invoice_id: str
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    invoice_total: Decimal
    billing_type: str
    regular_points: Decimal
    annual_points: Decimal
    referral_points: Decimal
    processed_at: datetime


class ListProcessedInvoicesResponseDTO(BaseModel):
    invoices: List[ProcessedInvoiceDTO]
    total: int
    limit: int
    offset: int


# ---------------------------------------------------------------------------
# Batch jobs
# ---------------------------------------------------------------------------

class SlabEvaluationResultDTO(BaseModel):
    """Summary of one slab evaluation run"""

    period_type: PeriodType
    period_label: str
    period_start: date
    period_end: date
    evaluated: int = Field(..., description="Accounts evaluated in this run")
    awarded: int = Field(..., description="Accounts that received a bonus")
    skipped: int = Field(default=0, description="Accounts already evaluated for the period")
    failed: int = Field(default=0, description="Accounts whose evaluation errored")
    total_points_awarded: Decimal = Decimal("0")
    execution_time_ms: int = 0


class CreditSweepResultDTO(BaseModel):
    """Summary of one credit overdue sweep"""

    checked: int = Field(..., description="Accounts with outstanding credit")
    processed: int = Field(..., description="Accounts past the threshold (auto-debit attempted)")
    total_debited: Decimal = Decimal("0")
    failed: int = 0
    threshold_days: int
    as_of: date
    execution_time_ms: int = 0


class LedgerDiscrepancyDTO(BaseModel):
    """Account pool whose cached balance differs from its transaction sum"""

    account_id: int
    pool: PointPool
    cached_balance: Decimal
    calculated_balance: Decimal
    discrepancy: Decimal


class ReconciliationResultDTO(BaseModel):
    total_accounts_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int


# ---------------------------------------------------------------------------
# Withdrawals
# ---------------------------------------------------------------------------

class RequestWithdrawalCommandDTO(BaseModel):
    account_id: int = Field(..., description="Account identifier")
    pool: PointPool = Field(..., description="Pool to withdraw from")
    amount: Decimal = Field(..., gt=0, description="Points to withdraw (must be > 0)")


class ProcessWithdrawalCommandDTO(BaseModel):
    withdrawal_id: int
    action: WithdrawalAction = Field(..., description="approve, reject or paid")
    actor_id: Optional[str] = Field(default=None, description="Admin processing the request")
    payment_reference: Optional[str] = None
    notes: Optional[str] = None


class WithdrawalDTO(BaseModel):
    id: int
    account_id: int
    pool: str
    amount: Decimal
    status: str
    requested_at: datetime
    processed_by: Optional[str] = None
    processed_at: Optional[datetime] = None
    payment_reference: Optional[str] = None
    notes: Optional[str] = None


class ListWithdrawalsResponseDTO(BaseModel):
    withdrawals: List[WithdrawalDTO]
    total: int
    limit: int
    offset: int
