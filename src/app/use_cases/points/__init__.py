"""Points domain use cases"""
from .get_balance import GetBalance
from .list_point_transactions import ListPointTransactions
from .adjust_points import AdjustPoints
from .award_attendance_points import AwardAttendancePoints
from .process_invoice import ProcessInvoice
from .list_processed_invoices import ListProcessedInvoices
from .evaluate_slabs import EvaluateSlabs
from .sweep_overdue_credit import SweepOverdueCredit
from .request_withdrawal import RequestWithdrawal
from .process_withdrawal import ProcessWithdrawal
from .list_withdrawals import ListWithdrawals
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    BalanceResponseDTO,
    PointTransactionDTO,
    ListPointTransactionsResponseDTO,
    AdjustPointsCommandDTO,
    AwardAttendanceCommandDTO,
    AttendanceAwardResponseDTO,
    InvoiceLineItemDTO,
    InvoiceDTO,
    ProcessInvoiceCommandDTO,
    ProcessInvoiceResponseDTO,
    ProcessedInvoiceDTO,
    ListProcessedInvoicesResponseDTO,
    SlabEvaluationResultDTO,
    CreditSweepResultDTO,
    LedgerDiscrepancyDTO,
    ReconciliationResultDTO,
    RequestWithdrawalCommandDTO,
    ProcessWithdrawalCommandDTO,
    WithdrawalDTO,
    ListWithdrawalsResponseDTO,
)

__all__ = [
    "GetBalance",
    "ListPointTransactions",
    "AdjustPoints",
    "AwardAttendancePoints",
    "ProcessInvoice",
    "ListProcessedInvoices",
    "EvaluateSlabs",
    "SweepOverdueCredit",
    "RequestWithdrawal",
    "ProcessWithdrawal",
    "ListWithdrawals",
    "ReconcileLedger",
    "BalanceResponseDTO",
    "PointTransactionDTO",
    "ListPointTransactionsResponseDTO",
    "AdjustPointsCommandDTO",
    "AwardAttendanceCommandDTO",
    "AttendanceAwardResponseDTO",
    "InvoiceLineItemDTO",
    "InvoiceDTO",
    "ProcessInvoiceCommandDTO",
    "ProcessInvoiceResponseDTO",
    "ProcessedInvoiceDTO",
    "ListProcessedInvoicesResponseDTO",
    "SlabEvaluationResultDTO",
    "CreditSweepResultDTO",
    "LedgerDiscrepancyDTO",
    "ReconciliationResultDTO",
    "RequestWithdrawalCommandDTO",
    "ProcessWithdrawalCommandDTO",
    "WithdrawalDTO",
    "ListWithdrawalsResponseDTO",
]
