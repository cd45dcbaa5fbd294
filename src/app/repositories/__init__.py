from .account_repository import AccountRepository
from .point_transaction_repository import PointTransactionRepository
from .referral_repository import ReferralRepository
from .product_point_rate_repository import ProductPointRateRepository
from .processed_invoice_repository import ProcessedInvoiceRepository
from .slab_repository import SlabDefinitionRepository, SlabEvaluationRepository
from .withdrawal_repository import WithdrawalRepository

__all__ = [
    "AccountRepository",
    "PointTransactionRepository",
    "ReferralRepository",
    "ProductPointRateRepository",
    "ProcessedInvoiceRepository",
    "SlabDefinitionRepository",
    "SlabEvaluationRepository",
    "WithdrawalRepository",
]
