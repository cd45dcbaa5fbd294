from .account_repository import SqlAlchemyAccountRepository
from .point_transaction_repository import SqlAlchemyPointTransactionRepository
from .referral_repository import SqlAlchemyReferralRepository
from .product_point_rate_repository import SqlAlchemyProductPointRateRepository
from .processed_invoice_repository import SqlAlchemyProcessedInvoiceRepository
from .slab_repository import SqlAlchemySlabDefinitionRepository, SqlAlchemySlabEvaluationRepository
from .withdrawal_repository import SqlAlchemyWithdrawalRepository

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyPointTransactionRepository",
    "SqlAlchemyReferralRepository",
    "SqlAlchemyProductPointRateRepository",
    "SqlAlchemyProcessedInvoiceRepository",
    "SqlAlchemySlabDefinitionRepository",
    "SqlAlchemySlabEvaluationRepository",
    "SqlAlchemyWithdrawalRepository",
]
