from .base import BaseModel, round_points
from .point_pool import PointPool
from .account import Account, AccountStatus
from .point_transaction import PointTransaction, TransactionType, TransactionSource
from .referral import ReferralRelationship, ReferralStatus
from .referral_tier import tier_percent
from .product_point_rate import ProductPointRate
from .processed_invoice import ProcessedInvoice, BillingType
from .period import PeriodType, period_bounds, previous_period_label
from .value_slab import SlabDefinition
from .slab_evaluation import SlabEvaluation
from .withdrawal import WithdrawalRequest, WithdrawalStatus, WithdrawalAction
from .errors import LoyaltyError, AccountNotFoundError, InsufficientPointsError

__all__ = [
    "BaseModel",
    "round_points",
    "PointPool",
    "Account",
    "AccountStatus",
    "PointTransaction",
    "TransactionType",
    "TransactionSource",
    "ReferralRelationship",
    "ReferralStatus",
    "tier_percent",
    "ProductPointRate",
    "ProcessedInvoice",
    "BillingType",
    "PeriodType",
    "period_bounds",
    "previous_period_label",
    "SlabDefinition",
    "SlabEvaluation",
    "WithdrawalRequest",
    "WithdrawalStatus",
    "WithdrawalAction",
    "LoyaltyError",
    "AccountNotFoundError",
    "InsufficientPointsError",
]
