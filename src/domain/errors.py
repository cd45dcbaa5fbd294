"""Domain errors raised by the points ledger

Use cases catch these, roll back the unit of work and turn them into
``Error`` results.
"""

from decimal import Decimal
from src.domain.point_pool import PointPool


class LoyaltyError(Exception):
    pass


class AccountNotFoundError(LoyaltyError):
    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class InsufficientPointsError(LoyaltyError):
    def __init__(self, account_id: int, pool: PointPool, available: Decimal, required: Decimal):
        self.account_id = account_id
        self.pool = pool
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient {pool.value} points. Available: {available}, Required: {required}"
        )
