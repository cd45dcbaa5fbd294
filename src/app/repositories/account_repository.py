"""Account Repository Interface

Defines the contract for loyalty account persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from src.domain.account import Account
from src.domain.point_pool import PointPool


class AccountRepository(ABC):
    """
    Repository interface for Account persistence

    Methods use pessimistic locking (SELECT FOR UPDATE) to ensure
    consistency during concurrent point mutations.
    """

    @abstractmethod
    async def get_by_id(self, account_id: int, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve account by ID

        Args:
            account_id: Account ID
            for_update: If True, lock the row until the unit of work ends (pessimistic lock)

        Returns:
            Account if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Account]:
        """Retrieve all accounts (reconciliation)"""
        pass

    @abstractmethod
    async def get_active(self) -> List[Account]:
        """Retrieve all active accounts (slab evaluation)"""
        pass

    @abstractmethod
    async def get_with_outstanding_credit(self) -> List[Account]:
        """Retrieve accounts with credit enabled and credit_used > 0"""
        pass

    @abstractmethod
    async def update_pool_balance(
        self,
        account: Account,
        pool: PointPool,
        new_balance: Decimal,
        earned: Decimal = Decimal("0"),
        redeemed: Decimal = Decimal("0"),
    ) -> None:
        """
        Set the cached pool balance and grow the lifetime counters

        Note:
            Should be called within a transaction with the account already locked
        """
        pass

    @abstractmethod
    async def update(self, account: Account) -> Account:
        """Persist changes to non-balance fields (credit bookkeeping)"""
        pass
