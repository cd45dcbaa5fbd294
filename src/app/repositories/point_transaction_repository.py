"""Point Transaction Repository Interface

Defines the contract for point transaction persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.point_pool import PointPool
from src.domain.point_transaction import PointTransaction, TransactionSource


class PointTransactionRepository(ABC):
    """
    Repository interface for PointTransaction persistence

    Transactions are immutable and append-only for audit trail.
    """

    @abstractmethod
    async def create(self, transaction: PointTransaction) -> PointTransaction:
        """
        Append a transaction

        Args:
            transaction: PointTransaction entity to persist

        Returns:
            Created PointTransaction with generated ID
        """
        pass

    @abstractmethod
    async def get_by_account_id(
        self,
        account_id: int,
        pool: Optional[PointPool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[PointTransaction], int]:
        """
        Retrieve a page of an account's transactions, newest first

        Args:
            account_id: Account ID
            pool: Optional pool filter
            limit: Maximum number of transactions to return
            offset: Number of transactions to skip

        Returns:
            Tuple of (transactions, total matching count)
        """
        pass

    @abstractmethod
    async def get_sum_by_account_pool(self, account_id: int, pool: PointPool) -> Decimal:
        """Sum of signed amounts for one account and pool (0 when empty)"""
        pass

    @abstractmethod
    async def get_by_reference(
        self,
        account_id: int,
        source: TransactionSource,
        reference_type: str,
        reference_id: str,
    ) -> Optional[PointTransaction]:
        """Find the transaction an external event already produced, if any"""
        pass
