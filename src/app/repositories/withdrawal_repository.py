"""Withdrawal Repository Interface

Defines the contract for withdrawal request persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from src.domain.withdrawal import WithdrawalRequest, WithdrawalStatus


class WithdrawalRepository(ABC):

    @abstractmethod
    async def create(self, withdrawal: WithdrawalRequest) -> WithdrawalRequest:
        pass

    @abstractmethod
    async def get_by_id(self, withdrawal_id: int) -> Optional[WithdrawalRequest]:
        pass

    @abstractmethod
    async def list(
        self,
        status: Optional[WithdrawalStatus] = None,
        account_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[WithdrawalRequest], int]:
        """Page of withdrawals, newest request first, with total count"""
        pass

    @abstractmethod
    async def claim_pending(
        self,
        withdrawal_id: int,
        status: WithdrawalStatus,
        processed_by: Optional[str],
        payment_reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """
        Move a withdrawal out of PENDING

        Conditional update (WHERE status = 'pending'): of several concurrent
        callers exactly one sees True; the rest see False.

        Args:
            withdrawal_id: Withdrawal ID
            status: Target status
            processed_by: Acting admin
            payment_reference: Optional payment reference
            notes: Optional notes

        Returns:
            True if this call performed the transition
        """
        pass
