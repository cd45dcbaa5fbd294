"""
List Point Transactions Use Case

Retrieves ledger history for an account with pagination.
"""
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.point_transaction_repository import PointTransactionRepository
from src.domain.point_pool import PointPool
from .dtos import ListPointTransactionsResponseDTO, PointTransactionDTO


class ListPointTransactions:
    """
    Use case: View point history

    Transactions are ordered by created_at DESC (most recent first) and can
    be restricted to one pool. Paging with limit/offset makes the read
    restartable from any position.
    """

    def __init__(self, transaction_repo: PointTransactionRepository):
        self.transaction_repo = transaction_repo

    async def execute(
        self,
        account_id: int,
        pool: Optional[PointPool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[ListPointTransactionsResponseDTO]:
        """
        List transactions for an account with pagination.

        Args:
            account_id: Account identifier
            pool: Optional pool filter
            limit: Maximum number of transactions to return (default 50)
            offset: Number of transactions to skip (default 0)

        Returns:
            Result[ListPointTransactionsResponseDTO]: Paginated transaction list
        """
        transactions, total = await self.transaction_repo.get_by_account_id(
            account_id=account_id,
            pool=pool,
            limit=limit,
            offset=offset,
        )

        transaction_dtos = [
            PointTransactionDTO(
                id=txn.id,
                pool=txn.pool.value,
                transaction_type=txn.transaction_type.value,
                amount=txn.amount,
                balance_after=txn.balance_after,
                source=txn.source.value,
                reference_type=txn.reference_type,
                reference_id=txn.reference_id,
                description=txn.description,
                created_by=txn.created_by,
                created_at=txn.created_at,
            )
            for txn in transactions
        ]

        return Return.ok(
            ListPointTransactionsResponseDTO(
                transactions=transaction_dtos,
                total=total,
                limit=limit,
                offset=offset,
            )
        )
