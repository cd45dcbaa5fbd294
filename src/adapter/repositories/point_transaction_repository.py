"""SQLAlchemy implementation of PointTransactionRepository

Provides persistence for the append-only point ledger.
"""

from decimal import Decimal
from typing import List, Optional, Tuple
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.point_transaction_repository import PointTransactionRepository
from src.domain.base import round_points
from src.domain.point_pool import PointPool
from src.domain.point_transaction import PointTransaction, TransactionSource


class SqlAlchemyPointTransactionRepository(PointTransactionRepository):
    """
    SQLAlchemy implementation of PointTransactionRepository

    Features:
    - Immutable append-only transactions
    - Newest-first paginated history (created_at, then id, descending)
    - Per account/pool sums for reconciliation
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: PointTransaction) -> PointTransaction:
        """
        Append a point transaction

        Args:
            transaction: PointTransaction entity to persist

        Returns:
            Created PointTransaction with generated ID
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_account_id(
        self,
        account_id: int,
        pool: Optional[PointPool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[PointTransaction], int]:
        """
        Retrieve transactions for an account with pagination

        Args:
            account_id: Account ID
            pool: Optional pool filter
            limit: Maximum number of transactions to return
            offset: Number of transactions to skip

        Returns:
            Tuple of (list of PointTransaction, total count)
        """
        filters = [PointTransaction.account_id == account_id]
        if pool is not None:
            filters.append(PointTransaction.pool == pool)

        count_stmt = select(func.count()).select_from(PointTransaction).where(*filters)
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar() or 0

        stmt = (
            select(PointTransaction)
            .where(*filters)
            .order_by(PointTransaction.created_at.desc(), PointTransaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_sum_by_account_pool(self, account_id: int, pool: PointPool) -> Decimal:
        stmt = (
            select(func.coalesce(func.sum(PointTransaction.amount), 0))
            .where(PointTransaction.account_id == account_id)
            .where(PointTransaction.pool == pool)
        )
        result = await self.session.execute(stmt)
        return round_points(result.scalar() or 0)

    async def get_by_reference(
        self,
        account_id: int,
        source: TransactionSource,
        reference_type: str,
        reference_id: str,
    ) -> Optional[PointTransaction]:
        stmt = (
            select(PointTransaction)
            .where(PointTransaction.account_id == account_id)
            .where(PointTransaction.source == source)
            .where(PointTransaction.reference_type == reference_type)
            .where(PointTransaction.reference_id == reference_id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()
