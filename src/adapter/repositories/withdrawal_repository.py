"""SQLAlchemy implementation of WithdrawalRepository

The pending -> processed transition is a guarded UPDATE so only one
concurrent processor can claim a withdrawal.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.withdrawal_repository import WithdrawalRepository
from src.domain.withdrawal import WithdrawalRequest, WithdrawalStatus


class SqlAlchemyWithdrawalRepository(WithdrawalRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, withdrawal: WithdrawalRequest) -> WithdrawalRequest:
        self.session.add(withdrawal)
        await self.session.flush()
        await self.session.refresh(withdrawal)
        return withdrawal

    async def get_by_id(self, withdrawal_id: int) -> Optional[WithdrawalRequest]:
        stmt = (
            select(WithdrawalRequest)
            .where(WithdrawalRequest.id == withdrawal_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(
        self,
        status: Optional[WithdrawalStatus] = None,
        account_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[WithdrawalRequest], int]:
        filters = []
        if status is not None:
            filters.append(WithdrawalRequest.status == status)
        if account_id is not None:
            filters.append(WithdrawalRequest.account_id == account_id)

        count_stmt = select(func.count()).select_from(WithdrawalRequest).where(*filters)
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar() or 0

        stmt = (
            select(WithdrawalRequest)
            .where(*filters)
            .order_by(WithdrawalRequest.requested_at.desc(), WithdrawalRequest.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def claim_pending(
        self,
        withdrawal_id: int,
        status: WithdrawalStatus,
        processed_by: Optional[str],
        payment_reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> bool:
        stmt = (
            update(WithdrawalRequest)
            .where(WithdrawalRequest.id == withdrawal_id)
            .where(WithdrawalRequest.status == WithdrawalStatus.PENDING)
            .values(
                status=status,
                processed_by=processed_by,
                processed_at=datetime.utcnow(),
                payment_reference=payment_reference,
                notes=notes,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
