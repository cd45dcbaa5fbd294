"""SQLAlchemy implementation of AccountRepository

Provides persistence for Account entities with pessimistic locking support
to prevent race conditions during concurrent point mutations.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.account_repository import AccountRepository
from src.domain.account import Account, AccountStatus
from src.domain.point_pool import PointPool


class SqlAlchemyAccountRepository(AccountRepository):
    """
    SQLAlchemy implementation of AccountRepository

    Features:
    - Pessimistic locking via a row write plus SELECT FOR UPDATE (also serializes SQLite)
    - Locked reads refresh the identity map so a stale in-session copy is never used
    - Atomic balance and lifetime counter updates
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, account_id: int, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve account by ID with optional row-level locking

        Args:
            account_id: Account ID
            for_update: If True, locks the row until commit (prevents concurrent modifications)

        Returns:
            Account if found, None otherwise
        """
        stmt = select(Account).where(Account.id == account_id)

        if for_update:
            # SQLite ignores FOR UPDATE; writing the row takes its database write lock
            await self.session.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(updated_at=datetime.utcnow())
                .execution_options(synchronize_session=False)
            )
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[Account]:
        result = await self.session.execute(select(Account).order_by(Account.id))
        return list(result.scalars().all())

    async def get_active(self) -> List[Account]:
        stmt = (
            select(Account)
            .where(Account.status == AccountStatus.ACTIVE)
            .order_by(Account.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_with_outstanding_credit(self) -> List[Account]:
        stmt = (
            select(Account)
            .where(Account.credit_enabled == True)  # noqa: E712
            .where(Account.credit_used > 0)
            .order_by(Account.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_pool_balance(
        self,
        account: Account,
        pool: PointPool,
        new_balance: Decimal,
        earned: Decimal = Decimal("0"),
        redeemed: Decimal = Decimal("0"),
    ) -> None:
        """
        Update pool balance, lifetime counters and updated_at timestamp

        Note:
            Should be called within a transaction with the account already locked
        """
        if pool == PointPool.REGULAR:
            account.regular_points = new_balance
            account.total_earned_regular = Decimal(account.total_earned_regular) + earned
            account.total_redeemed_regular = Decimal(account.total_redeemed_regular) + redeemed
        else:
            account.annual_points = new_balance
            account.total_earned_annual = Decimal(account.total_earned_annual) + earned
            account.total_redeemed_annual = Decimal(account.total_redeemed_annual) + redeemed

        account.updated_at = datetime.utcnow()
        self.session.add(account)
        await self.session.flush()

    async def update(self, account: Account) -> Account:
        account.updated_at = datetime.utcnow()
        self.session.add(account)
        await self.session.flush()
        return account
