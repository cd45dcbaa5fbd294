"""Points Ledger Service

The single write path for point balances. Every credit and debit locks the
account row, appends a PointTransaction and updates the cached pool
balance. Nothing is committed here: the row lock is held until the calling
use case commits its unit of work, so mutations of the same account are
strictly serialized and a failure anywhere in the use case rolls back every
entry it wrote.
"""

import logging
from decimal import Decimal
from typing import Optional
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.point_transaction_repository import PointTransactionRepository
from src.domain.account import Account
from src.domain.base import round_points
from src.domain.errors import AccountNotFoundError, InsufficientPointsError
from src.domain.point_pool import PointPool
from src.domain.point_transaction import PointTransaction, TransactionSource, TransactionType

logger = logging.getLogger(__name__)


class PointsLedger:
    """
    Append-only point ledger with cached per-pool balances

    Business Rules:
    1. credit/debit with amount <= 0 is a no-op (callers may pass computed zero awards)
    2. A pool balance never goes negative (InsufficientPointsError)
    3. balance_after on every entry equals the cached balance after the write
    4. Lifetime earned/redeemed counters grow with every credit/debit
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        transaction_repo: PointTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def credit(
        self,
        account_id: int,
        pool: PointPool,
        amount,
        source: TransactionSource,
        reference_id: Optional[str] = None,
        reference_type: Optional[str] = None,
        description: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> Decimal:
        """
        Add points to a pool

        Returns:
            The pool balance after the credit

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        amount = round_points(amount)
        if amount <= 0:
            return await self._current_balance(account_id, pool)

        account = await self.lock_account(account_id)
        balance_before = account.balance_for(pool)
        balance_after = balance_before + amount

        await self.transaction_repo.create(
            PointTransaction(
                account_id=account_id,
                pool=pool,
                transaction_type=TransactionType.EARN,
                amount=amount,
                balance_after=balance_after,
                source=source,
                reference_id=reference_id,
                reference_type=reference_type,
                description=description,
                created_by=actor_id,
            )
        )
        await self.account_repo.update_pool_balance(account, pool, balance_after, earned=amount)

        logger.debug(
            f"Credited {amount} {pool.value} points to account {account_id} "
            f"({source.value}), balance {balance_before} -> {balance_after}"
        )
        return balance_after

    async def debit(
        self,
        account_id: int,
        pool: PointPool,
        amount,
        source: TransactionSource,
        reference_id: Optional[str] = None,
        reference_type: Optional[str] = None,
        description: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> Decimal:
        """
        Remove points from a pool

        Returns:
            The pool balance after the debit

        Raises:
            AccountNotFoundError: If the account does not exist
            InsufficientPointsError: If amount exceeds the pool balance (nothing is written)
        """
        amount = round_points(amount)
        if amount <= 0:
            return await self._current_balance(account_id, pool)

        account = await self.lock_account(account_id)
        balance_before = account.balance_for(pool)
        if balance_before < amount:
            raise InsufficientPointsError(account_id, pool, balance_before, amount)

        balance_after = balance_before - amount

        await self.transaction_repo.create(
            PointTransaction(
                account_id=account_id,
                pool=pool,
                transaction_type=TransactionType.DEBIT,
                amount=-amount,
                balance_after=balance_after,
                source=source,
                reference_id=reference_id,
                reference_type=reference_type,
                description=description,
                created_by=actor_id,
            )
        )
        await self.account_repo.update_pool_balance(account, pool, balance_after, redeemed=amount)

        logger.debug(
            f"Debited {amount} {pool.value} points from account {account_id} "
            f"({source.value}), balance {balance_before} -> {balance_after}"
        )
        return balance_after

    async def lock_account(self, account_id: int) -> Account:
        """
        Lock the account for the rest of the unit of work

        Every balance mutation goes through here. Callers that must read
        before they write (idempotency checks) take the lock first.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        account = await self.account_repo.get_by_id(account_id, for_update=True)
        if not account:
            raise AccountNotFoundError(account_id)
        return account

    async def _current_balance(self, account_id: int, pool: PointPool) -> Decimal:
        account = await self.account_repo.get_by_id(account_id)
        if not account:
            raise AccountNotFoundError(account_id)
        return account.balance_for(pool)
