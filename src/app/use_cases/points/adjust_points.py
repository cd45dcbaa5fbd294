"""AdjustPoints Use Case

Manual admin correction of a pool balance through the ledger.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.domain.errors import AccountNotFoundError, InsufficientPointsError
from src.domain.point_transaction import TransactionSource
from .dtos import AdjustPointsCommandDTO, BalanceResponseDTO
from .get_balance import to_balance_dto

logger = logging.getLogger(__name__)


class AdjustPoints:
    """
    Use Case: Admin point adjustment

    Business Rules:
    1. Positive amount credits the pool, negative amount debits it
    2. Zero is rejected (INVALID_ADJUSTMENT)
    3. A debit never drives the pool negative (INSUFFICIENT_POINTS)
    """

    def __init__(self, uow: UnitOfWork, ledger: PointsLedger, account_repo: AccountRepository):
        self.uow = uow
        self.ledger = ledger
        self.account_repo = account_repo

    async def execute(self, command: AdjustPointsCommandDTO) -> Result[BalanceResponseDTO]:
        if command.amount == 0:
            return Return.err(
                Error(
                    code="INVALID_ADJUSTMENT",
                    message="Adjustment amount must be non-zero",
                )
            )

        description = command.description or "Admin adjustment"

        try:
            if command.amount > 0:
                await self.ledger.credit(
                    command.account_id, command.pool, command.amount,
                    TransactionSource.ADMIN_ADJUSTMENT,
                    description=description, actor_id=command.actor_id,
                )
            else:
                await self.ledger.debit(
                    command.account_id, command.pool, -command.amount,
                    TransactionSource.ADMIN_ADJUSTMENT,
                    description=description, actor_id=command.actor_id,
                )

            account = await self.account_repo.get_by_id(command.account_id)
            await self.uow.commit()

        except AccountNotFoundError as e:
            await self.uow.rollback()
            return Return.err(Error(code="ACCOUNT_NOT_FOUND", message=str(e)))
        except InsufficientPointsError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="INSUFFICIENT_POINTS",
                    message=str(e),
                    reason=f"balance={e.available}, required={e.required}",
                )
            )
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="ADJUST_POINTS_FAILED",
                    message="Failed to adjust points",
                    reason=str(e),
                )
            )

        logger.info(
            f"Admin {command.actor_id} adjusted {command.pool.value} points of "
            f"account {command.account_id} by {command.amount}"
        )
        return Return.ok(to_balance_dto(account))
