"""RequestWithdrawal Use Case

Creates a pending withdrawal request. Points move only when an admin
approves or pays the request.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.withdrawal_repository import WithdrawalRepository
from src.domain.withdrawal import WithdrawalRequest
from .dtos import RequestWithdrawalCommandDTO, WithdrawalDTO
from .list_withdrawals import to_withdrawal_dto

logger = logging.getLogger(__name__)


class RequestWithdrawal:
    """
    Use Case: Request a withdrawal

    Business Rules:
    1. Amount must be positive (validated by the command DTO)
    2. The pool balance must cover the amount at request time (advisory only;
       the debit on approval re-checks under lock)
    3. The request starts PENDING
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        withdrawal_repo: WithdrawalRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.withdrawal_repo = withdrawal_repo

    async def execute(self, command: RequestWithdrawalCommandDTO) -> Result[WithdrawalDTO]:
        try:
            account = await self.account_repo.get_by_id(command.account_id)
            if not account:
                return Return.err(
                    Error(
                        code="ACCOUNT_NOT_FOUND",
                        message=f"No loyalty account found with id {command.account_id}",
                    )
                )

            available = account.balance_for(command.pool)
            if available < command.amount:
                return Return.err(
                    Error(
                        code="INSUFFICIENT_POINTS",
                        message=(
                            f"Insufficient {command.pool.value} points. "
                            f"Available: {available}, Required: {command.amount}"
                        ),
                        reason=f"balance={available}, required={command.amount}",
                    )
                )

            withdrawal = await self.withdrawal_repo.create(
                WithdrawalRequest(
                    account_id=command.account_id,
                    pool=command.pool,
                    amount=command.amount,
                )
            )
            await self.uow.commit()

            logger.info(
                f"Withdrawal {withdrawal.id} requested: account {command.account_id}, "
                f"{command.amount} {command.pool.value} points"
            )
            return Return.ok(to_withdrawal_dto(withdrawal))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="REQUEST_WITHDRAWAL_FAILED",
                    message="Failed to create withdrawal request",
                    reason=str(e),
                )
            )
