"""ProcessWithdrawal Use Case

Admin transition of a pending withdrawal to approved, rejected or paid.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.withdrawal_repository import WithdrawalRepository
from src.domain.errors import AccountNotFoundError, InsufficientPointsError
from src.domain.point_transaction import TransactionSource
from src.domain.withdrawal import WithdrawalStatus
from .dtos import ProcessWithdrawalCommandDTO, WithdrawalDTO
from .list_withdrawals import to_withdrawal_dto

logger = logging.getLogger(__name__)

WITHDRAWAL_REFERENCE_TYPE = "withdrawal"


class ProcessWithdrawal:
    """
    Use Case: Process a withdrawal request

    Business Rules:
    1. Only PENDING requests can be processed (INVALID_WITHDRAWAL_STATE)
    2. The transition is claimed with a conditional update, so of several
       concurrent processors exactly one wins
    3. approve and paid debit the pool in the same transaction as the claim;
       reject never touches the ledger
    4. A failed debit rolls back the claim; the request stays PENDING

    Flow:
    1. Load request (WITHDRAWAL_NOT_FOUND)
    2. Claim pending -> target status
    3. Debit via the ledger when the action requires it
    4. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: PointsLedger,
        withdrawal_repo: WithdrawalRepository,
    ):
        self.uow = uow
        self.ledger = ledger
        self.withdrawal_repo = withdrawal_repo

    async def execute(self, command: ProcessWithdrawalCommandDTO) -> Result[WithdrawalDTO]:
        try:
            withdrawal = await self.withdrawal_repo.get_by_id(command.withdrawal_id)
            if not withdrawal:
                return Return.err(
                    Error(
                        code="WITHDRAWAL_NOT_FOUND",
                        message=f"Withdrawal request {command.withdrawal_id} not found",
                    )
                )

            if withdrawal.status != WithdrawalStatus.PENDING:
                return Return.err(self._invalid_state(command, withdrawal.status))

            claimed = await self.withdrawal_repo.claim_pending(
                command.withdrawal_id,
                command.action.target_status,
                processed_by=command.actor_id,
                payment_reference=command.payment_reference,
                notes=command.notes,
            )
            if not claimed:
                await self.uow.rollback()
                return Return.err(self._invalid_state(command, None))

            if command.action.debits_points:
                await self.ledger.debit(
                    withdrawal.account_id,
                    withdrawal.pool,
                    withdrawal.amount,
                    TransactionSource.WITHDRAWAL,
                    reference_id=str(withdrawal.id),
                    reference_type=WITHDRAWAL_REFERENCE_TYPE,
                    description=f"Withdrawal #{withdrawal.id} ({command.action.value})",
                    actor_id=command.actor_id,
                )

            await self.uow.commit()

            processed = await self.withdrawal_repo.get_by_id(command.withdrawal_id)

        except InsufficientPointsError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="INSUFFICIENT_POINTS",
                    message=str(e),
                    reason=f"balance={e.available}, required={e.required}",
                )
            )
        except AccountNotFoundError as e:
            await self.uow.rollback()
            return Return.err(Error(code="ACCOUNT_NOT_FOUND", message=str(e)))
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="PROCESS_WITHDRAWAL_FAILED",
                    message="Failed to process withdrawal",
                    reason=str(e),
                )
            )

        logger.info(
            f"Withdrawal {command.withdrawal_id} {command.action.target_status.value} "
            f"by {command.actor_id}"
        )
        return Return.ok(to_withdrawal_dto(processed))

    @staticmethod
    def _invalid_state(command: ProcessWithdrawalCommandDTO, status) -> Error:
        current = status.value if status else "already processed"
        return Error(
            code="INVALID_WITHDRAWAL_STATE",
            message=f"Withdrawal {command.withdrawal_id} is not pending",
            reason=f"status={current}, action={command.action.value}",
        )
