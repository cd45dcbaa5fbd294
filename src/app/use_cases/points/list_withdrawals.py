"""
List Withdrawals Use Case

Admin and participant view of withdrawal requests.
"""
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.withdrawal_repository import WithdrawalRepository
from src.domain.withdrawal import WithdrawalRequest, WithdrawalStatus
from .dtos import ListWithdrawalsResponseDTO, WithdrawalDTO


class ListWithdrawals:
    """Newest-first page of withdrawal requests, optionally filtered by status and account"""

    def __init__(self, withdrawal_repo: WithdrawalRepository):
        self.withdrawal_repo = withdrawal_repo

    async def execute(
        self,
        status: Optional[WithdrawalStatus] = None,
        account_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[ListWithdrawalsResponseDTO]:
        withdrawals, total = await self.withdrawal_repo.list(
            status=status,
            account_id=account_id,
            limit=limit,
            offset=offset,
        )

        return Return.ok(
            ListWithdrawalsResponseDTO(
                withdrawals=[to_withdrawal_dto(w) for w in withdrawals],
                total=total,
                limit=limit,
                offset=offset,
            )
        )


def to_withdrawal_dto(withdrawal: WithdrawalRequest) -> WithdrawalDTO:
    return WithdrawalDTO(
        id=withdrawal.id,
        account_id=withdrawal.account_id,
        pool=withdrawal.pool.value,
        amount=withdrawal.amount,
        status=withdrawal.status.value,
        requested_at=withdrawal.requested_at,
        processed_by=withdrawal.processed_by,
        processed_at=withdrawal.processed_at,
        payment_reference=withdrawal.payment_reference,
        notes=withdrawal.notes,
    )
