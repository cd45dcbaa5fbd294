"""Get Balance Use Case

Retrieves an account's point balances and lifetime counters.
"""

from libs.result import Result, Return, Error
from src.app.repositories.account_repository import AccountRepository
from src.app.use_cases.points.dtos import BalanceResponseDTO
from src.domain.account import Account


class GetBalance:
    """
    Get Balance Use Case

    Read-only operation that returns both pool balances plus lifetime
    earned/redeemed counters for display.
    """

    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    async def execute(self, account_id: int) -> Result[BalanceResponseDTO]:
        """
        Execute get balance operation

        Args:
            account_id: The account identifier

        Returns:
            Result[BalanceResponseDTO]: Success with balance data or error

        Errors:
            ACCOUNT_NOT_FOUND: No such account
        """
        account = await self.account_repo.get_by_id(account_id)

        if not account:
            return Return.err(
                Error(
                    code="ACCOUNT_NOT_FOUND",
                    message=f"No loyalty account found with id {account_id}",
                )
            )

        return Return.ok(to_balance_dto(account))


def to_balance_dto(account: Account) -> BalanceResponseDTO:
    return BalanceResponseDTO(
        account_id=account.id,
        regular=account.regular_points,
        annual=account.annual_points,
        total_earned_regular=account.total_earned_regular,
        total_earned_annual=account.total_earned_annual,
        total_redeemed_regular=account.total_redeemed_regular,
        total_redeemed_annual=account.total_redeemed_annual,
        last_updated=account.updated_at,
    )
