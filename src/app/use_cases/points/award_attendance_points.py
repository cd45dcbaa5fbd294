"""AwardAttendancePoints Use Case

Fulfils the attendance subsystem's fixed point award for one attendance record.
"""

from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.point_transaction_repository import PointTransactionRepository
from src.domain.base import round_points
from src.domain.errors import AccountNotFoundError
from src.domain.point_pool import PointPool
from src.domain.point_transaction import TransactionSource
from .dtos import AwardAttendanceCommandDTO, AttendanceAwardResponseDTO

ATTENDANCE_REFERENCE_TYPE = "attendance"


class AwardAttendancePoints:
    """
    Use Case: Award attendance points

    Business Rules:
    1. Credits the regular pool (source attendance)
    2. Amount defaults to the configured attendance award
    3. One award per attendance record: a repeated call returns the earlier award
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: PointsLedger,
        transaction_repo: PointTransactionRepository,
        default_points: Decimal = Decimal("5"),
    ):
        self.uow = uow
        self.ledger = ledger
        self.transaction_repo = transaction_repo
        self.default_points = Decimal(str(default_points))

    async def execute(self, command: AwardAttendanceCommandDTO) -> Result[AttendanceAwardResponseDTO]:
        try:
            # Held until commit so duplicate triggers see the first award
            await self.ledger.lock_account(command.account_id)

            existing = await self.transaction_repo.get_by_reference(
                command.account_id,
                TransactionSource.ATTENDANCE,
                ATTENDANCE_REFERENCE_TYPE,
                command.attendance_record_id,
            )
            if existing:
                awarded = existing.amount
                await self.uow.rollback()
                return Return.ok(
                    AttendanceAwardResponseDTO(
                        account_id=command.account_id,
                        attendance_record_id=command.attendance_record_id,
                        points_awarded=awarded,
                        already_awarded=True,
                    )
                )

            points = round_points(
                command.amount if command.amount is not None else self.default_points
            )

            await self.ledger.credit(
                command.account_id,
                PointPool.REGULAR,
                points,
                TransactionSource.ATTENDANCE,
                reference_id=command.attendance_record_id,
                reference_type=ATTENDANCE_REFERENCE_TYPE,
                description="Attendance points",
            )
            await self.uow.commit()

            return Return.ok(
                AttendanceAwardResponseDTO(
                    account_id=command.account_id,
                    attendance_record_id=command.attendance_record_id,
                    points_awarded=points if points > 0 else Decimal("0.00"),
                )
            )

        except AccountNotFoundError as e:
            await self.uow.rollback()
            return Return.err(Error(code="ACCOUNT_NOT_FOUND", message=str(e)))
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="AWARD_ATTENDANCE_FAILED",
                    message="Failed to award attendance points",
                    reason=str(e),
                )
            )
