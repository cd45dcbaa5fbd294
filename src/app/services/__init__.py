from .unit_of_work import UnitOfWork
from .points_ledger import PointsLedger

__all__ = [
    "UnitOfWork",
    "PointsLedger",
]
