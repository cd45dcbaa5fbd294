"""Shared base for domain table models"""

from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy import BigInteger, Integer
from sqlmodel import SQLModel

# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntId = BigInteger().with_variant(Integer(), "sqlite")

POINTS_QUANTUM = Decimal("0.01")


class BaseModel(SQLModel):
    """Base class for all domain entities"""
    pass


def round_points(value) -> Decimal:
    """Round a point or money amount half-up to 2 decimal places"""
    return Decimal(str(value)).quantize(POINTS_QUANTUM, rounding=ROUND_HALF_UP)
