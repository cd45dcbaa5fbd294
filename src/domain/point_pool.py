"""Point pools

Every account holds two independent balances.
"""

from enum import Enum


class PointPool(str, Enum):
    """Point balance pools"""
    REGULAR = "regular"  # Everyday earn / redeem
    ANNUAL = "annual"    # Periodic and bonus oriented
