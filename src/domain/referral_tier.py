"""Referral tier calculator

Maps the referred account's cumulative bill count to the bonus percentage
paid to the referrer. Each band includes its lower bound.
"""

from decimal import Decimal

REFERRAL_TIERS = (
    (10, Decimal("2.0")),
    (5, Decimal("1.5")),
    (3, Decimal("1.0")),
)

BASE_TIER_PCT = Decimal("0.5")


def tier_percent(cumulative_bills: int) -> Decimal:
    """Bonus percent for a referred account with ``cumulative_bills`` processed bills"""
    for min_bills, pct in REFERRAL_TIERS:
        if cumulative_bills >= min_bills:
            return pct
    return BASE_TIER_PCT
