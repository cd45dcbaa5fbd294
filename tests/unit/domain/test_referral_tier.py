"""Unit tests for the referral tier calculator"""

import pytest
from decimal import Decimal
from src.domain.referral_tier import tier_percent, BASE_TIER_PCT


class TestTierPercent:
    """Band boundaries at 3, 5 and 10 bills"""

    @pytest.mark.parametrize(
        "bills,expected",
        [
            (0, Decimal("0.5")),
            (1, Decimal("0.5")),
            (2, Decimal("0.5")),
            (3, Decimal("1.0")),
            (4, Decimal("1.0")),
            (5, Decimal("1.5")),
            (9, Decimal("1.5")),
            (10, Decimal("2.0")),
            (250, Decimal("2.0")),
        ],
    )
    def test_bands(self, bills, expected):
        assert tier_percent(bills) == expected

    def test_base_tier_below_first_band(self):
        assert tier_percent(2) == BASE_TIER_PCT

    def test_monotonic_non_decreasing(self):
        """More bills never lower the tier"""
        tiers = [tier_percent(n) for n in range(0, 30)]
        assert tiers == sorted(tiers)
