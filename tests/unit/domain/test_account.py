"""Unit tests for Account and related domain entities"""

from decimal import Decimal
from src.domain.account import Account, AccountStatus
from src.domain.base import round_points
from src.domain.point_pool import PointPool
from src.domain.value_slab import SlabDefinition
from src.domain.period import PeriodType
from src.domain.withdrawal import WithdrawalAction, WithdrawalStatus


class TestAccount:

    def test_defaults(self):
        account = Account(display_name="Painter One")

        assert account.status == AccountStatus.ACTIVE
        assert account.regular_points == Decimal("0")
        assert account.annual_points == Decimal("0")
        assert account.credit_enabled is False
        assert account.credit_settled_on is None

    def test_balance_for_pool(self):
        account = Account(regular_points=Decimal("12.50"), annual_points=Decimal("3.00"))

        assert account.balance_for(PointPool.REGULAR) == Decimal("12.50")
        assert account.balance_for(PointPool.ANNUAL) == Decimal("3.00")


class TestRoundPoints:

    def test_rounds_half_up_to_two_places(self):
        assert round_points(Decimal("1.005")) == Decimal("1.01")
        assert round_points(Decimal("1.004")) == Decimal("1.00")
        assert round_points("2.345") == Decimal("2.35")

    def test_accepts_ints_and_floats(self):
        assert round_points(5) == Decimal("5.00")
        assert round_points(0.1) == Decimal("0.10")


class TestSlabDefinition:

    def _slab(self, min_amount, max_amount):
        return SlabDefinition(
            period_type=PeriodType.MONTHLY,
            min_amount=Decimal(min_amount),
            max_amount=Decimal(max_amount) if max_amount is not None else None,
            bonus_points=Decimal("50"),
            label="Silver",
        )

    def test_contains_is_inclusive(self):
        slab = self._slab("1000", "4999.99")

        assert slab.contains(Decimal("1000"))
        assert slab.contains(Decimal("4999.99"))
        assert not slab.contains(Decimal("999.99"))
        assert not slab.contains(Decimal("5000"))

    def test_open_ended_slab(self):
        slab = self._slab("5000", None)

        assert slab.contains(Decimal("5000"))
        assert slab.contains(Decimal("1000000"))


class TestWithdrawalAction:

    def test_target_status(self):
        assert WithdrawalAction.APPROVE.target_status == WithdrawalStatus.APPROVED
        assert WithdrawalAction.REJECT.target_status == WithdrawalStatus.REJECTED
        assert WithdrawalAction.PAID.target_status == WithdrawalStatus.PAID

    def test_only_reject_leaves_ledger_alone(self):
        assert WithdrawalAction.APPROVE.debits_points
        assert WithdrawalAction.PAID.debits_points
        assert not WithdrawalAction.REJECT.debits_points
