"""Tests for profit and payout arithmetic."""

import pytest
from decimal import ROUND_DOWN, ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal

from settlement.models import Outcome
from settlement.payout import (
    net_result,
    payout,
    potential_payout,
    profit,
    round_money,
    to_money,
)


class TestProfit:

    def test_basic(self):
        assert profit(10000, 85) == Decimal("8500")

    def test_decimal_inputs(self):
        assert profit(Decimal("25000"), Decimal("80")) == Decimal("20000")

    def test_rounds_half_up_to_whole_rupiah(self):
        # 10001 * 85 / 100 = 8500.85
        assert profit(10001, 85) == Decimal("8501")
        # 10010 * 85 / 100 = 8508.5
        assert profit(10010, 85) == Decimal("8509")

    def test_fractional_rate(self):
        # 10000 * 82.5 / 100 = 8250
        assert profit(10000, Decimal("82.5")) == Decimal("8250")


class TestPayout:

    def test_won(self):
        assert payout(10000, 85, Outcome.WON) == 18500

    def test_lost(self):
        assert payout(10000, 85, Outcome.LOST) == 0

    def test_pending_raises(self):
        with pytest.raises(ValueError, match="PENDING"):
            payout(10000, 85, Outcome.PENDING)

    def test_rounds_once_at_the_end(self):
        # 10010 + 8508.5 = 18518.5 → 18519
        assert payout(10010, 85, Outcome.WON) == Decimal("18519")

    def test_custom_quantum_and_rounding(self):
        result = payout(
            Decimal("10.05"), 85, Outcome.WON,
            quantum=Decimal("0.01"), rounding=ROUND_HALF_EVEN,
        )
        # 10.05 + 8.5425 = 18.5925 → 18.59
        assert result == Decimal("18.59")

    def test_float_inputs_go_through_str(self):
        assert payout(10000.0, 85.0, Outcome.WON) == Decimal("18500")

    def test_potential_payout(self):
        assert potential_payout(50000, 80) == Decimal("90000")


class TestMoneyHelpers:

    def test_to_money(self):
        assert to_money(0.1) == Decimal("0.1")
        assert to_money("5") == Decimal("5")
        assert to_money(3) == Decimal("3")

    def test_round_money(self):
        assert round_money(Decimal("2.5")) == Decimal("3")
        assert round_money(Decimal("-2.5")) == Decimal("-3")

    @pytest.mark.parametrize("amount, quantum, rounding, expected", [
        ("18500", "1000", ROUND_HALF_UP, "19000"),
        ("18500", "1000", ROUND_DOWN, "18000"),
        ("18240", "500", ROUND_HALF_UP, "18000"),
        ("18250", "500", ROUND_HALF_UP, "18500"),
        ("12.34", "0.05", ROUND_HALF_UP, "12.35"),
        ("12.32", "0.05", ROUND_HALF_UP, "12.30"),
    ])
    def test_round_money_to_multiple_of_quantum(self, amount, quantum, rounding, expected):
        result = round_money(Decimal(amount), Decimal(quantum), rounding)
        assert result == Decimal(expected)
        assert result % Decimal(quantum) == 0

    def test_payout_with_coarse_quantum(self):
        assert payout(10000, 85, Outcome.WON, quantum=Decimal("1000"), rounding=ROUND_DOWN) == 18000

    def test_net_result(self):
        assert net_result(10000, Decimal("18500")) == Decimal("8500")
        assert net_result(10000, Decimal("0")) == Decimal("-10000")
