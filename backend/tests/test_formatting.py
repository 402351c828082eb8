"""Tests for display formatting."""

import pytest
from datetime import datetime
from decimal import Decimal

from settlement.clock import PLATFORM_TZ, from_datetime
from settlement.durations import Duration
from settlement.formatting import (
    format_countdown,
    format_currency,
    format_date,
    format_duration_label,
    format_time,
    format_timestamp,
)

TS = from_datetime(datetime(2025, 6, 1, 12, 0, 45, tzinfo=PLATFORM_TZ))


class TestDurationLabel:

    @pytest.mark.parametrize("minutes, label", [
        (0.0167, "1s"),
        (0.5, "30s"),
        (1, "1m"),
        (15, "15m"),
        (60, "1h"),
        (90, "1h 30m"),
        (1.5, "1m 30s"),
    ])
    def test_from_minutes(self, minutes, label):
        assert format_duration_label(minutes) == label

    def test_from_duration(self):
        assert format_duration_label(Duration(7200)) == "2h"


class TestCountdown:

    @pytest.mark.parametrize("seconds, text", [
        (0, "0s"),
        (45, "45s"),
        (75, "1m 15s"),
        (3723, "1h 2m 3s"),
        (-5, "0s"),
    ])
    def test_format(self, seconds, text):
        assert format_countdown(seconds) == text


class TestTimestamps:

    def test_timestamp(self):
        assert format_timestamp(TS) == "2025-06-01 12:00:45"

    def test_time(self):
        assert format_time(TS) == "12:00:45"

    def test_date(self):
        assert format_date(TS) == "01/06/2025"

    def test_wib_date_rolls_over_before_utc(self):
        # 2025-05-31 20:00:00 UTC is already June 1st in WIB
        ts = from_datetime(datetime(2025, 6, 1, 3, 0, 0, tzinfo=PLATFORM_TZ))
        assert format_date(ts) == "01/06/2025"


class TestCurrency:

    @pytest.mark.parametrize("amount, text", [
        (0, "Rp 0"),
        (18500, "Rp 18.500"),
        (Decimal("10000000"), "Rp 10.000.000"),
        (Decimal("999.5"), "Rp 1.000"),
        (-10000, "-Rp 10.000"),
    ])
    def test_format(self, amount, text):
        assert format_currency(amount) == text
