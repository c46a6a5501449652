"""Tests for date, month, time and amount parsing."""

import pytest
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from chargelog.utils.amount_parser import parse_amount, parse_optional_amount, round2, round3, to_decimal
from chargelog.utils.date_parser import current_month, month_bounds, month_key, parse_date, parse_month
from chargelog.utils.time_parser import anchor_times, format_time, parse_optional_time, parse_time


class TestParseDate:
    """Tests for parse_date."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2024-03-15", date(2024, 3, 15)),
            ("2024/03/15", date(2024, 3, 15)),
            ("March 15, 2024", date(2024, 3, 15)),
        ],
    )
    def test_absolute(self, text, expected):
        """Test absolute date formats."""
        assert parse_date(text) == expected

    def test_relative(self):
        """Test relative dates."""
        assert parse_date("today") == date.today()
        assert parse_date("Yesterday") == date.today() - timedelta(days=1)

    def test_invalid(self):
        """Test unparseable input."""
        with pytest.raises(ValueError, match="Could not parse date"):
            parse_date("someday")


class TestMonths:
    """Tests for month helpers."""

    @pytest.mark.parametrize("text", ["2024-03", "2024/3", " 2024-3 "])
    def test_parse_month(self, text):
        """Test month formats normalize to YYYY-MM."""
        assert parse_month(text) == "2024-03"

    def test_relative_months(self):
        """Test this month and last month."""
        assert parse_month("this month") == current_month()
        assert parse_month("last month") < current_month()

    @pytest.mark.parametrize("text", ["2024-13", "March", "2024"])
    def test_invalid_month(self, text):
        """Test malformed months are rejected."""
        with pytest.raises(ValueError):
            parse_month(text)

    def test_current_month(self):
        """Test current_month formatting."""
        assert current_month(date(2024, 1, 31)) == "2024-01"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (date(2024, 3, 1), "2024-03"),
            (datetime(2024, 12, 31, 23, 59), "2024-12"),
            ("2024-3-05", "2024-03"),
            ("2024/11/2", "2024-11"),
            ("", None),
            (None, None),
            ("garbage", None),
        ],
    )
    def test_month_key(self, value, expected):
        """Test record dates of any shape map to their month."""
        assert month_key(value) == expected

    @pytest.mark.parametrize(
        "month,expected",
        [
            ("2024-02", (date(2024, 2, 1), date(2024, 2, 29))),
            ("2023-02", (date(2023, 2, 1), date(2023, 2, 28))),
            ("2024-12", (date(2024, 12, 1), date(2024, 12, 31))),
        ],
    )
    def test_month_bounds(self, month, expected):
        """Test first and last day of a month."""
        assert month_bounds(month) == expected


class TestTimes:
    """Tests for time helpers."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("22:00", time(22, 0)),
            ("7:05", time(7, 5)),
            ("23:59:30", time(23, 59, 30)),
            ("2024-03-15T08:30:00", time(8, 30)),
            ("2024-03-15T08:30:00+08:00", time(8, 30)),
        ],
    )
    def test_parse_time(self, text, expected):
        """Test clock and ISO timestamp input."""
        assert parse_time(text) == expected

    @pytest.mark.parametrize("text", ["", "25:00", "noon"])
    def test_invalid_time(self, text):
        """Test malformed times are rejected."""
        with pytest.raises(ValueError):
            parse_time(text)

    def test_optional_time(self):
        """Test empty input gives None."""
        assert parse_optional_time("  ") is None
        assert parse_optional_time("10:00") == time(10, 0)

    def test_format_time(self):
        """Test HH:MM formatting."""
        assert format_time(time(7, 5, 59)) == "07:05"
        assert format_time(None) == ""

    def test_anchor_same_day(self):
        """Test ordered times stay on the record date."""
        start, end = anchor_times(date(2024, 3, 1), time(22, 0), time(23, 30))

        assert start == datetime(2024, 3, 1, 22, 0)
        assert end == datetime(2024, 3, 1, 23, 30)

    def test_anchor_crosses_midnight(self):
        """Test an earlier end time moves to the next day."""
        start, end = anchor_times(date(2024, 3, 31), time(23, 50), time(0, 10))

        assert start == datetime(2024, 3, 31, 23, 50)
        assert end == datetime(2024, 4, 1, 0, 10)

    def test_anchor_missing_times(self):
        """Test missing times stay missing."""
        assert anchor_times(date(2024, 3, 1), None, time(1, 0)) == (None, datetime(2024, 3, 1, 1, 0))


class TestAmounts:
    """Tests for amount helpers."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("123.45", Decimal("123.45")),
            ("$1,234.56", Decimal("1234.56")),
            ("NT$300", Decimal("300")),
            ("6.5 元", Decimal("6.5")),
            ("15 kWh", Decimal("15")),
            ("(10)", Decimal("-10")),
            ("-4", Decimal("-4")),
        ],
    )
    def test_parse_amount(self, text, expected):
        """Test amount formats."""
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "NaN", "Infinity"])
    def test_invalid_amount(self, text):
        """Test malformed amounts are rejected."""
        with pytest.raises(ValueError):
            parse_amount(text)

    def test_optional_amount(self):
        """Test empty input gives None."""
        assert parse_optional_amount("") is None
        assert parse_optional_amount(None) is None
        assert parse_optional_amount("2") == Decimal("2")

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, Decimal("0")),
            ("", Decimal("0")),
            (3, Decimal("3")),
            (2.5, Decimal("2.5")),
            ("1,000", Decimal("1000")),
            ("n/a", Decimal("0")),
        ],
    )
    def test_to_decimal(self, value, expected):
        """Test stored values coerce to Decimal."""
        assert to_decimal(value) == expected

    def test_rounding_is_half_up(self):
        """Test halves round away from zero."""
        assert round2(Decimal("2.345")) == Decimal("2.35")
        assert round2(Decimal("-2.345")) == Decimal("-2.35")
        assert round3(Decimal("8.2145")) == Decimal("8.215")
