"""
Property-based tests using Hypothesis.

These tests generate many sessions and record sets to check the invariants
of the derivation and aggregation engines.
"""

from datetime import date, time
from decimal import Decimal

from hypothesis import given, strategies as st

from chargelog.domain.aggregation import aggregate
from chargelog.domain.derivation import compute_duration, compute_fee
from chargelog.utils.amount_parser import round2, round3

times = st.times().map(lambda t: t.replace(second=0, microsecond=0))
amounts = st.decimals(min_value=0, max_value=10_000, places=2, allow_nan=False)
records = st.fixed_dictionaries(
    {
        "date": st.dates(min_value=date(2023, 1, 1), max_value=date(2025, 12, 31)),
        "charging_fee": amounts,
        "parking_fee": st.one_of(st.none(), amounts),
        "power": st.decimals(min_value=0, max_value=200, places=3, allow_nan=False),
    }
)


class TestDurationProperties:
    """Property-based tests for compute_duration."""

    @given(times, times)
    def test_duration_in_range(self, start, end):
        """
        Property: Duration is never negative and always under a full day.
        """
        minutes = compute_duration(start, end)
        assert 0 <= minutes < 24 * 60

    @given(times)
    def test_equal_times_are_zero(self, moment):
        """
        Property: Equal start and end times give 0 minutes.
        """
        assert compute_duration(moment, moment) == 0

    @given(times, times)
    def test_duration_wraps_the_clock(self, start, end):
        """
        Property: Going start->end and end->start covers exactly one day
        (unless the times are equal).
        """
        forward = compute_duration(start, end)
        backward = compute_duration(end, start)
        if start == end:
            assert forward == backward == 0
        else:
            assert forward + backward == 24 * 60


class TestFeeProperties:
    """Property-based tests for compute_fee."""

    @given(
        st.decimals(min_value=Decimal("0.001"), max_value=500, places=3),
        st.decimals(min_value=Decimal("0.01"), max_value=50, places=2),
        st.integers(min_value=1, max_value=600),
        st.decimals(min_value=Decimal("0.01"), max_value=20, places=2),
    )
    def test_per_unit_basis_wins(self, power, price, duration, per_minute):
        """
        Property: With a per-unit basis, the per-minute price never matters.
        """
        assert compute_fee(power, price, duration, per_minute) == round2(power * price)

    @given(
        st.integers(min_value=1, max_value=600),
        st.decimals(min_value=Decimal("0.01"), max_value=20, places=2),
    )
    def test_fee_has_two_decimals(self, duration, per_minute):
        """
        Property: Derived fees are quantized to cents.
        """
        fee = compute_fee(None, None, duration, per_minute)
        assert fee == fee.quantize(Decimal("0.01"))
        assert fee >= 0


class TestAggregationProperties:
    """Property-based tests for aggregate."""

    @given(st.lists(records, max_size=30))
    def test_months_partition_the_total(self, rows):
        """
        Property: Per-month counts add up to the lifetime count.
        """
        months = {row["date"].strftime("%Y-%m") for row in rows}
        per_month = sum(aggregate(rows, month).charging_count for month in months)
        assert per_month == aggregate(rows).charging_count == len(rows)

    @given(st.lists(records, max_size=30))
    def test_idempotent(self, rows):
        """
        Property: Aggregating twice yields identical results.
        """
        assert aggregate(rows) == aggregate(rows)

    @given(st.lists(records, max_size=30))
    def test_average_price_consistent(self, rows):
        """
        Property: Average price is zero exactly when no power was charged.
        """
        stats = aggregate(rows)
        if stats.total_power > 0:
            assert stats.average_price == round3(stats.total_cost / stats.total_power)
        else:
            assert stats.average_price == 0
