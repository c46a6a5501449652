"""Tests for StationService and StatisticsService."""

import pytest
from datetime import date
from decimal import Decimal

from chargelog.domain.entities import Specification
from chargelog.domain.errors import ValidationError


class TestStationService:
    """Tests for StationService."""

    def test_create_station(self, station_service):
        """Test creating a station entry."""
        station_service.create_station(
            vendor="Tesla", name="Taipei 101", specification=Specification.TPC, price_per_unit=Decimal("6.5")
        )
        station = station_service.list_stations()[0]

        assert station.vendor == "Tesla"
        assert station.specification is Specification.TPC
        assert station.price_per_unit == Decimal("6.5")

    def test_create_station_requires_vendor(self, station_service):
        """Test a station needs a vendor."""
        with pytest.raises(ValidationError):
            station_service.create_station(vendor="")

    def test_negative_price(self, station_service):
        """Test a negative default price is rejected."""
        with pytest.raises(ValidationError):
            station_service.create_station(vendor="Tesla", price_per_unit=Decimal("-1"))

    def test_ensure_vendor_once(self, station_service):
        """Test a vendor is registered only the first time."""
        assert station_service.ensure_vendor("EVOASIS", "Neihu") is not None
        assert station_service.ensure_vendor("EVOASIS", "Songshan") is None
        assert station_service.ensure_vendor("") is None

        assert station_service.list_vendors() == ["EVOASIS"]

    def test_list_vendors_sorted_and_distinct(self, station_service):
        """Test vendors are listed once each, sorted."""
        station_service.create_station(vendor="Yes!")
        station_service.create_station(vendor="Tesla", name="A")
        station_service.create_station(vendor="Tesla", name="B")

        assert station_service.list_vendors() == ["Tesla", "Yes!"]


class TestStatisticsService:
    """Tests for StatisticsService."""

    def test_monthly_stats(self, statistics_service, sample_records):
        """Test March totals include parking fees."""
        stats = statistics_service.monthly_stats("2024-03")

        assert stats.charging_count == 2
        assert stats.total_cost == Decimal("287.50")
        assert stats.total_power == Decimal("35")
        assert stats.average_price == Decimal("8.214")

    def test_lifetime_stats(self, statistics_service, sample_records):
        """Test lifetime totals cover every record."""
        stats = statistics_service.lifetime_stats()

        assert stats.charging_count == 3
        assert stats.total_cost == Decimal("337.50")
        assert stats.average_price == Decimal("7.500")

    def test_total_power_is_not_rounded(self, statistics_service, charging_service, input_factory):
        """Test power totals add the stored values exactly."""
        charging_service.create_record(input_factory(power=Decimal("2.0004")))
        charging_service.create_record(input_factory(power=Decimal("1.0003")))

        stats = statistics_service.monthly_stats("2024-03")

        assert stats.total_power == Decimal("3.0007")

    def test_empty_month(self, statistics_service, sample_records):
        """Test a month without records gives zeros."""
        stats = statistics_service.monthly_stats("2023-12")

        assert stats.charging_count == 0
        assert stats.total_cost == 0
        assert stats.average_price == 0

    def test_stats_follow_mutations(self, statistics_service, charging_service, sample_records):
        """Test statistics reflect a delete immediately."""
        charging_service.delete_record(sample_records[1].id)

        stats = statistics_service.monthly_stats("2024-03")
        assert stats.charging_count == 1
        assert stats.total_cost == Decimal("97.50")

    def test_monthly_report(self, statistics_service, sample_records):
        """Test the report carries every breakdown."""
        report = statistics_service.monthly_report("2024/3")

        assert report.month == "2024-03"
        assert [d.day for d in report.daily_totals] == [date(2024, 3, 1), date(2024, 3, 31)]
        assert {b.label: b.count for b in report.duration_buckets}["1-2 h"] == 2
        assert report.top_stations[0].count == 1

    def test_vehicle_filter(self, statistics_service, vehicle_service, sample_records):
        """Test statistics for a vehicle without records."""
        other_id = vehicle_service.create_vehicle(name="Leaf")

        assert statistics_service.lifetime_stats(vehicle_id=other_id).charging_count == 0

    def test_invalid_month(self, statistics_service):
        """Test a malformed month is rejected."""
        with pytest.raises(ValueError):
            statistics_service.monthly_stats("March")
