"""Charging statistics service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from chargelog.domain.aggregation import aggregate, daily_totals, duration_buckets, top_stations
from chargelog.domain.entities import ChargingStats, MonthlyReport
from chargelog.utils.date_parser import current_month, parse_month

if TYPE_CHECKING:
    from chargelog.database.base import Database


class StatisticsService:
    """Aggregates charging records read fresh from the store on every call."""

    def __init__(self, db: Database):
        """Initialize statistics service.

        Args:
            db: Database instance
        """
        self.db = db

    def monthly_stats(
        self, month: Optional[str] = None, vehicle_id: Optional[str] = None
    ) -> ChargingStats:
        """Totals for one month (the current month by default)."""
        month = parse_month(month) if month else current_month()
        return aggregate(self._records(vehicle_id), month)

    def lifetime_stats(self, vehicle_id: Optional[str] = None) -> ChargingStats:
        """Totals over every stored record."""
        return aggregate(self._records(vehicle_id))

    def monthly_report(
        self, month: Optional[str] = None, vehicle_id: Optional[str] = None
    ) -> MonthlyReport:
        """Stats plus the per-day, per-duration and per-station breakdowns of a month."""
        month = parse_month(month) if month else current_month()
        records = self._records(vehicle_id)
        return MonthlyReport(
            month=month,
            stats=aggregate(records, month),
            daily_totals=tuple(daily_totals(records, month)),
            duration_buckets=tuple(duration_buckets(records, month)),
            top_stations=tuple(top_stations(records, month)),
        )

    def _records(self, vehicle_id: Optional[str]):
        return self.db.list_charging_records(vehicle_id=vehicle_id)
