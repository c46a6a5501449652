"""Aggregation of charging records into summary statistics.

All functions are stateless folds over the records they are given. They never
mutate their input, and records may be ChargingRecord entities or plain
mappings (e.g. rows read back from an import). Missing numeric fields count
as zero.
"""

from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from chargelog.domain.entities import (
    ChargingStats,
    DailyTotal,
    DurationBucket,
    StationUsage,
)
from chargelog.utils.amount_parser import round2, round3, to_decimal
from chargelog.utils.date_parser import month_key, parse_date

# (label, inclusive upper bound in minutes); None is unbounded
DURATION_BUCKETS: tuple[tuple[str, Optional[int]], ...] = (
    ("0-30 min", 30),
    ("30-60 min", 60),
    ("1-2 h", 120),
    ("2 h+", None),
)


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        if name in record:
            return record[name]
        # Accept camelCase keys from exported/imported documents
        parts = name.split("_")
        camel = parts[0] + "".join(p.title() for p in parts[1:])
        return record.get(camel)
    return getattr(record, name, None)


def record_cost(record: Any) -> Decimal:
    """Charging fee plus parking fee of one record."""
    return to_decimal(_field(record, "charging_fee")) + to_decimal(
        _field(record, "parking_fee")
    )


def record_power(record: Any) -> Decimal:
    return to_decimal(_field(record, "power"))


def in_month(record: Any, month: Optional[str]) -> bool:
    """Whether a record falls in the month (always True without a month)."""
    if month is None:
        return True
    return month_key(_field(record, "date")) == month


def select_month(records: Iterable[Any], month: Optional[str] = None) -> list[Any]:
    """Return the records dated in month, or all records when month is None."""
    return [record for record in records if in_month(record, month)]


def aggregate(records: Iterable[Any], month: Optional[str] = None) -> ChargingStats:
    """Summarize records into total cost, total energy, count and average price.

    Args:
        records: Charging records to summarize
        month: Optional "YYYY-MM" filter; all records when None

    Returns:
        ChargingStats. All four fields are 0 for an empty selection.
    """
    selected = select_month(records, month)

    total_cost = round2(sum((record_cost(r) for r in selected), Decimal("0")))
    total_power = sum((record_power(r) for r in selected), Decimal("0"))

    if total_power > 0:
        average_price = round3(total_cost / total_power)
    else:
        average_price = Decimal("0")

    return ChargingStats(
        total_cost=total_cost,
        total_power=total_power,
        charging_count=len(selected),
        average_price=average_price,
    )


def _record_day(record: Any) -> Optional[date]:
    value = _field(record, "date")
    if value is None or isinstance(value, date):
        return value
    try:
        return parse_date(str(value))
    except ValueError:
        return None


def daily_totals(records: Iterable[Any], month: Optional[str] = None) -> list[DailyTotal]:
    """Cost and energy per day, sorted by day. Undated records are skipped."""
    cost_by_day: dict[date, Decimal] = defaultdict(Decimal)
    power_by_day: dict[date, Decimal] = defaultdict(Decimal)

    for record in select_month(records, month):
        day = _record_day(record)
        if day is None:
            continue
        cost_by_day[day] += record_cost(record)
        power_by_day[day] += record_power(record)

    return [
        DailyTotal(day=day, cost=cost_by_day[day], power=power_by_day[day])
        for day in sorted(cost_by_day)
    ]


def duration_buckets(
    records: Iterable[Any], month: Optional[str] = None
) -> list[DurationBucket]:
    """Count sessions per duration range (see DURATION_BUCKETS)."""
    counts = {label: 0 for label, _ in DURATION_BUCKETS}
    for record in select_month(records, month):
        minutes = to_decimal(_field(record, "duration"))
        for label, upper in DURATION_BUCKETS:
            if upper is None or minutes <= upper:
                counts[label] += 1
                break
    return [DurationBucket(label=label, count=counts[label]) for label, _ in DURATION_BUCKETS]


def top_stations(
    records: Iterable[Any], month: Optional[str] = None, limit: int = 5
) -> list[StationUsage]:
    """Most used vendor/station pairs, by session count then name."""
    counter: Counter[str] = Counter()
    for record in select_month(records, month):
        vendor = _field(record, "vendor") or ""
        station = _field(record, "station_name") or ""
        counter[f"{vendor}-{station}"] += 1

    ranked = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    return [StationUsage(label=label, count=count) for label, count in ranked[:limit]]
