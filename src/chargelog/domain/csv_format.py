"""CSV layout of charging and maintenance records.

Files are UTF-8 with a byte-order mark and a localized header row; the data
columns are positional and identical for every locale.
"""

import csv
import io
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Any, Optional

from chargelog.domain.derivation import compute_duration, compute_fee
from chargelog.domain.entities import (
    DEFAULT_UNIT,
    ChargingRecord,
    MaintenanceRecord,
    Specification,
)
from chargelog.utils.amount_parser import parse_optional_amount
from chargelog.utils.date_parser import parse_date
from chargelog.utils.time_parser import format_time, parse_optional_time

CSV_ENCODING = "utf-8-sig"
DEFAULT_LOCALE = "en"

CHARGING_COLUMNS = (
    "date",
    "current_mileage",
    "increased_mileage",
    "start_time",
    "end_time",
    "duration",
    "vendor",
    "station_name",
    "specification",
    "power",
    "unit",
    "price_per_unit",
    "price_per_minute",
    "charging_fee",
    "parking_fee",
    "notes",
)

MAINTENANCE_COLUMNS = (
    "date",
    "mileage",
    "type",
    "location",
    "cost",
    "description",
    "next_maintenance",
    "notes",
)

CHARGING_HEADERS = {
    "en": (
        "Date",
        "Current Mileage",
        "Increased Mileage",
        "Start Time",
        "End Time",
        "Duration",
        "Vendor",
        "Station",
        "Specification",
        "Power",
        "Unit",
        "Price per Unit",
        "Price per Minute",
        "Charging Fee",
        "Parking Fee",
        "Notes",
    ),
    "zh-TW": (
        "日期",
        "當前里程",
        "增加里程",
        "開始時間",
        "結束時間",
        "充電時長",
        "充電店家",
        "充電站",
        "充電規格",
        "電量",
        "單位",
        "每度電價",
        "每分鐘價格",
        "充電費用",
        "停車費用",
        "備註",
    ),
}

MAINTENANCE_HEADERS = {
    "en": (
        "Date",
        "Mileage",
        "Type",
        "Location",
        "Cost",
        "Description",
        "Next Maintenance",
        "Notes",
    ),
    "zh-TW": (
        "日期",
        "里程",
        "維修類型",
        "維修地點",
        "維修費用",
        "維修內容",
        "下次保養里程",
        "備註",
    ),
}

SUPPORTED_LOCALES = tuple(CHARGING_HEADERS)


def header_for(headers: dict[str, Sequence[str]], locale: Optional[str]) -> Sequence[str]:
    """Pick the header row for a locale.

    Raises:
        ValueError: If the locale is not supported
    """
    locale = locale or DEFAULT_LOCALE
    if locale not in headers:
        raise ValueError(
            f"Unsupported locale '{locale}'. Must be one of: {', '.join(SUPPORTED_LOCALES)}"
        )
    return headers[locale]


def format_number(value: Optional[Any]) -> str:
    """Plain decimal notation without trailing zeros; empty for None."""
    if value is None:
        return ""
    if isinstance(value, Decimal):
        text = format(value.normalize(), "f")
        return "0" if text in ("-0", "") else text
    return str(value)


def charging_row(record: ChargingRecord) -> list[str]:
    """Serialize one charging record in CHARGING_COLUMNS order."""
    return [
        record.date.isoformat(),
        format_number(record.current_mileage),
        format_number(record.increased_mileage),
        format_time(record.start_time),
        format_time(record.end_time),
        str(record.duration),
        record.vendor,
        record.station_name,
        record.specification.value if record.specification else "",
        format_number(record.power),
        record.unit,
        format_number(record.price_per_unit),
        format_number(record.price_per_minute),
        format_number(record.charging_fee),
        format_number(record.parking_fee),
        record.notes or "",
    ]


def maintenance_row(record: MaintenanceRecord) -> list[str]:
    """Serialize one maintenance record in MAINTENANCE_COLUMNS order."""
    return [
        record.date.isoformat(),
        format_number(record.mileage),
        record.type or "",
        record.location or "",
        format_number(record.total_cost),
        record.description or "",
        format_number(record.next_maintenance),
        record.notes or "",
    ]


def render_csv(header: Sequence[str], rows: Iterable[list[str]]) -> str:
    """Render a header and data rows as CSV text; comma-bearing fields are quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def read_csv_rows(text: str) -> list[tuple[int, list[str]]]:
    """Split CSV text into (line number, values) pairs, skipping the header row.

    Blank lines are dropped. Line numbers count the header as row 1.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    rows = []
    for row_num, values in enumerate(reader, start=1):
        if row_num == 1:
            continue
        if not any(value.strip() for value in values):
            continue
        rows.append((row_num, values))
    return rows


def _text(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


def _amount(values: dict[str, str], column: str, allow_negative: bool = False) -> Optional[Decimal]:
    try:
        amount = parse_optional_amount(values[column])
    except ValueError as e:
        raise ValueError(f"Invalid {column}: {e}") from e
    if amount is not None and amount < 0 and not allow_negative:
        raise ValueError(f"{column} must not be negative")
    return amount


def _columns(values: list[str], columns: Sequence[str]) -> dict[str, str]:
    if len(values) < len(columns):
        raise ValueError(f"Expected {len(columns)} columns, got {len(values)}")
    return dict(zip(columns, values))


def parse_charging_row(values: list[str]) -> dict[str, Any]:
    """Turn one positional CSV row into charging record fields.

    Stored values win over derived ones: duration and fee are only computed
    when their column is empty.

    Raises:
        ValueError: If the row is short or a value cannot be parsed
    """
    row = _columns(values, CHARGING_COLUMNS)

    if not row["date"].strip():
        raise ValueError("Missing date")
    record_date = parse_date(row["date"])
    start_time = parse_optional_time(row["start_time"])
    end_time = parse_optional_time(row["end_time"])

    duration_text = row["duration"].strip()
    if duration_text:
        try:
            duration = int(Decimal(duration_text))
        except ArithmeticError as e:
            raise ValueError(f"Invalid duration '{duration_text}'") from e
        if duration < 0:
            raise ValueError("duration must not be negative")
    elif start_time is not None and end_time is not None:
        duration = compute_duration(start_time, end_time)
    else:
        duration = 0

    power = _amount(row, "power") or Decimal("0")
    price_per_unit = _amount(row, "price_per_unit")
    price_per_minute = _amount(row, "price_per_minute")
    charging_fee = _amount(row, "charging_fee")
    if charging_fee is None:
        charging_fee = compute_fee(power, price_per_unit, duration, price_per_minute)

    increased_mileage = _amount(row, "increased_mileage", allow_negative=True)

    return {
        "date": record_date,
        "start_time": start_time,
        "end_time": end_time,
        "duration": duration,
        "vendor": row["vendor"].strip(),
        "station_name": row["station_name"].strip(),
        "specification": Specification.parse(row["specification"]),
        "power": power,
        "unit": row["unit"].strip() or DEFAULT_UNIT,
        "price_per_unit": price_per_unit,
        "price_per_minute": price_per_minute,
        "charging_fee": charging_fee if charging_fee is not None else Decimal("0"),
        "parking_fee": _amount(row, "parking_fee") or Decimal("0"),
        "current_mileage": _amount(row, "current_mileage"),
        "increased_mileage": increased_mileage if increased_mileage is not None else Decimal("0"),
        "notes": _text(row["notes"]),
    }


def parse_maintenance_row(values: list[str]) -> dict[str, Any]:
    """Turn one positional CSV row into maintenance record fields.

    Raises:
        ValueError: If the row is short or a value cannot be parsed
    """
    row = _columns(values, MAINTENANCE_COLUMNS)

    if not row["date"].strip():
        raise ValueError("Missing date")
    return {
        "date": parse_date(row["date"]),
        "mileage": _amount(row, "mileage"),
        "type": _text(row["type"]),
        "location": _text(row["location"]),
        "total_cost": _amount(row, "cost") or Decimal("0"),
        "description": _text(row["description"]),
        "next_maintenance": _amount(row, "next_maintenance"),
        "notes": _text(row["notes"]),
    }
