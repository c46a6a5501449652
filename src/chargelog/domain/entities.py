"""Domain model entities for chargelog.

These are pure data classes representing the charging log, independent of
database schema. Persisted entities are frozen; ChargingInput is the one
mutable shape, holding the partial values a user has entered so far.
"""

from dataclasses import dataclass, field
from datetime import datetime, date, time
from decimal import Decimal
from enum import Enum
from typing import Optional


class Specification(str, Enum):
    """Connector / charging-speed type of a session."""

    J1772 = "J1772"
    TYPE2 = "Type2"
    TPC = "TPC"
    CCS2 = "CCS2"
    CCS1 = "CCS1"

    @property
    def label(self) -> str:
        return SPECIFICATION_LABELS[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Specification"]:
        """Parse a stored or user-entered value. Empty means no specification."""
        if value is None or not str(value).strip():
            return None
        text = str(value).strip()
        for spec in cls:
            if spec.value.lower() == text.lower() or spec.name.lower() == text.lower():
                return spec
        raise ValueError(
            f"Unknown specification '{text}'. "
            f"Must be one of: {', '.join(s.value for s in cls)}"
        )


SPECIFICATION_LABELS = {
    Specification.J1772: "AC slow - J1772",
    Specification.TYPE2: "AC slow - Type 2",
    Specification.TPC: "DC fast - TPC (NACS)",
    Specification.CCS2: "DC fast - CCS2",
    Specification.CCS1: "DC fast - CCS1",
}


class ImportMode(str, Enum):
    """What a CSV import does with the records already in the store."""

    REPLACE = "replace"
    APPEND = "append"


DEFAULT_UNIT = "kWh"


@dataclass(frozen=True)
class ChargingRecord:
    """One charging session."""

    id: str
    date: date
    start_time: Optional[time]
    end_time: Optional[time]
    duration: int
    vendor: str
    station_name: str
    specification: Optional[Specification]
    power: Decimal
    unit: str
    price_per_unit: Optional[Decimal]
    price_per_minute: Optional[Decimal]
    charging_fee: Decimal
    parking_fee: Decimal
    current_mileage: Optional[Decimal]
    increased_mileage: Decimal
    notes: Optional[str]
    vehicle_id: Optional[str]
    created_at: datetime

    @property
    def total_cost(self) -> Decimal:
        return self.charging_fee + self.parking_fee


@dataclass
class ChargingInput:
    """Partial charging-session input as typed by the user.

    Every field is optional; validation happens when the input is submitted.
    """

    date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    duration: Optional[int] = None
    vendor: Optional[str] = None
    station_name: Optional[str] = None
    specification: Optional[Specification] = None
    power: Optional[Decimal] = None
    unit: Optional[str] = None
    price_per_unit: Optional[Decimal] = None
    price_per_minute: Optional[Decimal] = None
    charging_fee: Optional[Decimal] = None
    parking_fee: Optional[Decimal] = None
    current_mileage: Optional[Decimal] = None
    notes: Optional[str] = None
    vehicle_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: ChargingRecord) -> "ChargingInput":
        """Build an editable input from a stored record."""
        return cls(
            date=record.date,
            start_time=record.start_time,
            end_time=record.end_time,
            duration=record.duration,
            vendor=record.vendor,
            station_name=record.station_name,
            specification=record.specification,
            power=record.power,
            unit=record.unit,
            price_per_unit=record.price_per_unit,
            price_per_minute=record.price_per_minute,
            charging_fee=record.charging_fee,
            parking_fee=record.parking_fee,
            current_mileage=record.current_mileage,
            notes=record.notes,
            vehicle_id=record.vehicle_id,
        )


@dataclass(frozen=True)
class DerivedFields:
    """Dependent values computed from a ChargingInput."""

    duration: int
    charging_fee: Decimal
    fee_derived: bool
    average_price: Optional[Decimal]
    increased_mileage: Optional[Decimal]
    cost_per_distance: Optional[Decimal]


@dataclass(frozen=True)
class Vehicle:
    """Tracked vehicle domain entity."""

    id: str
    name: str
    image: Optional[str]
    purchase_date: Optional[date]
    is_default: bool
    created_at: datetime


@dataclass(frozen=True)
class MaintenanceItem:
    """One line of a maintenance record."""

    name: str
    quantity: Decimal
    unit_price: Decimal

    @property
    def total(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class MaintenanceRecord:
    """One service event."""

    id: str
    date: date
    mileage: Optional[Decimal]
    type: Optional[str]
    location: Optional[str]
    description: Optional[str]
    items: tuple[MaintenanceItem, ...]
    total_cost: Decimal
    next_maintenance: Optional[Decimal]
    notes: Optional[str]
    vehicle_id: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class ChargingStation:
    """Named charging network / site used to populate selection lists."""

    id: str
    vendor: str
    name: Optional[str]
    specification: Optional[Specification]
    price_per_unit: Optional[Decimal]
    created_at: datetime


@dataclass(frozen=True)
class ChargingStats:
    """Aggregated totals over a set of charging records."""

    total_cost: Decimal
    total_power: Decimal
    charging_count: int
    average_price: Decimal


@dataclass(frozen=True)
class DailyTotal:
    """Cost and energy charged on one day."""

    day: date
    cost: Decimal
    power: Decimal


@dataclass(frozen=True)
class DurationBucket:
    """Session count for one duration range."""

    label: str
    count: int


@dataclass(frozen=True)
class StationUsage:
    """Session count for one vendor/station pair."""

    label: str
    count: int


@dataclass(frozen=True)
class MonthlyReport:
    """Everything the statistics view shows for one month."""

    month: str
    stats: ChargingStats
    daily_totals: tuple[DailyTotal, ...] = ()
    duration_buckets: tuple[DurationBucket, ...] = ()
    top_stations: tuple[StationUsage, ...] = ()


@dataclass(frozen=True)
class RecordPage:
    """One page of a filtered record list, with page totals."""

    records: tuple[ChargingRecord, ...]
    page: int
    total_pages: int
    total_count: int
    total_power: Decimal = field(default=Decimal("0"))
    total_cost: Decimal = field(default=Decimal("0"))
