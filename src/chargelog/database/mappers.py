"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: the schema stores anchored
timestamps and plain strings where the domain works with wall-clock times
and enums.
"""

from decimal import Decimal
from typing import Optional

from chargelog.domain import entities as domain
from chargelog.database.models import (
    Vehicle as ORMVehicle,
    ChargingStation as ORMChargingStation,
    ChargingRecord as ORMChargingRecord,
    MaintenanceRecord as ORMMaintenanceRecord,
    MaintenanceItem as ORMMaintenanceItem,
)


def _specification(value: Optional[str]) -> Optional[domain.Specification]:
    try:
        return domain.Specification.parse(value)
    except ValueError:
        # Unknown values from older data are shown as unspecified
        return None


def vehicle_to_domain(
    orm_vehicle: ORMVehicle, default_vehicle_id: Optional[str] = None
) -> domain.Vehicle:
    """Convert SQLAlchemy Vehicle model to domain Vehicle entity."""
    return domain.Vehicle(
        id=orm_vehicle.id,
        name=orm_vehicle.name,
        image=orm_vehicle.image,
        purchase_date=orm_vehicle.purchase_date,
        is_default=default_vehicle_id is not None and orm_vehicle.id == default_vehicle_id,
        created_at=orm_vehicle.created_at,
    )


def station_to_domain(orm_station: ORMChargingStation) -> domain.ChargingStation:
    """Convert SQLAlchemy ChargingStation model to domain ChargingStation entity."""
    return domain.ChargingStation(
        id=orm_station.id,
        vendor=orm_station.vendor,
        name=orm_station.name,
        specification=_specification(orm_station.specification),
        price_per_unit=orm_station.price_per_unit,
        created_at=orm_station.created_at,
    )


def charging_record_to_domain(orm_record: ORMChargingRecord) -> domain.ChargingRecord:
    """Convert SQLAlchemy ChargingRecord model to domain ChargingRecord entity."""
    return domain.ChargingRecord(
        id=orm_record.id,
        date=orm_record.date,
        start_time=orm_record.start_at.time() if orm_record.start_at else None,
        end_time=orm_record.end_at.time() if orm_record.end_at else None,
        duration=orm_record.duration or 0,
        vendor=orm_record.vendor or "",
        station_name=orm_record.station_name or "",
        specification=_specification(orm_record.specification),
        power=orm_record.power if orm_record.power is not None else Decimal("0"),
        unit=orm_record.unit or domain.DEFAULT_UNIT,
        price_per_unit=orm_record.price_per_unit,
        price_per_minute=orm_record.price_per_minute,
        charging_fee=orm_record.charging_fee if orm_record.charging_fee is not None else Decimal("0"),
        parking_fee=orm_record.parking_fee if orm_record.parking_fee is not None else Decimal("0"),
        current_mileage=orm_record.current_mileage,
        increased_mileage=(
            orm_record.increased_mileage
            if orm_record.increased_mileage is not None
            else Decimal("0")
        ),
        notes=orm_record.notes,
        vehicle_id=orm_record.vehicle_id,
        created_at=orm_record.created_at,
    )


def maintenance_item_to_domain(orm_item: ORMMaintenanceItem) -> domain.MaintenanceItem:
    """Convert SQLAlchemy MaintenanceItem model to domain MaintenanceItem entity."""
    return domain.MaintenanceItem(
        name=orm_item.name,
        quantity=orm_item.quantity,
        unit_price=orm_item.unit_price,
    )


def maintenance_record_to_domain(
    orm_record: ORMMaintenanceRecord,
) -> domain.MaintenanceRecord:
    """Convert SQLAlchemy MaintenanceRecord model to domain MaintenanceRecord entity."""
    return domain.MaintenanceRecord(
        id=orm_record.id,
        date=orm_record.date,
        mileage=orm_record.mileage,
        type=orm_record.type,
        location=orm_record.location,
        description=orm_record.description,
        items=tuple(maintenance_item_to_domain(item) for item in orm_record.items),
        total_cost=orm_record.total_cost if orm_record.total_cost is not None else Decimal("0"),
        next_maintenance=orm_record.next_maintenance,
        notes=orm_record.notes,
        vehicle_id=orm_record.vehicle_id,
        created_at=orm_record.created_at,
    )
