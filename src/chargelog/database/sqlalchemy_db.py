"""Generic SQLAlchemy database implementation."""

import logging
from typing import Optional, Any
from datetime import date, datetime, time
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import and_, or_

from chargelog.database.base import Database
from chargelog.database.models import (
    Vehicle,
    ChargingStation,
    ChargingRecord,
    MaintenanceRecord,
    MaintenanceItem,
    Setting,
    create_session_factory,
)
from chargelog.database.mappers import (
    vehicle_to_domain,
    station_to_domain,
    charging_record_to_domain,
    maintenance_record_to_domain,
)
from chargelog.domain.entities import (
    Vehicle as DomainVehicle,
    ChargingStation as DomainChargingStation,
    ChargingRecord as DomainChargingRecord,
    MaintenanceRecord as DomainMaintenanceRecord,
    MaintenanceItem as DomainMaintenanceItem,
    Specification,
)
from chargelog.domain.errors import (
    NotFoundError,
    StorageError,
    maintenance_not_found,
    record_not_found,
    vehicle_not_found,
)
from chargelog.utils.time_parser import anchor_times

logger = logging.getLogger(__name__)

DEFAULT_VEHICLE_KEY = "default_vehicle_id"

CHARGING_FIELDS = {
    "date",
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
    "current_mileage",
    "increased_mileage",
    "notes",
    "vehicle_id",
}

MAINTENANCE_FIELDS = {
    "date",
    "mileage",
    "type",
    "location",
    "description",
    "total_cost",
    "next_maintenance",
    "notes",
    "vehicle_id",
}


def _charging_columns(fields: dict[str, Any]) -> dict[str, Any]:
    """Translate entity-named charging fields into column values."""
    unknown = set(fields) - CHARGING_FIELDS
    if unknown:
        raise ValueError(f"Unknown charging record fields: {', '.join(sorted(unknown))}")

    columns = {k: v for k, v in fields.items() if k not in ("start_time", "end_time")}
    start_at, end_at = anchor_times(
        fields["date"], fields.get("start_time"), fields.get("end_time")
    )
    columns["start_at"] = start_at
    columns["end_at"] = end_at

    spec = fields.get("specification")
    if isinstance(spec, Specification):
        columns["specification"] = spec.value
    return columns


def _maintenance_columns(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - MAINTENANCE_FIELDS
    if unknown:
        raise ValueError(f"Unknown maintenance fields: {', '.join(sorted(unknown))}")
    return dict(fields)


def _orm_items(items: list[DomainMaintenanceItem]) -> list[MaintenanceItem]:
    return [
        MaintenanceItem(
            position=position,
            name=item.name,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )
        for position, item in enumerate(items)
    ]


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def _commit(self, action: str) -> None:
        """Commit the current session, rolling back on failure.

        Raises:
            StorageError: If the write is rejected by the database
        """
        session = self._get_session()
        try:
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Failed to %s: %s", action, e)
            raise StorageError(f"Could not {action}: {e.__class__.__name__}") from e
        logger.debug("Committed: %s", action)

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    # Vehicle operations
    def create_vehicle(
        self, name: str, image: Optional[str] = None, purchase_date: Optional[date] = None
    ) -> str:
        """Create a vehicle. Returns vehicle ID."""
        session = self._get_session()
        vehicle = Vehicle(name=name, image=image, purchase_date=purchase_date)
        session.add(vehicle)
        self._commit(f"create vehicle '{name}'")
        return vehicle.id

    def get_vehicle(self, vehicle_id: str) -> Optional[DomainVehicle]:
        """Get vehicle by ID."""
        session = self._get_session()
        vehicle = session.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
        if vehicle is None:
            return None
        return vehicle_to_domain(vehicle, self.get_default_vehicle_id())

    def get_vehicle_by_name(self, name: str) -> Optional[DomainVehicle]:
        """Get vehicle by name."""
        session = self._get_session()
        vehicle = session.query(Vehicle).filter(Vehicle.name == name).first()
        if vehicle is None:
            return None
        return vehicle_to_domain(vehicle, self.get_default_vehicle_id())

    def list_vehicles(self) -> list[DomainVehicle]:
        """List all vehicles."""
        session = self._get_session()
        default_id = self.get_default_vehicle_id()
        vehicles = session.query(Vehicle).order_by(Vehicle.created_at, Vehicle.name).all()
        return [vehicle_to_domain(v, default_id) for v in vehicles]

    def update_vehicle(
        self,
        vehicle_id: str,
        name: Optional[str] = None,
        image: Optional[str] = None,
        purchase_date: Optional[date] = None,
        clear_image: bool = False,
    ) -> None:
        """Update vehicle fields."""
        session = self._get_session()
        vehicle = session.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
        if vehicle is None:
            raise NotFoundError(vehicle_not_found(vehicle_id))

        if name is not None:
            vehicle.name = name
        if clear_image:
            vehicle.image = None
        elif image is not None:
            vehicle.image = image
        if purchase_date is not None:
            vehicle.purchase_date = purchase_date
        self._commit(f"update vehicle {vehicle_id}")

    def delete_vehicle(self, vehicle_id: str) -> None:
        """Delete a vehicle, detaching its records and clearing it as default."""
        session = self._get_session()
        vehicle = session.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
        if vehicle is None:
            raise NotFoundError(vehicle_not_found(vehicle_id))

        session.query(ChargingRecord).filter(ChargingRecord.vehicle_id == vehicle_id).update(
            {ChargingRecord.vehicle_id: None}, synchronize_session=False
        )
        session.query(MaintenanceRecord).filter(
            MaintenanceRecord.vehicle_id == vehicle_id
        ).update({MaintenanceRecord.vehicle_id: None}, synchronize_session=False)
        session.query(Setting).filter(
            Setting.key == DEFAULT_VEHICLE_KEY, Setting.value == vehicle_id
        ).delete(synchronize_session=False)
        session.delete(vehicle)
        self._commit(f"delete vehicle {vehicle_id}")

    def get_default_vehicle_id(self) -> Optional[str]:
        """Get the default vehicle ID, if one is set."""
        session = self._get_session()
        setting = session.get(Setting, DEFAULT_VEHICLE_KEY)
        return setting.value if setting is not None else None

    def set_default_vehicle_id(self, vehicle_id: Optional[str]) -> None:
        """Set (or clear, with None) the default vehicle ID in one write."""
        session = self._get_session()
        if vehicle_id is None:
            session.query(Setting).filter(Setting.key == DEFAULT_VEHICLE_KEY).delete(
                synchronize_session=False
            )
        else:
            session.merge(Setting(key=DEFAULT_VEHICLE_KEY, value=vehicle_id))
        self._commit("set default vehicle")

    # Charging station operations
    def create_station(
        self,
        vendor: str,
        name: Optional[str] = None,
        specification: Optional[str] = None,
        price_per_unit: Any = None,
    ) -> str:
        """Create a charging station entry. Returns station ID."""
        session = self._get_session()
        if isinstance(specification, Specification):
            specification = specification.value
        station = ChargingStation(
            vendor=vendor,
            name=name,
            specification=specification,
            price_per_unit=price_per_unit,
        )
        session.add(station)
        self._commit(f"create station for vendor '{vendor}'")
        return station.id

    def list_stations(self) -> list[DomainChargingStation]:
        """List all charging stations ordered by vendor and name."""
        session = self._get_session()
        stations = (
            session.query(ChargingStation)
            .order_by(ChargingStation.vendor, ChargingStation.name)
            .all()
        )
        return [station_to_domain(s) for s in stations]

    def vendor_exists(self, vendor: str) -> bool:
        """Check whether any station entry uses the vendor name."""
        session = self._get_session()
        count = session.query(ChargingStation).filter(ChargingStation.vendor == vendor).count()
        return count > 0

    # Charging record operations
    def create_charging_record(self, **fields: Any) -> str:
        """Create a charging record. Returns record ID."""
        session = self._get_session()
        record = ChargingRecord(**_charging_columns(fields))
        session.add(record)
        self._commit("create charging record")
        return record.id

    def get_charging_record(self, record_id: str) -> Optional[DomainChargingRecord]:
        """Get charging record by ID."""
        session = self._get_session()
        record = session.query(ChargingRecord).filter(ChargingRecord.id == record_id).first()
        if record is None:
            return None
        return charging_record_to_domain(record)

    def update_charging_record(self, record_id: str, **fields: Any) -> None:
        """Replace the stored fields of a charging record."""
        session = self._get_session()
        record = session.query(ChargingRecord).filter(ChargingRecord.id == record_id).first()
        if record is None:
            raise NotFoundError(record_not_found(record_id))

        for column, value in _charging_columns(fields).items():
            setattr(record, column, value)
        self._commit(f"update charging record {record_id}")

    def delete_charging_record(self, record_id: str) -> None:
        """Delete a charging record."""
        session = self._get_session()
        record = session.query(ChargingRecord).filter(ChargingRecord.id == record_id).first()
        if record is None:
            raise NotFoundError(record_not_found(record_id))
        session.delete(record)
        self._commit(f"delete charging record {record_id}")

    def list_charging_records(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        vehicle_id: Optional[str] = None,
    ) -> list[DomainChargingRecord]:
        """List charging records, newest first, with optional filters."""
        session = self._get_session()
        query = session.query(ChargingRecord)

        if start_date is not None:
            query = query.filter(ChargingRecord.date >= start_date)
        if end_date is not None:
            query = query.filter(ChargingRecord.date <= end_date)
        if vehicle_id is not None:
            query = query.filter(ChargingRecord.vehicle_id == vehicle_id)

        records = query.order_by(
            ChargingRecord.date.desc(),
            ChargingRecord.start_at.desc(),
            ChargingRecord.created_at.desc(),
        ).all()
        return [charging_record_to_domain(r) for r in records]

    def get_previous_charging_record(
        self,
        vehicle_id: Optional[str],
        before_date: date,
        before_time: Optional[time] = None,
        exclude_id: Optional[str] = None,
    ) -> Optional[DomainChargingRecord]:
        """Get the latest record of a vehicle's log that precedes a moment
        and carries an odometer reading."""
        session = self._get_session()
        query = session.query(ChargingRecord).filter(
            ChargingRecord.current_mileage.isnot(None)
        )

        if vehicle_id is None:
            query = query.filter(ChargingRecord.vehicle_id.is_(None))
        else:
            query = query.filter(ChargingRecord.vehicle_id == vehicle_id)
        if exclude_id is not None:
            query = query.filter(ChargingRecord.id != exclude_id)

        if before_time is None:
            query = query.filter(ChargingRecord.date < before_date)
        else:
            before_at = datetime.combine(before_date, before_time)
            query = query.filter(
                or_(
                    ChargingRecord.date < before_date,
                    and_(
                        ChargingRecord.date == before_date,
                        ChargingRecord.start_at < before_at,
                    ),
                )
            )

        record = query.order_by(
            ChargingRecord.date.desc(),
            ChargingRecord.start_at.desc(),
            ChargingRecord.created_at.desc(),
        ).first()
        if record is None:
            return None
        return charging_record_to_domain(record)

    def add_charging_records(self, rows: list[dict[str, Any]], replace: bool = False) -> int:
        """Bulk insert charging records in one transaction."""
        session = self._get_session()
        if replace:
            removed = session.query(ChargingRecord).delete(synchronize_session=False)
            logger.info("Replacing %d charging records", removed)
        session.add_all([ChargingRecord(**_charging_columns(row)) for row in rows])
        self._commit(f"import {len(rows)} charging records")
        return len(rows)

    # Maintenance operations
    def create_maintenance_record(
        self, items: list[DomainMaintenanceItem], **fields: Any
    ) -> str:
        """Create a maintenance record with its line items. Returns record ID."""
        session = self._get_session()
        record = MaintenanceRecord(**_maintenance_columns(fields))
        record.items = _orm_items(items)
        session.add(record)
        self._commit("create maintenance record")
        return record.id

    def get_maintenance_record(self, record_id: str) -> Optional[DomainMaintenanceRecord]:
        """Get maintenance record by ID."""
        session = self._get_session()
        record = (
            session.query(MaintenanceRecord).filter(MaintenanceRecord.id == record_id).first()
        )
        if record is None:
            return None
        return maintenance_record_to_domain(record)

    def update_maintenance_record(
        self, record_id: str, items: list[DomainMaintenanceItem], **fields: Any
    ) -> None:
        """Replace the stored fields and items of a maintenance record."""
        session = self._get_session()
        record = (
            session.query(MaintenanceRecord).filter(MaintenanceRecord.id == record_id).first()
        )
        if record is None:
            raise NotFoundError(maintenance_not_found(record_id))

        for column, value in _maintenance_columns(fields).items():
            setattr(record, column, value)
        record.items = _orm_items(items)
        self._commit(f"update maintenance record {record_id}")

    def delete_maintenance_record(self, record_id: str) -> None:
        """Delete a maintenance record and its items."""
        session = self._get_session()
        record = (
            session.query(MaintenanceRecord).filter(MaintenanceRecord.id == record_id).first()
        )
        if record is None:
            raise NotFoundError(maintenance_not_found(record_id))
        session.delete(record)
        self._commit(f"delete maintenance record {record_id}")

    def list_maintenance_records(
        self, vehicle_id: Optional[str] = None
    ) -> list[DomainMaintenanceRecord]:
        """List maintenance records, newest first."""
        session = self._get_session()
        query = session.query(MaintenanceRecord)
        if vehicle_id is not None:
            query = query.filter(MaintenanceRecord.vehicle_id == vehicle_id)
        records = query.order_by(
            MaintenanceRecord.date.desc(), MaintenanceRecord.created_at.desc()
        ).all()
        return [maintenance_record_to_domain(r) for r in records]

    def add_maintenance_records(
        self, rows: list[dict[str, Any]], replace: bool = False
    ) -> int:
        """Bulk insert maintenance records (without items) in one transaction."""
        session = self._get_session()
        if replace:
            # Items first: bulk deletes bypass the ORM cascade
            session.query(MaintenanceItem).delete(synchronize_session=False)
            removed = session.query(MaintenanceRecord).delete(synchronize_session=False)
            logger.info("Replacing %d maintenance records", removed)
        session.add_all([MaintenanceRecord(**_maintenance_columns(row)) for row in rows])
        self._commit(f"import {len(rows)} maintenance records")
        return len(rows)
