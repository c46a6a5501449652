"""Abstract record store interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from datetime import date, time

# Import entities directly to avoid circular import through domain/__init__.py
from chargelog.domain.entities import (
    Vehicle,
    ChargingStation,
    ChargingRecord,
    MaintenanceRecord,
    MaintenanceItem,
)


class Database(ABC):
    """Abstract record store for chargelog.

    Charging record writes take the column values as keyword arguments named
    after the ChargingRecord entity fields (start_time/end_time are wall-clock
    times; the store anchors them to the record date).
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Vehicle operations
    @abstractmethod
    def create_vehicle(
        self, name: str, image: Optional[str] = None, purchase_date: Optional[date] = None
    ) -> str:
        """Create a vehicle. Returns vehicle ID."""
        pass

    @abstractmethod
    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        """Get vehicle by ID."""
        pass

    @abstractmethod
    def get_vehicle_by_name(self, name: str) -> Optional[Vehicle]:
        """Get vehicle by name."""
        pass

    @abstractmethod
    def list_vehicles(self) -> list[Vehicle]:
        """List all vehicles."""
        pass

    @abstractmethod
    def update_vehicle(
        self,
        vehicle_id: str,
        name: Optional[str] = None,
        image: Optional[str] = None,
        purchase_date: Optional[date] = None,
        clear_image: bool = False,
    ) -> None:
        """Update vehicle fields."""
        pass

    @abstractmethod
    def delete_vehicle(self, vehicle_id: str) -> None:
        """Delete a vehicle, detaching its records and clearing it as default."""
        pass

    @abstractmethod
    def get_default_vehicle_id(self) -> Optional[str]:
        """Get the default vehicle ID, if one is set."""
        pass

    @abstractmethod
    def set_default_vehicle_id(self, vehicle_id: Optional[str]) -> None:
        """Set (or clear, with None) the default vehicle ID in one write."""
        pass

    # Charging station operations
    @abstractmethod
    def create_station(
        self,
        vendor: str,
        name: Optional[str] = None,
        specification: Optional[str] = None,
        price_per_unit: Any = None,
    ) -> str:
        """Create a charging station entry. Returns station ID."""
        pass

    @abstractmethod
    def list_stations(self) -> list[ChargingStation]:
        """List all charging stations ordered by vendor and name."""
        pass

    @abstractmethod
    def vendor_exists(self, vendor: str) -> bool:
        """Check whether any station entry uses the vendor name."""
        pass

    # Charging record operations
    @abstractmethod
    def create_charging_record(self, **fields: Any) -> str:
        """Create a charging record. Returns record ID."""
        pass

    @abstractmethod
    def get_charging_record(self, record_id: str) -> Optional[ChargingRecord]:
        """Get charging record by ID."""
        pass

    @abstractmethod
    def update_charging_record(self, record_id: str, **fields: Any) -> None:
        """Replace the stored fields of a charging record."""
        pass

    @abstractmethod
    def delete_charging_record(self, record_id: str) -> None:
        """Delete a charging record."""
        pass

    @abstractmethod
    def list_charging_records(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        vehicle_id: Optional[str] = None,
    ) -> list[ChargingRecord]:
        """List charging records, newest first, with optional filters."""
        pass

    @abstractmethod
    def get_previous_charging_record(
        self,
        vehicle_id: Optional[str],
        before_date: date,
        before_time: Optional[time] = None,
        exclude_id: Optional[str] = None,
    ) -> Optional[ChargingRecord]:
        """Get the latest record of a vehicle's log that precedes a moment
        and carries an odometer reading."""
        pass

    @abstractmethod
    def add_charging_records(self, rows: list[dict[str, Any]], replace: bool = False) -> int:
        """Bulk insert charging records in one transaction.

        When replace is True all existing records are removed first, in the
        same transaction. Returns the number of inserted records.
        """
        pass

    # Maintenance operations
    @abstractmethod
    def create_maintenance_record(
        self, items: list[MaintenanceItem], **fields: Any
    ) -> str:
        """Create a maintenance record with its line items. Returns record ID."""
        pass

    @abstractmethod
    def get_maintenance_record(self, record_id: str) -> Optional[MaintenanceRecord]:
        """Get maintenance record by ID."""
        pass

    @abstractmethod
    def update_maintenance_record(
        self, record_id: str, items: list[MaintenanceItem], **fields: Any
    ) -> None:
        """Replace the stored fields and items of a maintenance record."""
        pass

    @abstractmethod
    def delete_maintenance_record(self, record_id: str) -> None:
        """Delete a maintenance record and its items."""
        pass

    @abstractmethod
    def list_maintenance_records(
        self, vehicle_id: Optional[str] = None
    ) -> list[MaintenanceRecord]:
        """List maintenance records, newest first."""
        pass

    @abstractmethod
    def add_maintenance_records(
        self, rows: list[dict[str, Any]], replace: bool = False
    ) -> int:
        """Bulk insert maintenance records (without items) in one transaction."""
        pass
