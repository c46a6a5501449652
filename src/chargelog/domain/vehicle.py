"""Vehicle domain service."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Optional

from chargelog.domain.entities import Vehicle as VehicleEntity
from chargelog.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_vehicle_name,
    missing_field,
    vehicle_not_found,
)

if TYPE_CHECKING:
    from chargelog.database.base import Database

logger = logging.getLogger(__name__)


class VehicleService:
    """Service for managing vehicles and the default vehicle."""

    def __init__(self, db: Database):
        """Initialize vehicle service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_vehicle(
        self,
        name: str,
        purchase_date: Optional[date] = None,
        image: Optional[str] = None,
    ) -> str:
        """Create a new vehicle.

        Args:
            name: Display name (required, unique)
            purchase_date: Optional purchase date
            image: Optional photo as a data URI

        Returns:
            Vehicle ID

        Raises:
            ValidationError: If name is empty
            ConflictError: If a vehicle with the same name exists
        """
        name = self._validate_name(name)
        if self.db.get_vehicle_by_name(name) is not None:
            raise ConflictError(duplicate_vehicle_name(name))

        vehicle_id = self.db.create_vehicle(name=name, image=image, purchase_date=purchase_date)
        logger.info("Created vehicle %s (%s)", vehicle_id, name)
        return vehicle_id

    def get_vehicle(self, vehicle_id: str) -> Optional[VehicleEntity]:
        """Get vehicle by ID."""
        return self.db.get_vehicle(vehicle_id)

    def get_vehicle_by_name(self, name: str) -> Optional[VehicleEntity]:
        """Get vehicle by name."""
        return self.db.get_vehicle_by_name(name)

    def list_vehicles(self) -> list[VehicleEntity]:
        """List all vehicles."""
        return self.db.list_vehicles()

    def update_vehicle(
        self,
        vehicle_id: str,
        name: Optional[str] = None,
        purchase_date: Optional[date] = None,
        image: Optional[str] = None,
        clear_image: bool = False,
    ) -> None:
        """Update a vehicle. Only the given fields change; the default flag is kept.

        Raises:
            NotFoundError: If the vehicle doesn't exist
            ValidationError: If the new name is empty
            ConflictError: If another vehicle already has the new name
        """
        self._require(vehicle_id)

        if name is not None:
            name = self._validate_name(name)
            existing = self.db.get_vehicle_by_name(name)
            if existing is not None and existing.id != vehicle_id:
                raise ConflictError(duplicate_vehicle_name(name))

        self.db.update_vehicle(
            vehicle_id=vehicle_id,
            name=name,
            image=image,
            purchase_date=purchase_date,
            clear_image=clear_image,
        )

    def delete_vehicle(self, vehicle_id: str) -> None:
        """Delete a vehicle. Deleting the default vehicle leaves no default.

        Raises:
            NotFoundError: If the vehicle doesn't exist
        """
        vehicle = self._require(vehicle_id)
        self.db.delete_vehicle(vehicle_id)
        if vehicle.is_default:
            logger.info("Deleted default vehicle %s; no default is set now", vehicle_id)

    def set_default_vehicle(self, vehicle_id: str) -> VehicleEntity:
        """Make a vehicle the default one.

        The default is a single stored identifier, so the previous default is
        replaced in the same write.

        Returns:
            The updated vehicle

        Raises:
            NotFoundError: If the vehicle doesn't exist
        """
        self._require(vehicle_id)
        self.db.set_default_vehicle_id(vehicle_id)
        return self._require(vehicle_id)

    def get_default_vehicle(self) -> Optional[VehicleEntity]:
        """Return the default vehicle, or None when none is set."""
        vehicle_id = self.db.get_default_vehicle_id()
        if vehicle_id is None:
            return None
        return self.db.get_vehicle(vehicle_id)

    def _require(self, vehicle_id: str) -> VehicleEntity:
        vehicle = self.db.get_vehicle(vehicle_id)
        if vehicle is None:
            raise NotFoundError(vehicle_not_found(vehicle_id))
        return vehicle

    @staticmethod
    def _validate_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError(missing_field("name"))
        return name


def days_owned(purchase_date: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Days since the vehicle was bought, or None without a purchase date."""
    if purchase_date is None:
        return None
    today = today or date.today()
    return (today - purchase_date).days


def format_ownership(days: int) -> str:
    """Render an ownership length as "N days" or "N years M days" (365-day years)."""
    if days >= 365:
        years, remaining = divmod(days, 365)
        return f"{years} years {remaining} days"
    return f"{days} days"
