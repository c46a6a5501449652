"""Charging station / vendor domain service."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from chargelog.domain.entities import ChargingStation, Specification
from chargelog.domain.errors import ValidationError, missing_field, negative_value

if TYPE_CHECKING:
    from chargelog.database.base import Database

logger = logging.getLogger(__name__)


class StationService:
    """Service for managing the known vendors and stations."""

    def __init__(self, db: Database):
        """Initialize station service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_station(
        self,
        vendor: str,
        name: Optional[str] = None,
        specification: Optional[Specification] = None,
        price_per_unit: Optional[Decimal] = None,
    ) -> str:
        """Create a station entry.

        Args:
            vendor: Vendor / network name
            name: Optional station name
            specification: Optional default connector type
            price_per_unit: Optional default price per unit

        Returns:
            Station ID

        Raises:
            ValidationError: If vendor is empty or the price is negative
        """
        vendor = (vendor or "").strip()
        if not vendor:
            raise ValidationError(missing_field("vendor"))
        if price_per_unit is not None and price_per_unit < 0:
            raise ValidationError(negative_value("price_per_unit"))

        return self.db.create_station(
            vendor=vendor,
            name=name.strip() if name else None,
            specification=specification,
            price_per_unit=price_per_unit,
        )

    def list_stations(self) -> list[ChargingStation]:
        """List all station entries."""
        return self.db.list_stations()

    def list_vendors(self) -> list[str]:
        """List distinct vendor names, sorted."""
        return sorted({station.vendor for station in self.db.list_stations()})

    def ensure_vendor(
        self,
        vendor: str,
        station_name: Optional[str] = None,
        specification: Optional[Specification] = None,
    ) -> Optional[str]:
        """Register a vendor the first time it is used.

        Returns:
            The new station ID, or None when the vendor was already known
        """
        vendor = (vendor or "").strip()
        if not vendor or self.db.vendor_exists(vendor):
            return None

        logger.info("Registering new vendor '%s'", vendor)
        return self.db.create_station(
            vendor=vendor, name=station_name, specification=specification
        )
