"""Maintenance record domain service."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

from chargelog.domain.entities import MaintenanceItem, MaintenanceRecord
from chargelog.domain.errors import (
    NotFoundError,
    ValidationError,
    maintenance_not_found,
    missing_field,
    negative_value,
    vehicle_not_found,
)
from chargelog.utils.amount_parser import round2, to_decimal

if TYPE_CHECKING:
    from chargelog.database.base import Database

logger = logging.getLogger(__name__)


def total_cost(items: Sequence[MaintenanceItem], cost: Optional[Decimal] = None) -> Decimal:
    """Record total: the sum of item totals, or the entered cost when there are no items."""
    if items:
        return round2(sum((item.total for item in items), Decimal("0")))
    return round2(to_decimal(cost))


def _validate_items(items: Sequence[MaintenanceItem]) -> None:
    for item in items:
        if not (item.name or "").strip():
            raise ValidationError(missing_field("item name"))
        if item.quantity < 0:
            raise ValidationError(negative_value("quantity"))
        if item.unit_price < 0:
            raise ValidationError(negative_value("unit_price"))


class MaintenanceService:
    """Service for managing maintenance records."""

    def __init__(self, db: Database):
        """Initialize maintenance service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_record(
        self,
        date: date,
        type: str,
        location: str,
        mileage: Decimal,
        items: Optional[Sequence[MaintenanceItem]] = None,
        cost: Optional[Decimal] = None,
        description: Optional[str] = None,
        next_maintenance: Optional[Decimal] = None,
        notes: Optional[str] = None,
        vehicle_id: Optional[str] = None,
    ) -> str:
        """Create a maintenance record.

        Args:
            date: Service date
            type: Kind of service (e.g. "Tyres")
            location: Where the service happened
            mileage: Odometer reading at service
            items: Optional line items
            cost: Total cost, used only when there are no items
            description: Optional description
            next_maintenance: Optional next-service mileage
            notes: Optional notes
            vehicle_id: Vehicle ID (defaults to the default vehicle)

        Returns:
            Maintenance record ID

        Raises:
            ValidationError: If a required field is missing or a number is negative
            NotFoundError: If the vehicle doesn't exist
        """
        items = list(items or [])
        fields = self._validated_fields(
            date=date,
            type=type,
            location=location,
            mileage=mileage,
            cost=cost,
            description=description,
            next_maintenance=next_maintenance,
            notes=notes,
            items=items,
        )
        if vehicle_id is None:
            vehicle_id = self.db.get_default_vehicle_id()
        else:
            self._require_vehicle(vehicle_id)
        fields["vehicle_id"] = vehicle_id

        record_id = self.db.create_maintenance_record(items, **fields)
        logger.info("Created maintenance record %s (%s)", record_id, fields["total_cost"])
        return record_id

    def update_record(
        self,
        record_id: str,
        date: Optional[date] = None,
        type: Optional[str] = None,
        location: Optional[str] = None,
        mileage: Optional[Decimal] = None,
        items: Optional[Sequence[MaintenanceItem]] = None,
        cost: Optional[Decimal] = None,
        description: Optional[str] = None,
        next_maintenance: Optional[Decimal] = None,
        notes: Optional[str] = None,
        vehicle_id: Optional[str] = None,
    ) -> None:
        """Update a maintenance record. Fields left as None keep their value.

        Raises:
            NotFoundError: If the record or vehicle doesn't exist
            ValidationError: If a required field is emptied or a number is negative
        """
        existing = self.get_record(record_id)
        if existing is None:
            raise NotFoundError(maintenance_not_found(record_id))

        items = list(items) if items is not None else list(existing.items)
        if cost is None and not items:
            cost = existing.total_cost

        fields = self._validated_fields(
            date=date if date is not None else existing.date,
            type=type if type is not None else existing.type,
            location=location if location is not None else existing.location,
            mileage=mileage if mileage is not None else existing.mileage,
            cost=cost,
            description=description if description is not None else existing.description,
            next_maintenance=(
                next_maintenance if next_maintenance is not None else existing.next_maintenance
            ),
            notes=notes if notes is not None else existing.notes,
            items=items,
        )
        if vehicle_id is not None:
            self._require_vehicle(vehicle_id)
            fields["vehicle_id"] = vehicle_id

        self.db.update_maintenance_record(record_id, items, **fields)

    def delete_record(self, record_id: str) -> None:
        """Delete a maintenance record and its items."""
        self.db.delete_maintenance_record(record_id)
        logger.info("Deleted maintenance record %s", record_id)

    def get_record(self, record_id: str) -> Optional[MaintenanceRecord]:
        """Get maintenance record by ID."""
        return self.db.get_maintenance_record(record_id)

    def list_records(self, vehicle_id: Optional[str] = None) -> list[MaintenanceRecord]:
        """List maintenance records, newest first."""
        return self.db.list_maintenance_records(vehicle_id=vehicle_id)

    def _validated_fields(
        self,
        items: list[MaintenanceItem],
        cost: Optional[Decimal],
        **fields: Any,
    ) -> dict[str, Any]:
        if fields["date"] is None:
            raise ValidationError(missing_field("date"))
        for name in ("type", "location"):
            if not (fields[name] or "").strip():
                raise ValidationError(missing_field(name))
            fields[name] = fields[name].strip()
        if fields["mileage"] is None:
            raise ValidationError(missing_field("mileage"))
        for name in ("mileage", "next_maintenance"):
            if fields[name] is not None and fields[name] < 0:
                raise ValidationError(negative_value(name))
        if cost is not None and cost < 0:
            raise ValidationError(negative_value("cost"))
        _validate_items(items)

        fields["total_cost"] = total_cost(items, cost)
        return fields

    def _require_vehicle(self, vehicle_id: str) -> None:
        if self.db.get_vehicle(vehicle_id) is None:
            raise NotFoundError(vehicle_not_found(vehicle_id))
