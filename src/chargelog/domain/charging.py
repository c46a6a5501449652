"""Charging record domain service."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

from chargelog.domain.derivation import derive_all
from chargelog.domain.entities import (
    DEFAULT_UNIT,
    ChargingInput,
    ChargingRecord as ChargingRecordEntity,
    DerivedFields,
)
from chargelog.domain.errors import (
    NotFoundError,
    ValidationError,
    missing_field,
    negative_value,
    record_not_found,
    vehicle_not_found,
)
from chargelog.domain.station import StationService
from chargelog.utils.date_parser import month_bounds

if TYPE_CHECKING:
    from chargelog.database.base import Database

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("date", "start_time", "end_time", "vendor", "station_name", "power")

NON_NEGATIVE_FIELDS = (
    "duration",
    "power",
    "price_per_unit",
    "price_per_minute",
    "charging_fee",
    "parking_fee",
    "current_mileage",
)


def validate_input(charging_input: ChargingInput) -> None:
    """Check a session before it is derived and stored.

    Raises:
        ValidationError: On the first missing required field or negative number
    """
    for name in REQUIRED_FIELDS:
        value = getattr(charging_input, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(missing_field(name))

    for name in NON_NEGATIVE_FIELDS:
        value = getattr(charging_input, name)
        if value is not None and value < 0:
            raise ValidationError(negative_value(name))


class ChargingRecordService:
    """Service for recording, editing and listing charging sessions."""

    def __init__(self, db: Database):
        """Initialize charging record service.

        Args:
            db: Database instance
        """
        self.db = db
        self.stations = StationService(db)

    def previous_mileage(
        self,
        vehicle_id: Optional[str],
        record_date: date,
        start_time: Optional[time] = None,
        exclude_id: Optional[str] = None,
    ) -> Optional[Decimal]:
        """Odometer reading of the record preceding a session in the same log.

        Returns:
            The reading, or None when the session is the first of its log
        """
        previous = self.db.get_previous_charging_record(
            vehicle_id, record_date, start_time, exclude_id=exclude_id
        )
        return previous.current_mileage if previous is not None else None

    def preview(
        self, charging_input: ChargingInput, exclude_id: Optional[str] = None
    ) -> DerivedFields:
        """Derive the dependent fields of a partial input without storing it.

        Incomplete input is fine here; the mileage delta is only computed once
        the date and the current mileage are known.
        """
        previous = None
        if charging_input.date is not None and charging_input.current_mileage is not None:
            vehicle_id = self._vehicle_for(charging_input)
            previous = self.previous_mileage(
                vehicle_id,
                charging_input.date,
                charging_input.start_time,
                exclude_id=exclude_id,
            )
        return derive_all(charging_input, previous)

    def create_record(self, charging_input: ChargingInput) -> str:
        """Validate, derive and store a new charging session.

        When no vehicle is given the default vehicle is used (or none, when no
        default is set). An unknown vendor is registered as a station.

        Returns:
            Record ID

        Raises:
            ValidationError: If a required field is missing or a number is negative
            NotFoundError: If the given vehicle doesn't exist
            StorageError: If the store rejects the write; nothing is saved
        """
        validate_input(charging_input)
        vehicle_id = self._vehicle_for(charging_input)
        charging_input = replace(charging_input, vehicle_id=vehicle_id)

        fields = self._derive_fields(charging_input)
        record_id = self.db.create_charging_record(**fields)
        self.stations.ensure_vendor(
            charging_input.vendor,
            charging_input.station_name,
            charging_input.specification,
        )
        logger.info("Created charging record %s on %s", record_id, charging_input.date)
        return record_id

    def update_record(self, record_id: str, charging_input: ChargingInput) -> None:
        """Re-derive and replace a stored charging session.

        Raises:
            NotFoundError: If the record or the given vehicle doesn't exist
            ValidationError: If a required field is missing or a number is negative
        """
        if self.db.get_charging_record(record_id) is None:
            raise NotFoundError(record_not_found(record_id))

        validate_input(charging_input)
        if charging_input.vehicle_id is not None:
            self._require_vehicle(charging_input.vehicle_id)

        fields = self._derive_fields(charging_input, exclude_id=record_id)
        self.db.update_charging_record(record_id, **fields)
        self.stations.ensure_vendor(
            charging_input.vendor,
            charging_input.station_name,
            charging_input.specification,
        )
        logger.info("Updated charging record %s", record_id)

    def delete_record(self, record_id: str) -> None:
        """Delete a charging session.

        Raises:
            NotFoundError: If the record doesn't exist
        """
        self.db.delete_charging_record(record_id)
        logger.info("Deleted charging record %s", record_id)

    def get_record(self, record_id: str) -> Optional[ChargingRecordEntity]:
        """Get charging record by ID."""
        return self.db.get_charging_record(record_id)

    def list_records(
        self, month: Optional[str] = None, vehicle_id: Optional[str] = None
    ) -> list[ChargingRecordEntity]:
        """List charging records, newest first.

        Args:
            month: Optional "YYYY-MM" month filter
            vehicle_id: Optional vehicle filter

        Raises:
            ValueError: If month is not a valid month
        """
        start_date = end_date = None
        if month is not None:
            start_date, end_date = month_bounds(month)
        return self.db.list_charging_records(
            start_date=start_date, end_date=end_date, vehicle_id=vehicle_id
        )

    def _derive_fields(
        self, charging_input: ChargingInput, exclude_id: Optional[str] = None
    ) -> dict[str, Any]:
        previous = None
        if charging_input.current_mileage is not None:
            previous = self.previous_mileage(
                charging_input.vehicle_id,
                charging_input.date,
                charging_input.start_time,
                exclude_id=exclude_id,
            )
        derived = derive_all(charging_input, previous)

        if derived.increased_mileage is not None and derived.increased_mileage < 0:
            logger.warning(
                "Odometer reading %s on %s is lower than the previous reading %s",
                charging_input.current_mileage,
                charging_input.date,
                previous,
            )

        return {
            "date": charging_input.date,
            "start_time": charging_input.start_time,
            "end_time": charging_input.end_time,
            "duration": derived.duration,
            "vendor": charging_input.vendor.strip(),
            "station_name": charging_input.station_name.strip(),
            "specification": charging_input.specification,
            "power": charging_input.power,
            "unit": charging_input.unit or DEFAULT_UNIT,
            "price_per_unit": charging_input.price_per_unit,
            "price_per_minute": charging_input.price_per_minute,
            "charging_fee": derived.charging_fee,
            "parking_fee": charging_input.parking_fee or Decimal("0"),
            "current_mileage": charging_input.current_mileage,
            "increased_mileage": (
                derived.increased_mileage
                if derived.increased_mileage is not None
                else Decimal("0")
            ),
            "notes": charging_input.notes,
            "vehicle_id": charging_input.vehicle_id,
        }

    def _vehicle_for(self, charging_input: ChargingInput) -> Optional[str]:
        if charging_input.vehicle_id is not None:
            self._require_vehicle(charging_input.vehicle_id)
            return charging_input.vehicle_id
        return self.db.get_default_vehicle_id()

    def _require_vehicle(self, vehicle_id: str) -> None:
        if self.db.get_vehicle(vehicle_id) is None:
            raise NotFoundError(vehicle_not_found(vehicle_id))
