"""CSV import/export domain services."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from chargelog.domain.csv_format import (
    CHARGING_HEADERS,
    CSV_ENCODING,
    DEFAULT_LOCALE,
    MAINTENANCE_HEADERS,
    charging_row,
    header_for,
    maintenance_row,
    parse_charging_row,
    parse_maintenance_row,
    read_csv_rows,
    render_csv,
)
from chargelog.domain.entities import ChargingRecord, ImportMode, MaintenanceRecord
from chargelog.domain.errors import NotFoundError, vehicle_not_found
from chargelog.domain.station import StationService

if TYPE_CHECKING:
    from chargelog.database.base import Database

logger = logging.getLogger(__name__)


def _read_file(csv_file_path: str | Path) -> str:
    csv_path = Path(csv_file_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_file_path}")
    with open(csv_path, "r", encoding=CSV_ENCODING, newline="") as f:
        return f.read()


def _write_file(csv_file_path: str | Path, text: str) -> None:
    with open(csv_file_path, "w", encoding=CSV_ENCODING, newline="") as f:
        f.write(text)


def _parse_rows(
    text: str, parse_row: Callable[[list[str]], dict[str, Any]]
) -> tuple[list[dict[str, Any]], list[str]]:
    parsed = []
    errors = []
    for row_num, values in read_csv_rows(text):
        try:
            parsed.append(parse_row(values))
        except ValueError as e:
            errors.append(f"Row {row_num}: {e}")
    return parsed, errors


class _CSVService:
    default_mode = ImportMode.APPEND
    kind = "records"

    def __init__(self, db: Database):
        """Initialize CSV service.

        Args:
            db: Database instance
        """
        self.db = db

    def _resolve_vehicle(self, vehicle_id: Optional[str]) -> Optional[str]:
        if vehicle_id is None:
            return self.db.get_default_vehicle_id()
        if self.db.get_vehicle(vehicle_id) is None:
            raise NotFoundError(vehicle_not_found(vehicle_id))
        return vehicle_id

    def _import(
        self,
        csv_file_path: str | Path,
        parse_row: Callable[[list[str]], dict[str, Any]],
        add_rows: Callable[[list[dict[str, Any]], bool], int],
        mode: Optional[ImportMode | str],
        vehicle_id: Optional[str],
    ) -> dict[str, Any]:
        if mode is None:
            mode = self.default_mode
        elif not isinstance(mode, ImportMode):
            mode = ImportMode(mode.strip().lower())
        vehicle_id = self._resolve_vehicle(vehicle_id)
        text = _read_file(csv_file_path)

        rows, errors = _parse_rows(text, parse_row)
        for row in rows:
            row["vehicle_id"] = vehicle_id

        imported = 0
        if rows:
            imported = add_rows(rows, mode == ImportMode.REPLACE)
        elif mode == ImportMode.REPLACE:
            logger.warning("No valid rows in %s; existing %s kept", csv_file_path, self.kind)

        if errors:
            logger.warning("Skipped %d invalid rows in %s", len(errors), csv_file_path)
        logger.info("Imported %d %s from %s (%s)", imported, self.kind, csv_file_path, mode.value)
        return {
            "imported": imported,
            "skipped": len(errors),
            "errors": errors,
        }


class ChargingCSVService(_CSVService):
    """Service for exporting and importing charging records as CSV."""

    default_mode = ImportMode.REPLACE
    kind = "charging records"

    def export_text(
        self, records: Iterable[ChargingRecord], locale: Optional[str] = DEFAULT_LOCALE
    ) -> str:
        """Render records as CSV text. The byte-order mark is added when writing a file."""
        header = header_for(CHARGING_HEADERS, locale)
        return render_csv(header, (charging_row(record) for record in records))

    def export_records(
        self,
        csv_file_path: str | Path,
        locale: Optional[str] = DEFAULT_LOCALE,
        vehicle_id: Optional[str] = None,
    ) -> int:
        """Write charging records (newest first) to a CSV file.

        Returns:
            Number of exported records

        Raises:
            ValueError: If the locale is not supported
        """
        records = self.db.list_charging_records(vehicle_id=vehicle_id)
        _write_file(csv_file_path, self.export_text(records, locale))
        logger.info("Exported %d charging records to %s", len(records), csv_file_path)
        return len(records)

    def import_records(
        self,
        csv_file_path: str | Path,
        mode: Optional[ImportMode | str] = None,
        vehicle_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """Import charging records from a CSV file.

        Args:
            csv_file_path: Path to CSV file
            mode: REPLACE (default) clears every stored charging record in the
                same transaction as the insert; APPEND keeps them
            vehicle_id: Vehicle for the imported records (defaults to the
                default vehicle)

        Returns:
            Dict with import statistics:
            - imported: number of records imported
            - skipped: number of invalid rows
            - errors: list of "Row N: ..." messages

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            NotFoundError: If the vehicle doesn't exist
        """
        return self._import(csv_file_path, parse_charging_row, self._add_rows, mode, vehicle_id)

    def _add_rows(self, rows: list[dict[str, Any]], replace: bool) -> int:
        imported = self.db.add_charging_records(rows, replace=replace)
        stations = StationService(self.db)
        for row in rows:
            stations.ensure_vendor(row["vendor"], row["station_name"], row["specification"])
        return imported


class MaintenanceCSVService(_CSVService):
    """Service for exporting and importing maintenance records as CSV."""

    default_mode = ImportMode.APPEND
    kind = "maintenance records"

    def export_text(
        self, records: Iterable[MaintenanceRecord], locale: Optional[str] = DEFAULT_LOCALE
    ) -> str:
        """Render maintenance records as CSV text."""
        header = header_for(MAINTENANCE_HEADERS, locale)
        return render_csv(header, (maintenance_row(record) for record in records))

    def export_records(
        self,
        csv_file_path: str | Path,
        locale: Optional[str] = DEFAULT_LOCALE,
        vehicle_id: Optional[str] = None,
    ) -> int:
        """Write maintenance records to a CSV file.

        Returns:
            Number of exported records
        """
        records = self.db.list_maintenance_records(vehicle_id=vehicle_id)
        _write_file(csv_file_path, self.export_text(records, locale))
        logger.info("Exported %d maintenance records to %s", len(records), csv_file_path)
        return len(records)

    def import_records(
        self,
        csv_file_path: str | Path,
        mode: Optional[ImportMode | str] = None,
        vehicle_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """Import maintenance records (without line items) from a CSV file.

        Same result shape as ChargingCSVService.import_records; the default
        mode is APPEND.
        """
        return self._import(
            csv_file_path,
            parse_maintenance_row,
            lambda rows, replace: self.db.add_maintenance_records(rows, replace=replace),
            mode,
            vehicle_id,
        )
