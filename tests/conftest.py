"""Shared pytest fixtures for chargelog tests."""

import tempfile
import os
from datetime import date, time
from decimal import Decimal
import pytest

from chargelog.database.factories import create_sqlite_database
from chargelog.domain.charging import ChargingRecordService
from chargelog.domain.csv_transfer import ChargingCSVService, MaintenanceCSVService
from chargelog.domain.entities import ChargingInput, Specification
from chargelog.domain.maintenance import MaintenanceService
from chargelog.domain.station import StationService
from chargelog.domain.statistics import StatisticsService
from chargelog.domain.vehicle import VehicleService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def vehicle_service(temp_db):
    """Create a VehicleService with a temporary database."""
    return VehicleService(temp_db)


@pytest.fixture
def charging_service(temp_db):
    """Create a ChargingRecordService with a temporary database."""
    return ChargingRecordService(temp_db)


@pytest.fixture
def maintenance_service(temp_db):
    """Create a MaintenanceService with a temporary database."""
    return MaintenanceService(temp_db)


@pytest.fixture
def station_service(temp_db):
    """Create a StationService with a temporary database."""
    return StationService(temp_db)


@pytest.fixture
def statistics_service(temp_db):
    """Create a StatisticsService with a temporary database."""
    return StatisticsService(temp_db)


@pytest.fixture
def charging_csv_service(temp_db):
    """Create a ChargingCSVService with a temporary database."""
    return ChargingCSVService(temp_db)


@pytest.fixture
def maintenance_csv_service(temp_db):
    """Create a MaintenanceCSVService with a temporary database."""
    return MaintenanceCSVService(temp_db)


@pytest.fixture
def sample_vehicle(vehicle_service):
    """Create a sample default vehicle for testing."""
    vehicle_id = vehicle_service.create_vehicle(name="Model 3", purchase_date=date(2022, 5, 1))
    return vehicle_service.set_default_vehicle(vehicle_id)


def make_input(**overrides) -> ChargingInput:
    """Build a complete, valid charging input."""
    values = {
        "date": date(2024, 3, 15),
        "start_time": time(22, 0),
        "end_time": time(23, 30),
        "vendor": "Tesla",
        "station_name": "Taipei 101",
        "specification": Specification.TPC,
        "power": Decimal("15"),
        "price_per_unit": Decimal("6.5"),
    }
    values.update(overrides)
    return ChargingInput(**values)


@pytest.fixture
def input_factory():
    """Return the builder for complete charging inputs."""
    return make_input


@pytest.fixture
def sample_records(charging_service, sample_vehicle):
    """Create charging records across two months for the default vehicle."""
    ids = [
        charging_service.create_record(
            make_input(date=date(2024, 3, 1), current_mileage=Decimal("1000"))
        ),
        charging_service.create_record(
            make_input(
                date=date(2024, 3, 31),
                vendor="Yes!",
                station_name="Xinyi, Taipei",
                power=Decimal("20"),
                price_per_unit=Decimal("8"),
                parking_fee=Decimal("30"),
                current_mileage=Decimal("1250"),
            )
        ),
        charging_service.create_record(
            make_input(
                date=date(2024, 4, 1),
                start_time=time(23, 50),
                end_time=time(0, 10),
                power=Decimal("10"),
                price_per_unit=Decimal("5"),
                current_mileage=Decimal("1400"),
            )
        ),
    ]
    return [charging_service.get_record(record_id) for record_id in ids]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
