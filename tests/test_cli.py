"""Tests for the command-line interface."""

import click
import pytest

from chargelog.cli.main import cli
from chargelog.cli.vehicle_resolution import resolve_vehicle, resolve_vehicle_or_exit
from chargelog.database.sqlalchemy_db import SQLAlchemyDatabase
from chargelog.domain.errors import StorageError

ADD_ARGS = [
    "--date", "2024-03-15",
    "--start", "22:00",
    "--end", "23:30",
    "--vendor", "Tesla",
    "--station", "Taipei 101",
    "--spec", "TPC",
    "--power", "15",
    "--price-per-unit", "6.5",
]


@pytest.fixture
def run(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def invoke(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)

    return invoke


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


class TestVehicleResolution:
    """Tests for vehicle name/ID resolution."""

    def test_resolve_by_id_and_name(self, vehicle_service, sample_vehicle):
        """Test both the ID and the name resolve."""
        assert resolve_vehicle(vehicle_service, sample_vehicle.id) == sample_vehicle.id
        assert resolve_vehicle(vehicle_service, "Model 3") == sample_vehicle.id

    def test_resolve_unknown(self, vehicle_service):
        """Test an unknown vehicle raises ValueError."""
        with pytest.raises(ValueError, match="not found"):
            resolve_vehicle(vehicle_service, "Nope")

    def test_resolve_or_exit(self, vehicle_service, capsys):
        """Test the CLI helper exits with status 1."""
        assert resolve_vehicle_or_exit(_ctx(), vehicle_service, None) is None

        with pytest.raises(click.exceptions.Exit) as excinfo:
            resolve_vehicle_or_exit(_ctx(), vehicle_service, "Nope")

        assert excinfo.value.exit_code == 1
        assert "Vehicle 'Nope' not found" in capsys.readouterr().err


class TestMainGroup:
    """Tests for the top-level group."""

    def test_help(self, cli_runner):
        """Test help does not need a database."""
        result = cli_runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("record", "vehicle", "maintenance", "station", "stats", "export", "import"):
            assert command in result.output


class TestVehicleCommands:
    """Tests for vehicle commands."""

    def test_add_and_list(self, run):
        """Test adding a default vehicle and listing it."""
        result = run("vehicle", "add", "Model Y", "--purchase-date", "2023-01-01", "--default")

        assert result.exit_code == 0
        assert "Created vehicle 'Model Y'" in result.output
        assert "Set as default vehicle" in result.output

        result = run("vehicle", "list")
        assert result.exit_code == 0
        assert "* Model Y" in result.output
        assert "owned" in result.output

    def test_duplicate_name(self, run):
        """Test duplicate names fail with an error."""
        run("vehicle", "add", "Model Y")
        result = run("vehicle", "add", "Model Y")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_set_default(self, run, sample_vehicle):
        """Test switching the default vehicle by name."""
        run("vehicle", "add", "Model Y")
        result = run("vehicle", "set-default", "Model Y")

        assert result.exit_code == 0
        assert "Default vehicle is now 'Model Y'" in result.output

    def test_delete_cancelled(self, run, sample_vehicle):
        """Test answering no keeps the vehicle."""
        result = run("vehicle", "delete", "Model 3", input="n\n")

        assert result.exit_code == 0
        assert "Deletion cancelled." in result.output
        assert "Model 3" in run("vehicle", "list").output


class TestRecordCommands:
    """Tests for charging record commands."""

    def test_add_record(self, run, sample_vehicle):
        """Test adding a session prints the derived fields."""
        result = run("record", "add", *ADD_ARGS, "--mileage", "1000")

        assert result.exit_code == 0
        assert "Created charging record" in result.output
        assert "Duration: 90 min" in result.output
        assert "Charging fee: $97.50 (derived)" in result.output

    def test_add_storage_failure(self, run, monkeypatch):
        """Test a rejected write exits with an error and saves nothing."""

        def reject(self, **fields):
            raise StorageError("Could not create charging record: OperationalError")

        monkeypatch.setattr(SQLAlchemyDatabase, "create_charging_record", reject)

        result = run("record", "add", *ADD_ARGS)

        assert result.exit_code == 1
        assert "Error: Could not create charging record" in result.output
        assert "No changes were saved." in result.output
        assert "No vendors found." in run("station", "list", "--vendors").output
        assert "No charging records found." in run("record", "list").output

    def test_add_missing_field(self, run):
        """Test a missing required field is an error."""
        result = run("record", "add", "--date", "2024-03-15")

        assert result.exit_code == 1
        assert "Missing required field" in result.output

    def test_add_invalid_time(self, run):
        """Test a malformed time is an error."""
        result = run("record", "add", *ADD_ARGS, "--start", "25:99")

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_lower_mileage_warns(self, run, sample_records):
        """Test a reading below the previous one is stored with a warning."""
        result = run("record", "add", *ADD_ARGS, "--date", "2024-05-01", "--mileage", "1300")

        assert result.exit_code == 0
        assert "Increased mileage: -100" in result.output
        assert "Warning: mileage is lower" in result.output

    def test_preview_crosses_midnight(self, run):
        """Test preview derives values without storing anything."""
        result = run(
            "record", "preview", "--start", "23:50", "--end", "00:10", "--power", "10", "--price-per-unit", "5"
        )

        assert result.exit_code == 0
        assert "Duration: 20 min" in result.output
        assert "Charging fee: $50.00 (derived)" in result.output
        assert "No charging records found." in run("record", "list").output

    def test_list_month(self, run, sample_records):
        """Test listing one month with page totals."""
        result = run("record", "list", "--month", "2024-03")

        assert result.exit_code == 0
        assert "Found 2 record(s), page 1/1" in result.output
        assert "$287.50" in result.output

    def test_list_search(self, run, sample_records):
        """Test keyword search over station names."""
        result = run("record", "list", "--search", "xinyi")

        assert "Found 1 record(s)" in result.output

    def test_list_invalid_month(self, run):
        """Test a malformed month is an error."""
        result = run("record", "list", "--month", "March")

        assert result.exit_code == 1

    def test_show(self, run, sample_records):
        """Test showing one record."""
        result = run("record", "show", sample_records[1].id)

        assert result.exit_code == 0
        assert "Station: Xinyi, Taipei" in result.output
        assert "Parking fee: $30.00" in result.output

    def test_update(self, run, sample_records):
        """Test updating recomputes the fee."""
        record_id = sample_records[0].id
        result = run("record", "update", record_id, "--power", "20")

        assert result.exit_code == 0
        assert "Charging fee: $130.00 (derived)" in result.output
        assert "$130.00" in run("record", "show", record_id).output

    def test_delete(self, run, sample_records):
        """Test deleting after confirmation."""
        record_id = sample_records[0].id
        result = run("record", "delete", record_id, input="y\n")

        assert result.exit_code == 0
        assert f"Deleted charging record {record_id}" in result.output
        assert run("record", "show", record_id).exit_code == 1

    def test_unknown_record(self, run):
        """Test unknown record IDs are errors."""
        result = run("record", "show", "missing")

        assert result.exit_code == 1
        assert "Charging record missing not found" in result.output

    def test_unknown_vehicle(self, run):
        """Test unknown vehicles are errors."""
        result = run("record", "list", "--vehicle", "Nope")

        assert result.exit_code == 1
        assert "Vehicle 'Nope' not found" in result.output


class TestMaintenanceCommands:
    """Tests for maintenance commands."""

    def test_add_with_items(self, run, sample_vehicle):
        """Test the total is the sum of the items."""
        result = run(
            "maintenance", "add",
            "--date", "2024-03-01",
            "--type", "Tyres",
            "--location", "Garage",
            "--mileage", "20000",
            "--item", "Tyre:4:3500",
            "--item", "Alignment:1:200",
        )

        assert result.exit_code == 0
        assert "Total cost: $14,200.00" in result.output

        result = run("maintenance", "list", "-v")
        assert "Tyres" in result.output
        assert "Alignment" in result.output

    def test_bad_item(self, run):
        """Test malformed items are errors."""
        result = run(
            "maintenance", "add",
            "--date", "2024-03-01",
            "--type", "Tyres",
            "--location", "Garage",
            "--mileage", "20000",
            "--item", "Tyre",
        )

        assert result.exit_code == 1
        assert "NAME:QUANTITY:PRICE" in result.output


class TestStationCommands:
    """Tests for station commands."""

    def test_add_and_list(self, run):
        """Test adding a station and listing vendors."""
        result = run("station", "add", "Tesla", "--name", "Taipei 101", "--spec", "TPC", "--price-per-unit", "6.5")

        assert result.exit_code == 0
        assert "Created station for 'Tesla'" in result.output
        assert run("station", "list", "--vendors").output.strip() == "Tesla"

    def test_vendors_registered_by_records(self, run, sample_records):
        """Test vendors used in records show up."""
        result = run("station", "list", "--vendors")

        assert "Tesla" in result.output
        assert "Yes!" in result.output


class TestStatsCommands:
    """Tests for statistics commands."""

    def test_month(self, run, sample_records):
        """Test monthly totals."""
        result = run("stats", "month", "--month", "2024-03", "--detail")

        assert result.exit_code == 0
        assert "Statistics for 2024-03:" in result.output
        assert "$287.50" in result.output
        assert "Top stations:" in result.output

    def test_month_without_records(self, run):
        """Test an empty month shows zeros."""
        result = run("stats", "month", "--month", "2020-01")

        assert result.exit_code == 0
        assert "$0.00" in result.output

    def test_total(self, run, sample_records):
        """Test lifetime totals."""
        result = run("stats", "total")

        assert result.exit_code == 0
        assert "Lifetime statistics:" in result.output
        assert "$337.50" in result.output


class TestCSVCommands:
    """Tests for export and import commands."""

    def test_export_then_append(self, run, sample_records, tmp_path):
        """Test exported records import back in append mode."""
        path = str(tmp_path / "records.csv")

        result = run("export", "records", path, "--locale", "zh-TW")
        assert result.exit_code == 0
        assert "Exported 3 charging records" in result.output

        result = run("import", "records", path, "--mode", "append")
        assert result.exit_code == 0
        assert "Imported: 3 charging records" in result.output
        assert "Found 6 record(s)" in run("record", "list").output

    def test_import_reports_bad_rows(self, run, tmp_path):
        """Test invalid rows are listed on stderr."""
        path = tmp_path / "records.csv"
        path.write_text("Date\nnot a date\n", encoding="utf-8")

        result = run("import", "records", str(path))

        assert result.exit_code == 0
        assert "Skipped: 1 invalid rows" in result.output
        assert "Row 2:" in result.output

    def test_import_missing_file(self, run, tmp_path):
        """Test a missing file fails before import."""
        result = run("import", "records", str(tmp_path / "nope.csv"))

        assert result.exit_code != 0

    def test_maintenance_round_trip(self, run, tmp_path):
        """Test maintenance export and import."""
        run(
            "maintenance", "add",
            "--date", "2024-03-01",
            "--type", "Oil",
            "--location", "Garage",
            "--mileage", "5000",
            "--cost", "1200",
        )
        path = str(tmp_path / "maintenance.csv")

        assert "Exported 1 maintenance records" in run("export", "maintenance", path).output
        result = run("import", "maintenance", path)
        assert "Imported: 1 maintenance records" in result.output
