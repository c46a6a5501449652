"""CSV import commands."""

import click
from chargelog.cli.vehicle_resolution import resolve_vehicle_or_exit
from chargelog.domain.csv_transfer import ChargingCSVService, MaintenanceCSVService
from chargelog.domain.entities import ImportMode
from chargelog.domain.vehicle import VehicleService

MODE_OPTION = click.option(
    "--mode",
    type=click.Choice([mode.value for mode in ImportMode], case_sensitive=False),
    help="replace clears existing records first, append keeps them (or CHARGELOG_IMPORT_MODE)",
    envvar="CHARGELOG_IMPORT_MODE",
)


def _echo_result(result: dict, kind: str) -> None:
    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} {kind}")
    click.echo(f"  Skipped: {result['skipped']} invalid rows")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


def _run_import(ctx, service, csv_file: str, mode: str | None, vehicle: str | None, kind: str):
    vehicle_id = resolve_vehicle_or_exit(ctx, VehicleService(ctx.obj["db"]), vehicle)
    try:
        result = service.import_records(csv_file, mode=mode, vehicle_id=vehicle_id)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    _echo_result(result, kind)


@click.group()
def import_group():
    """Import records from CSV."""
    pass


@import_group.command("records")
@click.argument("csv_file", type=click.Path(exists=True))
@MODE_OPTION
@click.option("--vehicle", help="Vehicle for the imported records (name or ID)")
@click.pass_context
def import_records(ctx, csv_file: str, mode: str | None, vehicle: str | None):
    """Import charging records from CSV_FILE.

    The default mode is replace: every stored charging record is removed and
    the file's rows are inserted in one transaction.
    """
    service = ChargingCSVService(ctx.obj["db"])
    _run_import(ctx, service, csv_file, mode, vehicle, "charging records")


@import_group.command("maintenance")
@click.argument("csv_file", type=click.Path(exists=True))
@MODE_OPTION
@click.option("--vehicle", help="Vehicle for the imported records (name or ID)")
@click.pass_context
def import_maintenance(ctx, csv_file: str, mode: str | None, vehicle: str | None):
    """Import maintenance records from CSV_FILE. The default mode is append."""
    service = MaintenanceCSVService(ctx.obj["db"])
    _run_import(ctx, service, csv_file, mode, vehicle, "maintenance records")


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_group, name="import")
