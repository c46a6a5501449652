"""CSV export commands."""

import click
from chargelog.cli.vehicle_resolution import resolve_vehicle_or_exit
from chargelog.domain.csv_format import DEFAULT_LOCALE, SUPPORTED_LOCALES
from chargelog.domain.csv_transfer import ChargingCSVService, MaintenanceCSVService
from chargelog.domain.vehicle import VehicleService

LOCALE_OPTION = click.option(
    "--locale",
    type=click.Choice(SUPPORTED_LOCALES),
    default=DEFAULT_LOCALE,
    show_default=True,
    help="Header language (or CHARGELOG_LOCALE)",
    envvar="CHARGELOG_LOCALE",
)


@click.group()
def export_group():
    """Export records to CSV."""
    pass


@export_group.command("records")
@click.argument("csv_file", type=click.Path(dir_okay=False, writable=True))
@LOCALE_OPTION
@click.option("--vehicle", help="Only this vehicle's records (name or ID)")
@click.pass_context
def export_records(ctx, csv_file: str, locale: str, vehicle: str | None):
    """Export charging records to CSV_FILE."""
    db = ctx.obj["db"]
    service = ChargingCSVService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, VehicleService(db), vehicle)

    try:
        count = service.export_records(csv_file, locale=locale, vehicle_id=vehicle_id)
    except (ValueError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported {count} charging records to {csv_file}")


@export_group.command("maintenance")
@click.argument("csv_file", type=click.Path(dir_okay=False, writable=True))
@LOCALE_OPTION
@click.option("--vehicle", help="Only this vehicle's records (name or ID)")
@click.pass_context
def export_maintenance(ctx, csv_file: str, locale: str, vehicle: str | None):
    """Export maintenance records to CSV_FILE."""
    db = ctx.obj["db"]
    service = MaintenanceCSVService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, VehicleService(db), vehicle)

    try:
        count = service.export_records(csv_file, locale=locale, vehicle_id=vehicle_id)
    except (ValueError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported {count} maintenance records to {csv_file}")


def register_commands(cli):
    """Register export commands with main CLI."""
    cli.add_command(export_group, name="export")
