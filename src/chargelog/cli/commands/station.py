"""Charging station / vendor commands."""

import click
from chargelog.cli.error_handling import handle_domain_error
from chargelog.domain.entities import Specification
from chargelog.domain.station import StationService
from chargelog.utils.amount_parser import parse_optional_amount


@click.group()
def station_group():
    """Manage known vendors and stations."""
    pass


@station_group.command("list")
@click.option("--vendors", "vendors_only", is_flag=True, help="List vendor names only")
@click.pass_context
def list_stations(ctx, vendors_only: bool):
    """List known stations."""
    db = ctx.obj["db"]
    service = StationService(db)

    if vendors_only:
        vendors = service.list_vendors()
        if not vendors:
            click.echo("No vendors found.")
            return
        for vendor in vendors:
            click.echo(vendor)
        return

    stations = service.list_stations()
    if not stations:
        click.echo("No stations found.")
        return

    click.echo("\nStations:")
    click.echo("-" * 80)
    for s in stations:
        spec = s.specification.value if s.specification else ""
        price = f"{s.price_per_unit}" if s.price_per_unit is not None else ""
        click.echo(f"{s.vendor:15s} | {(s.name or '')[:25]:25s} | {spec:6s} | {price}")


@station_group.command("add")
@click.argument("vendor")
@click.option("--name", help="Station name")
@click.option(
    "--spec",
    "specification",
    type=click.Choice([spec.value for spec in Specification], case_sensitive=False),
    help="Default connector specification",
)
@click.option("--price-per-unit", help="Default price per unit")
@click.pass_context
def add_station(ctx, vendor: str, name: str | None, specification: str | None, price_per_unit: str | None):
    """Add a station entry for VENDOR.

    Examples:
        chargelog station add Tesla --name "Taipei 101" --spec TPC --price-per-unit 6.5
    """
    db = ctx.obj["db"]
    service = StationService(db)

    try:
        station_id = service.create_station(
            vendor=vendor,
            name=name,
            specification=Specification.parse(specification),
            price_per_unit=parse_optional_amount(price_per_unit),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created station for '{vendor}' (ID: {station_id})")


def register_commands(cli):
    """Register station commands with main CLI."""
    cli.add_command(station_group, name="station")
