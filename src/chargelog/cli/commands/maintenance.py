"""Maintenance record commands."""

from decimal import Decimal

import click
from chargelog.cli.error_handling import handle_domain_error
from chargelog.cli.vehicle_resolution import resolve_vehicle_or_exit
from chargelog.domain.entities import MaintenanceItem
from chargelog.domain.maintenance import MaintenanceService
from chargelog.domain.vehicle import VehicleService
from chargelog.utils.amount_parser import parse_amount, parse_optional_amount
from chargelog.utils.date_parser import parse_date


def parse_item(text: str) -> MaintenanceItem:
    """Parse a "name:quantity:unit price" item option.

    Raises:
        ValueError: If the item is malformed
    """
    parts = text.rsplit(":", 2)
    if len(parts) != 3 or not parts[0].strip():
        raise ValueError(f"Invalid item '{text}': expected NAME:QUANTITY:PRICE")
    name, quantity, unit_price = parts
    return MaintenanceItem(
        name=name.strip(), quantity=parse_amount(quantity), unit_price=parse_amount(unit_price)
    )


def _parse_fields(ctx, date, mileage, cost, next_maintenance, items):
    try:
        return {
            "date": parse_date(date) if date is not None else None,
            "mileage": parse_optional_amount(mileage),
            "cost": parse_optional_amount(cost),
            "next_maintenance": parse_optional_amount(next_maintenance),
            "items": [parse_item(item) for item in items] if items else None,
        }
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def _money(value: Decimal | None) -> str:
    return "-" if value is None else f"${value:,.2f}"


@click.group()
def maintenance_group():
    """Manage maintenance records."""
    pass


@maintenance_group.command("add")
@click.option("--date", required=True, help="Service date (YYYY-MM-DD or 'today')")
@click.option("--type", "type_", required=True, help="Kind of service")
@click.option("--location", required=True, help="Where the service happened")
@click.option("--mileage", required=True, help="Odometer reading at service")
@click.option(
    "--item",
    "items",
    multiple=True,
    help="Line item as NAME:QUANTITY:PRICE (repeatable)",
)
@click.option("--cost", help="Total cost, when no items are given")
@click.option("--description", help="Description")
@click.option("--next", "next_maintenance", help="Next service mileage")
@click.option("--notes", help="Notes")
@click.option("--vehicle", help="Vehicle name or ID (defaults to the default vehicle)")
@click.pass_context
def add_maintenance(
    ctx,
    date: str,
    type_: str,
    location: str,
    mileage: str,
    items: tuple[str, ...],
    cost: str | None,
    description: str | None,
    next_maintenance: str | None,
    notes: str | None,
    vehicle: str | None,
):
    """Add a maintenance record.

    The total is the sum of the item totals, or --cost when there are no items.

    Examples:
        chargelog maintenance add --date 2024-03-01 --type Tyres --location "Shop" \\
            --mileage 20000 --item "Tyre:4:3500"
    """
    db = ctx.obj["db"]
    service = MaintenanceService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, VehicleService(db), vehicle)
    fields = _parse_fields(ctx, date, mileage, cost, next_maintenance, items)

    try:
        record_id = service.create_record(
            type=type_,
            location=location,
            description=description,
            notes=notes,
            vehicle_id=vehicle_id,
            **fields,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    record = service.get_record(record_id)
    click.echo(f"Created maintenance record {record_id}")
    click.echo(f"  Total cost: {_money(record.total_cost)}")


@maintenance_group.command("update")
@click.argument("record_id")
@click.option("--date", help="Service date")
@click.option("--type", "type_", help="Kind of service")
@click.option("--location", help="Where the service happened")
@click.option("--mileage", help="Odometer reading at service")
@click.option("--item", "items", multiple=True, help="Replace items (NAME:QUANTITY:PRICE)")
@click.option("--cost", help="Total cost, when there are no items")
@click.option("--description", help="Description")
@click.option("--next", "next_maintenance", help="Next service mileage")
@click.option("--notes", help="Notes")
@click.option("--vehicle", help="Vehicle name or ID")
@click.pass_context
def update_maintenance(
    ctx,
    record_id: str,
    date: str | None,
    type_: str | None,
    location: str | None,
    mileage: str | None,
    items: tuple[str, ...],
    cost: str | None,
    description: str | None,
    next_maintenance: str | None,
    notes: str | None,
    vehicle: str | None,
) -> None:
    """Update a maintenance record. Only the given fields change."""
    db = ctx.obj["db"]
    service = MaintenanceService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, VehicleService(db), vehicle)
    fields = _parse_fields(ctx, date, mileage, cost, next_maintenance, items)

    try:
        service.update_record(
            record_id,
            type=type_,
            location=location,
            description=description,
            notes=notes,
            vehicle_id=vehicle_id,
            **fields,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated maintenance record {record_id}")


@maintenance_group.command("delete")
@click.argument("record_id")
@click.pass_context
def delete_maintenance(ctx, record_id: str) -> None:
    """Delete a maintenance record."""
    db = ctx.obj["db"]
    service = MaintenanceService(db)

    record = service.get_record(record_id)
    if record is None:
        click.echo(f"Error: Maintenance record {record_id} not found", err=True)
        ctx.exit(1)

    if not click.confirm(f"Are you sure you want to delete the {record.date} {record.type} record?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_record(record_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted maintenance record {record_id}")


@maintenance_group.command("list")
@click.option("--vehicle", help="Vehicle name or ID")
@click.option("--verbose", "-v", is_flag=True, help="Show line items and notes")
@click.pass_context
def list_maintenance(ctx, vehicle: str | None, verbose: bool):
    """List maintenance records, newest first."""
    db = ctx.obj["db"]
    service = MaintenanceService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, VehicleService(db), vehicle)

    records = service.list_records(vehicle_id=vehicle_id)
    if not records:
        click.echo("No maintenance records found.")
        return

    click.echo(f"\nFound {len(records)} maintenance record(s):")
    click.echo("-" * 90)
    for rec in records:
        click.echo(
            f"{rec.date} | {(rec.type or '')[:15]:15s} | {(rec.location or '')[:15]:15s} | "
            f"{rec.mileage or '-'!s:>10} | {_money(rec.total_cost):>10s} | {rec.id}"
        )
        if verbose:
            for item in rec.items:
                click.echo(
                    f"    {item.name}: {item.quantity} x {_money(item.unit_price)} = {_money(item.total)}"
                )
            if rec.next_maintenance is not None:
                click.echo(f"    Next service at: {rec.next_maintenance}")
            if rec.notes:
                click.echo(f"    Notes: {rec.notes}")


def register_commands(cli):
    """Register maintenance commands with main CLI."""
    cli.add_command(maintenance_group, name="maintenance")
