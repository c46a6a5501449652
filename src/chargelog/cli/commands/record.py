"""Charging record commands."""

from decimal import Decimal

import click
from chargelog.cli.error_handling import handle_domain_error
from chargelog.cli.vehicle_resolution import resolve_vehicle_or_exit
from chargelog.domain.charging import ChargingRecordService
from chargelog.domain.entities import ChargingInput, Specification
from chargelog.domain.history import DEFAULT_PAGE_SIZE, filter_records, paginate
from chargelog.domain.vehicle import VehicleService
from chargelog.utils.amount_parser import parse_optional_amount
from chargelog.utils.date_parser import parse_date, parse_month
from chargelog.utils.time_parser import format_time, parse_optional_time

SPEC_CHOICES = [spec.value for spec in Specification]


def record_options(func):
    """Attach the shared charging-session options to a command."""
    options = [
        click.option("--date", help="Session date (YYYY-MM-DD or 'today', 'yesterday')"),
        click.option("--start", "start_time", help="Start time (HH:MM)"),
        click.option("--end", "end_time", help="End time (HH:MM); earlier than start means next day"),
        click.option("--duration", type=int, help="Duration in minutes (used when times are missing)"),
        click.option("--vendor", help="Charging vendor / network"),
        click.option("--station", "station_name", help="Station name"),
        click.option(
            "--spec",
            "specification",
            type=click.Choice(SPEC_CHOICES, case_sensitive=False),
            help="Connector specification",
        ),
        click.option("--power", help="Energy charged (kWh)"),
        click.option("--unit", help="Energy unit label (default kWh)"),
        click.option("--price-per-unit", help="Price per unit of energy"),
        click.option("--price-per-minute", help="Price per minute"),
        click.option("--fee", "charging_fee", help="Charging fee, when no rate applies"),
        click.option("--parking-fee", help="Parking fee"),
        click.option("--mileage", "current_mileage", help="Odometer reading"),
        click.option("--notes", help="Notes"),
        click.option("--vehicle", help="Vehicle name or ID (defaults to the default vehicle)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _apply_options(ctx, charging_input: ChargingInput, options: dict) -> ChargingInput:
    """Parse the given option strings onto charging_input. Exits on bad values."""
    try:
        if options.get("date") is not None:
            charging_input.date = parse_date(options["date"])
        for name in ("start_time", "end_time"):
            if options.get(name) is not None:
                setattr(charging_input, name, parse_optional_time(options[name]))
        for name in (
            "power",
            "price_per_unit",
            "price_per_minute",
            "charging_fee",
            "parking_fee",
            "current_mileage",
        ):
            if options.get(name) is not None:
                setattr(charging_input, name, parse_optional_amount(options[name]))
        if options.get("specification") is not None:
            charging_input.specification = Specification.parse(options["specification"])
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    for name in ("duration", "vendor", "station_name", "unit", "notes"):
        if options.get(name) is not None:
            setattr(charging_input, name, options[name])

    vehicle = options.get("vehicle")
    if vehicle is not None:
        charging_input.vehicle_id = resolve_vehicle_or_exit(
            ctx, VehicleService(ctx.obj["db"]), vehicle
        )
    return charging_input


def _money(value: Decimal | None) -> str:
    return "-" if value is None else f"${value:,.2f}"


def _echo_derived(derived) -> None:
    click.echo(f"  Duration: {derived.duration} min")
    source = "derived" if derived.fee_derived else "entered"
    click.echo(f"  Charging fee: {_money(derived.charging_fee)} ({source})")
    if derived.average_price is not None:
        click.echo(f"  Average price: {derived.average_price}")
    if derived.increased_mileage is not None:
        click.echo(f"  Increased mileage: {derived.increased_mileage}")
        if derived.increased_mileage < 0:
            click.echo(
                "Warning: mileage is lower than the previous record's reading", err=True
            )
    if derived.cost_per_distance is not None:
        click.echo(f"  Cost per distance: {derived.cost_per_distance}")


@click.group()
def record_group():
    """Manage charging records."""
    pass


@record_group.command("add")
@record_options
@click.pass_context
def add_record(ctx, **options):
    """Add a charging session.

    Date, start, end, vendor, station and power are required. The fee is
    derived from power x price per unit, else duration x price per minute,
    else taken from --fee.

    Examples:
        chargelog record add --date today --start 22:00 --end 23:30 \\
            --vendor Tesla --station "Taipei 101" --power 15 --price-per-unit 6.5
    """
    db = ctx.obj["db"]
    service = ChargingRecordService(db)

    charging_input = _apply_options(ctx, ChargingInput(), options)
    try:
        derived = service.preview(charging_input)
        record_id = service.create_record(charging_input)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created charging record {record_id}")
    _echo_derived(derived)


@record_group.command("update")
@click.argument("record_id")
@record_options
@click.pass_context
def update_record(ctx, record_id: str, **options):
    """Update a charging session.

    Only the given fields change; derived fields are recomputed.

    Examples:
        chargelog record update 3f2a... --power 20
    """
    db = ctx.obj["db"]
    service = ChargingRecordService(db)

    existing = service.get_record(record_id)
    if existing is None:
        click.echo(f"Error: Charging record {record_id} not found", err=True)
        ctx.exit(1)

    charging_input = _apply_options(ctx, ChargingInput.from_record(existing), options)
    try:
        derived = service.preview(charging_input, exclude_id=record_id)
        service.update_record(record_id, charging_input)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated charging record {record_id}")
    _echo_derived(derived)


@record_group.command("preview")
@record_options
@click.pass_context
def preview_record(ctx, **options):
    """Show the derived fields of a session without saving it.

    Examples:
        chargelog record preview --start 23:50 --end 00:10 --power 10 --price-per-unit 5
    """
    db = ctx.obj["db"]
    service = ChargingRecordService(db)

    charging_input = _apply_options(ctx, ChargingInput(), options)
    try:
        derived = service.preview(charging_input)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo("Preview:")
    _echo_derived(derived)


@record_group.command("delete")
@click.argument("record_id")
@click.pass_context
def delete_record(ctx, record_id: str) -> None:
    """Delete a charging session."""
    db = ctx.obj["db"]
    service = ChargingRecordService(db)

    record = service.get_record(record_id)
    if record is None:
        click.echo(f"Error: Charging record {record_id} not found", err=True)
        ctx.exit(1)

    if not click.confirm(
        f"Are you sure you want to delete the {record.date} session at {record.vendor}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_record(record_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted charging record {record_id}")


@record_group.command("show")
@click.argument("record_id")
@click.pass_context
def show_record(ctx, record_id: str) -> None:
    """Show every field of a charging session."""
    db = ctx.obj["db"]
    service = ChargingRecordService(db)

    record = service.get_record(record_id)
    if record is None:
        click.echo(f"Error: Charging record {record_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"\nCharging record {record.id}")
    click.echo(f"  Date: {record.date}")
    click.echo(f"  Time: {format_time(record.start_time)} - {format_time(record.end_time)}")
    click.echo(f"  Duration: {record.duration} min")
    click.echo(f"  Vendor: {record.vendor}")
    click.echo(f"  Station: {record.station_name}")
    if record.specification is not None:
        click.echo(f"  Specification: {record.specification.label}")
    click.echo(f"  Power: {record.power} {record.unit}")
    if record.price_per_unit is not None:
        click.echo(f"  Price per unit: {record.price_per_unit}")
    if record.price_per_minute is not None:
        click.echo(f"  Price per minute: {record.price_per_minute}")
    click.echo(f"  Charging fee: {_money(record.charging_fee)}")
    click.echo(f"  Parking fee: {_money(record.parking_fee)}")
    if record.current_mileage is not None:
        click.echo(f"  Mileage: {record.current_mileage} (+{record.increased_mileage})")
    if record.notes:
        click.echo(f"  Notes: {record.notes}")


@record_group.command("list")
@click.option("--month", help="Month to show (YYYY-MM, 'this month', 'last month')")
@click.option("--vehicle", help="Vehicle name or ID")
@click.option("--search", "keyword", help="Match station, vendor or notes")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option(
    "--page-size", type=int, default=DEFAULT_PAGE_SIZE, show_default=True, help="Records per page"
)
@click.pass_context
def list_records(
    ctx, month: str | None, vehicle: str | None, keyword: str | None, page: int, page_size: int
):
    """List charging sessions, newest first."""
    db = ctx.obj["db"]
    service = ChargingRecordService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, VehicleService(db), vehicle)

    try:
        month_key = parse_month(month) if month else None
        records = filter_records(
            service.list_records(month=month_key, vehicle_id=vehicle_id), keyword=keyword
        )
        result = paginate(records, page=page, page_size=page_size)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not result.records:
        click.echo("No charging records found.")
        return

    click.echo(f"\nFound {result.total_count} record(s), page {result.page}/{result.total_pages}:")
    click.echo("-" * 100)
    for rec in result.records:
        times = f"{format_time(rec.start_time)}-{format_time(rec.end_time)}"
        click.echo(
            f"{rec.date} {times:11s} | {rec.vendor[:12]:12s} | {rec.station_name[:20]:20s} | "
            f"{rec.power:>8} {rec.unit:4s} | {_money(rec.total_cost):>10s} | {rec.id}"
        )
    click.echo("-" * 100)
    click.echo(f"Page total: {result.total_power} | {_money(result.total_cost)}")


def register_commands(cli):
    """Register charging record commands with main CLI."""
    cli.add_command(record_group, name="record")
