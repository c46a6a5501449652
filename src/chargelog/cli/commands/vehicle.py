"""Vehicle management commands."""

import click
from chargelog.cli.error_handling import handle_domain_error
from chargelog.cli.vehicle_resolution import resolve_vehicle_or_exit
from chargelog.domain.vehicle import VehicleService, days_owned, format_ownership
from chargelog.utils.date_parser import parse_date
from chargelog.utils.image import resize_image


def _parse_purchase_date(ctx, value: str | None):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid purchase date: {e}", err=True)
        ctx.exit(1)


def _load_image(ctx, path: str | None) -> str | None:
    if path is None:
        return None
    try:
        return resize_image(path)
    except (OSError, ValueError) as e:
        click.echo(f"Error: Could not read image: {e}", err=True)
        ctx.exit(1)


@click.group()
def vehicle_group():
    """Manage vehicles."""
    pass


@vehicle_group.command("add")
@click.argument("name", metavar="VEHICLE_NAME")
@click.option("--purchase-date", help="Purchase date (YYYY-MM-DD)")
@click.option("--image", type=click.Path(exists=True, dir_okay=False), help="Photo file")
@click.option("--default", "make_default", is_flag=True, help="Make this the default vehicle")
@click.pass_context
def add_vehicle(ctx, name: str, purchase_date: str | None, image: str | None, make_default: bool):
    """Add a vehicle.

    The photo is resized to fit within 800x800 before it is stored.

    Examples:
        chargelog vehicle add "Model 3" --purchase-date 2022-05-01 --default
    """
    db = ctx.obj["db"]
    service = VehicleService(db)

    bought = _parse_purchase_date(ctx, purchase_date)
    image_uri = _load_image(ctx, image)

    try:
        vehicle_id = service.create_vehicle(name=name, purchase_date=bought, image=image_uri)
        if make_default:
            service.set_default_vehicle(vehicle_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created vehicle '{name}' (ID: {vehicle_id})")
    if make_default:
        click.echo("Set as default vehicle")


@vehicle_group.command("list")
@click.pass_context
def list_vehicles(ctx):
    """List all vehicles."""
    db = ctx.obj["db"]
    service = VehicleService(db)

    vehicles = service.list_vehicles()
    if not vehicles:
        click.echo("No vehicles found.")
        return

    click.echo("\nVehicles:")
    click.echo("-" * 80)
    for v in vehicles:
        marker = "*" if v.is_default else " "
        owned = days_owned(v.purchase_date)
        owned_text = f"owned {format_ownership(owned)}" if owned is not None else ""
        click.echo(f"{marker} {v.name:20s} | {owned_text:30s} | ID: {v.id}")


@vehicle_group.command("update")
@click.argument("vehicle", metavar="VEHICLE")
@click.option("--name", help="New name")
@click.option("--purchase-date", help="Purchase date (YYYY-MM-DD)")
@click.option("--image", type=click.Path(exists=True, dir_okay=False), help="New photo file")
@click.option("--clear-image", is_flag=True, help="Remove the photo")
@click.pass_context
def update_vehicle(
    ctx,
    vehicle: str,
    name: str | None,
    purchase_date: str | None,
    image: str | None,
    clear_image: bool,
) -> None:
    """Update a vehicle.

    VEHICLE can be a vehicle name or ID.
    """
    db = ctx.obj["db"]
    service = VehicleService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, service, vehicle)

    bought = _parse_purchase_date(ctx, purchase_date)
    image_uri = _load_image(ctx, image)

    try:
        service.update_vehicle(
            vehicle_id,
            name=name,
            purchase_date=bought,
            image=image_uri,
            clear_image=clear_image,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated vehicle {vehicle_id}")


@vehicle_group.command("delete")
@click.argument("vehicle", metavar="VEHICLE")
@click.pass_context
def delete_vehicle(ctx, vehicle: str) -> None:
    """Delete a vehicle.

    VEHICLE can be a vehicle name or ID. Its records are kept without a vehicle.
    """
    db = ctx.obj["db"]
    service = VehicleService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, service, vehicle)
    vehicle_obj = service.get_vehicle(vehicle_id)

    if not click.confirm(f"Are you sure you want to delete vehicle '{vehicle_obj.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_vehicle(vehicle_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted vehicle '{vehicle_obj.name}'")


@vehicle_group.command("set-default")
@click.argument("vehicle", metavar="VEHICLE")
@click.pass_context
def set_default_vehicle(ctx, vehicle: str) -> None:
    """Make a vehicle the default one.

    VEHICLE can be a vehicle name or ID.
    """
    db = ctx.obj["db"]
    service = VehicleService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, service, vehicle)

    try:
        updated = service.set_default_vehicle(vehicle_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Default vehicle is now '{updated.name}'")


def register_commands(cli):
    """Register vehicle commands with main CLI."""
    cli.add_command(vehicle_group, name="vehicle")
