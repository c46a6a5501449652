"""CLI helpers for vehicle resolution."""

from __future__ import annotations

import click

from chargelog.domain.vehicle import VehicleService


def resolve_vehicle(vehicle_service: VehicleService, vehicle: str) -> str:
    """Resolve a vehicle name or ID to a vehicle ID.

    Raises:
        ValueError: If no vehicle matches
    """
    found = vehicle_service.get_vehicle(vehicle)
    if found is not None:
        return found.id

    found = vehicle_service.get_vehicle_by_name(vehicle)
    if found is not None:
        return found.id

    raise ValueError(f"Vehicle '{vehicle}' not found")


def resolve_vehicle_or_exit(
    ctx: click.Context, vehicle_service: VehicleService, vehicle: str | None
) -> str | None:
    """Resolve vehicle name or ID, or exit with a CLI error.

    None passes through so the default vehicle applies.
    """
    if vehicle is None:
        return None
    try:
        return resolve_vehicle(vehicle_service, vehicle)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
