"""Statistics commands."""

import click
from chargelog.cli.error_handling import handle_domain_error
from chargelog.cli.vehicle_resolution import resolve_vehicle_or_exit
from chargelog.domain.statistics import StatisticsService
from chargelog.domain.vehicle import VehicleService


def _echo_stats(stats) -> None:
    click.echo(f"  Total cost:    ${stats.total_cost:,.2f}")
    click.echo(f"  Total power:   {stats.total_power}")
    click.echo(f"  Sessions:      {stats.charging_count}")
    click.echo(f"  Average price: {stats.average_price}")


@click.group()
def stats_group():
    """Show charging statistics."""
    pass


@stats_group.command("month")
@click.option("--month", help="Month (YYYY-MM, 'this month', 'last month'); default this month")
@click.option("--vehicle", help="Vehicle name or ID")
@click.option("--detail", is_flag=True, help="Show daily totals, durations and top stations")
@click.pass_context
def month_stats(ctx, month: str | None, vehicle: str | None, detail: bool):
    """Show totals for one month."""
    db = ctx.obj["db"]
    service = StatisticsService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, VehicleService(db), vehicle)

    try:
        report = service.monthly_report(month, vehicle_id=vehicle_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nStatistics for {report.month}:")
    _echo_stats(report.stats)

    if not detail or report.stats.charging_count == 0:
        return

    click.echo("\nDaily totals:")
    for day in report.daily_totals:
        click.echo(f"  {day.day} | ${day.cost:>10,.2f} | {day.power}")

    click.echo("\nDurations:")
    for bucket in report.duration_buckets:
        click.echo(f"  {bucket.label:10s} {bucket.count}")

    click.echo("\nTop stations:")
    for usage in report.top_stations:
        click.echo(f"  {usage.label:30s} {usage.count}")


@stats_group.command("total")
@click.option("--vehicle", help="Vehicle name or ID")
@click.pass_context
def total_stats(ctx, vehicle: str | None):
    """Show lifetime totals."""
    db = ctx.obj["db"]
    service = StatisticsService(db)
    vehicle_id = resolve_vehicle_or_exit(ctx, VehicleService(db), vehicle)

    click.echo("\nLifetime statistics:")
    _echo_stats(service.lifetime_stats(vehicle_id=vehicle_id))


def register_commands(cli):
    """Register statistics commands with main CLI."""
    cli.add_command(stats_group, name="stats")
