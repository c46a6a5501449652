"""Main CLI entry point."""

import logging

import click
from chargelog.database.factories import create_sqlite_database

# Import and register all commands at module level
from chargelog.cli.commands import (
    record,
    vehicle,
    maintenance,
    station,
    stats,
    export_cmd,
    import_cmd,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CHARGELOG_DB_PATH environment variable)",
    envvar="CHARGELOG_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity (or CHARGELOG_LOG_LEVEL)",
    envvar="CHARGELOG_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Chargelog - Electric vehicle charging log.

    Record charging sessions and maintenance, manage vehicles, view monthly
    statistics and move data in and out as CSV.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
record.register_commands(cli)
vehicle.register_commands(cli)
maintenance.register_commands(cli)
station.register_commands(cli)
stats.register_commands(cli)
export_cmd.register_commands(cli)
import_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
