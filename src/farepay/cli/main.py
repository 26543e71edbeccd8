"""Main CLI entry point."""

import click
from farepay.database.factories import create_database
from farepay.logging import setup_logging

# Import and register all commands at module level
from farepay.cli.commands import card, vehicle, tap, topup, transaction, serve


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides FAREPAY_DB_PATH environment variable)",
    envvar="FAREPAY_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL (overrides FAREPAY_DATABASE_URL; wins over --db-path)",
    envvar="FAREPAY_DATABASE_URL",
)
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    help="Log level",
    envvar="LOG_LEVEL",
)
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, log_level: str, json_logs: bool):
    """Farepay - cashless fare payments for NFC cards.

    Register cards and vehicles, process fare taps from validators, top up
    balances and inspect the ledger.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level, json_output=json_logs)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=database_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
card.register_commands(cli)
vehicle.register_commands(cli)
tap.register_commands(cli)
topup.register_commands(cli)
transaction.register_commands(cli)
serve.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
