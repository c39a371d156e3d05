"""Main CLI entry point."""

import logging

import click
from tallybook.database.factories import open_ledger

# Import and register all commands at module level
from tallybook.cli.commands import (
    account,
    init_accounts,
    add,
    transaction,
    import_cmd,
    report,
    ledger,
    asset,
    reconcile,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TALLYBOOK_DB_PATH environment variable)",
    envvar="TALLYBOOK_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log database writes to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Tallybook - small-business bookkeeping.

    Keep a chart of accounts and a double-entry journal, and produce income
    statements, balance sheets and cash flow summaries for any period.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db, settings = open_ledger(database_path=db_path)
        ctx.obj["db"] = db
        ctx.obj["settings"] = settings
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
init_accounts.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
import_cmd.register_commands(cli)
report.register_commands(cli)
ledger.register_commands(cli)
asset.register_commands(cli)
reconcile.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
