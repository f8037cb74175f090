"""Main CLI entry point."""

import logging

import click
from bankimport.config import DB_PATH_ENV, PROFILES_ENV, ImportSettings
from bankimport.cli.error_handling import handle_domain_error
from bankimport.database.factories import create_sqlite_database
from bankimport.domain.errors import DomainError
from bankimport.domain.profiles import default_registry, load_registry
from bankimport.domain.statement_parser import StatementParser

# Import and register all commands at module level
from bankimport.cli.commands import (
    account,
    import_cmd,
    movements,
    preview,
    profiles,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--profiles",
    "profiles_path",
    type=click.Path(dir_okay=False),
    help=f"JSON file with bank profiles (overrides {PROFILES_ENV} environment variable)",
    envvar=PROFILES_ENV,
)
@click.option("--verbose", "-v", is_flag=True, help="Log detection and parsing details")
@click.pass_context
def cli(ctx, db_path: str | None, profiles_path: str | None, verbose: bool):
    """Bankimport - Bank statement ingestion.

    Detects the layout of CSV and Excel exports from many banks, normalizes
    their movements and imports them into accounts without duplicates.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if ctx.invoked_subcommand is None:
        return

    try:
        registry = load_registry(profiles_path) if profiles_path else default_registry()
        settings = ImportSettings.from_env()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    ctx.obj["registry"] = registry
    ctx.obj["settings"] = settings
    ctx.obj["parser"] = StatementParser(registry=registry, settings=settings)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()
    ctx.obj["db"] = db
    ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
preview.register_commands(cli)
import_cmd.register_commands(cli)
movements.register_commands(cli)
profiles.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
