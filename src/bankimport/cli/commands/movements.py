"""Stored movement listing command."""

import click
from bankimport.cli.error_handling import handle_domain_error
from bankimport.domain.account import AccountService
from bankimport.domain.errors import DomainError
from bankimport.utils.amount_parser import format_amount
from bankimport.utils.date_parser import parse_date


@click.command("movements")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD, DD/MM/YYYY or e.g. 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD, DD/MM/YYYY or e.g. 'today')")
@click.pass_context
def list_movements(ctx, account: str | None, start_date: str | None, end_date: str | None):
    """List imported movements, newest first."""
    db = ctx.obj["db"]
    account_service = AccountService(db)

    account_id = None
    if account is not None:
        try:
            account_id = account_service.resolve_account(account).id
        except DomainError as e:
            handle_domain_error(ctx, e)
            return

    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    movements = db.list_movements(account_id=account_id, start_date=start, end_date=end)
    if not movements:
        click.echo("No movements found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}
    click.echo(f"\nFound {len(movements)} movement(s):")
    click.echo("-" * 90)
    for movement in movements:
        account_name = accounts.get(movement.account_id, "Unknown")
        click.echo(
            f"{movement.date.isoformat()} | {format_amount(movement.amount):>12} | "
            f"{account_name:15s} | {movement.description}"
        )


def register_commands(cli):
    """Register movements command with main CLI."""
    cli.add_command(list_movements)
