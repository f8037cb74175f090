"""Statement import command."""

import click
from bankimport.cli.commands.preview import show_fallback_help
from bankimport.cli.error_handling import handle_domain_error
from bankimport.cli.mapping_options import check_mapping_options, header_row_index, parse_mapping_option
from bankimport.domain.errors import DomainError
from bankimport.domain.movement_import import MovementImportService


@click.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID")
@click.option("--content-type", help="Declared content type (e.g. text/csv)")
@click.option("--map", "mapping", multiple=True, callback=parse_mapping_option, help="Column mapping ROLE=COLUMN (repeatable)")
@click.option("--header-row", type=click.IntRange(min=1), help="Header row number used with --map (1-based)")
@click.option("--profile", "profile_key", help="Bank profile for dates and decimals used with --map")
@click.option("--keep-duplicates", is_flag=True, help="Keep movements repeated within the file")
@click.pass_context
def import_statement(
    ctx,
    statement_file: str,
    account: str,
    content_type: str | None,
    mapping: dict[str, int] | None,
    header_row: int | None,
    profile_key: str | None,
    keep_duplicates: bool,
):
    """Import movements from a bank statement into an account."""
    check_mapping_options(mapping, header_row, profile_key)
    service = MovementImportService(ctx.obj["db"], parser=ctx.obj["parser"])

    try:
        result = service.import_file(
            statement_file,
            account,
            content_type=content_type,
            mapping=mapping,
            header_row=header_row_index(header_row),
            keep_duplicates=keep_duplicates,
            profile_key=profile_key,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if result["fallback_required"]:
        click.echo("Nothing imported.", err=True)
        show_fallback_help(result["available_columns"], click.format_filename(statement_file))
        ctx.exit(1)

    click.echo(f"\nImport complete ({result['bank']}, confidence {result['confidence']:.0%}):")
    click.echo(f"  Imported: {result['imported']} movements")
    click.echo(f"  Skipped: {result['skipped']} already imported")
    click.echo(f"  Duplicates in file: {result['duplicates_in_file']}")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)
    if result["warnings"]:
        click.echo(f"  Warnings: {len(result['warnings'])}")
        for warning in result["warnings"]:
            click.echo(f"    {warning}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statement)
