"""Statement preview command."""

import click
from bankimport.cli.error_handling import handle_domain_error
from bankimport.cli.mapping_options import check_mapping_options, header_row_index, parse_mapping_option
from bankimport.domain.errors import DomainError
from bankimport.domain.movement_import import MovementImportService
from bankimport.utils.amount_parser import format_amount


def show_fallback_help(headers: list[str] | tuple[str, ...], file_name: str) -> None:
    """Explain how to supply a manual mapping when no header was detected."""
    click.echo("Could not detect the header row of this statement.")
    if headers:
        click.echo("\nColumns of the closest header candidate:")
        for index, cell in enumerate(headers):
            click.echo(f"  [{index}] {cell}")
    click.echo("\nMap the columns by index and name the header row, for example:")
    click.echo(
        f"  bankimport preview {file_name} --header-row 1 "
        "--map date=0 --map description=1 --map amount=2"
    )


@click.command("preview")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--content-type", help="Declared content type (e.g. text/csv)")
@click.option("--map", "mapping", multiple=True, callback=parse_mapping_option, help="Column mapping ROLE=COLUMN (repeatable)")
@click.option("--header-row", type=click.IntRange(min=1), help="Header row number used with --map (1-based)")
@click.option("--profile", "profile_key", help="Bank profile for dates and decimals used with --map")
@click.option("--limit", type=click.IntRange(min=1), help="Number of movements to show")
@click.pass_context
def preview_statement(
    ctx,
    statement_file: str,
    content_type: str | None,
    mapping: dict[str, int] | None,
    header_row: int | None,
    profile_key: str | None,
    limit: int | None,
):
    """Parse a statement and show what would be imported.

    Examples:
        bankimport preview movimientos.xlsx
        bankimport preview export.csv --header-row 3 --map date=0 --map description=2 --map amount=4
    """
    check_mapping_options(mapping, header_row, profile_key)
    service = MovementImportService(ctx.obj["db"], parser=ctx.obj["parser"])

    try:
        result = service.parse_file(
            statement_file,
            content_type=content_type,
            mapping=mapping,
            header_row=header_row_index(header_row),
            profile_key=profile_key,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if result.header is None:
        for error in result.errors:
            click.echo(f"Error: {error}", err=True)
        ctx.exit(1)

    if result.fallback_required:
        show_fallback_help(result.header.headers, click.format_filename(statement_file))
        return

    stats = result.duplicate_stats
    click.echo(f"Bank: {result.bank_name} ({result.bank_key}), confidence {result.confidence:.0%}")
    if result.sheet_name:
        click.echo(f"Sheet: {result.sheet_name}")
    click.echo(f"Header row: {result.header.header_row_index + 1}")
    if result.decimal_separator:
        click.echo(f"Decimal separator: '{result.decimal_separator}'")
    click.echo(
        f"Rows: {result.total_rows} | Movements: {len(result.movements)} | "
        f"Errors: {len(result.errors)} | Duplicates: {stats.duplicates} ({stats.duplicate_groups} groups)"
    )

    shown = result.movements[:limit] if limit else result.preview
    if shown:
        click.echo(f"\n{'Date':<12}{'Amount':>12}  Description")
        click.echo("-" * 70)
        for movement in shown:
            marker = " [duplicate]" if movement.is_duplicate else ""
            click.echo(
                f"{movement.date.isoformat():<12}{format_amount(movement.amount):>12}  "
                f"{movement.description}{marker}"
            )
        if len(shown) < len(result.movements):
            click.echo(f"... {len(result.movements) - len(shown)} more")

    if result.errors:
        click.echo("\nErrors:")
        for error in result.errors:
            click.echo(f"  {error}")

    if result.warnings:
        click.echo("\nWarnings:")
        for warning in result.warnings:
            click.echo(f"  {warning}")


def register_commands(cli):
    """Register preview command with main CLI."""
    cli.add_command(preview_statement)
