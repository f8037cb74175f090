"""Bank profile listing command."""

import click


@click.command("profiles")
@click.pass_context
def list_profiles(ctx):
    """List the bank profiles used for header detection."""
    registry = ctx.obj["registry"]

    click.echo("\nBank profiles:")
    click.echo("-" * 70)
    for profile in registry.all_profiles():
        click.echo(
            f"{profile.key:12s} | {profile.name:20s} | Dates: {profile.date_format:10s} | "
            f"Decimal: '{profile.decimal_separator}'"
        )


def register_commands(cli):
    """Register profiles command with main CLI."""
    cli.add_command(list_profiles)
