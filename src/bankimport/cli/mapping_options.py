"""Parsing of --map ROLE=COLUMN options."""

from typing import Optional

import click

from bankimport.domain.entities import ROLES


def parse_mapping_option(ctx, param, values: tuple[str, ...]) -> Optional[dict[str, int]]:
    """Click callback turning ("date=0", "amount=3") into {"date": 0, "amount": 3}."""
    if not values:
        return None

    mapping: dict[str, int] = {}
    for value in values:
        role, sep, column = value.partition("=")
        role = role.strip().lower()
        if not sep or not role or not column.strip():
            raise click.BadParameter(f"'{value}' must look like ROLE=COLUMN, e.g. date=0")
        if role not in ROLES:
            raise click.BadParameter(f"Unknown role '{role}'. Must be one of: {', '.join(ROLES)}")
        if role in mapping:
            raise click.BadParameter(f"Role '{role}' is mapped more than once")
        try:
            index = int(column)
        except ValueError:
            raise click.BadParameter(f"Column for '{role}' must be a number, got '{column}'")
        if index < 0:
            raise click.BadParameter(f"Column for '{role}' must not be negative")
        mapping[role] = index
    return mapping


def header_row_index(header_row: Optional[int]) -> Optional[int]:
    """Convert a 1-based --header-row to a 0-based row index."""
    if header_row is None:
        return None
    return header_row - 1


def check_mapping_options(
    mapping: Optional[dict[str, int]], header_row: Optional[int], profile_key: Optional[str]
) -> None:
    """Reject --header-row and --profile when no --map is given."""
    if mapping is None and (header_row is not None or profile_key is not None):
        raise click.UsageError("--header-row and --profile can only be used together with --map")
