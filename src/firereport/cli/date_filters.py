"""CLI helpers for report period resolution."""

from datetime import date

import click

from firereport.domain.entities import DateRangeBoundaries
from firereport.domain.errors import ValidationError
from firereport.utils.date_parser import parse_date, resolve_date_range


def resolve_cli_date_range(
    ctx,
    *,
    period: str | None,
    year: int | None,
    start_date: str | None,
    end_date: str | None,
    today: date | None = None,
) -> DateRangeBoundaries:
    """Resolve the report period from --period/--year or explicit dates."""
    if period and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period:
        if today is None:
            today = date.today()
        try:
            return resolve_date_range(period, year or today.year, today=today)
        except ValidationError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    if not (start_date and end_date):
        click.echo(
            "Error: Specify --period (with optional --year) or both --start-date and --end-date.",
            err=True,
        )
        ctx.exit(1)

    try:
        start = parse_date(start_date)
    except ValueError as e:
        click.echo(f"Error: Invalid start date: {e}", err=True)
        ctx.exit(1)

    try:
        end = parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: Invalid end date: {e}", err=True)
        ctx.exit(1)

    return DateRangeBoundaries(start_date=start, end_date=end, year=start.year)
