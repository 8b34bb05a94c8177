"""CLI helpers for date range resolution."""

from datetime import date

import click

from spendbook.utils.date_parser import parse_date, period_range


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    year: int | None = None,
    quarter: int | None = None,
    month: int | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a period (year/quarter/month) or explicit dates."""
    if (quarter is not None or month is not None) and year is None:
        click.echo("Error: --quarter and --month require --year.", err=True)
        ctx.exit(1)

    if year is not None and (start_date or end_date):
        click.echo(
            "Error: Period options (--year, --quarter, --month) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if year is not None:
        try:
            return period_range(year, quarter=quarter, month=month)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    start = None
    end = None

    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)

    return start, end
