"""People commands."""

import click

from spendbook.cli.date_filters import resolve_cli_date_range
from spendbook.cli.error_handling import handle_domain_error
from spendbook.cli.resolution import resolve_or_exit, resolve_page_size
from spendbook.domain.errors import DomainError
from spendbook.domain.filters import PEOPLE_COLUMNS, SortDirection, SortState, TransactionFilters
from spendbook.domain.nature import FILTER_NAMES, nature_from_filter
from spendbook.domain.person import PersonService


@click.group()
def people_group():
    """Manage people and view per-person summaries."""
    pass


@people_group.command("create")
@click.argument("name")
@click.option("--group", "is_group", is_flag=True, help="The entry is a group of people")
@click.pass_context
def create_person(ctx, name: str, is_group: bool):
    """Create a person or group."""
    service = PersonService(ctx.obj["db"])
    try:
        person_id = service.create_person(name=name, is_group=is_group)
        click.echo(f"Created person '{name.strip()}' (ID: {person_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@people_group.command("summary")
@click.option("--search", default="", help="Filter people by name")
@click.option("--type", "nature", type=click.Choice(("all",) + FILTER_NAMES), default="all")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--year", type=int, help="Limit to a calendar year")
@click.option("--quarter", type=int, help="Limit to a quarter of --year (1-4)")
@click.option("--month", type=int, help="Limit to a month of --year (1-12)")
@click.option(
    "--sort",
    "sort_column",
    type=click.Choice(sorted(PEOPLE_COLUMNS)),
    help="Sort column (default: name)",
)
@click.option("--desc", is_flag=True, help="Sort descending")
@click.option("--page", type=int, default=1, help="Page number")
@click.option("--page-size", type=int, help="People per page")
@click.option("--verbose", "-v", is_flag=True, help="List each person's transactions")
@click.pass_context
def people_summary(
    ctx,
    search: str,
    nature: str,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    year: int | None,
    quarter: int | None,
    month: int | None,
    sort_column: str | None,
    desc: bool,
    page: int,
    page_size: int | None,
    verbose: bool,
):
    """Show totals per person: transactions, amount, cashback and last date."""
    db = ctx.obj["db"]
    service = PersonService(db)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, year=year, quarter=quarter, month=month
    )
    account_id = resolve_or_exit(ctx, db.list_accounts(), account, "Account")

    filters = TransactionFilters(
        nature=nature_from_filter(nature),
        account_id=account_id,
        search=search,
        date_from=start,
        date_to=end,
        page=page,
        page_size=resolve_page_size(ctx, page_size),
    )
    sort = None
    if sort_column:
        sort = SortState(sort_column, SortDirection.DESC if desc else SortDirection.ASC)

    try:
        result = service.list_people(filters, sort=sort)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No people found.")
        return

    click.echo("\nPeople:")
    click.echo("-" * 100)
    for person in result.items:
        last = person.last_transaction_date.date().isoformat() if person.last_transaction_date else "-"
        click.echo(
            f"{person.name:22s} | {person.total_transactions:3d} txns"
            f" | Amount: {person.total_amount:>16,.2f}"
            f" | Back: {person.total_back:>12,.2f}"
            f" | Last: {last}"
        )
        if verbose:
            for txn in person.transactions:
                click.echo(
                    f"    {txn.date.date().isoformat()}  {txn.amount:>16,.2f}  {txn.notes or ''}"
                )
    click.echo(f"\nPage {result.page}/{result.total_pages} ({result.total} people)")


def register_commands(cli):
    """Register people commands with main CLI."""
    cli.add_command(people_group, name="people")
