"""Transaction management commands."""

from datetime import UTC, datetime, time

import click

from spendbook.cli.date_filters import resolve_cli_date_range
from spendbook.cli.error_handling import handle_domain_error
from spendbook.cli.resolution import resolve_or_exit, resolve_page_size
from spendbook.domain.entities import BulkDeletePolicy, CashbackRequest, TransactionDraft
from spendbook.domain.errors import DomainError
from spendbook.domain.filters import (
    TRANSACTION_COLUMNS,
    SortDirection,
    SortState,
    TransactionFilters,
    total_pages,
)
from spendbook.domain.nature import FILTER_NAMES, nature_from_filter, nature_label
from spendbook.domain.transaction import TransactionService
from spendbook.utils.amount_parser import parse_amount
from spendbook.utils.date_parser import parse_date


def _service(ctx) -> TransactionService:
    settings = ctx.obj["settings"]
    return TransactionService(ctx.obj["db"], bulk_delete_policy=settings.bulk_delete_policy)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option(
    "--type", "nature", type=click.Choice(FILTER_NAMES), required=True, help="Transaction type"
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 1,250,000)")
@click.option(
    "--date",
    "date_str",
    default="today",
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--from-account", help="Paying account name or ID")
@click.option("--to-account", help="Receiving account name or ID")
@click.option("--category", help="Subcategory name or ID")
@click.option("--person", help="Person name or ID")
@click.option("--shop", help="Shop name or ID")
@click.option("--notes", help="Notes")
@click.option("--cashback-percent", help="Cashback percent (0-100)")
@click.option("--cashback-amount", help="Cashback amount")
@click.option("--debt-tag", help="Debt tag, e.g. 'MINH-2024'")
@click.option("--debt-cycle", help="Debt cycle tag (defaults to the month of the date, e.g. 'NOV24')")
@click.pass_context
def add_transaction(
    ctx,
    nature: str,
    amount: str,
    date_str: str,
    from_account: str | None,
    to_account: str | None,
    category: str | None,
    person: str | None,
    shop: str | None,
    notes: str | None,
    cashback_percent: str | None,
    cashback_amount: str | None,
    debt_tag: str | None,
    debt_cycle: str | None,
):
    """Add a transaction.

    Expenses need --from-account and --category, income needs --to-account
    and --category, debts need --from-account and --person, and transfers
    need two different accounts. Cashback on expenses is capped by the
    paying account's cashback policy.

    Examples:
        spendbook transaction add --type expense --amount 100000 --from-account "Platinum Card" --category Supermarket --cashback-percent 10 --cashback-amount 8000
        spendbook transaction add --type debt --amount 500000 --from-account "Cash Wallet" --person "Minh Nguyen"
    """
    db = ctx.obj["db"]
    service = _service(ctx)

    try:
        txn_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
        cashback = None
        if cashback_percent is not None or cashback_amount is not None:
            cashback = CashbackRequest(
                percent=parse_amount(cashback_percent) if cashback_percent else 0,
                amount=parse_amount(cashback_amount) if cashback_amount else 0,
            )
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    accounts = db.list_accounts()
    draft = TransactionDraft(
        nature=nature_from_filter(nature),
        amount=txn_amount,
        date=datetime.combine(txn_date, time.min, tzinfo=UTC),
        notes=notes,
        from_account_id=resolve_or_exit(ctx, accounts, from_account, "Account"),
        to_account_id=resolve_or_exit(ctx, accounts, to_account, "Account"),
        subcategory_id=resolve_or_exit(ctx, db.list_subcategories(), category, "Category"),
        person_id=resolve_or_exit(ctx, db.list_people(), person, "Person"),
        shop_id=resolve_or_exit(ctx, db.list_shops(), shop, "Shop"),
        cashback=cashback,
        debt_tag=debt_tag,
        debt_cycle_tag=debt_cycle,
    )

    try:
        transaction_id = service.create_transaction(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    txn = service.get_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Type: {nature_label(txn.nature)}")
    click.echo(f"  Date: {txn_date}")
    click.echo(f"  Amount: {txn.amount:,.2f}")
    if txn.cashback_amount is not None:
        click.echo(f"  Cashback: {txn.cashback_percent}% = {txn.cashback_amount:,.0f}")
    click.echo(f"  Final price: {txn.final_price:,.2f}")


@transaction_group.command("list")
@click.option("--type", "nature", type=click.Choice(("all",) + FILTER_NAMES), default="all")
@click.option("--account", help="Account name or ID (either side of the transaction)")
@click.option("--category", help="Subcategory name or ID")
@click.option("--person", help="Person name or ID")
@click.option("--status", help="Status, e.g. 'Active'")
@click.option("--search", default="", help="Search notes, categories, shop, accounts and person")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--year", type=int, help="Limit to a calendar year")
@click.option("--quarter", type=int, help="Limit to a quarter of --year (1-4)")
@click.option("--month", type=int, help="Limit to a month of --year (1-12)")
@click.option("--page", type=int, default=1, help="Page number")
@click.option("--page-size", type=int, help="Transactions per page")
@click.option(
    "--sort",
    "sort_column",
    type=click.Choice(sorted(TRANSACTION_COLUMNS)),
    help="Sort column (default: newest first)",
)
@click.option("--desc", is_flag=True, help="Sort descending")
@click.option("--verbose", "-v", is_flag=True, help="Show all fields of each transaction")
@click.pass_context
def list_transactions(
    ctx,
    nature: str,
    account: str | None,
    category: str | None,
    person: str | None,
    status: str | None,
    search: str,
    start_date: str | None,
    end_date: str | None,
    year: int | None,
    quarter: int | None,
    month: int | None,
    page: int,
    page_size: int | None,
    sort_column: str | None,
    desc: bool,
    verbose: bool,
):
    """View transactions with optional filters, newest first unless --sort is given."""
    db = ctx.obj["db"]
    service = _service(ctx)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, year=year, quarter=quarter, month=month
    )
    filters = TransactionFilters(
        nature=nature_from_filter(nature),
        account_id=resolve_or_exit(ctx, db.list_accounts(), account, "Account"),
        category_id=resolve_or_exit(ctx, db.list_subcategories(), category, "Category"),
        person_id=resolve_or_exit(ctx, db.list_people(), person, "Person"),
        status=status,
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
        result = service.list_transactions(filters, sort=sort)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if result.error:
        click.echo(f"Warning: {result.error}", err=True)

    if not result.items:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {result.total} transaction(s):")
    click.echo("=" * 100)
    for txn in result.items:
        label = nature_label(txn.nature) if txn.nature else "-"
        category_name = txn.subcategory_name or txn.category_name or "Uncategorized"
        click.echo(
            f"{txn.date.date().isoformat()} | {label:8s} | {txn.amount:>16,.2f} | {category_name:16s} | {txn.notes or ''}"
        )
        if verbose:
            click.echo(f"    ID: {txn.id}")
            if txn.from_account:
                click.echo(f"    From: {txn.from_account.name}")
            if txn.to_account:
                click.echo(f"    To: {txn.to_account.name}")
            if txn.person:
                click.echo(f"    Person: {txn.person.name}")
            if txn.shop:
                click.echo(f"    Shop: {txn.shop.name}")
            if txn.cashback_amount is not None:
                click.echo(f"    Cashback: {txn.cashback_amount:,.0f}")
            if txn.debt_tag:
                click.echo(f"    Debt: {txn.debt_tag} ({txn.debt_cycle_tag or '-'})")

    total = service.total_amount(result.items)
    click.echo("=" * 100)
    click.echo(f"Page total: {total:,.2f}")
    click.echo(f"Page {result.page}/{total_pages(result.total, result.page_size)}")


@transaction_group.command("delete")
@click.argument("transaction_ids", nargs=-1, required=True)
@click.option(
    "--policy",
    type=click.Choice([policy.value for policy in BulkDeletePolicy]),
    help="Bulk delete behaviour on failure (overrides SPENDBOOK_BULK_DELETE_POLICY)",
)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transactions(ctx, transaction_ids: tuple[str, ...], policy: str | None, yes: bool):
    """Delete one or more transactions by ID."""
    service = _service(ctx)

    count = len(set(transaction_ids))
    if not yes and not click.confirm(f"Delete {count} transaction(s)?"):
        click.echo("Deletion cancelled.")
        return

    try:
        if count == 1:
            service.delete_transaction(transaction_ids[0])
            deleted = [transaction_ids[0]]
        else:
            deleted = service.delete_transactions(
                transaction_ids, policy=BulkDeletePolicy(policy) if policy else None
            )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted {len(deleted)} transaction(s)")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
