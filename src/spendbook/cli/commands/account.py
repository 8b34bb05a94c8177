"""Account management commands."""

import click

from spendbook.cli.error_handling import handle_domain_error
from spendbook.cli.resolution import resolve_or_exit, resolve_page_size
from spendbook.domain.account import AccountService
from spendbook.domain.errors import DomainError
from spendbook.domain.filters import ACCOUNT_COLUMNS, SortDirection, SortState
from spendbook.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", help="Account type (cash, bank, credit, ...)")
@click.option("--credit-limit", help="Credit limit (e.g., 20,000,000)")
@click.option("--cashback-rate", help="Cashback rate in percent (e.g., 3 for 3%)")
@click.option("--max-cashback", help="Maximum cashback per transaction")
@click.pass_context
def create_account(
    ctx,
    name: str,
    account_type: str | None,
    credit_limit: str | None,
    cashback_rate: str | None,
    max_cashback: str | None,
):
    """Create a new account.

    Passing --cashback-rate or --max-cashback makes the account cashback
    eligible.

    Examples:
        spendbook account create "Cash Wallet" --type cash
        spendbook account create "Platinum Card" --type credit --credit-limit 20000000 --cashback-rate 3 --max-cashback 500000
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        limit = parse_amount(credit_limit) if credit_limit else None
        rate = parse_amount(cashback_rate) / 100 if cashback_rate else None
        cap = parse_amount(max_cashback) if max_cashback else None
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        account_id = service.create_account(
            name=name,
            type=account_type,
            credit_limit=limit,
            cashback_percentage=rate,
            max_cashback_amount=cap,
        )
        click.echo(f"Created account '{name.strip()}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--search", default="", help="Filter by name or type")
@click.option(
    "--sort",
    "sort_column",
    type=click.Choice(sorted(ACCOUNT_COLUMNS)),
    default="name",
    help="Sort column",
)
@click.option("--desc", is_flag=True, help="Sort descending")
@click.option("--page", type=int, default=1, help="Page number")
@click.option("--page-size", type=int, help="Accounts per page")
@click.pass_context
def list_accounts(
    ctx, search: str, sort_column: str, desc: bool, page: int, page_size: int | None
):
    """List accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    direction = SortDirection.DESC if desc else SortDirection.ASC
    try:
        result = service.list_accounts(
            search=search,
            sort=SortState(sort_column, direction),
            page=page,
            page_size=resolve_page_size(ctx, page_size),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in result.items:
        limit = f"{acc.credit_limit:,.0f}" if acc.credit_limit is not None else "-"
        cashback = "cashback" if acc.is_cashback_eligible else ""
        click.echo(
            f"{acc.id:36s} | {acc.name:22s} | {acc.type or '-':10s} | Limit: {limit:>14s} | {cashback}"
        )
    click.echo(f"\nPage {result.page}/{result.total_pages} ({result.total} accounts)")


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show account details and cashback policy.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = resolve_or_exit(ctx, db.list_accounts(), account, "Account")
    acc = service.get_account(account_id)
    try:
        policy = service.get_cashback_policy(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Account: {acc.name}")
    click.echo(f"  ID: {acc.id}")
    click.echo(f"  Type: {acc.type or '-'}")
    if acc.credit_limit is not None:
        click.echo(f"  Credit limit: {acc.credit_limit:,.0f}")
    if policy is None:
        click.echo("  Cashback: not eligible")
        return
    rate = f"{policy.percent_limit.normalize():f}%" if policy.percent_limit is not None else "no limit"
    cap = f"{policy.max_amount:,.0f}" if policy.max_amount is not None else "no cap"
    click.echo(f"  Cashback: up to {rate}, max {cap}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
