"""Cashback preview command."""

import click

from spendbook.cli.error_handling import handle_domain_error
from spendbook.cli.resolution import resolve_or_exit
from spendbook.domain.account import AccountService
from spendbook.domain.cashback import compute_cashback
from spendbook.domain.entities import CashbackRequest
from spendbook.domain.errors import DomainError
from spendbook.utils.amount_parser import parse_amount


@click.command("cashback")
@click.argument("amount")
@click.option("--percent", default="0", help="Requested cashback percent (0-100)")
@click.option("--back", "back_amount", default="0", help="Requested cashback amount")
@click.option("--account", help="Paying account name or ID whose policy applies")
@click.pass_context
def preview_cashback(
    ctx, amount: str, percent: str, back_amount: str, account: str | None
):
    """Preview the normalized cashback for an expense.

    Examples:
        spendbook cashback 100000 --percent 10 --back 8000 --account "Platinum Card"
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        txn_amount = parse_amount(amount)
        requested = CashbackRequest(
            percent=parse_amount(percent), amount=parse_amount(back_amount)
        )
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    account_id = resolve_or_exit(ctx, db.list_accounts(), account, "Account")

    try:
        policy = service.get_cashback_policy(account_id) if account_id else None
        if account_id and policy is None:
            # The account is not cashback eligible
            requested = None
        result = compute_cashback(txn_amount, requested, policy)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Cashback: {result.percent}% = {result.amount:,.0f}")
    click.echo(f"Final price: {result.final_price:,.2f}")


def register_commands(cli):
    """Register cashback command with main CLI."""
    cli.add_command(preview_cashback)
