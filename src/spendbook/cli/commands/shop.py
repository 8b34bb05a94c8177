"""Shop management commands."""

import click

from spendbook.cli.error_handling import handle_domain_error
from spendbook.cli.resolution import resolve_page_size
from spendbook.domain.errors import DomainError
from spendbook.domain.filters import SHOP_COLUMNS, SortDirection, SortState
from spendbook.domain.shop import ShopService


@click.group()
def shop_group():
    """Manage shops."""
    pass


@shop_group.command("create")
@click.argument("name")
@click.option("--type", "shop_type", help="Shop type (ecommerce, bank, ...)")
@click.option("--image-url", help="Image URL")
@click.pass_context
def create_shop(ctx, name: str, shop_type: str | None, image_url: str | None):
    """Create a shop."""
    service = ShopService(ctx.obj["db"])
    try:
        shop_id = service.create_shop(name=name, type=shop_type, image_url=image_url)
        click.echo(f"Created shop '{name.strip()}' (ID: {shop_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@shop_group.command("list")
@click.option("--search", default="", help="Filter by name or type")
@click.option(
    "--sort",
    "sort_column",
    type=click.Choice(sorted(SHOP_COLUMNS)),
    default="name",
    help="Sort column",
)
@click.option("--desc", is_flag=True, help="Sort descending")
@click.option("--page", type=int, default=1, help="Page number")
@click.option("--page-size", type=int, help="Shops per page")
@click.pass_context
def list_shops(
    ctx, search: str, sort_column: str, desc: bool, page: int, page_size: int | None
):
    """List shops."""
    service = ShopService(ctx.obj["db"])

    direction = SortDirection.DESC if desc else SortDirection.ASC
    try:
        result = service.list_shops(
            search=search,
            sort=SortState(sort_column, direction),
            page=page,
            page_size=resolve_page_size(ctx, page_size),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No shops found.")
        return

    click.echo("\nShops:")
    click.echo("-" * 60)
    for shop in result.items:
        click.echo(f"{shop.name:24s} | {shop.type or '-'}")
    click.echo(f"\nPage {result.page}/{result.total_pages} ({result.total} shops)")


def register_commands(cli):
    """Register shop commands with main CLI."""
    cli.add_command(shop_group, name="shop")
