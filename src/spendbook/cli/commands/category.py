"""Category management commands."""

import click

from spendbook.cli.error_handling import handle_domain_error
from spendbook.cli.resolution import resolve_or_exit
from spendbook.domain.category import CategoryService
from spendbook.domain.errors import DomainError
from spendbook.domain.nature import FILTER_NAMES, nature_from_filter, nature_label


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name")
@click.option(
    "--nature",
    help="Transaction nature (EX, IN, TF, DE or a name like 'expense'); subcategories inherit the parent's by default",
)
@click.option("--parent", help="Parent category name or ID; creates a subcategory")
@click.option("--image-url", help="Image URL")
@click.pass_context
def create_category(ctx, name: str, nature: str | None, parent: str | None, image_url: str | None):
    """Create a category, or a subcategory with --parent.

    Top-level categories with no or an unknown nature are stored as expense.

    Examples:
        spendbook category create "Groceries"
        spendbook category create "Salary" --nature income --parent "Income"
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    parent_id = resolve_or_exit(ctx, db.list_categories(), parent, "Category")

    try:
        if parent_id is None:
            category_id = service.create_category(
                name=name, transaction_nature=nature, image_url=image_url
            )
        else:
            category_id = service.create_subcategory(
                name=name,
                category_id=parent_id,
                transaction_nature=nature,
                image_url=image_url,
            )
        click.echo(f"Created category '{name.strip()}' (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("list")
@click.option("--search", default="", help="Filter by name")
@click.option(
    "--nature",
    type=click.Choice(("all",) + FILTER_NAMES),
    default="all",
    help="Only categories of this nature",
)
@click.pass_context
def list_categories(ctx, search: str, nature: str):
    """List categories and their subcategories."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    wanted = nature_from_filter(nature)
    categories = service.list_categories(search=search, nature=wanted)
    if not categories:
        click.echo("No categories found.")
        return

    subcategories = service.list_subcategories(nature=wanted)
    children: dict[str, list[str]] = {}
    for sub in subcategories:
        if sub.category_id:
            children.setdefault(sub.category_id, []).append(sub.name)

    click.echo("\nCategories:")
    for category in categories:
        label = nature_label(category.transaction_nature) if category.transaction_nature else "-"
        click.echo(f"{category.name} [{label}]")
        for child in children.get(category.id, []):
            click.echo(f"  - {child}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
