"""CLI helpers for resolving records given by name or ID."""

from __future__ import annotations

from typing import Iterable, Protocol

import click

from spendbook.domain.errors import NotFoundError
from spendbook.domain.filters import normalize_search_text


class _Named(Protocol):
    id: str
    name: str


def resolve_record(records: Iterable[_Named], value: str, kind: str) -> str:
    """Resolve a record ID or name to its ID.

    An exact ID match wins; otherwise names are compared ignoring case and
    diacritics.

    Args:
        records: Candidate records
        value: ID or name typed by the user
        kind: Record kind for the error message ("Account", "Person", ...)

    Returns:
        Record ID

    Raises:
        NotFoundError: If nothing matches
    """
    records = list(records)
    for record in records:
        if record.id == value:
            return record.id

    wanted = normalize_search_text(value)
    for record in records:
        if normalize_search_text(record.name) == wanted:
            return record.id

    raise NotFoundError(f"{kind} '{value}' not found")


def resolve_or_exit(
    ctx: click.Context, records: Iterable[_Named], value: str | None, kind: str
) -> str | None:
    """Resolve a record ID or name, or exit with a CLI error.

    None passes through unchanged so optional options need no special case.
    """
    if value is None:
        return None
    try:
        return resolve_record(records, value, kind)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_page_size(ctx: click.Context, page_size: int | None) -> int:
    """Return the requested page size, or the configured default.

    Only the configured page size options are accepted.
    """
    settings = ctx.obj["settings"]
    if page_size is None:
        return settings.page_size
    if page_size not in settings.page_size_options:
        options = ", ".join(str(option) for option in settings.page_size_options)
        click.echo(f"Error: Page size must be one of {options}.", err=True)
        ctx.exit(1)
    return page_size
