"""Filtering, sorting and pagination helpers shared by every list view."""

import math
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, TypeVar

from spendbook.domain.entities import Transaction, TransactionNature
from spendbook.domain.errors import ValidationError
from spendbook.utils.date_parser import date_tag_sort_value, parse_timestamp

T = TypeVar("T")

NEGATIVE_INFINITY = float("-inf")


def normalize_search_text(value: Optional[str]) -> str:
    """Fold text for search: strip diacritics, lower-case and trim.

    Example: "  Thẻ Tín Dụng " -> "the tin dung"
    """
    if not value:
        return ""
    # "Đ" has no decomposition
    decomposed = unicodedata.normalize("NFD", value.replace("Đ", "D").replace("đ", "d"))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower().strip()


def matches_search(query: Optional[str], *values: Optional[str]) -> bool:
    """Return True if the folded query is a substring of any folded value.

    An empty query matches everything.
    """
    needle = normalize_search_text(query)
    if not needle:
        return True
    return any(needle in normalize_search_text(value) for value in values if value)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class SortState:
    """Current sort column and direction of a table."""

    column: str
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class SortColumn:
    """How to read and compare one sortable column."""

    kind: SortKind
    getter: Callable[[Any], Any]


def toggle_sort(state: Optional[SortState], column: str) -> SortState:
    """Return the sort state after the user clicks ``column``.

    Clicking the active column flips its direction; clicking another column
    starts it ascending.
    """
    if state is not None and state.column == column:
        flipped = SortDirection.DESC if state.direction == SortDirection.ASC else SortDirection.ASC
        return SortState(column=column, direction=flipped)
    return SortState(column=column, direction=SortDirection.ASC)


def _number_key(value: Any) -> float:
    if value is None:
        return NEGATIVE_INFINITY
    try:
        number = float(value)
    except (TypeError, ValueError):
        return NEGATIVE_INFINITY
    return number if math.isfinite(number) else NEGATIVE_INFINITY


def _date_key(value: Any) -> float:
    if value is None or value == "":
        return NEGATIVE_INFINITY
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).timestamp()
    try:
        return parse_timestamp(str(value)).timestamp()
    except ValueError:
        return NEGATIVE_INFINITY


def text_sort_key(value: Any) -> tuple[str, str]:
    """Sort key comparing text without regard to case or diacritics."""
    text = "" if value is None else str(value)
    return (normalize_search_text(text), text.casefold())


_KEY_FUNCTIONS: Mapping[SortKind, Callable[[Any], Any]] = {
    SortKind.STRING: text_sort_key,
    SortKind.NUMBER: _number_key,
    SortKind.DATE: _date_key,
}


def sort_records(
    items: Iterable[T], state: SortState, columns: Mapping[str, SortColumn]
) -> list[T]:
    """Sort records by the active column.

    Missing or non-finite numbers and dates sort as negative infinity, so
    they come first ascending and last descending. Strings compare without
    regard to case or diacritics. The sort is stable.

    Args:
        items: Records to sort
        state: Active column and direction
        columns: Sortable columns by name

    Returns:
        New sorted list

    Raises:
        ValidationError: If ``state.column`` is not a known column
    """
    column = columns.get(state.column)
    if column is None:
        raise ValidationError(f"Unknown sort column '{state.column}'")
    key_function = _KEY_FUNCTIONS[column.kind]
    return sorted(
        items,
        key=lambda item: key_function(column.getter(item)),
        reverse=state.direction == SortDirection.DESC,
    )


@dataclass(frozen=True)
class Page:
    """A 1-indexed slice of a collection."""

    items: tuple
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)


def total_pages(total: int, page_size: int) -> int:
    """Number of pages for ``total`` items; an empty collection has one page."""
    return max(1, math.ceil(total / page_size))


def clamp_page(page: int, total: int, page_size: int) -> int:
    """Clamp ``page`` into [1, last page] for a collection of ``total`` items."""
    if page_size < 1:
        raise ValidationError("Page size must be at least 1")
    return min(max(page, 1), total_pages(total, page_size))


def paginate(items: Sequence[T], page: int, page_size: int) -> Page:
    """Return the requested page, clamped to the pages that exist.

    Requesting a page past the end (for instance after a filter shrank the
    collection) returns the last page rather than an empty one.
    """
    current = clamp_page(page, len(items), page_size)
    start = (current - 1) * page_size
    return Page(
        items=tuple(items[start : start + page_size]),
        page=current,
        page_size=page_size,
        total=len(items),
    )


@dataclass(frozen=True)
class TransactionFilters:
    """Transaction list filters; None or empty means "any"."""

    nature: Optional[TransactionNature] = None
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    person_id: Optional[str] = None
    status: Optional[str] = None
    search: str = ""
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    page: int = 1
    page_size: int = 10


def transaction_matches(txn: Transaction, filters: TransactionFilters) -> bool:
    """Return True if a transaction passes every active filter."""
    if filters.nature is not None and txn.nature != filters.nature:
        return False
    if filters.account_id:
        account_ids = {
            ref.id for ref in (txn.from_account, txn.to_account) if ref is not None
        }
        if filters.account_id not in account_ids:
            return False
    if filters.category_id and txn.subcategory_id != filters.category_id:
        return False
    if filters.person_id and (txn.person is None or txn.person.id != filters.person_id):
        return False
    if filters.status and txn.status != filters.status:
        return False

    txn_day = txn.date.date()
    if filters.date_from is not None and txn_day < filters.date_from:
        return False
    if filters.date_to is not None and txn_day > filters.date_to:
        return False

    return matches_search(
        filters.search,
        txn.notes,
        txn.category_name,
        txn.subcategory_name,
        txn.shop.name if txn.shop else None,
        txn.from_account.name if txn.from_account else None,
        txn.to_account.name if txn.to_account else None,
        txn.person.name if txn.person else None,
    )


def filter_transactions(
    transactions: Iterable[Transaction], filters: TransactionFilters
) -> list[Transaction]:
    """Apply ``filters`` and order the matches newest first."""
    matched = [txn for txn in transactions if transaction_matches(txn, filters)]
    return sorted(matched, key=lambda txn: txn.date, reverse=True)


ACCOUNT_COLUMNS: Mapping[str, SortColumn] = {
    "name": SortColumn(SortKind.STRING, lambda account: account.name),
    "type": SortColumn(SortKind.STRING, lambda account: account.type),
    "credit_limit": SortColumn(SortKind.NUMBER, lambda account: account.credit_limit),
    "created_at": SortColumn(SortKind.DATE, lambda account: account.created_at),
}

SHOP_COLUMNS: Mapping[str, SortColumn] = {
    "name": SortColumn(SortKind.STRING, lambda shop: shop.name),
    "type": SortColumn(SortKind.STRING, lambda shop: shop.type),
    "created_at": SortColumn(SortKind.DATE, lambda shop: shop.created_at),
}

CATEGORY_COLUMNS: Mapping[str, SortColumn] = {
    "name": SortColumn(SortKind.STRING, lambda category: category.name),
    "nature": SortColumn(
        SortKind.STRING,
        lambda category: category.transaction_nature.value
        if category.transaction_nature
        else None,
    ),
}

PEOPLE_COLUMNS: Mapping[str, SortColumn] = {
    "name": SortColumn(SortKind.STRING, lambda person: person.name),
    "total_transactions": SortColumn(SortKind.NUMBER, lambda person: person.total_transactions),
    "total_amount": SortColumn(SortKind.NUMBER, lambda person: person.total_amount),
    "total_back": SortColumn(SortKind.NUMBER, lambda person: person.total_back),
    "last_transaction_date": SortColumn(
        SortKind.DATE, lambda person: person.last_transaction_date
    ),
}

TRANSACTION_COLUMNS: Mapping[str, SortColumn] = {
    "date": SortColumn(SortKind.DATE, lambda txn: txn.date),
    "amount": SortColumn(SortKind.NUMBER, lambda txn: txn.amount),
    "final_price": SortColumn(SortKind.NUMBER, lambda txn: txn.final_price),
    # Untagged or malformed cycles sort as negative infinity
    "debt_cycle": SortColumn(
        SortKind.NUMBER, lambda txn: date_tag_sort_value(txn.debt_cycle_tag)
    ),
}
