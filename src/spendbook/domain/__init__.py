"""Domain layer for spendbook application.

Only the pure calculation modules are re-exported here; services live in
their own modules and are imported from there, since they depend on the
database layer.
"""

from spendbook.domain.nature import (
    normalize_nature,
    resolve_nature,
    get_database_nature_candidates,
)
from spendbook.domain.cashback import compute_cashback
from spendbook.domain.people import aggregate_people
from spendbook.domain.filters import (
    filter_transactions,
    matches_search,
    paginate,
    sort_records,
    toggle_sort,
)

__all__ = [
    "normalize_nature",
    "resolve_nature",
    "get_database_nature_candidates",
    "compute_cashback",
    "aggregate_people",
    "filter_transactions",
    "matches_search",
    "paginate",
    "sort_records",
    "toggle_sort",
]
