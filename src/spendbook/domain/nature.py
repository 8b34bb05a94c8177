"""Transaction nature codes and their legacy spellings.

Category records written over time use several encodings for the same
nature ("Expense", "EXP", "ex", ...). Everything entering the domain goes
through ``normalize_nature`` so the rest of the code only sees
``TransactionNature`` members or None.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from spendbook.domain.entities import TransactionNature


_ALIASES: Mapping[str, TransactionNature] = MappingProxyType(
    {
        "EX": TransactionNature.EXPENSE,
        "EXPENSE": TransactionNature.EXPENSE,
        "EXPENSES": TransactionNature.EXPENSE,
        "EXP": TransactionNature.EXPENSE,
        "IN": TransactionNature.INCOME,
        "INCOME": TransactionNature.INCOME,
        "INCOMES": TransactionNature.INCOME,
        "INC": TransactionNature.INCOME,
        "TF": TransactionNature.TRANSFER,
        "TR": TransactionNature.TRANSFER,
        "TRANSFER": TransactionNature.TRANSFER,
        "TRANSFERS": TransactionNature.TRANSFER,
        "TRANS": TransactionNature.TRANSFER,
        "DE": TransactionNature.DEBT,
        "DEBT": TransactionNature.DEBT,
        "DEBTS": TransactionNature.DEBT,
        "DEBIT": TransactionNature.DEBT,
    }
)

# Spellings found in stored category rows, per nature.
_STORED_SPELLINGS: Mapping[TransactionNature, tuple[str, ...]] = MappingProxyType(
    {
        TransactionNature.EXPENSE: ("Expense", "Expenses", "EX"),
        TransactionNature.INCOME: ("Income", "Incomes", "IN"),
        TransactionNature.TRANSFER: ("Transfer", "Transfers", "TF"),
        TransactionNature.DEBT: ("Debt", "Debts", "DE"),
    }
)

_LABELS: Mapping[TransactionNature, str] = MappingProxyType(
    {
        TransactionNature.EXPENSE: "Expense",
        TransactionNature.INCOME: "Income",
        TransactionNature.TRANSFER: "Transfer",
        TransactionNature.DEBT: "Debt",
    }
)

_FILTER_NAMES: Mapping[str, TransactionNature] = MappingProxyType(
    {
        "expense": TransactionNature.EXPENSE,
        "income": TransactionNature.INCOME,
        "transfer": TransactionNature.TRANSFER,
        "debt": TransactionNature.DEBT,
    }
)


def normalize_nature(value) -> Optional[TransactionNature]:
    """Map a raw nature label to its canonical code.

    Args:
        value: Raw label such as "Expense", " tr ", "DEBIT" or a
            TransactionNature member

    Returns:
        The matching TransactionNature, or None if the label is unknown
    """
    if value is None:
        return None
    if isinstance(value, TransactionNature):
        return value
    key = str(value).strip().upper()
    if not key:
        return None
    return _ALIASES.get(key)


def resolve_nature(value, fallback: TransactionNature) -> TransactionNature:
    """Normalize ``value``, using ``fallback`` when it is unknown."""
    nature = normalize_nature(value)
    return nature if nature is not None else fallback


def is_transfer_nature(value) -> bool:
    return normalize_nature(value) is TransactionNature.TRANSFER


def get_database_nature_candidates(nature: TransactionNature) -> list[str]:
    """Return every stored spelling a query should accept for ``nature``.

    Each known spelling is offered as stored, upper-cased and lower-cased,
    followed by the code itself. Duplicates are dropped, first occurrence
    wins.

    Args:
        nature: Canonical nature code

    Returns:
        Distinct candidate strings in a stable order
    """
    seen: dict[str, None] = {}

    def add(candidate: str) -> None:
        trimmed = candidate.strip()
        if trimmed:
            seen.setdefault(trimmed, None)

    for spelling in _STORED_SPELLINGS.get(nature, (nature.value,)):
        add(spelling)
        add(spelling.upper())
        add(spelling.lower())
    add(nature.value)

    return list(seen)


def nature_label(nature: TransactionNature) -> str:
    """Return the display word for a nature code (e.g. "Expense")."""
    return _LABELS[nature]


def nature_from_filter(name: str) -> Optional[TransactionNature]:
    """Translate a list filter name ("expense", "all", ...) into a code.

    "all" and unknown names return None, meaning no nature filter.
    """
    return _FILTER_NAMES.get(name.strip().lower())


FILTER_NAMES = tuple(_FILTER_NAMES)
