"""Per-person totals over a set of transactions."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from spendbook.domain.cashback import ZERO, percent_amount
from spendbook.domain.entities import (
    CashbackSource,
    PersonAggregate,
    Transaction,
)
from spendbook.domain.filters import text_sort_key


@dataclass
class _Running:
    id: str
    name: str
    image_url: Optional[str]
    transactions: list[Transaction] = field(default_factory=list)
    total_amount: Decimal = ZERO
    total_back: Decimal = ZERO
    total_final_price: Decimal = ZERO
    last_transaction_date: Optional[datetime] = None


def cashback_back(txn: Transaction) -> Decimal:
    """Return the cashback a transaction contributes to its person's total.

    Percent-sourced rows already store the resolved amount, which is used
    as is; the percent share is only computed when that amount is missing.
    Amount-sourced rows contribute their manual amount. Rows without any
    cashback contribute nothing.
    """
    source = txn.cashback_source
    if source is CashbackSource.PERCENT:
        if txn.cashback_amount is not None:
            return txn.cashback_amount
        return percent_amount(txn.amount, txn.cashback_percent)
    if source is CashbackSource.AMOUNT:
        return txn.cashback_amount or ZERO
    return ZERO


def aggregate_people(transactions: Iterable[Transaction]) -> list[PersonAggregate]:
    """Fold transactions into one aggregate per person.

    Transactions without a person id or name are skipped. Each aggregate
    keeps its transactions newest first, and the result is ordered by person
    name, ignoring case and diacritics, then by id. The input transactions are not modified.

    Args:
        transactions: Transactions, in any order

    Returns:
        List of PersonAggregate
    """
    running: dict[str, _Running] = {}

    for txn in transactions:
        person = txn.person
        if person is None or not person.id or not person.name:
            continue

        entry = running.get(person.id)
        if entry is None:
            entry = _Running(id=person.id, name=person.name, image_url=person.image_url)
            running[person.id] = entry

        entry.transactions.append(txn)
        entry.total_amount += txn.amount
        entry.total_back += cashback_back(txn)
        entry.total_final_price += (
            txn.final_price if txn.final_price is not None else txn.amount
        )
        if entry.last_transaction_date is None or txn.date > entry.last_transaction_date:
            entry.last_transaction_date = txn.date

    aggregates = [
        PersonAggregate(
            id=entry.id,
            name=entry.name,
            image_url=entry.image_url,
            transactions=tuple(
                sorted(entry.transactions, key=lambda txn: txn.date, reverse=True)
            ),
            total_transactions=len(entry.transactions),
            total_amount=entry.total_amount,
            total_back=entry.total_back,
            total_final_price=entry.total_final_price,
            last_transaction_date=entry.last_transaction_date,
        )
        for entry in running.values()
    ]
    return sorted(
        aggregates,
        key=lambda aggregate: (*text_sort_key(aggregate.name), aggregate.name, aggregate.id),
    )
