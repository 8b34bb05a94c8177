"""Domain model entities for spendbook.

These are pure data classes representing business concepts, independent of
the record store schema. Store implementations map their rows onto these
before any domain logic runs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class TransactionNature(str, Enum):
    """Economic direction of a transaction or category."""

    EXPENSE = "EX"
    INCOME = "IN"
    TRANSFER = "TF"
    DEBT = "DE"


class CashbackSource(str, Enum):
    """Which cashback field a stored transaction was entered with."""

    PERCENT = "percent"
    AMOUNT = "amount"


class BulkDeletePolicy(str, Enum):
    """How a bulk delete behaves when one of the deletes fails."""

    STOP_ON_FIRST_FAILURE = "stop_on_first_failure"
    ALL_OR_NOTHING = "all_or_nothing"


@dataclass(frozen=True)
class Ref:
    """Lightweight reference to a joined record for display."""

    id: str
    name: str
    image_url: Optional[str] = None


@dataclass(frozen=True)
class CashbackPolicy:
    """Account-level cashback caps.

    ``percent_limit`` is on the 0-100 scale; ``max_amount`` is an absolute
    currency cap. Either may be None, meaning no cap of that kind.
    """

    percent_limit: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: str
    name: str
    image_url: Optional[str] = None
    type: Optional[str] = None
    credit_limit: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    is_cashback_eligible: bool = False
    cashback_percentage: Optional[Decimal] = None
    max_cashback_amount: Optional[Decimal] = None

    def cashback_policy(self) -> Optional[CashbackPolicy]:
        """Return the cashback caps, or None if the account earns no cashback.

        The stored percentage is a fraction (0.05 for 5%) and is converted
        to the 0-100 scale here.
        """
        if not self.is_cashback_eligible:
            return None
        percent_limit = None
        if self.cashback_percentage is not None:
            percent_limit = max(Decimal(0), Decimal(self.cashback_percentage) * 100)
        max_amount = None
        if self.max_cashback_amount is not None:
            max_amount = Decimal(self.max_cashback_amount)
        return CashbackPolicy(percent_limit=percent_limit, max_amount=max_amount)


@dataclass(frozen=True)
class CategoryInfo:
    """Parent category fields as joined onto a subcategory."""

    name: Optional[str]
    transaction_nature: Optional[str] = None


@dataclass(frozen=True)
class SingleCategory:
    """Relation that joined exactly one parent category."""

    category: CategoryInfo


@dataclass(frozen=True)
class ManyCategories:
    """Relation that joined a list of parent categories."""

    categories: tuple[CategoryInfo, ...]


CategoryRelation = Union[None, SingleCategory, ManyCategories]


@dataclass(frozen=True)
class Category:
    """Top-level category domain entity."""

    id: str
    name: str
    image_url: Optional[str] = None
    transaction_nature: Optional[TransactionNature] = None
    is_shop: bool = False


@dataclass(frozen=True)
class Subcategory:
    """Subcategory domain entity, optionally attached to a parent category."""

    id: str
    name: str
    image_url: Optional[str] = None
    transaction_nature: Optional[str] = None
    category_id: Optional[str] = None
    relation: CategoryRelation = None


@dataclass(frozen=True)
class Shop:
    """Shop domain entity."""

    id: str
    name: str
    image_url: Optional[str] = None
    type: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Person:
    """Person domain entity."""

    id: str
    name: str
    image_url: Optional[str] = None
    is_group: bool = False


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity as shown in lists and histories."""

    id: str
    date: datetime
    amount: Decimal
    final_price: Optional[Decimal] = None
    notes: Optional[str] = None
    status: str = "Active"
    nature: Optional[TransactionNature] = None
    from_account: Optional[Ref] = None
    to_account: Optional[Ref] = None
    person: Optional[Ref] = None
    category_name: Optional[str] = None
    subcategory_id: Optional[str] = None
    subcategory_name: Optional[str] = None
    shop: Optional[Ref] = None
    cashback_percent: Optional[Decimal] = None
    cashback_amount: Optional[Decimal] = None
    debt_tag: Optional[str] = None
    debt_cycle_tag: Optional[str] = None

    @property
    def cashback_source(self) -> Optional[CashbackSource]:
        """Tell whether the cashback was entered as a percent or an amount."""
        if self.cashback_percent is not None and not Decimal(self.cashback_percent).is_nan():
            return CashbackSource.PERCENT
        if self.cashback_amount is not None and not Decimal(self.cashback_amount).is_nan():
            return CashbackSource.AMOUNT
        return None


@dataclass(frozen=True)
class CashbackRequest:
    """Cashback as typed by the user: percent on 0-100 and a currency amount."""

    percent: Decimal
    amount: Decimal


@dataclass(frozen=True)
class TransactionDraft:
    """User input for a new transaction, before validation."""

    nature: TransactionNature
    amount: Decimal
    date: Optional[datetime]
    notes: Optional[str] = None
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    person_id: Optional[str] = None
    shop_id: Optional[str] = None
    cashback: Optional[CashbackRequest] = None
    debt_tag: Optional[str] = None
    debt_cycle_tag: Optional[str] = None


@dataclass(frozen=True)
class NewTransaction:
    """Validated insert payload for the record store."""

    date: datetime
    amount: Decimal
    final_price: Decimal
    nature: TransactionNature
    notes: Optional[str] = None
    status: str = "Active"
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    person_id: Optional[str] = None
    shop_id: Optional[str] = None
    cashback_percent: Optional[Decimal] = None
    cashback_amount: Optional[Decimal] = None
    debt_tag: Optional[str] = None
    debt_cycle_tag: Optional[str] = None


@dataclass(frozen=True)
class CashbackResult:
    """Normalized cashback and the resulting final price."""

    percent: Decimal
    amount: Decimal
    final_price: Decimal


@dataclass(frozen=True)
class PersonAggregate:
    """Per-person totals derived from transactions; never persisted."""

    id: str
    name: str
    image_url: Optional[str]
    transactions: tuple[Transaction, ...]
    total_transactions: int
    total_amount: Decimal
    total_back: Decimal
    total_final_price: Decimal
    last_transaction_date: Optional[datetime]


@dataclass(frozen=True)
class ListResult:
    """One page of records plus the total match count.

    ``error`` carries an upstream message when the records came from the
    demo dataset instead of the configured store.
    """

    items: tuple = field(default_factory=tuple)
    total: int = 0
    page: int = 1
    page_size: int = 10
    error: Optional[str] = None
