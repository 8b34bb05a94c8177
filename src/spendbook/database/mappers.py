"""Mapper functions to convert SQLAlchemy models into domain entities.

Nature spellings and loose numeric columns are normalized here, so domain
code never sees the raw stored encodings.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from spendbook.domain import entities as domain
from spendbook.domain.categories import (
    category_relation_from_raw,
    resolve_category_relation,
    resolve_subcategory_nature,
)
from spendbook.domain.nature import normalize_nature
from spendbook.utils.amount_parser import coerce_amount
from spendbook.utils.date_parser import parse_timestamp
from spendbook.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Subcategory as ORMSubcategory,
    Shop as ORMShop,
    Person as ORMPerson,
    Transaction as ORMTransaction,
)


def _timestamp(value) -> Optional[datetime]:
    return parse_timestamp(value) if value is not None else None


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        image_url=orm_account.image_url,
        type=orm_account.type,
        credit_limit=coerce_amount(orm_account.credit_limit),
        created_at=_timestamp(orm_account.created_at),
        is_cashback_eligible=bool(orm_account.is_cashback_eligible),
        cashback_percentage=coerce_amount(orm_account.cashback_percentage),
        max_cashback_amount=coerce_amount(orm_account.max_cashback_amount),
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        image_url=orm_category.image_url,
        transaction_nature=normalize_nature(orm_category.transaction_nature),
        is_shop=bool(orm_category.is_shop),
    )


def subcategory_to_domain(orm_subcategory: ORMSubcategory) -> domain.Subcategory:
    """Convert SQLAlchemy Subcategory model to domain Subcategory entity."""
    parent = orm_subcategory.category
    raw_parent = None
    if parent is not None:
        raw_parent = {"name": parent.name, "transaction_nature": parent.transaction_nature}
    return domain.Subcategory(
        id=orm_subcategory.id,
        name=orm_subcategory.name,
        image_url=orm_subcategory.image_url,
        transaction_nature=orm_subcategory.transaction_nature,
        category_id=orm_subcategory.category_id,
        relation=category_relation_from_raw(raw_parent),
    )


def shop_to_domain(orm_shop: ORMShop) -> domain.Shop:
    """Convert SQLAlchemy Shop model to domain Shop entity."""
    return domain.Shop(
        id=orm_shop.id,
        name=orm_shop.name,
        image_url=orm_shop.image_url,
        type=orm_shop.type,
        created_at=_timestamp(orm_shop.created_at),
    )


def person_to_domain(orm_person: ORMPerson) -> domain.Person:
    """Convert SQLAlchemy Person model to domain Person entity."""
    return domain.Person(
        id=orm_person.id,
        name=orm_person.name,
        image_url=orm_person.image_url,
        is_group=bool(orm_person.is_group),
    )


def _ref(record) -> Optional[domain.Ref]:
    if record is None:
        return None
    return domain.Ref(id=record.id, name=record.name, image_url=record.image_url)


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity.

    The nature comes from the transaction row when it is recognizable, then
    from its subcategory and parent category, and defaults to expense.
    """
    subcategory = (
        subcategory_to_domain(orm_transaction.subcategory)
        if orm_transaction.subcategory is not None
        else None
    )
    parent = resolve_category_relation(subcategory.relation) if subcategory else None

    nature = normalize_nature(orm_transaction.nature)
    if nature is None and subcategory is not None:
        nature = resolve_subcategory_nature(subcategory.transaction_nature, subcategory.relation)

    return domain.Transaction(
        id=orm_transaction.id,
        date=parse_timestamp(orm_transaction.date),
        amount=coerce_amount(orm_transaction.amount) or Decimal(0),
        final_price=coerce_amount(orm_transaction.final_price),
        notes=orm_transaction.notes,
        status=orm_transaction.status or "Active",
        nature=nature or domain.TransactionNature.EXPENSE,
        from_account=_ref(orm_transaction.from_account),
        to_account=_ref(orm_transaction.to_account),
        person=_ref(orm_transaction.person),
        category_name=parent.name if parent else None,
        subcategory_id=orm_transaction.subcategory_id,
        subcategory_name=subcategory.name if subcategory else None,
        shop=_ref(orm_transaction.shop),
        cashback_percent=coerce_amount(orm_transaction.cashback_percent),
        cashback_amount=coerce_amount(orm_transaction.cashback_amount),
        debt_tag=orm_transaction.debt_tag,
        debt_cycle_tag=orm_transaction.debt_cycle_tag,
    )
