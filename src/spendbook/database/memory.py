"""In-memory record store.

Serves the demo dataset when no database is configured, and backs the
fallback path when the configured store fails.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from spendbook.database.base import RecordStore
from spendbook.domain import errors
from spendbook.domain.categories import resolve_category_relation
from spendbook.domain.entities import (
    Account,
    Category,
    CategoryInfo,
    NewTransaction,
    Person,
    Ref,
    Shop,
    SingleCategory,
    Subcategory,
    Transaction,
    TransactionNature,
)
from spendbook.domain.errors import NotFoundError


def _new_id() -> str:
    return str(uuid.uuid4())


def _ref(record) -> Optional[Ref]:
    if record is None:
        return None
    return Ref(id=record.id, name=record.name, image_url=record.image_url)


class InMemoryRecordStore(RecordStore):
    """RecordStore keeping every record in process memory."""

    def __init__(
        self,
        accounts: Iterable[Account] = (),
        categories: Iterable[Category] = (),
        subcategories: Iterable[Subcategory] = (),
        shops: Iterable[Shop] = (),
        people: Iterable[Person] = (),
        transactions: Optional[dict[str, NewTransaction]] = None,
    ):
        self._accounts = {account.id: account for account in accounts}
        self._categories = {category.id: category for category in categories}
        self._subcategories = {sub.id: sub for sub in subcategories}
        self._shops = {shop.id: shop for shop in shops}
        self._people = {person.id: person for person in people}
        self._transactions: dict[str, NewTransaction] = dict(transactions or {})

    @classmethod
    def with_demo_data(cls) -> "InMemoryRecordStore":
        """Create a store holding a fresh copy of the demo dataset."""
        from spendbook.database import demo_data

        return cls(
            accounts=demo_data.ACCOUNTS,
            categories=demo_data.CATEGORIES,
            subcategories=demo_data.SUBCATEGORIES,
            shops=demo_data.SHOPS,
            people=demo_data.PEOPLE,
            transactions=demo_data.TRANSACTIONS,
        )

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        pass

    # Account operations
    def create_account(
        self,
        name: str,
        type: Optional[str] = None,
        credit_limit: Optional[Decimal] = None,
        is_cashback_eligible: bool = False,
        cashback_percentage: Optional[Decimal] = None,
        max_cashback_amount: Optional[Decimal] = None,
        image_url: Optional[str] = None,
    ) -> str:
        account = Account(
            id=_new_id(),
            name=name,
            image_url=image_url,
            type=type,
            credit_limit=credit_limit,
            is_cashback_eligible=is_cashback_eligible,
            cashback_percentage=cashback_percentage,
            max_cashback_amount=max_cashback_amount,
        )
        self._accounts[account.id] = account
        return account.id

    def get_account(self, account_id: str) -> Optional[Account]:
        return self._accounts.get(account_id)

    def list_accounts(self) -> list[Account]:
        return sorted(self._accounts.values(), key=lambda account: account.name)

    # Category operations
    def create_category(
        self,
        name: str,
        transaction_nature: TransactionNature,
        image_url: Optional[str] = None,
        is_shop: bool = False,
    ) -> str:
        category = Category(
            id=_new_id(),
            name=name,
            image_url=image_url,
            transaction_nature=transaction_nature,
            is_shop=is_shop,
        )
        self._categories[category.id] = category
        return category.id

    def list_categories(self) -> list[Category]:
        return sorted(self._categories.values(), key=lambda category: category.name)

    def create_subcategory(
        self,
        name: str,
        category_id: Optional[str] = None,
        transaction_nature: Optional[TransactionNature] = None,
        image_url: Optional[str] = None,
    ) -> str:
        relation = None
        parent = self._categories.get(category_id) if category_id else None
        if parent is not None:
            parent_nature = parent.transaction_nature.value if parent.transaction_nature else None
            relation = SingleCategory(CategoryInfo(name=parent.name, transaction_nature=parent_nature))
        subcategory = Subcategory(
            id=_new_id(),
            name=name,
            image_url=image_url,
            transaction_nature=transaction_nature.value if transaction_nature else None,
            category_id=category_id,
            relation=relation,
        )
        self._subcategories[subcategory.id] = subcategory
        return subcategory.id

    def get_subcategory(self, subcategory_id: str) -> Optional[Subcategory]:
        return self._subcategories.get(subcategory_id)

    def list_subcategories(self) -> list[Subcategory]:
        return sorted(self._subcategories.values(), key=lambda sub: sub.name)

    # Shop and people operations
    def create_shop(
        self, name: str, type: Optional[str] = None, image_url: Optional[str] = None
    ) -> str:
        shop = Shop(id=_new_id(), name=name, type=type, image_url=image_url)
        self._shops[shop.id] = shop
        return shop.id

    def list_shops(self) -> list[Shop]:
        return sorted(self._shops.values(), key=lambda shop: shop.name)

    def create_person(
        self, name: str, image_url: Optional[str] = None, is_group: bool = False
    ) -> str:
        person = Person(id=_new_id(), name=name, image_url=image_url, is_group=is_group)
        self._people[person.id] = person
        return person.id

    def get_person(self, person_id: str) -> Optional[Person]:
        return self._people.get(person_id)

    def list_people(self) -> list[Person]:
        return sorted(self._people.values(), key=lambda person: person.name)

    # Transaction operations
    def _to_domain(self, transaction_id: str, row: NewTransaction) -> Transaction:
        subcategory = self._subcategories.get(row.subcategory_id) if row.subcategory_id else None
        parent = resolve_category_relation(subcategory.relation) if subcategory else None
        return Transaction(
            id=transaction_id,
            date=row.date,
            amount=row.amount,
            final_price=row.final_price,
            notes=row.notes,
            status=row.status,
            nature=row.nature,
            from_account=_ref(self._accounts.get(row.from_account_id)),
            to_account=_ref(self._accounts.get(row.to_account_id)),
            person=_ref(self._people.get(row.person_id)),
            category_name=parent.name if parent else None,
            subcategory_id=row.subcategory_id,
            subcategory_name=subcategory.name if subcategory else None,
            shop=_ref(self._shops.get(row.shop_id)),
            cashback_percent=row.cashback_percent,
            cashback_amount=row.cashback_amount,
            debt_tag=row.debt_tag,
            debt_cycle_tag=row.debt_cycle_tag,
        )

    def insert_transaction(self, payload: NewTransaction) -> str:
        transaction_id = f"txn-{_new_id()}"
        self._transactions[transaction_id] = payload
        return transaction_id

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        row = self._transactions.get(transaction_id)
        return self._to_domain(transaction_id, row) if row is not None else None

    def list_transactions(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        account_id: Optional[str] = None,
        person_id: Optional[str] = None,
        nature: Optional[TransactionNature] = None,
    ) -> list[Transaction]:
        results = []
        for transaction_id, row in self._transactions.items():
            txn = self._to_domain(transaction_id, row)
            day = txn.date.date()
            if date_from is not None and day < date_from:
                continue
            if date_to is not None and day > date_to:
                continue
            if account_id and account_id not in (row.from_account_id, row.to_account_id):
                continue
            if person_id and row.person_id != person_id:
                continue
            if nature is not None and txn.nature != nature:
                continue
            results.append(txn)
        return sorted(results, key=lambda txn: txn.date, reverse=True)

    def delete_transaction(self, transaction_id: str) -> None:
        if transaction_id not in self._transactions:
            raise NotFoundError(errors.transaction_not_found(transaction_id))
        del self._transactions[transaction_id]

    def delete_transactions(self, transaction_ids: Sequence[str]) -> None:
        for transaction_id in transaction_ids:
            if transaction_id not in self._transactions:
                raise NotFoundError(errors.transaction_not_found(transaction_id))
        for transaction_id in dict.fromkeys(transaction_ids):
            del self._transactions[transaction_id]
