"""Tests for the record store implementations."""

from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from spendbook.database import create_record_store, create_sqlite_database
from spendbook.database.base import RecordStore
from spendbook.database.memory import InMemoryRecordStore
from spendbook.database.models import (
    Category as ORMCategory,
    Subcategory as ORMSubcategory,
    Transaction as ORMTransaction,
)
from spendbook.database.sqlalchemy_db import SQLAlchemyRecordStore
from spendbook.domain.entities import NewTransaction, TransactionNature
from spendbook.domain.errors import NotFoundError, UpstreamError


def payload(day, amount="1000", nature=TransactionNature.EXPENSE, **kwargs):
    return NewTransaction(
        date=datetime(2024, 10, day, 12, 0, tzinfo=UTC),
        amount=Decimal(amount),
        final_price=Decimal(amount),
        nature=nature,
        **kwargs,
    )


class TestFactories:
    """Tests for store factory functions."""

    def test_sqlite_factory(self, tmp_path):
        db = create_sqlite_database(str(tmp_path / "spendbook.db"))
        assert isinstance(db, SQLAlchemyRecordStore)
        assert isinstance(db, RecordStore)

    def test_no_url_gives_demo_store(self, monkeypatch):
        monkeypatch.delenv("SPENDBOOK_DATABASE_URL", raising=False)
        db = create_record_store()
        assert isinstance(db, InMemoryRecordStore)
        assert len(db.list_accounts()) == 4

    def test_url_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SPENDBOOK_DATABASE_URL", f"sqlite:///{tmp_path / 'env.db'}")
        db = create_record_store()
        assert isinstance(db, SQLAlchemyRecordStore)


class TestSQLAlchemyRecordStore:
    """Tests for the SQLAlchemy-backed store."""

    def test_account_round_trip(self, temp_db):
        account_id = temp_db.create_account(
            name="Platinum Card",
            type="credit",
            credit_limit=Decimal("20000000"),
            is_cashback_eligible=True,
            cashback_percentage=Decimal("0.03"),
            max_cashback_amount=Decimal("500000"),
        )

        account = temp_db.get_account(account_id)

        assert account.name == "Platinum Card"
        assert account.credit_limit == Decimal("20000000")
        assert account.is_cashback_eligible is True
        assert account.cashback_policy().percent_limit == Decimal("3")
        assert account.created_at.tzinfo is not None
        assert temp_db.get_account("missing") is None

    def test_lists_are_ordered_by_name(self, temp_db):
        temp_db.create_shop(name="VPBank", type="bank")
        temp_db.create_shop(name="Tiki", type="ecommerce")
        temp_db.create_person(name="Minh")
        temp_db.create_person(name="An", is_group=True)

        assert [shop.name for shop in temp_db.list_shops()] == ["Tiki", "VPBank"]
        people = temp_db.list_people()
        assert [person.name for person in people] == ["An", "Minh"]
        assert people[0].is_group is True

    def test_transaction_round_trip(self, temp_db, sample_accounts, sample_categories, sample_person):
        shop_id = temp_db.create_shop(name="Co.op Mart")
        txn_id = temp_db.insert_transaction(
            payload(
                5,
                "450000",
                from_account_id=sample_accounts["card"],
                subcategory_id=sample_categories["Supermarket"],
                person_id=sample_person,
                shop_id=shop_id,
                cashback_percent=Decimal("1.5"),
                cashback_amount=Decimal("6750"),
                notes="Groceries",
            )
        )

        txn = temp_db.get_transaction(txn_id)

        assert txn.date == datetime(2024, 10, 5, 12, 0, tzinfo=UTC)
        assert txn.amount == Decimal("450000")
        assert txn.cashback_percent == Decimal("1.5")
        assert txn.shop.name == "Co.op Mart"
        assert txn.person.name == "Minh Nguyen"
        assert txn.category_name == "Groceries"
        assert txn.subcategory_name == "Supermarket"

    def test_list_filters(self, temp_db, sample_accounts, sample_person):
        temp_db.insert_transaction(payload(1, from_account_id=sample_accounts["cash"]))
        temp_db.insert_transaction(payload(10, to_account_id=sample_accounts["card"]))
        temp_db.insert_transaction(
            payload(20, from_account_id=sample_accounts["card"], person_id=sample_person)
        )

        everything = temp_db.list_transactions()
        by_card = temp_db.list_transactions(account_id=sample_accounts["card"])
        by_person = temp_db.list_transactions(person_id=sample_person)
        by_date = temp_db.list_transactions(date_from=date(2024, 10, 10), date_to=date(2024, 10, 10))

        assert [txn.date.day for txn in everything] == [20, 10, 1]
        assert [txn.date.day for txn in by_card] == [20, 10]
        assert [txn.date.day for txn in by_person] == [20]
        assert [txn.date.day for txn in by_date] == [10]

    def test_nature_filter_accepts_legacy_spellings(self, temp_db):
        """Rows written with old nature spellings still match the canonical filter."""
        session = temp_db.session_factory()
        parent = ORMCategory(name="Salary", transaction_nature="Incomes")
        sub = ORMSubcategory(name="Bonus", category=parent)
        session.add_all(
            [
                parent,
                sub,
                ORMTransaction(date=datetime(2024, 10, 1), amount=Decimal("10"), nature="income"),
                ORMTransaction(date=datetime(2024, 10, 2), amount=Decimal("20"), subcategory=sub),
                ORMTransaction(date=datetime(2024, 10, 3), amount=Decimal("30"), nature="EX"),
                ORMTransaction(date=datetime(2024, 10, 4), amount=Decimal("40")),
            ]
        )
        session.commit()
        session.close()

        income = temp_db.list_transactions(nature=TransactionNature.INCOME)
        expense = temp_db.list_transactions(nature=TransactionNature.EXPENSE)

        assert sorted(txn.amount for txn in income) == [Decimal("10"), Decimal("20")]
        assert all(txn.nature is TransactionNature.INCOME for txn in income)
        # A row with no nature anywhere counts as an expense
        assert sorted(txn.amount for txn in expense) == [Decimal("30"), Decimal("40")]

    def test_delete_transaction(self, temp_db):
        txn_id = temp_db.insert_transaction(payload(1))

        temp_db.delete_transaction(txn_id)

        assert temp_db.get_transaction(txn_id) is None
        with pytest.raises(NotFoundError):
            temp_db.delete_transaction(txn_id)

    def test_bulk_delete_is_atomic(self, temp_db):
        first = temp_db.insert_transaction(payload(1))
        second = temp_db.insert_transaction(payload(2))

        with pytest.raises(NotFoundError):
            temp_db.delete_transactions([first, "missing", second])

        assert len(temp_db.list_transactions()) == 2

    def test_driver_errors_become_upstream_errors(self, temp_db):
        ORMTransaction.__table__.drop(bind=temp_db.session_factory.kw["bind"])

        with pytest.raises(UpstreamError, match="no such table"):
            temp_db.list_transactions()

    def test_initialize_schema_recreates_missing_tables(self, temp_db):
        ORMTransaction.__table__.drop(bind=temp_db.session_factory.kw["bind"])

        temp_db.initialize_schema()

        assert list(temp_db.list_transactions()) == []


class TestInMemoryRecordStore:
    """Tests for the in-memory store."""

    def test_demo_data_is_complete(self, demo_store):
        assert len(demo_store.list_accounts()) == 4
        assert len(demo_store.list_categories()) == 6
        assert len(demo_store.list_subcategories()) == 7
        assert len(demo_store.list_shops()) == 3
        assert len(demo_store.list_people()) == 2
        assert len(demo_store.list_transactions()) == 7

    def test_demo_copies_are_independent(self):
        first = InMemoryRecordStore.with_demo_data()
        second = InMemoryRecordStore.with_demo_data()

        first.delete_transaction("tx-1001")

        assert second.get_transaction("tx-1001") is not None

    def test_joined_fields(self, demo_store):
        txn = demo_store.get_transaction("tx-1005")

        assert txn.person.name == "Minh Nguyen"
        assert txn.category_name == "Dining"
        assert txn.subcategory_name == "Coffee"
        assert txn.from_account.name == "Salary Account"

    def test_created_records(self):
        store = InMemoryRecordStore()
        parent = store.create_category("Loans", TransactionNature.DEBT)
        sub_id = store.create_subcategory("Lending", category_id=parent)

        sub = store.get_subcategory(sub_id)

        assert sub.relation.category.name == "Loans"
        assert sub.relation.category.transaction_nature == "DE"

    def test_filters(self, demo_store):
        debts = demo_store.list_transactions(nature=TransactionNature.DEBT)
        by_wallet = demo_store.list_transactions(account_id="acc-cash-wallet")

        assert [txn.id for txn in debts] == ["tx-1007"]
        assert [txn.id for txn in by_wallet] == ["tx-1007"]
