"""Shared pytest fixtures for spendbook tests."""

import logging
import os
import tempfile
from datetime import datetime, UTC
from decimal import Decimal

import pytest

from spendbook import logging_setup
from spendbook.database.factories import create_sqlite_database
from spendbook.database.memory import InMemoryRecordStore
from spendbook.domain.account import AccountService
from spendbook.domain.category import CategoryService
from spendbook.domain.entities import TransactionNature
from spendbook.domain.person import PersonService
from spendbook.domain.shop import ShopService
from spendbook.domain.transaction import TransactionService


@pytest.fixture(autouse=True)
def isolated_logging(monkeypatch):
    """Start every test with an unconfigured package logger.

    CLI invocations call configure_logging, which otherwise sticks for the
    rest of the session.
    """
    logger = logging.getLogger("spendbook")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.handlers.clear()
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)

    yield logger

    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


@pytest.fixture
def temp_db():
    """Create a temporary SQLite-backed record store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def database_url(temp_db):
    """SQLAlchemy URL of the temporary store, for CLI tests."""
    return f"sqlite:///{temp_db.database_path}"


@pytest.fixture
def demo_store():
    """Create an in-memory store holding the demo dataset."""
    return InMemoryRecordStore.with_demo_data()


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary store."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary store."""
    return CategoryService(temp_db)


@pytest.fixture
def shop_service(temp_db):
    """Create a ShopService with a temporary store."""
    return ShopService(temp_db)


@pytest.fixture
def person_service(temp_db):
    """Create a PersonService with a temporary store."""
    return PersonService(temp_db)


@pytest.fixture
def transaction_service(temp_db, demo_store):
    """Create a TransactionService with a temporary store and demo fallback."""
    return TransactionService(temp_db, fallback=demo_store)


@pytest.fixture
def sample_accounts(temp_db):
    """Create a cash account and a cashback credit card; return their IDs."""
    cash_id = temp_db.create_account(name="Cash Wallet", type="cash")
    card_id = temp_db.create_account(
        name="Platinum Card",
        type="credit",
        credit_limit=Decimal("20000000"),
        is_cashback_eligible=True,
        cashback_percentage=Decimal("0.05"),
        max_cashback_amount=Decimal("3000"),
    )
    return {"cash": cash_id, "card": card_id}


@pytest.fixture
def sample_categories(temp_db):
    """Create categories with subcategories; return subcategory IDs by name."""
    groceries = temp_db.create_category(name="Groceries", transaction_nature=TransactionNature.EXPENSE)
    income = temp_db.create_category(name="Income", transaction_nature=TransactionNature.INCOME)
    loans = temp_db.create_category(name="Loans", transaction_nature=TransactionNature.DEBT)
    return {
        "Supermarket": temp_db.create_subcategory(
            name="Supermarket", category_id=groceries, transaction_nature=TransactionNature.EXPENSE
        ),
        "Salary": temp_db.create_subcategory(
            name="Salary", category_id=income, transaction_nature=TransactionNature.INCOME
        ),
        "Lending": temp_db.create_subcategory(name="Lending", category_id=loans),
    }


@pytest.fixture
def sample_person(temp_db):
    """Create a sample person and return the ID."""
    return temp_db.create_person(name="Minh Nguyen")


@pytest.fixture
def txn_date():
    """A fixed transaction timestamp."""
    return datetime(2024, 11, 5, 12, 0, tzinfo=UTC)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
