"""Factory functions for creating record store instances."""

from typing import Optional

from spendbook.config import Settings
from spendbook.database.base import RecordStore
from spendbook.database.memory import InMemoryRecordStore
from spendbook.database.sqlalchemy_db import SQLAlchemyRecordStore
from spendbook.logging_setup import get_logger

logger = get_logger("spendbook.database.factories")


def create_sqlite_database(database_path: str) -> SQLAlchemyRecordStore:
    """Create a SQLite-backed record store.

    Args:
        database_path: Path to SQLite database file

    Returns:
        SQLAlchemyRecordStore instance configured for SQLite
    """
    return SQLAlchemyRecordStore(f"sqlite:///{database_path}")


def create_record_store(database_url: Optional[str] = None) -> RecordStore:
    """Create the record store for the given URL.

    Args:
        database_url: SQLAlchemy URL. If None, checks SPENDBOOK_DATABASE_URL;
            when neither is set the in-memory demo store is returned.

    Returns:
        RecordStore instance
    """
    if database_url is None:
        database_url = Settings.from_env().database_url

    if not database_url:
        logger.warning("No database configured. Using demo data.")
        return InMemoryRecordStore.with_demo_data()

    return SQLAlchemyRecordStore(database_url)
