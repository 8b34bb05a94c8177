"""Record store layer for spendbook application."""

from spendbook.database.base import RecordStore
from spendbook.database.factories import create_record_store, create_sqlite_database

__all__ = ["RecordStore", "create_record_store", "create_sqlite_database"]
