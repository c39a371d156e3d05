"""Database layer for tallybook application."""

from tallybook.database.base import Database
from tallybook.database.factories import create_sqlite_database, open_ledger

__all__ = ["Database", "create_sqlite_database", "open_ledger"]
