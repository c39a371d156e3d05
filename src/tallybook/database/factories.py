"""Factories that open a ledger: its database and the settings it runs with."""

import os
from pathlib import Path
from typing import Mapping, Optional

from tallybook.config import LedgerSettings
from tallybook.database.sqlalchemy_db import SQLAlchemyDatabase

DATABASE_FILENAME = "tallybook.db"


def default_database_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Resolve where the ledger lives when no path is given.

    TALLYBOOK_DB_PATH names the file directly; otherwise the file sits in
    TALLYBOOK_HOME, or ~/.tallybook when that is unset.
    """
    if environ is None:
        environ = os.environ

    if environ.get("TALLYBOOK_DB_PATH"):
        return Path(environ["TALLYBOOK_DB_PATH"]).expanduser()

    home = environ.get("TALLYBOOK_HOME")
    data_dir = Path(home).expanduser() if home else Path.home() / ".tallybook"
    return data_dir / DATABASE_FILENAME


def create_sqlite_database(
    database_path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to the SQLite file; resolved with
            default_database_path when None
        environ: Mapping to read TALLYBOOK_* variables from (defaults to os.environ)

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = Path(database_path) if database_path is not None else default_database_path(environ)
    path.parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyDatabase(f"sqlite:///{path}")


def open_ledger(
    database_path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> tuple[SQLAlchemyDatabase, LedgerSettings]:
    """Open the ledger database and read its settings from the same environment."""
    settings = LedgerSettings.from_env(environ)
    db = create_sqlite_database(database_path, environ)
    db.connect()
    db.initialize_schema()
    return db, settings
