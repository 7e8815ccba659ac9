"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerbook.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = ".ledgerbook"
DEFAULT_DB_FILE = "ledgerbook.db"


def default_database_path() -> str:
    """Return ~/.ledgerbook/ledgerbook.db, creating the directory if needed."""
    db_dir = Path.home() / DEFAULT_DB_DIR
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / DEFAULT_DB_FILE)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERBOOK_DB_PATH
            environment variable, then defaults to ~/.ledgerbook/ledgerbook.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("LEDGERBOOK_DB_PATH")

    if database_path is None:
        database_path = default_database_path()

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
