"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from farepay.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks FAREPAY_DB_PATH
            environment variable, then defaults to ~/.farepay/farepay.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("FAREPAY_DB_PATH")

    if database_path is None:
        home = Path.home()
        db_dir = home / ".farepay"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "farepay.db")

    database_url = f"sqlite:///{database_path}"
    db = SQLAlchemyDatabase(database_url)
    db.database_path = database_path
    return db


def create_database(
    database_url: Optional[str] = None, database_path: Optional[str] = None
) -> SQLAlchemyDatabase:
    """Create a database from a SQLAlchemy URL or fall back to SQLite.

    A URL (argument or FAREPAY_DATABASE_URL) wins over a SQLite path.
    """
    if database_url is None:
        database_url = os.environ.get("FAREPAY_DATABASE_URL")
    if database_url:
        return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path=database_path)
