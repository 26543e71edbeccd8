"""Database layer for farepay."""

from farepay.database.base import Database, UidMatch, UidPattern
from farepay.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "UidMatch", "UidPattern", "create_database", "create_sqlite_database"]
