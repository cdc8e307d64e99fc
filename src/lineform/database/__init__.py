"""Database layer for the lineform rate book."""

from lineform.database.base import Database
from lineform.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
