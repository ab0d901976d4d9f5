"""Database layer for fxposition application."""

from fxposition.database.base import Database
from fxposition.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
