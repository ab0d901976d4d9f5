"""Database factory functions for creating database instances."""

from typing import Optional

from fxposition.config import get_database_path
from fxposition.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks FXPOS_DB_PATH
            environment variable, then defaults to ~/.fxposition/fxposition.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    database_url = f"sqlite:///{get_database_path(database_path)}"
    return SQLAlchemyDatabase(database_url)


def create_database(database_url: str) -> SQLAlchemyDatabase:
    """Create a database instance for any SQLAlchemy URL."""
    return SQLAlchemyDatabase(database_url)
