"""Environment-based configuration."""

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

DEFAULT_PAID_UP_CAPITAL = Decimal("2979527")
DEFAULT_CAPITAL_CURRENCY = "ETB"
DEFAULT_LOG_LEVEL = "WARNING"


def get_database_path(database_path: Optional[str] = None) -> str:
    """Resolve the SQLite database file.

    Args:
        database_path: Explicit path. If None, checks FXPOS_DB_PATH
            environment variable, then defaults to ~/.fxposition/fxposition.db
    """
    if database_path is None:
        database_path = os.environ.get("FXPOS_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".fxposition"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "fxposition.db")

    return database_path


def get_capital_fallback() -> Decimal:
    """Capital used when no capital record is effective on a date."""
    raw = os.environ.get("FXPOS_PAID_UP_CAPITAL")
    if not raw:
        return DEFAULT_PAID_UP_CAPITAL
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"FXPOS_PAID_UP_CAPITAL must be a number, got '{raw}'")
    if value <= 0:
        raise ValueError("FXPOS_PAID_UP_CAPITAL must be positive")
    return value


def get_capital_currency() -> str:
    return os.environ.get("FXPOS_CAPITAL_CURRENCY", DEFAULT_CAPITAL_CURRENCY).upper()


def get_log_level() -> str:
    return os.environ.get("FXPOS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
