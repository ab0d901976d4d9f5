"""Tests for environment configuration."""

from decimal import Decimal

import pytest

from fxposition.config import (
    get_capital_currency,
    get_capital_fallback,
    get_database_path,
    get_log_level,
)


def test_database_path_precedence(monkeypatch, tmp_path):
    monkeypatch.setenv("FXPOS_DB_PATH", str(tmp_path / "env.db"))
    assert get_database_path(str(tmp_path / "explicit.db")) == str(tmp_path / "explicit.db")
    assert get_database_path() == str(tmp_path / "env.db")


def test_capital_fallback(monkeypatch):
    monkeypatch.delenv("FXPOS_PAID_UP_CAPITAL", raising=False)
    assert get_capital_fallback() == Decimal("2979527")
    monkeypatch.setenv("FXPOS_PAID_UP_CAPITAL", "5000000")
    assert get_capital_fallback() == Decimal("5000000")


@pytest.mark.parametrize("raw", ["abc", "0", "-10"])
def test_invalid_capital_fallback(monkeypatch, raw):
    monkeypatch.setenv("FXPOS_PAID_UP_CAPITAL", raw)
    with pytest.raises(ValueError):
        get_capital_fallback()


def test_capital_currency_and_log_level(monkeypatch):
    monkeypatch.setenv("FXPOS_CAPITAL_CURRENCY", "usd")
    monkeypatch.setenv("FXPOS_LOG_LEVEL", "debug")
    assert get_capital_currency() == "USD"
    assert get_log_level() == "DEBUG"
