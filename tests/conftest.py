"""Shared pytest fixtures for fxposition tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from fxposition.database.factories import create_sqlite_database
from fxposition.domain.alerts import AlertService
from fxposition.domain.balance import BalanceLedgerService
from fxposition.domain.capital import CapitalService
from fxposition.domain.correspondent import CorrespondentLimitMonitor
from fxposition.domain.entities import Actor, Role
from fxposition.domain.position import PositionCalculator
from fxposition.domain.reference import ReferenceDataService
from fxposition.domain.transaction import TransactionWorkflowService

BUSINESS_DATE = date(2024, 6, 14)
FALLBACK_CAPITAL = Decimal("1000000")


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def business_date():
    """The date most scenarios run on."""
    return BUSINESS_DATE


@pytest.fixture
def maker():
    return Actor(id=1, role=Role.MAKER)


@pytest.fixture
def authorizer():
    return Actor(id=2, role=Role.AUTHORIZER)


@pytest.fixture
def admin():
    return Actor(id=3, role=Role.ADMIN)


@pytest.fixture
def reference_service(temp_db):
    """Create a ReferenceDataService with a temporary database."""
    return ReferenceDataService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a BalanceLedgerService with a temporary database."""
    return BalanceLedgerService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionWorkflowService with a temporary database."""
    return TransactionWorkflowService(temp_db)


@pytest.fixture
def capital_service(temp_db):
    """CapitalService with a fixed fallback and a clock frozen on the business date."""
    return CapitalService(temp_db, fallback=FALLBACK_CAPITAL, clock=lambda: BUSINESS_DATE)


@pytest.fixture
def position_calculator(temp_db, capital_service):
    return PositionCalculator(temp_db, capital_service=capital_service)


@pytest.fixture
def correspondent_monitor(temp_db):
    return CorrespondentLimitMonitor(temp_db)


@pytest.fixture
def alert_service(temp_db):
    return AlertService(temp_db)


@pytest.fixture
def usd(reference_service):
    return reference_service.create_currency("USD", "US Dollar")


@pytest.fixture
def eur(reference_service):
    return reference_service.create_currency("EUR", "Euro")


@pytest.fixture
def seeded_items(reference_service):
    """Seed the default balance item catalog and return items by code."""
    reference_service.init_default_items()
    return {item.code: item for item in reference_service.list_balance_items()}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_db_path(tmp_path):
    """Path of a database file used only through the CLI."""
    return str(tmp_path / "cli.db")
