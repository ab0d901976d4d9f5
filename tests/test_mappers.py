"""Tests for database mappers."""

from datetime import UTC, date, datetime
from decimal import Decimal

from fxposition.database.mappers import (
    alert_to_domain,
    balance_entry_to_domain,
    balance_item_to_domain,
    fx_transaction_to_domain,
)
from fxposition.database.models import (
    Alert as ORMAlert,
    BalanceEntry as ORMBalanceEntry,
    BalanceItem as ORMBalanceItem,
    FxTransaction as ORMFxTransaction,
)
from fxposition.domain.entities import (
    Alert,
    AlertType,
    ApprovalStatus,
    BalanceEntry,
    BalanceItem,
    BalanceType,
    FxTransaction,
    ItemCategory,
    TransactionType,
)


class TestBalanceItemMapper:
    def test_balance_item_to_domain(self):
        orm_item = ORMBalanceItem(
            id=1,
            code="IBC_100",
            name="IBC (100% Collected)",
            category="memo_asset",
            balance_type="off_balance_sheet",
            display_order=3,
            is_active=True,
        )
        item = balance_item_to_domain(orm_item)

        assert isinstance(item, BalanceItem)
        assert item.category is ItemCategory.MEMO_ASSET
        assert item.balance_type is BalanceType.OFF_BALANCE_SHEET
        assert item.display_order == 3


class TestBalanceEntryMapper:
    def test_balance_entry_to_domain(self):
        orm_entry = ORMBalanceEntry(
            id=7,
            balance_date=date(2024, 6, 14),
            currency_id=1,
            item_id=2,
            amount=Decimal("-50.25"),
            status="submitted",
            created_by=1,
            authorized_by=None,
            notes="note",
            version=3,
        )
        entry = balance_entry_to_domain(orm_entry)

        assert isinstance(entry, BalanceEntry)
        assert entry.amount == Decimal("-50.25")
        assert entry.status is ApprovalStatus.SUBMITTED
        assert entry.version == 3


class TestFxTransactionMapper:
    def test_fx_transaction_to_domain(self):
        orm_txn = ORMFxTransaction(
            id=4,
            transaction_date=date(2024, 6, 14),
            currency_id=1,
            transaction_type="sale",
            amount=Decimal("50"),
            rate=None,
            reference="R-9",
            description=None,
            status="authorized",
            created_by=1,
            authorized_by=2,
            version=2,
        )
        txn = fx_transaction_to_domain(orm_txn)

        assert isinstance(txn, FxTransaction)
        assert txn.transaction_type is TransactionType.SALE
        assert txn.status is ApprovalStatus.AUTHORIZED
        assert txn.rate is None
        assert txn.reference == "R-9"


class TestAlertMapper:
    def test_alert_to_domain(self):
        created = datetime.now(UTC)
        orm_alert = ORMAlert(
            id=1,
            bank_id=5,
            alert_type="MIN_LIMIT_VIOLATED",
            current_percentage=Decimal("4"),
            limit_percentage=Decimal("10"),
            variation=Decimal("6"),
            alert_date=date(2024, 6, 14),
            is_resolved=False,
            resolved_by=None,
            resolved_at=None,
            created_at=created,
        )
        alert = alert_to_domain(orm_alert)

        assert isinstance(alert, Alert)
        assert alert.alert_type is AlertType.MIN_LIMIT_VIOLATED
        assert alert.variation == Decimal("6")
        assert alert.created_at == created
