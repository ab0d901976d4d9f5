"""Abstract database interface.

Each entity has its own repository interface; `Database` aggregates them
together with connection and transaction management.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from fxposition.domain.entities import (
    Alert,
    AlertType,
    ApprovalStatus,
    BalanceEntry,
    BalanceItem,
    BalanceType,
    CapitalRecord,
    CorrespondentBalance,
    CorrespondentBank,
    Currency,
    ExchangeRate,
    FxTransaction,
    ItemCategory,
    TransactionType,
)


class CurrencyRepository(ABC):
    @abstractmethod
    def create_currency(self, code: str, name: str) -> int:
        """Create a currency. Returns currency ID."""
        pass

    @abstractmethod
    def get_currency(self, currency_id: int) -> Optional[Currency]:
        """Get currency by ID."""
        pass

    @abstractmethod
    def get_currency_by_code(self, code: str) -> Optional[Currency]:
        """Get currency by ISO code."""
        pass

    @abstractmethod
    def list_currencies(self, active_only: bool = True) -> list[Currency]:
        """List currencies ordered by code."""
        pass


class BalanceItemRepository(ABC):
    @abstractmethod
    def create_balance_item(
        self,
        code: str,
        name: str,
        category: ItemCategory,
        balance_type: BalanceType = BalanceType.ON_BALANCE_SHEET,
        display_order: int = 0,
    ) -> int:
        """Create a balance item. Returns item ID."""
        pass

    @abstractmethod
    def get_balance_item(self, item_id: int) -> Optional[BalanceItem]:
        """Get balance item by ID."""
        pass

    @abstractmethod
    def get_balance_item_by_code(self, code: str) -> Optional[BalanceItem]:
        """Get balance item by code."""
        pass

    @abstractmethod
    def list_balance_items(self, active_only: bool = True) -> list[BalanceItem]:
        """List balance items ordered by category and display order."""
        pass


class ExchangeRateRepository(ABC):
    @abstractmethod
    def upsert_exchange_rate(
        self,
        currency_id: int,
        rate_date: date,
        buying_rate: Decimal,
        selling_rate: Decimal,
        mid_rate: Decimal,
    ) -> int:
        """Create or replace the rate for (currency, date). Returns rate ID."""
        pass

    @abstractmethod
    def get_exchange_rate(self, currency_id: int, rate_date: date) -> Optional[ExchangeRate]:
        """Get the rate of a currency on an exact date."""
        pass

    @abstractmethod
    def list_exchange_rates(self, rate_date: date) -> list[ExchangeRate]:
        """List all rates recorded for a date."""
        pass


class BalanceEntryRepository(ABC):
    @abstractmethod
    def create_balance_entry(
        self,
        balance_date: date,
        currency_id: int,
        item_id: int,
        amount: Decimal,
        status: ApprovalStatus,
        created_by: Optional[int],
        authorized_by: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a balance entry. Returns entry ID.

        Raises:
            DuplicateError: If the (date, currency, item) key already exists
        """
        pass

    @abstractmethod
    def get_balance_entry(self, entry_id: int) -> Optional[BalanceEntry]:
        """Get balance entry by ID."""
        pass

    @abstractmethod
    def find_balance_entry(
        self, balance_date: date, currency_id: int, item_id: int
    ) -> Optional[BalanceEntry]:
        """Get the entry stored under a (date, currency, item) key."""
        pass

    @abstractmethod
    def find_latest_balance_entry_before(
        self,
        currency_id: int,
        item_id: int,
        before_date: date,
        status: ApprovalStatus = ApprovalStatus.AUTHORIZED,
    ) -> Optional[BalanceEntry]:
        """Get the most recent entry strictly before a date with the given status."""
        pass

    @abstractmethod
    def update_balance_entry(
        self,
        entry_id: int,
        amount: Optional[Decimal] = None,
        status: Optional[ApprovalStatus] = None,
        authorized_by: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> None:
        """Update balance entry fields. None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_balance_entry(self, entry_id: int) -> None:
        """Delete a balance entry."""
        pass

    @abstractmethod
    def list_balance_entries(
        self,
        balance_date: date,
        currency_id: Optional[int] = None,
        status: Optional[ApprovalStatus] = None,
    ) -> list[BalanceEntry]:
        """List entries of a date with optional filters."""
        pass


class TransactionRepository(ABC):
    @abstractmethod
    def create_fx_transaction(
        self,
        transaction_date: date,
        currency_id: int,
        transaction_type: TransactionType,
        amount: Decimal,
        rate: Optional[Decimal],
        status: ApprovalStatus,
        created_by: Optional[int],
        authorized_by: Optional[int] = None,
        reference: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_fx_transaction(self, transaction_id: int) -> Optional[FxTransaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_fx_transaction_status(
        self,
        transaction_id: int,
        status: ApprovalStatus,
        authorized_by: Optional[int] = None,
    ) -> None:
        """Change transaction status."""
        pass

    @abstractmethod
    def list_fx_transactions(
        self,
        transaction_date: date,
        currency_id: Optional[int] = None,
        status: Optional[ApprovalStatus] = None,
    ) -> list[FxTransaction]:
        """List transactions of a date with optional filters."""
        pass


class CapitalRepository(ABC):
    @abstractmethod
    def create_capital_record(
        self,
        amount: Decimal,
        effective_date: date,
        currency: str,
        is_active: bool,
        created_by: Optional[int],
        notes: Optional[str] = None,
    ) -> int:
        """Create a capital record. Returns record ID."""
        pass

    @abstractmethod
    def get_capital_record(self, record_id: int) -> Optional[CapitalRecord]:
        """Get capital record by ID."""
        pass

    @abstractmethod
    def get_capital_record_by_date(self, effective_date: date) -> Optional[CapitalRecord]:
        """Get the record with exactly this effective date."""
        pass

    @abstractmethod
    def update_capital_record(
        self,
        record_id: int,
        amount: Optional[Decimal] = None,
        is_active: Optional[bool] = None,
        currency: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> None:
        """Update capital record fields. None leaves a field unchanged."""
        pass

    @abstractmethod
    def list_capital_records(self, active_only: bool = False) -> list[CapitalRecord]:
        """List capital records, newest effective date first."""
        pass


class CorrespondentRepository(ABC):
    @abstractmethod
    def create_correspondent_bank(
        self,
        name: str,
        currency_id: int,
        max_limit: Optional[Decimal] = None,
        min_limit: Optional[Decimal] = None,
        account_number: Optional[str] = None,
        swift_code: Optional[str] = None,
    ) -> int:
        """Create a correspondent bank. Returns bank ID."""
        pass

    @abstractmethod
    def get_correspondent_bank(self, bank_id: int) -> Optional[CorrespondentBank]:
        """Get correspondent bank by ID."""
        pass

    @abstractmethod
    def list_correspondent_banks(
        self, currency_id: Optional[int] = None, active_only: bool = True
    ) -> list[CorrespondentBank]:
        """List correspondent banks ordered by name."""
        pass

    @abstractmethod
    def update_correspondent_bank_limits(
        self, bank_id: int, max_limit: Optional[Decimal], min_limit: Optional[Decimal]
    ) -> None:
        """Replace both limits of a bank."""
        pass

    @abstractmethod
    def set_correspondent_bank_active(self, bank_id: int, is_active: bool) -> None:
        """Activate or deactivate a bank."""
        pass

    @abstractmethod
    def upsert_correspondent_balance(
        self,
        bank_id: int,
        balance_date: date,
        balance_amount: Decimal,
        created_by: Optional[int],
        notes: Optional[str] = None,
    ) -> int:
        """Create or overwrite the balance for (bank, date). Returns balance ID."""
        pass

    @abstractmethod
    def get_correspondent_balance(
        self, bank_id: int, balance_date: date
    ) -> Optional[CorrespondentBalance]:
        """Get the balance of a bank on a date."""
        pass

    @abstractmethod
    def list_correspondent_balances(
        self, balance_date: Optional[date] = None, bank_id: Optional[int] = None
    ) -> list[CorrespondentBalance]:
        """List balances filtered by date and/or bank, newest first."""
        pass


class AlertRepository(ABC):
    @abstractmethod
    def find_open_alert(
        self, bank_id: int, alert_date: date, alert_type: AlertType
    ) -> Optional[Alert]:
        """Get the unresolved alert for (bank, date, type), if any."""
        pass

    @abstractmethod
    def create_alert_if_absent(
        self,
        bank_id: int,
        alert_type: AlertType,
        current_percentage: Decimal,
        limit_percentage: Decimal,
        variation: Decimal,
        alert_date: date,
    ) -> Optional[int]:
        """Insert an alert unless an unresolved one exists for the same key.

        Returns:
            New alert ID, or None if an unresolved alert already existed
        """
        pass

    @abstractmethod
    def get_alert(self, alert_id: int) -> Optional[Alert]:
        """Get alert by ID."""
        pass

    @abstractmethod
    def list_alerts(
        self, alert_date: Optional[date] = None, include_resolved: bool = False
    ) -> list[Alert]:
        """List alerts, newest first."""
        pass

    @abstractmethod
    def resolve_alert(self, alert_id: int, resolved_by: int, resolved_at: datetime) -> None:
        """Mark an alert resolved."""
        pass


class Database(
    CurrencyRepository,
    BalanceItemRepository,
    ExchangeRateRepository,
    BalanceEntryRepository,
    TransactionRepository,
    CapitalRepository,
    CorrespondentRepository,
    AlertRepository,
):
    """Abstract database interface for fxposition."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Run the enclosed writes as one unit.

        Re-entrant: only the outermost block commits. Any exception rolls
        back everything written since the outermost block started.
        """
        pass

    @abstractmethod
    def savepoint(self) -> AbstractContextManager[None]:
        """Scope writes that may be discarded without failing the caller."""
        pass
