"""Reference data domain service.

Currencies, the balance-item catalog, exchange rates and correspondent
banks: the minimal surface the computation engine looks things up in.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Union

import structlog

from fxposition.database.base import Database
from fxposition.domain.entities import (
    BalanceItem,
    BalanceType,
    CorrespondentBank,
    Currency,
    ExchangeRate,
    ItemCategory,
)
from fxposition.domain.errors import (
    DependencyMissingError,
    DuplicateError,
    NotFoundError,
    ValidationError,
    missing_catalog_item,
    not_found,
)

logger = structlog.get_logger(__name__)

CASH_ON_HAND = "CASH_ON_HAND"
DUE_FROM_BANKS = "DUE_FROM_BANKS"
DUE_TO_BANKS = "DUE_TO_BANKS"

# (code, name, category, display order)
DEFAULT_BALANCE_ITEMS = [
    (CASH_ON_HAND, "F/Cy Cash on hand", ItemCategory.ASSET, 1),
    ("CASH_IN_TRANSIT", "F/Cy Cash in transit (NBE)", ItemCategory.ASSET, 2),
    ("SHORT_TIME_DEPOSIT", "Short Time Deposit", ItemCategory.ASSET, 3),
    ("CORR_BANK_BALANCE", "F/Cy Correspondent Bank Balance", ItemCategory.ASSET, 4),
    ("ODBP", "ODBP", ItemCategory.ASSET, 5),
    ("UNCLEARED_EFFECTS", "Uncleared effects - international money transfer", ItemCategory.ASSET, 6),
    (DUE_FROM_BANKS, "Due from banks", ItemCategory.ASSET, 7),
    ("DIASPORA_AC", "DIASPORA A/C", ItemCategory.LIABILITY, 1),
    ("FCY_SAVING_AC", "FCY SAVING A/C", ItemCategory.LIABILITY, 2),
    ("NR_FCY_AC", "NR-FCY A/C", ItemCategory.LIABILITY, 3),
    ("RETENTION_AC_A", "RETENTION A/C 'A'", ItemCategory.LIABILITY, 4),
    ("RETENTION_AC_B", "RETENTION A/C 'B'", ItemCategory.LIABILITY, 5),
    (DUE_TO_BANKS, "Due to banks", ItemCategory.LIABILITY, 6),
    ("ACTIVE_LC", "Active Letter of Credit (L/C)", ItemCategory.MEMO_LIABILITY, 1),
    ("INACTIVE_LC", "Inactive Letter of Credit (L/C)", ItemCategory.MEMO_LIABILITY, 2),
    ("IBC_100", "IBC (100% Collected)", ItemCategory.MEMO_ASSET, 3),
    ("EPSE", "EPSE", ItemCategory.MEMO_ASSET, 4),
    ("IBC_OUTSTANDING", "IBC Outstanding (with less than 100% deposit)", ItemCategory.MEMO_LIABILITY, 5),
    ("OUTSTANDING_PO", "Outstanding purchase order (PO)", ItemCategory.MEMO_LIABILITY, 6),
    ("SUPPLIER_CREDIT_PO", "Supplier Credit PO", ItemCategory.MEMO_LIABILITY, 7),
    ("SUPPLIER_CREDIT_LC", "Supplier Credit LC", ItemCategory.MEMO_LIABILITY, 8),
]

MEMO_CATEGORIES = (ItemCategory.MEMO_ASSET, ItemCategory.MEMO_LIABILITY)


def _check_limit(name: str, value: Optional[Decimal]) -> None:
    if value is not None and not (Decimal(0) <= value <= Decimal(100)):
        raise ValidationError(f"{name} must be between 0 and 100, got {value}")


class ReferenceDataService:
    """Service for currencies, balance items, exchange rates and banks."""

    def __init__(self, db: Database):
        """Initialize reference data service.

        Args:
            db: Database instance
        """
        self.db = db

    # Currencies
    def create_currency(self, code: str, name: str) -> Currency:
        """Create a currency.

        Raises:
            ValidationError: If the code is not three letters
            DuplicateError: If the code already exists
        """
        code = code.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValidationError(f"Invalid currency code '{code}'")
        if self.db.get_currency_by_code(code) is not None:
            raise DuplicateError(f"Currency '{code}' already exists")
        currency_id = self.db.create_currency(code=code, name=name)
        return self.db.get_currency(currency_id)

    def resolve_currency(self, currency: Union[str, int]) -> Currency:
        """Resolve a currency by code or ID.

        Raises:
            NotFoundError: If no currency matches
        """
        if isinstance(currency, int) or str(currency).isdigit():
            found = self.db.get_currency(int(currency))
        else:
            found = self.db.get_currency_by_code(str(currency).strip().upper())
        if found is None:
            raise NotFoundError(not_found("Currency", currency))
        return found

    def list_currencies(self, active_only: bool = True) -> list[Currency]:
        return self.db.list_currencies(active_only=active_only)

    # Balance items
    def create_balance_item(
        self,
        code: str,
        name: str,
        category: ItemCategory,
        balance_type: Optional[BalanceType] = None,
        display_order: int = 0,
    ) -> BalanceItem:
        """Create a balance item.

        Memo categories default to off-balance-sheet, everything else to
        on-balance-sheet.
        """
        if self.db.get_balance_item_by_code(code) is not None:
            raise DuplicateError(f"Balance item '{code}' already exists")
        if balance_type is None:
            balance_type = (
                BalanceType.OFF_BALANCE_SHEET
                if category in MEMO_CATEGORIES
                else BalanceType.ON_BALANCE_SHEET
            )
        item_id = self.db.create_balance_item(
            code=code,
            name=name,
            category=category,
            balance_type=balance_type,
            display_order=display_order,
        )
        return self.db.get_balance_item(item_id)

    def init_default_items(self) -> int:
        """Create any missing item of the default catalog.

        Returns:
            Number of items created
        """
        created = 0
        with self.db.transaction():
            for code, name, category, display_order in DEFAULT_BALANCE_ITEMS:
                if self.db.get_balance_item_by_code(code) is None:
                    self.create_balance_item(code, name, category, display_order=display_order)
                    created += 1
        logger.info("default_items_initialized", created=created)
        return created

    def resolve_balance_item(self, item: Union[str, int]) -> BalanceItem:
        """Resolve a balance item by code or ID.

        Raises:
            NotFoundError: If no item matches
        """
        if isinstance(item, int) or str(item).isdigit():
            found = self.db.get_balance_item(int(item))
        else:
            found = self.db.get_balance_item_by_code(str(item).strip().upper())
        if found is None:
            raise NotFoundError(not_found("Balance item", item))
        return found

    def require_item(self, code: str) -> BalanceItem:
        """Get a catalog item the engine cannot work without.

        Raises:
            DependencyMissingError: If the item is absent or inactive
        """
        item = self.db.get_balance_item_by_code(code)
        if item is None or not item.is_active:
            raise DependencyMissingError(missing_catalog_item(code))
        return item

    def list_balance_items(self, active_only: bool = True) -> list[BalanceItem]:
        return self.db.list_balance_items(active_only=active_only)

    # Exchange rates
    def set_exchange_rate(
        self,
        currency: Union[str, int],
        rate_date: date,
        buying_rate: Decimal,
        selling_rate: Decimal,
        mid_rate: Optional[Decimal] = None,
    ) -> ExchangeRate:
        """Record the rate of a currency for a date.

        The mid rate defaults to the midpoint of buying and selling rates.
        """
        for label, value in (("buying rate", buying_rate), ("selling rate", selling_rate)):
            if value <= 0:
                raise ValidationError(f"{label} must be positive")
        if mid_rate is None:
            mid_rate = (buying_rate + selling_rate) / 2
        elif mid_rate <= 0:
            raise ValidationError("mid rate must be positive")

        resolved = self.resolve_currency(currency)
        self.db.upsert_exchange_rate(
            currency_id=resolved.id,
            rate_date=rate_date,
            buying_rate=buying_rate,
            selling_rate=selling_rate,
            mid_rate=mid_rate,
        )
        return self.db.get_exchange_rate(resolved.id, rate_date)

    def get_mid_rate(self, currency_id: int, rate_date: date) -> Optional[Decimal]:
        """Mid rate of a currency on an exact date, or None if not recorded."""
        rate = self.db.get_exchange_rate(currency_id, rate_date)
        return rate.mid_rate if rate is not None else None

    def list_exchange_rates(self, rate_date: date) -> list[ExchangeRate]:
        return self.db.list_exchange_rates(rate_date)

    # Correspondent banks
    def create_bank(
        self,
        name: str,
        currency: Union[str, int],
        max_limit: Optional[Decimal] = None,
        min_limit: Optional[Decimal] = None,
        account_number: Optional[str] = None,
        swift_code: Optional[str] = None,
    ) -> CorrespondentBank:
        """Register a correspondent bank with optional percentage limits."""
        self._validate_limits(max_limit, min_limit)
        resolved = self.resolve_currency(currency)
        bank_id = self.db.create_correspondent_bank(
            name=name,
            currency_id=resolved.id,
            max_limit=max_limit,
            min_limit=min_limit,
            account_number=account_number,
            swift_code=swift_code,
        )
        logger.info("correspondent_bank_created", bank_id=bank_id, currency=resolved.code)
        return self.db.get_correspondent_bank(bank_id)

    def update_bank_limits(
        self, bank_id: int, max_limit: Optional[Decimal], min_limit: Optional[Decimal]
    ) -> CorrespondentBank:
        """Replace the limits of a bank. Existing alerts are left untouched."""
        self.get_bank(bank_id)
        self._validate_limits(max_limit, min_limit)
        self.db.update_correspondent_bank_limits(bank_id, max_limit, min_limit)
        return self.db.get_correspondent_bank(bank_id)

    def set_bank_active(self, bank_id: int, is_active: bool) -> CorrespondentBank:
        """Activate or deactivate a bank.

        Inactive banks are left out of currency totals, limit checks and
        reports. Their balance history is kept.
        """
        self.get_bank(bank_id)
        self.db.set_correspondent_bank_active(bank_id, is_active)
        logger.info("correspondent_bank_status_changed", bank_id=bank_id, is_active=is_active)
        return self.db.get_correspondent_bank(bank_id)

    def get_bank(self, bank_id: int) -> CorrespondentBank:
        bank = self.db.get_correspondent_bank(bank_id)
        if bank is None:
            raise NotFoundError(not_found("Correspondent bank", bank_id))
        return bank

    def list_banks(self, currency: Union[str, int, None] = None) -> list[CorrespondentBank]:
        currency_id = self.resolve_currency(currency).id if currency is not None else None
        return self.db.list_correspondent_banks(currency_id=currency_id)

    @staticmethod
    def _validate_limits(max_limit: Optional[Decimal], min_limit: Optional[Decimal]) -> None:
        _check_limit("max limit", max_limit)
        _check_limit("min limit", min_limit)
        if max_limit is not None and min_limit is not None and min_limit > max_limit:
            raise ValidationError("min limit cannot exceed max limit")
