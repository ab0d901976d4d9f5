"""Domain model entities for fxposition.

These are pure data classes representing business concepts, independent of
database schema. Services receive and return these; the ORM models never
leave the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class ApprovalStatus(str, Enum):
    """Maker-checker status shared by balance entries and transactions."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    AUTHORIZED = "authorized"
    REJECTED = "rejected"


class ItemCategory(str, Enum):
    ASSET = "asset"
    LIABILITY = "liability"
    MEMO_ASSET = "memo_asset"
    MEMO_LIABILITY = "memo_liability"


class BalanceType(str, Enum):
    ON_BALANCE_SHEET = "on_balance_sheet"
    OFF_BALANCE_SHEET = "off_balance_sheet"


class TransactionType(str, Enum):
    PURCHASE = "purchase"
    SALE = "sale"


class AlertType(str, Enum):
    MAX_LIMIT_EXCEEDED = "MAX_LIMIT_EXCEEDED"
    MIN_LIMIT_VIOLATED = "MIN_LIMIT_VIOLATED"


class Role(str, Enum):
    MAKER = "maker"
    AUTHORIZER = "authorizer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    """User identity supplied by the request layer for audit fields."""

    id: int
    role: Role


@dataclass(frozen=True)
class Currency:
    """Currency domain entity."""

    id: int
    code: str
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class BalanceItem:
    """Balance-sheet line catalog entity."""

    id: int
    code: str
    name: str
    category: ItemCategory
    balance_type: BalanceType = BalanceType.ON_BALANCE_SHEET
    display_order: int = 0
    is_active: bool = True


@dataclass(frozen=True)
class BalanceEntry:
    """Dated balance of one item in one currency."""

    id: int
    balance_date: date
    currency_id: int
    item_id: int
    amount: Decimal
    status: ApprovalStatus
    created_by: Optional[int]
    authorized_by: Optional[int]
    notes: Optional[str]
    version: int = 1


@dataclass(frozen=True)
class FxTransaction:
    """Foreign-currency purchase or sale."""

    id: int
    transaction_date: date
    currency_id: int
    transaction_type: TransactionType
    amount: Decimal
    rate: Optional[Decimal]
    status: ApprovalStatus
    created_by: Optional[int]
    authorized_by: Optional[int]
    reference: Optional[str] = None
    description: Optional[str] = None
    version: int = 1


@dataclass(frozen=True)
class CapitalRecord:
    """Paid-up capital figure effective from a date."""

    id: int
    amount: Decimal
    effective_date: date
    currency: str
    is_active: bool
    created_by: Optional[int]
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ExchangeRate:
    """Exchange rate of a currency on a date."""

    id: int
    currency_id: int
    rate_date: date
    buying_rate: Decimal
    selling_rate: Decimal
    mid_rate: Decimal


@dataclass(frozen=True)
class CorrespondentBank:
    """External bank holding foreign-currency balances."""

    id: int
    name: str
    currency_id: int
    max_limit: Optional[Decimal]
    min_limit: Optional[Decimal]
    account_number: Optional[str] = None
    swift_code: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class CorrespondentBalance:
    """Balance held at a correspondent bank on a date."""

    id: int
    bank_id: int
    balance_date: date
    balance_amount: Decimal
    created_by: Optional[int]
    notes: Optional[str] = None


@dataclass(frozen=True)
class Alert:
    """Persisted record of a detected limit breach."""

    id: int
    bank_id: int
    alert_type: AlertType
    current_percentage: Decimal
    limit_percentage: Decimal
    variation: Decimal
    alert_date: date
    is_resolved: bool
    resolved_by: Optional[int]
    resolved_at: Optional[datetime]
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CashOnHand:
    """Breakdown of a day's cash-on-hand derivation."""

    currency: str
    calculation_date: date
    opening_balance: Decimal
    purchases: Decimal
    sales: Decimal
    computed: Decimal
    recorded: Optional[Decimal]


@dataclass(frozen=True)
class CurrencyTotals:
    """Authorized balances of one currency summed by item category."""

    currency_id: int
    currency: str
    asset: Decimal
    liability: Decimal
    memo_asset: Decimal
    memo_liability: Decimal
    cash_on_hand: Decimal

    @property
    def total_liability(self) -> Decimal:
        return self.liability + self.memo_liability


@dataclass(frozen=True)
class CurrencyPosition:
    """Net open position of one currency."""

    currency: str
    asset: Decimal
    liability: Decimal
    memo_asset: Decimal
    memo_liability: Decimal
    position: Decimal
    mid_rate: Decimal
    position_local: Decimal
    percentage: Decimal
    type: str


@dataclass(frozen=True)
class OverallPosition:
    total_long: Decimal
    total_short: Decimal
    overall_open_position: Decimal
    overall_percentage: Decimal
    paid_up_capital: Decimal


@dataclass(frozen=True)
class PositionReport:
    report_date: date
    currencies: tuple[CurrencyPosition, ...]
    overall: OverallPosition


@dataclass(frozen=True)
class BankLimitLine:
    """One bank's share of its currency total on a date."""

    bank_id: int
    bank_name: str
    currency: str
    balance: Decimal
    percentage: Decimal
    max_limit: Optional[Decimal]
    min_limit: Optional[Decimal]
    variation: Decimal
    status: str


@dataclass(frozen=True)
class CurrencyLimits:
    currency: str
    total_balance: Decimal
    banks: tuple[BankLimitLine, ...]


@dataclass(frozen=True)
class LimitsReport:
    report_date: date
    currencies: dict[str, CurrencyLimits] = field(default_factory=dict)
    breaches: tuple[BankLimitLine, ...] = ()


@dataclass(frozen=True)
class CashCoverReport:
    report_date: date
    cash_cover: dict[str, tuple[BankLimitLine, ...]] = field(default_factory=dict)
    breaches: tuple[BankLimitLine, ...] = ()
