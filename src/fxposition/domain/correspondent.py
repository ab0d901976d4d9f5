"""Correspondent bank balance monitoring against concentration limits."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from fxposition.database.base import Database
from fxposition.domain.entities import (
    Actor,
    Alert,
    AlertType,
    BankLimitLine,
    CashCoverReport,
    CorrespondentBalance,
    CorrespondentBank,
    CurrencyLimits,
    LimitsReport,
)
from fxposition.domain.errors import ValidationError
from fxposition.domain.reference import ReferenceDataService

logger = structlog.get_logger(__name__)

STATUS_NORMAL = "normal"
STATUS_EXCEEDED = "exceeded"
STATUS_BELOW = "below"

DEFAULT_CASH_COVER_TOP = 3


def share_of_total(balance: Decimal, total: Decimal) -> Decimal:
    """Percentage of `total` held as `balance`; zero when the total is zero."""
    if total <= 0:
        return Decimal(0)
    return balance / total * 100


def classify(
    percentage: Decimal, max_limit: Optional[Decimal], min_limit: Optional[Decimal]
) -> tuple[str, Decimal]:
    """Limit status of a percentage and how far it is past the limit.

    The max limit is checked first; a bank is never both exceeded and below.
    """
    if max_limit is not None and percentage > max_limit:
        return STATUS_EXCEEDED, percentage - max_limit
    if min_limit is not None and percentage < min_limit:
        return STATUS_BELOW, min_limit - percentage
    return STATUS_NORMAL, Decimal(0)


class CorrespondentLimitMonitor:
    """Tracks correspondent balances, checks limits and raises alerts."""

    def __init__(self, db: Database):
        """Initialize correspondent limit monitor.

        Args:
            db: Database instance
        """
        self.db = db
        self.reference = ReferenceDataService(db)

    def add_balance(
        self,
        bank_id: int,
        balance_date: date,
        amount: Decimal,
        actor: Actor,
        notes: Optional[str] = None,
    ) -> CorrespondentBalance:
        """Record the balance of a bank on a date and check its limits.

        The balance is stored even if the limit check fails; that failure is
        logged and not raised.

        Raises:
            NotFoundError: If the bank doesn't exist
            ValidationError: If the amount is negative
        """
        bank = self.reference.get_bank(bank_id)
        if amount < 0:
            raise ValidationError("Correspondent balance cannot be negative")

        with self.db.transaction():
            self.db.upsert_correspondent_balance(
                bank_id=bank.id,
                balance_date=balance_date,
                balance_amount=amount,
                created_by=actor.id,
                notes=notes,
            )
            try:
                with self.db.savepoint():
                    self.check_and_alert(bank.id, balance_date)
            except Exception:
                logger.exception(
                    "limit_check_failed", bank_id=bank.id, date=balance_date.isoformat()
                )

        logger.info(
            "correspondent_balance_recorded",
            bank_id=bank.id,
            date=balance_date.isoformat(),
            amount=str(amount),
        )
        return self.db.get_correspondent_balance(bank.id, balance_date)

    def get_bank_balances(self, bank_id: int) -> list[CorrespondentBalance]:
        """Balance history of a bank, newest first."""
        self.reference.get_bank(bank_id)
        return self.db.list_correspondent_balances(bank_id=bank_id)

    def _currency_balances(
        self, currency_id: int, balance_date: date
    ) -> tuple[list[CorrespondentBank], dict[int, Decimal]]:
        banks = self.db.list_correspondent_banks(currency_id=currency_id)
        balances = {
            b.bank_id: b.balance_amount
            for b in self.db.list_correspondent_balances(balance_date=balance_date)
        }
        return banks, {bank.id: balances.get(bank.id, Decimal(0)) for bank in banks}

    def check_and_alert(self, bank_id: int, balance_date: date) -> list[Alert]:
        """Compare a bank's share of its currency total with its limits.

        Returns:
            Alerts created by this call. An unresolved alert of the same
            bank, date and type is never duplicated.
        """
        bank = self.reference.get_bank(bank_id)
        if not bank.is_active:
            return []

        _, balances = self._currency_balances(bank.currency_id, balance_date)
        total = sum(balances.values(), Decimal(0))
        if total == 0:
            return []

        percentage = share_of_total(balances.get(bank.id, Decimal(0)), total)
        status, variation = classify(percentage, bank.max_limit, bank.min_limit)
        if status == STATUS_NORMAL:
            return []

        if status == STATUS_EXCEEDED:
            alert_type, limit = AlertType.MAX_LIMIT_EXCEEDED, bank.max_limit
        else:
            alert_type, limit = AlertType.MIN_LIMIT_VIOLATED, bank.min_limit

        alert_id = self.db.create_alert_if_absent(
            bank_id=bank.id,
            alert_type=alert_type,
            current_percentage=percentage,
            limit_percentage=limit,
            variation=variation,
            alert_date=balance_date,
        )
        if alert_id is None:
            return []

        logger.warning(
            "limit_alert_raised",
            bank_id=bank.id,
            bank=bank.name,
            type=alert_type.value,
            percentage=str(percentage),
            limit=str(limit),
        )
        return [self.db.get_alert(alert_id)]

    def generate_limits_report(self, report_date: date) -> LimitsReport:
        """Every active bank's share of its currency total on a date.

        Read-only; no alerts are written.
        """
        currencies: dict[str, CurrencyLimits] = {}
        breaches: list[BankLimitLine] = []

        for currency in self.db.list_currencies(active_only=True):
            banks, balances = self._currency_balances(currency.id, report_date)
            if not banks:
                continue
            total = sum(balances.values(), Decimal(0))

            lines = []
            for bank in banks:
                balance = balances[bank.id]
                percentage = share_of_total(balance, total)
                status, variation = classify(percentage, bank.max_limit, bank.min_limit)
                line = BankLimitLine(
                    bank_id=bank.id,
                    bank_name=bank.name,
                    currency=currency.code,
                    balance=balance,
                    percentage=percentage,
                    max_limit=bank.max_limit,
                    min_limit=bank.min_limit,
                    variation=variation,
                    status=status,
                )
                lines.append(line)
                if status != STATUS_NORMAL:
                    breaches.append(line)

            currencies[currency.code] = CurrencyLimits(
                currency=currency.code, total_balance=total, banks=tuple(lines)
            )

        return LimitsReport(
            report_date=report_date, currencies=currencies, breaches=tuple(breaches)
        )

    def generate_cash_cover_report(
        self, report_date: date, top: int = DEFAULT_CASH_COVER_TOP
    ) -> CashCoverReport:
        """Per currency, the banks holding the largest positive balances."""
        limits = self.generate_limits_report(report_date)
        cash_cover = {}
        for code, currency_limits in limits.currencies.items():
            covering = sorted(
                (line for line in currency_limits.banks if line.balance > 0),
                key=lambda line: line.balance,
                reverse=True,
            )
            cash_cover[code] = tuple(covering[:top])
        return CashCoverReport(
            report_date=report_date, cash_cover=cash_cover, breaches=limits.breaches
        )
