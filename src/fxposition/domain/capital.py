"""Paid-up capital timeline and its domain service."""

from bisect import bisect_right
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional

import structlog

from fxposition.config import get_capital_currency, get_capital_fallback
from fxposition.database.base import Database
from fxposition.domain.entities import Actor, CapitalRecord
from fxposition.domain.errors import CalculationError, ValidationError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CapitalTimeline:
    """Capital amounts keyed by effective date, ascending."""

    dates: tuple[date, ...] = ()
    amounts: tuple[Decimal, ...] = ()

    @classmethod
    def from_records(cls, records: Iterable[CapitalRecord]) -> "CapitalTimeline":
        """Build a timeline from the active records only."""
        points = sorted((r.effective_date, r.amount) for r in records if r.is_active)
        return cls(
            dates=tuple(d for d, _ in points),
            amounts=tuple(a for _, a in points),
        )

    def value_at(self, on_date: date, default: Decimal) -> Decimal:
        """Amount effective on a date: the latest point on or before it."""
        index = bisect_right(self.dates, on_date)
        if index == 0:
            return default
        return self.amounts[index - 1]


class CapitalService:
    """Service for the time-varying paid-up capital."""

    def __init__(
        self,
        db: Database,
        fallback: Optional[Decimal] = None,
        clock: Callable[[], date] = date.today,
    ):
        """Initialize capital service.

        Args:
            db: Database instance
            fallback: Capital used before the first record. Defaults to
                FXPOS_PAID_UP_CAPITAL or the built-in constant.
            clock: Returns today's date
        """
        self.db = db
        self.fallback = fallback if fallback is not None else get_capital_fallback()
        self.clock = clock

    def timeline(self) -> CapitalTimeline:
        """Timeline of the active capital records."""
        return CapitalTimeline.from_records(self.db.list_capital_records(active_only=True))

    def capital_for_date(self, on_date: date) -> Decimal:
        """Capital effective on a date, or the fallback if none is.

        Raises:
            CalculationError: If the effective amount is not positive
        """
        capital = self.timeline().value_at(on_date, self.fallback)
        if capital <= 0:
            raise CalculationError(f"Paid-up capital on {on_date.isoformat()} is not positive")
        return capital

    def current_capital(self) -> Decimal:
        """Capital effective today."""
        return self.capital_for_date(self.clock())

    def get_capital_history(self) -> list[CapitalRecord]:
        """All capital records, newest effective date first."""
        return self.db.list_capital_records()

    def upsert_capital(
        self,
        amount: Decimal,
        effective_date: date,
        actor: Actor,
        currency: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> CapitalRecord:
        """Record a capital amount effective from a date.

        A record with the same effective date is updated in place. A
        future-dated record supersedes every active record. A backdated one
        supersedes the current record only if that record starts after it.

        Raises:
            ValidationError: If the amount is not positive
        """
        if amount <= 0:
            raise ValidationError("Capital amount must be positive")
        currency = (currency or get_capital_currency()).upper()

        with self.db.transaction():
            existing = self.db.get_capital_record_by_date(effective_date)
            if existing is not None:
                self.db.update_capital_record(
                    existing.id, amount=amount, currency=currency, notes=notes
                )
                logger.info(
                    "capital_updated",
                    record_id=existing.id,
                    effective_date=effective_date.isoformat(),
                    amount=str(amount),
                )
                return self.db.get_capital_record(existing.id)

            active = self.db.list_capital_records(active_only=True)
            if effective_date > self.clock():
                for record in active:
                    self.db.update_capital_record(record.id, is_active=False)
                logger.info(
                    "capital_superseded",
                    effective_date=effective_date.isoformat(),
                    deactivated=[r.id for r in active],
                )
            else:
                previous = next((r for r in active if r.effective_date < effective_date), None)
                if previous is not None:
                    logger.info(
                        "capital_backdated",
                        effective_date=effective_date.isoformat(),
                        previous_id=previous.id,
                        previous_date=previous.effective_date.isoformat(),
                    )
                current = active[0] if active else None
                if current is not None and current.effective_date > effective_date:
                    self.db.update_capital_record(current.id, is_active=False)
                    logger.info(
                        "capital_superseded",
                        effective_date=effective_date.isoformat(),
                        deactivated=[current.id],
                    )

            record_id = self.db.create_capital_record(
                amount=amount,
                effective_date=effective_date,
                currency=currency,
                is_active=True,
                created_by=actor.id,
                notes=notes,
            )

        logger.info(
            "capital_created",
            record_id=record_id,
            effective_date=effective_date.isoformat(),
            amount=str(amount),
        )
        return self.db.get_capital_record(record_id)
