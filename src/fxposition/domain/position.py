"""Net open position calculation."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from fxposition.database.base import Database
from fxposition.domain.capital import CapitalService
from fxposition.domain.entities import (
    ApprovalStatus,
    CurrencyPosition,
    CurrencyTotals,
    ItemCategory,
    OverallPosition,
    PositionReport,
)
from fxposition.domain.reference import CASH_ON_HAND, ReferenceDataService
from fxposition.domain.transaction import TransactionWorkflowService

logger = structlog.get_logger(__name__)


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    if whole == 0:
        return Decimal(0)
    return part / whole * 100


class PositionCalculator:
    """Derives per-currency totals and the open position against capital.

    Read-only: it never writes to the database and never raises for a
    currency that lacks rate data, it just leaves that currency out.
    """

    def __init__(self, db: Database, capital_service: Optional[CapitalService] = None):
        """Initialize position calculator.

        Args:
            db: Database instance
            capital_service: Capital lookup. Defaults to one built on `db`.
        """
        self.db = db
        self.capital = capital_service or CapitalService(db)
        self.reference = ReferenceDataService(db)
        self.transactions = TransactionWorkflowService(db)

    def get_totals(self, on_date: date) -> list[CurrencyTotals]:
        """Authorized balances of every active currency summed by category.

        Cash on hand is not taken from the stored entry of the day but
        recomputed from the carried-forward balance and the day's authorized
        transactions, so a stale entry is never reported.
        """
        items = {item.id: item for item in self.db.list_balance_items(active_only=False)}
        cash_item = self.db.get_balance_item_by_code(CASH_ON_HAND)

        totals = []
        for currency in self.db.list_currencies(active_only=True):
            sums = {category: Decimal(0) for category in ItemCategory}
            for entry in self.db.list_balance_entries(
                on_date, currency_id=currency.id, status=ApprovalStatus.AUTHORIZED
            ):
                if cash_item is not None and entry.item_id == cash_item.id:
                    continue
                item = items.get(entry.item_id)
                if item is None:
                    continue
                sums[item.category] += entry.amount

            cash = Decimal(0)
            if cash_item is not None:
                cash = self.transactions.calculate_cash_on_hand(currency.id, on_date).computed
            sums[ItemCategory.ASSET] += cash

            totals.append(
                CurrencyTotals(
                    currency_id=currency.id,
                    currency=currency.code,
                    asset=sums[ItemCategory.ASSET],
                    liability=sums[ItemCategory.LIABILITY],
                    memo_asset=sums[ItemCategory.MEMO_ASSET],
                    memo_liability=sums[ItemCategory.MEMO_LIABILITY],
                    cash_on_hand=cash,
                )
            )
        return totals

    def get_position(self, on_date: date) -> PositionReport:
        """Open position per currency and overall, in local currency."""
        capital = self.capital.capital_for_date(on_date)

        positions = []
        for totals in self.get_totals(on_date):
            mid_rate = self.reference.get_mid_rate(totals.currency_id, on_date)
            if mid_rate is None:
                logger.debug(
                    "position_currency_omitted",
                    currency=totals.currency,
                    date=on_date.isoformat(),
                    reason="no mid rate",
                )
                continue

            position = (totals.asset + totals.memo_asset) - (
                totals.liability + totals.memo_liability
            )
            position_local = position * mid_rate
            positions.append(
                CurrencyPosition(
                    currency=totals.currency,
                    asset=totals.asset,
                    liability=totals.liability,
                    memo_asset=totals.memo_asset,
                    memo_liability=totals.memo_liability,
                    position=position,
                    mid_rate=mid_rate,
                    position_local=position_local,
                    percentage=_percent(position_local, capital),
                    type="long" if position >= 0 else "short",
                )
            )

        total_long = sum((p.position_local for p in positions if p.position_local > 0), Decimal(0))
        total_short = sum(
            (abs(p.position_local) for p in positions if p.position_local < 0), Decimal(0)
        )
        overall = -total_short if total_short > total_long else total_long

        return PositionReport(
            report_date=on_date,
            currencies=tuple(positions),
            overall=OverallPosition(
                total_long=total_long,
                total_short=total_short,
                overall_open_position=overall,
                overall_percentage=_percent(overall, capital),
                paid_up_capital=capital,
            ),
        )
