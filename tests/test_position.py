"""Tests for position calculator."""

from datetime import timedelta
from decimal import Decimal

import pytest

from fxposition.domain.reference import CASH_ON_HAND


@pytest.fixture
def usd_book(ledger_service, usd, seeded_items, authorizer, business_date):
    """Authorized USD balances across all four categories plus cash."""
    for item, amount in (
        ("ODBP", "500"),
        ("DIASPORA_AC", "200"),
        ("IBC_100", "30"),
        ("ACTIVE_LC", "80"),
    ):
        ledger_service.create_entry(business_date, "USD", item, Decimal(amount), authorizer)
    # Cash carries forward from the previous day
    ledger_service.create_entry(
        business_date - timedelta(days=1), "USD", CASH_ON_HAND, Decimal("1000"), authorizer
    )
    return usd


class TestGetTotals:
    def test_sums_by_category(self, position_calculator, usd_book, business_date):
        (totals,) = position_calculator.get_totals(business_date)
        assert totals.currency == "USD"
        assert totals.cash_on_hand == Decimal("1000")
        assert totals.asset == Decimal("1500")
        assert totals.liability == Decimal("200")
        assert totals.memo_asset == Decimal("30")
        assert totals.memo_liability == Decimal("80")
        assert totals.total_liability == Decimal("280")

    def test_ignores_unauthorized_entries(
        self, ledger_service, position_calculator, usd, seeded_items, maker, business_date
    ):
        ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("500"), maker)
        (totals,) = position_calculator.get_totals(business_date)
        assert totals.asset == Decimal("0")

    def test_cash_carries_forward(
        self, ledger_service, position_calculator, usd, seeded_items, authorizer, business_date
    ):
        ledger_service.create_entry(
            business_date - timedelta(days=3), "USD", CASH_ON_HAND, Decimal("700"), authorizer
        )
        (totals,) = position_calculator.get_totals(business_date)
        assert totals.cash_on_hand == Decimal("700")
        assert totals.asset == Decimal("700")

    def test_authorized_transactions_are_counted_once(
        self, ledger_service, transaction_service, position_calculator, usd, seeded_items,
        authorizer, business_date
    ):
        ledger_service.create_entry(
            business_date - timedelta(days=1), "USD", CASH_ON_HAND, Decimal("1000"), authorizer
        )
        transaction_service.create_transaction(
            business_date, "USD", "purchase", Decimal("200"), None, authorizer
        )
        (totals,) = position_calculator.get_totals(business_date)
        assert totals.cash_on_hand == Decimal("1200")
        # Cash plus the due from banks posting
        assert totals.asset == Decimal("1400")

    def test_previous_day_entered_after_transaction(
        self, ledger_service, transaction_service, position_calculator, usd, seeded_items,
        authorizer, business_date
    ):
        transaction_service.create_transaction(
            business_date, "USD", "purchase", Decimal("200"), None, authorizer
        )
        ledger_service.create_entry(
            business_date - timedelta(days=1), "USD", CASH_ON_HAND, Decimal("1000"), authorizer
        )

        cash = transaction_service.calculate_cash_on_hand("USD", business_date)
        assert cash.recorded == Decimal("200")
        (totals,) = position_calculator.get_totals(business_date)
        assert totals.cash_on_hand == Decimal("1200")

    def test_previous_day_corrected_by_admin(
        self, ledger_service, transaction_service, position_calculator, usd, seeded_items,
        authorizer, admin, business_date
    ):
        previous = ledger_service.create_entry(
            business_date - timedelta(days=1), "USD", CASH_ON_HAND, Decimal("1000"), authorizer
        )
        transaction_service.create_transaction(
            business_date, "USD", "purchase", Decimal("200"), None, authorizer
        )
        ledger_service.update(previous.id, Decimal("2000"), admin)

        (totals,) = position_calculator.get_totals(business_date)
        assert totals.cash_on_hand == Decimal("2200")

    def test_same_day_manual_cash_is_not_reported(
        self, ledger_service, position_calculator, usd, seeded_items, authorizer, business_date
    ):
        ledger_service.create_entry(business_date, "USD", CASH_ON_HAND, Decimal("500"), authorizer)
        (totals,) = position_calculator.get_totals(business_date)
        assert totals.cash_on_hand == Decimal("0")


class TestGetPosition:
    def test_long_position(self, reference_service, position_calculator, usd_book, business_date):
        reference_service.set_exchange_rate("USD", business_date, Decimal("49"), Decimal("51"))

        report = position_calculator.get_position(business_date)
        (position,) = report.currencies
        assert position.position == Decimal("1250")
        assert position.mid_rate == Decimal("50")
        assert position.position_local == Decimal("62500")
        assert position.percentage == Decimal("6.25")
        assert position.type == "long"
        assert report.overall.total_long == Decimal("62500")
        assert report.overall.total_short == Decimal("0")
        assert report.overall.overall_open_position == Decimal("62500")
        assert report.overall.paid_up_capital == Decimal("1000000")

    def test_short_side_dominates(
        self, reference_service, ledger_service, position_calculator, usd_book, eur, authorizer, business_date
    ):
        reference_service.set_exchange_rate("USD", business_date, Decimal("49"), Decimal("51"))
        reference_service.set_exchange_rate("EUR", business_date, Decimal("59"), Decimal("61"))
        ledger_service.create_entry(business_date, "EUR", "DIASPORA_AC", Decimal("2000"), authorizer)

        report = position_calculator.get_position(business_date)
        by_code = {p.currency: p for p in report.currencies}
        assert by_code["EUR"].type == "short"
        assert by_code["EUR"].position_local == Decimal("-120000")
        assert report.overall.total_long == Decimal("62500")
        assert report.overall.total_short == Decimal("120000")
        assert report.overall.overall_open_position == Decimal("-120000")
        assert report.overall.overall_percentage == Decimal("-12")

    def test_currency_without_rate_is_omitted(
        self, reference_service, position_calculator, usd_book, eur, business_date
    ):
        reference_service.set_exchange_rate("USD", business_date, Decimal("49"), Decimal("51"))
        # EUR has a rate, but for another day
        reference_service.set_exchange_rate(
            "EUR", business_date - timedelta(days=1), Decimal("59"), Decimal("61")
        )

        report = position_calculator.get_position(business_date)
        assert [p.currency for p in report.currencies] == ["USD"]

    def test_no_rates_at_all(self, position_calculator, usd_book, business_date):
        report = position_calculator.get_position(business_date)
        assert report.currencies == ()
        assert report.overall.overall_open_position == Decimal("0")
        assert report.overall.overall_percentage == Decimal("0")

    def test_uses_capital_effective_on_date(
        self, reference_service, capital_service, position_calculator, usd_book, authorizer, business_date
    ):
        reference_service.set_exchange_rate("USD", business_date, Decimal("49"), Decimal("51"))
        capital_service.upsert_capital(Decimal("500000"), business_date - timedelta(days=30), authorizer)

        report = position_calculator.get_position(business_date)
        assert report.overall.paid_up_capital == Decimal("500000")
        assert report.currencies[0].percentage == Decimal("12.5")
