"""Tests for correspondent limit monitoring."""

from datetime import timedelta
from decimal import Decimal

import pytest

from fxposition.domain.correspondent import classify, share_of_total
from fxposition.domain.entities import AlertType
from fxposition.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def banks(reference_service, usd):
    """Bank X with a 25% max limit and bank Y without limits."""
    x = reference_service.create_bank("Bank X", "USD", max_limit=Decimal("25"))
    y = reference_service.create_bank("Bank Y", "USD")
    return x, y


class TestHelpers:
    def test_share_of_total(self):
        assert share_of_total(Decimal("30"), Decimal("100")) == Decimal("30")
        assert share_of_total(Decimal("30"), Decimal("0")) == Decimal("0")

    def test_classify_checks_max_before_min(self):
        assert classify(Decimal("30"), Decimal("25"), Decimal("40")) == ("exceeded", Decimal("5"))
        assert classify(Decimal("10"), None, Decimal("15")) == ("below", Decimal("5"))
        assert classify(Decimal("20"), Decimal("25"), Decimal("15")) == ("normal", Decimal("0"))


class TestAddBalance:
    def test_scenario_max_limit_alert_not_duplicated(
        self, correspondent_monitor, alert_service, banks, authorizer, business_date
    ):
        x, y = banks
        correspondent_monitor.add_balance(y.id, business_date, Decimal("70"), authorizer)
        correspondent_monitor.add_balance(x.id, business_date, Decimal("30"), authorizer)

        alerts = alert_service.get_active_alerts(business_date)
        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.bank_id == x.id
        assert alert.alert_type == AlertType.MAX_LIMIT_EXCEEDED
        assert alert.current_percentage == Decimal("30")
        assert alert.limit_percentage == Decimal("25")
        assert alert.variation == Decimal("5")

        correspondent_monitor.add_balance(x.id, business_date, Decimal("30"), authorizer)
        assert len(alert_service.get_active_alerts(business_date)) == 1

    def test_new_alert_after_resolution(
        self, correspondent_monitor, alert_service, banks, authorizer, business_date
    ):
        x, y = banks
        correspondent_monitor.add_balance(y.id, business_date, Decimal("70"), authorizer)
        correspondent_monitor.add_balance(x.id, business_date, Decimal("30"), authorizer)
        (alert,) = alert_service.get_active_alerts(business_date)
        alert_service.resolve_alert(alert.id, authorizer)

        correspondent_monitor.add_balance(x.id, business_date, Decimal("30"), authorizer)
        (fresh,) = alert_service.get_active_alerts(business_date)
        assert fresh.id != alert.id

    def test_min_limit_alert(self, reference_service, correspondent_monitor, alert_service, usd, authorizer, business_date):
        big = reference_service.create_bank("Big", "USD")
        small = reference_service.create_bank("Small", "USD", min_limit=Decimal("20"))
        correspondent_monitor.add_balance(big.id, business_date, Decimal("90"), authorizer)
        correspondent_monitor.add_balance(small.id, business_date, Decimal("10"), authorizer)

        (alert,) = alert_service.get_active_alerts(business_date)
        assert alert.bank_id == small.id
        assert alert.alert_type == AlertType.MIN_LIMIT_VIOLATED
        assert alert.variation == Decimal("10")

    def test_zero_total_skips_check(self, reference_service, correspondent_monitor, alert_service, usd, authorizer, business_date):
        bank = reference_service.create_bank("Empty", "USD", min_limit=Decimal("10"))
        correspondent_monitor.add_balance(bank.id, business_date, Decimal("0"), authorizer)
        assert alert_service.get_active_alerts() == []

    def test_upsert_overwrites_same_day(self, correspondent_monitor, banks, authorizer, business_date):
        x, _ = banks
        correspondent_monitor.add_balance(x.id, business_date, Decimal("10"), authorizer)
        balance = correspondent_monitor.add_balance(x.id, business_date, Decimal("15"), authorizer, notes="restated")
        assert balance.balance_amount == Decimal("15")
        assert len(correspondent_monitor.get_bank_balances(x.id)) == 1

    def test_negative_amount_rejected(self, correspondent_monitor, banks, authorizer, business_date):
        x, _ = banks
        with pytest.raises(ValidationError):
            correspondent_monitor.add_balance(x.id, business_date, Decimal("-1"), authorizer)

    def test_unknown_bank(self, correspondent_monitor, authorizer, business_date):
        with pytest.raises(NotFoundError):
            correspondent_monitor.add_balance(42, business_date, Decimal("1"), authorizer)

    def test_failed_check_does_not_lose_balance(
        self, correspondent_monitor, banks, authorizer, business_date, monkeypatch
    ):
        x, _ = banks

        def broken_check(bank_id, balance_date):
            raise RuntimeError("boom")

        monkeypatch.setattr(correspondent_monitor, "check_and_alert", broken_check)
        balance = correspondent_monitor.add_balance(x.id, business_date, Decimal("30"), authorizer)
        assert balance.balance_amount == Decimal("30")

    def test_check_and_alert_returns_new_alerts(self, correspondent_monitor, banks, authorizer, business_date):
        x, y = banks
        correspondent_monitor.add_balance(y.id, business_date, Decimal("70"), authorizer)
        correspondent_monitor.add_balance(x.id, business_date, Decimal("30"), authorizer)
        # Already alerted by add_balance
        assert correspondent_monitor.check_and_alert(x.id, business_date) == []
        assert correspondent_monitor.check_and_alert(y.id, business_date) == []

    def test_bank_balance_history_newest_first(self, correspondent_monitor, banks, authorizer, business_date):
        x, _ = banks
        earlier = business_date - timedelta(days=1)
        correspondent_monitor.add_balance(x.id, earlier, Decimal("10"), authorizer)
        correspondent_monitor.add_balance(x.id, business_date, Decimal("20"), authorizer)
        history = correspondent_monitor.get_bank_balances(x.id)
        assert [b.balance_date for b in history] == [business_date, earlier]

    def test_inactive_banks_do_not_count_toward_total(
        self, reference_service, correspondent_monitor, alert_service, banks, authorizer, business_date
    ):
        x, y = banks
        z = reference_service.create_bank("Bank Z", "USD")
        correspondent_monitor.add_balance(y.id, business_date, Decimal("70"), authorizer)
        correspondent_monitor.add_balance(z.id, business_date, Decimal("100"), authorizer)
        reference_service.set_bank_active(z.id, False)

        # 30 of 100 once Bank Z is left out, 30 of 200 otherwise
        correspondent_monitor.add_balance(x.id, business_date, Decimal("30"), authorizer)
        (alert,) = alert_service.get_active_alerts(business_date)
        assert alert.bank_id == x.id
        assert alert.current_percentage == Decimal("30")

        report = correspondent_monitor.generate_limits_report(business_date)
        usd_limits = report.currencies["USD"]
        assert usd_limits.total_balance == Decimal("100")
        assert "Bank Z" not in {line.bank_name for line in usd_limits.banks}

    def test_inactive_bank_is_not_checked(
        self, reference_service, correspondent_monitor, alert_service, banks, authorizer, business_date
    ):
        x, y = banks
        reference_service.set_bank_active(x.id, False)
        correspondent_monitor.add_balance(y.id, business_date, Decimal("70"), authorizer)
        balance = correspondent_monitor.add_balance(x.id, business_date, Decimal("30"), authorizer)
        assert balance.balance_amount == Decimal("30")
        assert correspondent_monitor.check_and_alert(x.id, business_date) == []
        assert alert_service.get_active_alerts() == []


class TestReports:
    def test_limits_report(self, correspondent_monitor, banks, authorizer, business_date):
        x, y = banks
        correspondent_monitor.add_balance(y.id, business_date, Decimal("70"), authorizer)
        correspondent_monitor.add_balance(x.id, business_date, Decimal("30"), authorizer)

        report = correspondent_monitor.generate_limits_report(business_date)
        usd_limits = report.currencies["USD"]
        assert usd_limits.total_balance == Decimal("100")
        lines = {line.bank_name: line for line in usd_limits.banks}
        assert lines["Bank X"].status == "exceeded"
        assert lines["Bank X"].variation == Decimal("5")
        assert lines["Bank Y"].status == "normal"
        assert lines["Bank Y"].percentage == Decimal("70")
        assert [b.bank_name for b in report.breaches] == ["Bank X"]

    def test_limits_report_has_no_side_effects(
        self, temp_db, correspondent_monitor, alert_service, banks, business_date
    ):
        x, y = banks
        temp_db.upsert_correspondent_balance(x.id, business_date, Decimal("30"), created_by=1)
        temp_db.upsert_correspondent_balance(y.id, business_date, Decimal("70"), created_by=1)

        report = correspondent_monitor.generate_limits_report(business_date)
        assert len(report.breaches) == 1
        assert alert_service.get_active_alerts() == []

    def test_banks_without_balance_count_as_zero(self, correspondent_monitor, banks, business_date):
        report = correspondent_monitor.generate_limits_report(business_date)
        usd_limits = report.currencies["USD"]
        assert usd_limits.total_balance == Decimal("0")
        assert all(line.percentage == Decimal("0") for line in usd_limits.banks)

    def test_cash_cover_top_banks(self, reference_service, correspondent_monitor, usd, authorizer, business_date):
        amounts = {"A": "10", "B": "40", "C": "0", "D": "30", "E": "20"}
        for name, amount in amounts.items():
            bank = reference_service.create_bank(name, "USD")
            correspondent_monitor.add_balance(bank.id, business_date, Decimal(amount), authorizer)

        report = correspondent_monitor.generate_cash_cover_report(business_date)
        assert [line.bank_name for line in report.cash_cover["USD"]] == ["B", "D", "E"]

        wider = correspondent_monitor.generate_cash_cover_report(business_date, top=10)
        # Zero balances never provide cover
        assert [line.bank_name for line in wider.cash_cover["USD"]] == ["B", "D", "E", "A"]
