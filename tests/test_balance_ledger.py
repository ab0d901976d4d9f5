"""Tests for balance ledger service."""

from decimal import Decimal

import pytest

from fxposition.domain.entities import ApprovalStatus
from fxposition.domain.errors import (
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    StateConflictError,
    ValidationError,
)


class TestCreateEntry:
    def test_maker_creates_draft(self, ledger_service, usd, seeded_items, maker, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        assert entry.status == ApprovalStatus.DRAFT
        assert entry.created_by == maker.id
        assert entry.authorized_by is None
        assert entry.item_id == seeded_items["ODBP"].id

    def test_authorizer_creates_authorized(self, ledger_service, usd, seeded_items, authorizer, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), authorizer)
        assert entry.status == ApprovalStatus.AUTHORIZED
        assert entry.authorized_by == authorizer.id

    def test_duplicate_key_rejected(self, ledger_service, usd, seeded_items, maker, business_date):
        ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        with pytest.raises(DuplicateError):
            ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("5"), maker)
        assert len(ledger_service.list_entries(business_date)) == 1

    def test_unknown_item(self, ledger_service, usd, seeded_items, maker, business_date):
        with pytest.raises(NotFoundError):
            ledger_service.create_entry(business_date, "USD", "NOPE", Decimal("1"), maker)

    def test_inactive_currency(self, temp_db, ledger_service, usd, seeded_items, maker, business_date):
        from fxposition.database.models import Currency

        session = temp_db._get_session()
        session.query(Currency).filter(Currency.id == usd.id).update({"is_active": False})
        session.commit()
        with pytest.raises(ValidationError):
            ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("1"), maker)


class TestTransitions:
    def test_submit_then_authorize(self, ledger_service, usd, seeded_items, maker, authorizer, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        submitted = ledger_service.submit(entry.id, maker)
        assert submitted.status == ApprovalStatus.SUBMITTED

        authorized = ledger_service.authorize(entry.id, authorizer)
        assert authorized.status == ApprovalStatus.AUTHORIZED
        assert authorized.authorized_by == authorizer.id

    def test_authorize_requires_submitted(self, ledger_service, usd, seeded_items, maker, authorizer, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        with pytest.raises(StateConflictError):
            ledger_service.authorize(entry.id, authorizer)

    def test_authorize_twice_fails(self, ledger_service, usd, seeded_items, maker, authorizer, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        ledger_service.submit(entry.id, maker)
        ledger_service.authorize(entry.id, authorizer)
        with pytest.raises(StateConflictError):
            ledger_service.authorize(entry.id, authorizer)

    def test_submit_requires_draft(self, ledger_service, usd, seeded_items, maker, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        ledger_service.submit(entry.id, maker)
        with pytest.raises(StateConflictError):
            ledger_service.submit(entry.id, maker)

    def test_maker_cannot_authorize(self, ledger_service, usd, seeded_items, maker, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        ledger_service.submit(entry.id, maker)
        with pytest.raises(PermissionDeniedError):
            ledger_service.authorize(entry.id, maker)
        assert ledger_service.get_entry(entry.id).status == ApprovalStatus.SUBMITTED

    def test_reject(self, ledger_service, usd, seeded_items, maker, authorizer, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        ledger_service.submit(entry.id, maker)
        rejected = ledger_service.reject(entry.id, authorizer)
        assert rejected.status == ApprovalStatus.REJECTED

    def test_missing_entry(self, ledger_service, maker):
        with pytest.raises(NotFoundError):
            ledger_service.submit(999, maker)


class TestUpdateDelete:
    def test_update_submitted_returns_to_draft(self, ledger_service, usd, seeded_items, maker, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        ledger_service.submit(entry.id, maker)
        updated = ledger_service.update(entry.id, Decimal("150"), maker, notes="corrected")
        assert updated.amount == Decimal("150")
        assert updated.status == ApprovalStatus.DRAFT
        assert updated.notes == "corrected"

    def test_update_authorized_denied_for_non_admin(
        self, ledger_service, usd, seeded_items, authorizer, business_date
    ):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), authorizer)
        with pytest.raises(PermissionDeniedError):
            ledger_service.update(entry.id, Decimal("150"), authorizer)
        assert ledger_service.get_entry(entry.id).amount == Decimal("100")

    def test_admin_override_keeps_authorized(
        self, ledger_service, usd, seeded_items, authorizer, admin, business_date
    ):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), authorizer)
        updated = ledger_service.update(entry.id, Decimal("150"), admin)
        assert updated.amount == Decimal("150")
        assert updated.status == ApprovalStatus.AUTHORIZED
        assert updated.authorized_by == admin.id

    def test_update_bumps_version(self, ledger_service, usd, seeded_items, maker, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        updated = ledger_service.update(entry.id, Decimal("101"), maker)
        assert updated.version == entry.version + 1

    def test_rejected_cannot_be_updated(
        self, ledger_service, usd, seeded_items, maker, authorizer, admin, business_date
    ):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        ledger_service.submit(entry.id, maker)
        ledger_service.reject(entry.id, authorizer)
        with pytest.raises(StateConflictError):
            ledger_service.update(entry.id, Decimal("1"), admin)

    def test_delete_draft(self, ledger_service, usd, seeded_items, maker, business_date):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), maker)
        ledger_service.delete(entry.id, maker)
        with pytest.raises(NotFoundError):
            ledger_service.get_entry(entry.id)

    def test_delete_authorized_requires_admin(
        self, ledger_service, usd, seeded_items, authorizer, admin, business_date
    ):
        entry = ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("100"), authorizer)
        with pytest.raises(PermissionDeniedError):
            ledger_service.delete(entry.id, authorizer)
        ledger_service.delete(entry.id, admin)
        assert ledger_service.list_entries(business_date) == []


def test_list_entries_filters(ledger_service, usd, eur, seeded_items, maker, authorizer, business_date):
    ledger_service.create_entry(business_date, "USD", "ODBP", Decimal("1"), maker)
    ledger_service.create_entry(business_date, "EUR", "ODBP", Decimal("2"), authorizer)
    assert len(ledger_service.list_entries(business_date)) == 2
    assert [e.amount for e in ledger_service.list_entries(business_date, currency="EUR")] == [Decimal("2")]
    authorized = ledger_service.list_entries(business_date, status=ApprovalStatus.AUTHORIZED)
    assert [e.currency_id for e in authorized] == [eur.id]
