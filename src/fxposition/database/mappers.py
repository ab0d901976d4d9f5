"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so that column types (strings for
enumerations, numeric precision) never leak into the domain.
"""

from fxposition.domain import entities as domain
from fxposition.database.models import (
    Alert as ORMAlert,
    BalanceEntry as ORMBalanceEntry,
    BalanceItem as ORMBalanceItem,
    CapitalRecord as ORMCapitalRecord,
    CorrespondentBalance as ORMCorrespondentBalance,
    CorrespondentBank as ORMCorrespondentBank,
    Currency as ORMCurrency,
    ExchangeRate as ORMExchangeRate,
    FxTransaction as ORMFxTransaction,
)


def currency_to_domain(orm_currency: ORMCurrency) -> domain.Currency:
    """Convert SQLAlchemy Currency model to domain Currency entity."""
    return domain.Currency(
        id=orm_currency.id,
        code=orm_currency.code,
        name=orm_currency.name,
        is_active=orm_currency.is_active,
    )


def balance_item_to_domain(orm_item: ORMBalanceItem) -> domain.BalanceItem:
    """Convert SQLAlchemy BalanceItem model to domain BalanceItem entity."""
    return domain.BalanceItem(
        id=orm_item.id,
        code=orm_item.code,
        name=orm_item.name,
        category=domain.ItemCategory(orm_item.category),
        balance_type=domain.BalanceType(orm_item.balance_type),
        display_order=orm_item.display_order,
        is_active=orm_item.is_active,
    )


def exchange_rate_to_domain(orm_rate: ORMExchangeRate) -> domain.ExchangeRate:
    """Convert SQLAlchemy ExchangeRate model to domain ExchangeRate entity."""
    return domain.ExchangeRate(
        id=orm_rate.id,
        currency_id=orm_rate.currency_id,
        rate_date=orm_rate.rate_date,
        buying_rate=orm_rate.buying_rate,
        selling_rate=orm_rate.selling_rate,
        mid_rate=orm_rate.mid_rate,
    )


def balance_entry_to_domain(orm_entry: ORMBalanceEntry) -> domain.BalanceEntry:
    """Convert SQLAlchemy BalanceEntry model to domain BalanceEntry entity."""
    return domain.BalanceEntry(
        id=orm_entry.id,
        balance_date=orm_entry.balance_date,
        currency_id=orm_entry.currency_id,
        item_id=orm_entry.item_id,
        amount=orm_entry.amount,
        status=domain.ApprovalStatus(orm_entry.status),
        created_by=orm_entry.created_by,
        authorized_by=orm_entry.authorized_by,
        notes=orm_entry.notes,
        version=orm_entry.version,
    )


def fx_transaction_to_domain(orm_txn: ORMFxTransaction) -> domain.FxTransaction:
    """Convert SQLAlchemy FxTransaction model to domain FxTransaction entity."""
    return domain.FxTransaction(
        id=orm_txn.id,
        transaction_date=orm_txn.transaction_date,
        currency_id=orm_txn.currency_id,
        transaction_type=domain.TransactionType(orm_txn.transaction_type),
        amount=orm_txn.amount,
        rate=orm_txn.rate,
        status=domain.ApprovalStatus(orm_txn.status),
        created_by=orm_txn.created_by,
        authorized_by=orm_txn.authorized_by,
        reference=orm_txn.reference,
        description=orm_txn.description,
        version=orm_txn.version,
    )


def capital_record_to_domain(orm_record: ORMCapitalRecord) -> domain.CapitalRecord:
    """Convert SQLAlchemy CapitalRecord model to domain CapitalRecord entity."""
    return domain.CapitalRecord(
        id=orm_record.id,
        amount=orm_record.amount,
        effective_date=orm_record.effective_date,
        currency=orm_record.currency,
        is_active=orm_record.is_active,
        created_by=orm_record.created_by,
        notes=orm_record.notes,
        created_at=orm_record.created_at,
    )


def correspondent_bank_to_domain(orm_bank: ORMCorrespondentBank) -> domain.CorrespondentBank:
    """Convert SQLAlchemy CorrespondentBank model to domain CorrespondentBank entity."""
    return domain.CorrespondentBank(
        id=orm_bank.id,
        name=orm_bank.name,
        currency_id=orm_bank.currency_id,
        max_limit=orm_bank.max_limit,
        min_limit=orm_bank.min_limit,
        account_number=orm_bank.account_number,
        swift_code=orm_bank.swift_code,
        is_active=orm_bank.is_active,
    )


def correspondent_balance_to_domain(
    orm_balance: ORMCorrespondentBalance,
) -> domain.CorrespondentBalance:
    """Convert SQLAlchemy CorrespondentBalance model to domain entity."""
    return domain.CorrespondentBalance(
        id=orm_balance.id,
        bank_id=orm_balance.bank_id,
        balance_date=orm_balance.balance_date,
        balance_amount=orm_balance.balance_amount,
        created_by=orm_balance.created_by,
        notes=orm_balance.notes,
    )


def alert_to_domain(orm_alert: ORMAlert) -> domain.Alert:
    """Convert SQLAlchemy Alert model to domain Alert entity."""
    return domain.Alert(
        id=orm_alert.id,
        bank_id=orm_alert.bank_id,
        alert_type=domain.AlertType(orm_alert.alert_type),
        current_percentage=orm_alert.current_percentage,
        limit_percentage=orm_alert.limit_percentage,
        variation=orm_alert.variation,
        alert_date=orm_alert.alert_date,
        is_resolved=orm_alert.is_resolved,
        resolved_by=orm_alert.resolved_by,
        resolved_at=orm_alert.resolved_at,
        created_at=orm_alert.created_at,
    )
