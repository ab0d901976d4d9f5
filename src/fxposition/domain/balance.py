"""Balance ledger domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional, Union

import structlog

from fxposition.database.base import Database
from fxposition.domain.entities import Actor, ApprovalStatus, BalanceEntry
from fxposition.domain.errors import (
    DuplicateError,
    NotFoundError,
    ValidationError,
    duplicate_balance_entry,
    not_found,
)
from fxposition.domain.reference import ReferenceDataService
from fxposition.domain.workflow import (
    advance,
    check_editable,
    initial_status,
    require_authorizer,
)

logger = structlog.get_logger(__name__)


class BalanceLedgerService:
    """Service for dated per-currency balance entries under maker-checker."""

    def __init__(self, db: Database):
        """Initialize balance ledger service.

        Args:
            db: Database instance
        """
        self.db = db
        self.reference = ReferenceDataService(db)

    def create_entry(
        self,
        balance_date: date,
        currency: Union[str, int],
        item: Union[str, int],
        amount: Decimal,
        actor: Actor,
        notes: Optional[str] = None,
    ) -> BalanceEntry:
        """Create a balance entry.

        Makers create drafts; authorizers create entries directly authorized.

        Args:
            balance_date: Balance date
            currency: Currency code or ID
            item: Balance item code or ID
            amount: Signed amount
            actor: Acting user
            notes: Optional notes

        Returns:
            The created entry

        Raises:
            NotFoundError: If currency or item doesn't exist
            ValidationError: If currency or item is inactive
            DuplicateError: If an entry already exists for (date, currency, item)
        """
        resolved_currency = self.reference.resolve_currency(currency)
        resolved_item = self.reference.resolve_balance_item(item)
        if not resolved_currency.is_active:
            raise ValidationError(f"Currency {resolved_currency.code} is inactive")
        if not resolved_item.is_active:
            raise ValidationError(f"Balance item {resolved_item.code} is inactive")

        status = initial_status(actor)
        with self.db.transaction():
            existing = self.db.find_balance_entry(balance_date, resolved_currency.id, resolved_item.id)
            if existing is not None:
                raise DuplicateError(
                    duplicate_balance_entry(balance_date, resolved_currency.code, resolved_item.code)
                )
            entry_id = self.db.create_balance_entry(
                balance_date=balance_date,
                currency_id=resolved_currency.id,
                item_id=resolved_item.id,
                amount=amount,
                status=status,
                created_by=actor.id,
                authorized_by=actor.id if status == ApprovalStatus.AUTHORIZED else None,
                notes=notes,
            )

        logger.info(
            "balance_entry_created",
            entry_id=entry_id,
            currency=resolved_currency.code,
            item=resolved_item.code,
            status=status.value,
        )
        return self.db.get_balance_entry(entry_id)

    def get_entry(self, entry_id: int) -> BalanceEntry:
        """Get balance entry by ID.

        Raises:
            NotFoundError: If entry doesn't exist
        """
        entry = self.db.get_balance_entry(entry_id)
        if entry is None:
            raise NotFoundError(not_found("Balance entry", entry_id))
        return entry

    def submit(self, entry_id: int, actor: Actor) -> BalanceEntry:
        """Submit a draft entry for authorization."""
        with self.db.transaction():
            entry = self.get_entry(entry_id)
            status = advance(entry.status, ApprovalStatus.SUBMITTED, f"balance entry {entry_id}")
            self.db.update_balance_entry(entry_id, status=status)
        logger.info("balance_entry_submitted", entry_id=entry_id, actor=actor.id)
        return self.get_entry(entry_id)

    def authorize(self, entry_id: int, actor: Actor) -> BalanceEntry:
        """Authorize a submitted entry.

        Raises:
            PermissionDeniedError: If the actor cannot authorize
            StateConflictError: If the entry is not submitted
        """
        require_authorizer(actor, "authorize balance entries")
        with self.db.transaction():
            entry = self.get_entry(entry_id)
            status = advance(entry.status, ApprovalStatus.AUTHORIZED, f"balance entry {entry_id}")
            self.db.update_balance_entry(entry_id, status=status, authorized_by=actor.id)
        logger.info("balance_entry_authorized", entry_id=entry_id, actor=actor.id)
        return self.get_entry(entry_id)

    def reject(self, entry_id: int, actor: Actor) -> BalanceEntry:
        """Reject a submitted entry."""
        require_authorizer(actor, "reject balance entries")
        with self.db.transaction():
            entry = self.get_entry(entry_id)
            status = advance(entry.status, ApprovalStatus.REJECTED, f"balance entry {entry_id}")
            self.db.update_balance_entry(entry_id, status=status)
        logger.info("balance_entry_rejected", entry_id=entry_id, actor=actor.id)
        return self.get_entry(entry_id)

    def update(
        self,
        entry_id: int,
        amount: Decimal,
        actor: Actor,
        notes: Optional[str] = None,
    ) -> BalanceEntry:
        """Change the amount of an entry.

        Draft and submitted entries go back to the actor's initial status
        (draft for makers). Authorized entries can only be force-edited by
        an admin and stay authorized.
        """
        with self.db.transaction():
            entry = self.get_entry(entry_id)
            override = check_editable(entry.status, actor, f"balance entry {entry_id}")
            status = ApprovalStatus.AUTHORIZED if override else initial_status(actor)
            self.db.update_balance_entry(
                entry_id,
                amount=amount,
                status=status,
                authorized_by=actor.id if status == ApprovalStatus.AUTHORIZED else None,
                notes=notes,
            )
        logger.info(
            "balance_entry_updated", entry_id=entry_id, actor=actor.id, override=override
        )
        return self.get_entry(entry_id)

    def delete(self, entry_id: int, actor: Actor) -> None:
        """Delete an entry under the same rules as update."""
        with self.db.transaction():
            entry = self.get_entry(entry_id)
            override = check_editable(entry.status, actor, f"balance entry {entry_id}")
            self.db.delete_balance_entry(entry_id)
        logger.info(
            "balance_entry_deleted", entry_id=entry_id, actor=actor.id, override=override
        )

    def list_entries(
        self,
        balance_date: date,
        currency: Union[str, int, None] = None,
        status: Optional[ApprovalStatus] = None,
    ) -> list[BalanceEntry]:
        """List entries of a date, optionally by currency and status."""
        currency_id = self.reference.resolve_currency(currency).id if currency is not None else None
        return self.db.list_balance_entries(balance_date, currency_id=currency_id, status=status)

    # System postings (used by transaction authorization)
    def set_authorized_amount(
        self, balance_date: date, currency_id: int, item_id: int, amount: Decimal, actor: Actor
    ) -> BalanceEntry:
        """Upsert an entry to `amount` with status authorized."""
        existing = self.db.find_balance_entry(balance_date, currency_id, item_id)
        if existing is None:
            entry_id = self.db.create_balance_entry(
                balance_date=balance_date,
                currency_id=currency_id,
                item_id=item_id,
                amount=amount,
                status=ApprovalStatus.AUTHORIZED,
                created_by=actor.id,
                authorized_by=actor.id,
            )
        else:
            entry_id = existing.id
            self.db.update_balance_entry(
                entry_id,
                amount=amount,
                status=ApprovalStatus.AUTHORIZED,
                authorized_by=actor.id,
            )
        return self.get_entry(entry_id)

    def add_to_authorized_amount(
        self, balance_date: date, currency_id: int, item_id: int, delta: Decimal, actor: Actor
    ) -> BalanceEntry:
        """Create-or-accumulate: add `delta` to the day's authorized amount.

        A same-day entry that is not authorized does not count as a base.
        """
        existing = self.db.find_balance_entry(balance_date, currency_id, item_id)
        base = Decimal(0)
        if existing is not None and existing.status == ApprovalStatus.AUTHORIZED:
            base = existing.amount
        return self.set_authorized_amount(balance_date, currency_id, item_id, base + delta, actor)
