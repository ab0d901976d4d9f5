"""Foreign-currency transaction domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional, Union

import structlog

from fxposition.database.base import Database
from fxposition.domain.balance import BalanceLedgerService
from fxposition.domain.entities import (
    Actor,
    ApprovalStatus,
    CashOnHand,
    FxTransaction,
    TransactionType,
)
from fxposition.domain.errors import NotFoundError, ValidationError, not_found
from fxposition.domain.reference import (
    CASH_ON_HAND,
    DUE_FROM_BANKS,
    DUE_TO_BANKS,
    ReferenceDataService,
)
from fxposition.domain.workflow import advance, initial_status, require_authorizer

logger = structlog.get_logger(__name__)


class TransactionWorkflowService:
    """Service for purchase/sale transactions and their ledger effect."""

    def __init__(self, db: Database):
        """Initialize transaction workflow service.

        Args:
            db: Database instance
        """
        self.db = db
        self.reference = ReferenceDataService(db)
        self.ledger = BalanceLedgerService(db)

    def create_transaction(
        self,
        transaction_date: date,
        currency: Union[str, int],
        transaction_type: Union[TransactionType, str],
        amount: Decimal,
        rate: Optional[Decimal],
        actor: Actor,
        reference: Optional[str] = None,
        description: Optional[str] = None,
    ) -> FxTransaction:
        """Create a transaction.

        Makers create drafts. Authorizers create it authorized, which posts
        it to the ledger in the same database transaction.

        Args:
            transaction_date: Transaction date
            currency: Currency code or ID
            transaction_type: purchase or sale
            amount: Positive amount in the foreign currency
            rate: Optional deal rate
            actor: Acting user
            reference: Optional external reference
            description: Optional description

        Returns:
            The created transaction

        Raises:
            ValidationError: If type, amount or rate is invalid
            NotFoundError: If currency doesn't exist
            DependencyMissingError: If a ledger item needed for posting is missing
        """
        try:
            transaction_type = TransactionType(transaction_type)
        except ValueError:
            raise ValidationError(f"Invalid transaction type '{transaction_type}'")
        if amount <= 0:
            raise ValidationError("Transaction amount must be positive")
        if rate is not None and rate <= 0:
            raise ValidationError("Transaction rate must be positive")

        resolved = self.reference.resolve_currency(currency)
        if not resolved.is_active:
            raise ValidationError(f"Currency {resolved.code} is inactive")

        status = initial_status(actor)
        with self.db.transaction():
            transaction_id = self.db.create_fx_transaction(
                transaction_date=transaction_date,
                currency_id=resolved.id,
                transaction_type=transaction_type,
                amount=amount,
                rate=rate,
                status=status,
                created_by=actor.id,
                authorized_by=actor.id if status == ApprovalStatus.AUTHORIZED else None,
                reference=reference,
                description=description,
            )
            if status == ApprovalStatus.AUTHORIZED:
                self._post_to_ledger(self.get_transaction(transaction_id), actor)

        logger.info(
            "transaction_created",
            transaction_id=transaction_id,
            currency=resolved.code,
            type=transaction_type.value,
            status=status.value,
        )
        return self.get_transaction(transaction_id)

    def get_transaction(self, transaction_id: int) -> FxTransaction:
        """Get transaction by ID.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.db.get_fx_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(not_found("Transaction", transaction_id))
        return txn

    def submit(self, transaction_id: int, actor: Actor) -> FxTransaction:
        """Submit a draft transaction for authorization."""
        with self.db.transaction():
            txn = self.get_transaction(transaction_id)
            status = advance(txn.status, ApprovalStatus.SUBMITTED, f"transaction {transaction_id}")
            self.db.update_fx_transaction_status(transaction_id, status)
        logger.info("transaction_submitted", transaction_id=transaction_id, actor=actor.id)
        return self.get_transaction(transaction_id)

    def authorize(self, transaction_id: int, actor: Actor) -> FxTransaction:
        """Authorize a submitted transaction and post it to the ledger.

        The status change, the cash-on-hand upsert and the due from/to banks
        posting commit together or not at all. The cash baseline is read
        from committed ledger state, so calling this again after a failure
        is safe.

        Raises:
            PermissionDeniedError: If the actor cannot authorize
            StateConflictError: If the transaction is not submitted
            DependencyMissingError: If a ledger item needed for posting is missing
        """
        require_authorizer(actor, "authorize transactions")
        with self.db.transaction():
            txn = self.get_transaction(transaction_id)
            status = advance(txn.status, ApprovalStatus.AUTHORIZED, f"transaction {transaction_id}")
            self.db.update_fx_transaction_status(transaction_id, status, authorized_by=actor.id)
            self._post_to_ledger(txn, actor)
        logger.info("transaction_authorized", transaction_id=transaction_id, actor=actor.id)
        return self.get_transaction(transaction_id)

    def reject(self, transaction_id: int, actor: Actor) -> FxTransaction:
        """Reject a submitted transaction. Nothing is posted."""
        require_authorizer(actor, "reject transactions")
        with self.db.transaction():
            txn = self.get_transaction(transaction_id)
            status = advance(txn.status, ApprovalStatus.REJECTED, f"transaction {transaction_id}")
            self.db.update_fx_transaction_status(transaction_id, status)
        logger.info("transaction_rejected", transaction_id=transaction_id, actor=actor.id)
        return self.get_transaction(transaction_id)

    def list_transactions(
        self,
        transaction_date: date,
        currency: Union[str, int, None] = None,
        status: Optional[ApprovalStatus] = None,
    ) -> list[FxTransaction]:
        """List transactions of a date."""
        currency_id = self.reference.resolve_currency(currency).id if currency is not None else None
        return self.db.list_fx_transactions(transaction_date, currency_id=currency_id, status=status)

    def calculate_cash_on_hand(
        self, currency: Union[str, int], calculation_date: date
    ) -> CashOnHand:
        """Derive the day's cash on hand of a currency.

        Opening balance is the latest authorized cash entry before the date
        (carry-forward), plus the day's authorized purchases minus sales. The
        recorded value is the same-day authorized entry, if any.
        """
        resolved = self.reference.resolve_currency(currency)
        cash_item = self.reference.require_item(CASH_ON_HAND)

        opening = self._opening_cash(calculation_date, resolved.id, cash_item.id)
        purchases = Decimal(0)
        sales = Decimal(0)
        for txn in self.db.list_fx_transactions(
            calculation_date, currency_id=resolved.id, status=ApprovalStatus.AUTHORIZED
        ):
            if txn.transaction_type == TransactionType.PURCHASE:
                purchases += txn.amount
            else:
                sales += txn.amount

        today = self.db.find_balance_entry(calculation_date, resolved.id, cash_item.id)
        recorded = None
        if today is not None and today.status == ApprovalStatus.AUTHORIZED:
            recorded = today.amount

        return CashOnHand(
            currency=resolved.code,
            calculation_date=calculation_date,
            opening_balance=opening,
            purchases=purchases,
            sales=sales,
            computed=opening + purchases - sales,
            recorded=recorded,
        )

    def _opening_cash(self, balance_date: date, currency_id: int, cash_item_id: int) -> Decimal:
        previous = self.db.find_latest_balance_entry_before(currency_id, cash_item_id, balance_date)
        return previous.amount if previous is not None else Decimal(0)

    def _cash_baseline(self, balance_date: date, currency_id: int, cash_item_id: int) -> Decimal:
        """Today's authorized cash if present, else the carried-forward balance."""
        today = self.db.find_balance_entry(balance_date, currency_id, cash_item_id)
        if today is not None and today.status == ApprovalStatus.AUTHORIZED:
            return today.amount
        return self._opening_cash(balance_date, currency_id, cash_item_id)

    def _post_to_ledger(self, txn: FxTransaction, actor: Actor) -> None:
        """Apply an authorized transaction to cash on hand and due from/to banks."""
        cash_item = self.reference.require_item(CASH_ON_HAND)
        baseline = self._cash_baseline(txn.transaction_date, txn.currency_id, cash_item.id)

        if txn.transaction_type == TransactionType.PURCHASE:
            new_cash = baseline + txn.amount
        else:
            new_cash = baseline - txn.amount
        self.ledger.set_authorized_amount(
            txn.transaction_date, txn.currency_id, cash_item.id, new_cash, actor
        )

        if txn.transaction_type == TransactionType.PURCHASE:
            secondary = self.reference.require_item(DUE_FROM_BANKS)
            delta = txn.amount
        else:
            secondary = self.reference.require_item(DUE_TO_BANKS)
            delta = -txn.amount
        self.ledger.add_to_authorized_amount(
            txn.transaction_date, txn.currency_id, secondary.id, delta, actor
        )

        logger.debug(
            "transaction_posted",
            transaction_id=txn.id,
            baseline=str(baseline),
            cash_on_hand=str(new_cash),
            secondary=secondary.code,
        )
