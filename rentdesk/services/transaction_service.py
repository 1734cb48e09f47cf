"""Income/expense ledger operations."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from rentdesk.exceptions import TransactionNotFoundError, TransactionValidationError
from rentdesk.models.transaction import Transaction
from rentdesk.services.common import transactions_repo, time_based_id
from rentdesk.utils.constants import (
    TransactionType,
    TransactionStatus,
    RENTAL_PAYMENT_CATEGORY,
    PENDING_CATEGORIES,
)
from rentdesk.utils.dates import now_utc, to_iso
from rentdesk.utils.numbers import parse_amount


def build_income_transaction(
        booking: dict,
        amount: int,
        *,
        car_name: str = "",
        additional: bool = False,
        receipt_image: Optional[str] = None,
        existing_ids=(),
        now: Optional[datetime] = None,
) -> Transaction:
    """Income line for a payment received against a booking."""
    now = now or now_utc()
    label = "Additional payment" if additional else "Payment"
    return Transaction(
        id=time_based_id(existing_ids, now, prefix="tx-"),
        date=to_iso(now),
        amount=amount,
        type=TransactionType.INCOME,
        category=RENTAL_PAYMENT_CATEGORY,
        description=f"{label} {booking.get('customer_name', '')} - {car_name or 'Car'}",
        booking_id=booking.get("id"),
        receipt_image=receipt_image or None,
        status=TransactionStatus.PAID,
    )


def initial_status_for(category: str) -> str:
    """Reimbursements and partner deposits wait for confirmation; other expenses are settled."""
    return TransactionStatus.PENDING if category in PENDING_CATEGORIES else TransactionStatus.PAID


def build_expense_transaction(
        category: str,
        amount,
        *,
        description: str = "",
        related_id: Optional[str] = None,
        receipt_image: Optional[str] = None,
        tx_id: str,
        now: Optional[datetime] = None,
) -> Transaction:
    category = (category or "").strip()
    value = parse_amount(amount)
    if not category:
        raise TransactionValidationError("Category is required")
    if value <= 0:
        raise TransactionValidationError("Amount must be greater than zero")
    return Transaction(
        id=tx_id,
        date=to_iso(now or now_utc()),
        amount=value,
        type=TransactionType.EXPENSE,
        category=category,
        description=(description or "").strip(),
        receipt_image=receipt_image or None,
        status=initial_status_for(category),
        related_id=related_id or None,
    )


class TransactionService:
    """List, record and settle ledger lines."""

    @staticmethod
    def list(tx_type: Optional[str] = None, booking_id: Optional[str] = None, store=None) -> list[dict]:
        res = transactions_repo(store).list()
        if tx_type:
            res = [t for t in res if t.get("type") == tx_type]
        if booking_id:
            res = [t for t in res if str(t.get("booking_id")) == str(booking_id)]
        return res

    @staticmethod
    def record(tx: Transaction | dict, store=None) -> dict:
        """Prepend a ledger line (newest first)."""
        data = tx.to_dict() if isinstance(tx, Transaction) else dict(tx)
        return transactions_repo(store).upsert(data, prepend=True)

    @staticmethod
    def next_id(store=None, now: Optional[datetime] = None) -> str:
        ids = [str(t.get("id")) for t in transactions_repo(store).list()]
        return time_based_id(ids, now, prefix="tx-")

    @staticmethod
    def add_expense(
            category: str,
            amount,
            description: str = "",
            related_id: Optional[str] = None,
            receipt_image: Optional[str] = None,
            store=None,
    ):
        """
        Record an expense.

        Returns:
            (ok: bool, message: str, tx_id: Optional[str])
        """
        try:
            tx = build_expense_transaction(
                category,
                amount,
                description=description,
                related_id=related_id,
                receipt_image=receipt_image,
                tx_id=TransactionService.next_id(store),
            )
        except TransactionValidationError as e:
            return False, e.message, None

        TransactionService.record(tx, store)
        return True, f"Expense recorded ({tx.status})", tx.id

    @staticmethod
    def mark_paid(tx_id: str, store=None):
        """Settle a pending line (reimbursement paid out / partner deposit handed over)."""
        repo = transactions_repo(store)
        tx = repo.get_by_id(tx_id)
        if not tx:
            return False, TransactionNotFoundError.default_message
        if tx.get("status") == TransactionStatus.PAID:
            return False, "Transaction already paid"
        tx["status"] = TransactionStatus.PAID
        repo.upsert(tx)
        return True, "Transaction marked as paid"
