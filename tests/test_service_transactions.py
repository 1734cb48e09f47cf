import pytest

from rentdesk.exceptions import TransactionValidationError
from rentdesk.models.transaction import Transaction
from rentdesk.services.transaction_service import (
    TransactionService,
    build_expense_transaction,
    build_income_transaction,
    initial_status_for,
)
from rentdesk.utils.constants import TransactionStatus, TransactionType, RENTAL_PAYMENT_CATEGORY
from rentdesk.utils.dates import parse_instant

NOW = parse_instant("2024-01-01T00:00:00Z")


def test_income_line_for_booking_payment():
    tx = build_income_transaction({"id": "b1", "customer_name": "Budi"}, 150000, car_name="Honda Brio",
                                  receipt_image="r.jpg", now=NOW)
    assert isinstance(tx, Transaction) and tx.is_income
    assert tx.id == "tx-1704067200000"
    assert tx.date == "2024-01-01T00:00:00+00:00"
    assert tx.category == RENTAL_PAYMENT_CATEGORY
    assert tx.status == TransactionStatus.PAID
    assert tx.booking_id == "b1"
    assert tx.description == "Payment Budi - Honda Brio"


def test_income_line_id_skips_taken_ids():
    tx = build_income_transaction({"id": "b1"}, 1, existing_ids=["tx-1704067200000"], now=NOW)
    assert tx.id == "tx-1704067200001"


def test_pending_categories():
    assert initial_status_for("Reimbursement") == TransactionStatus.PENDING
    assert initial_status_for("Setor Mitra") == TransactionStatus.PENDING
    assert initial_status_for("Fuel") == TransactionStatus.PAID


def test_record_prepends(store):
    TransactionService.record(build_income_transaction({"id": "b1"}, 100, now=NOW))
    TransactionService.record({"id": "tx-2", "type": TransactionType.EXPENSE, "amount": 5, "category": "Fuel"})
    assert [t["id"] for t in TransactionService.list()] == ["tx-2", "tx-1704067200000"]
    assert [t["id"] for t in TransactionService.list(tx_type=TransactionType.INCOME)] == ["tx-1704067200000"]
    assert [t["id"] for t in TransactionService.list(booking_id="b1")] == ["tx-1704067200000"]


def test_add_expense_and_settle_reimbursement(store):
    ok, msg, tx_id = TransactionService.add_expense("Reimbursement", "75000", "Bensin", related_id="d1")
    assert ok, msg
    tx = TransactionService.list()[0]
    assert tx["id"] == tx_id
    assert tx["status"] == TransactionStatus.PENDING
    assert tx["amount"] == 75000
    assert tx["related_id"] == "d1"

    ok, msg = TransactionService.mark_paid(tx_id)
    assert ok, msg
    assert TransactionService.list()[0]["status"] == TransactionStatus.PAID

    ok, msg = TransactionService.mark_paid(tx_id)
    assert not ok and "already" in msg


def test_add_expense_validation(store):
    assert TransactionService.add_expense("", 1000)[0] is False
    ok, msg, tx_id = TransactionService.add_expense("Service", "abc")
    assert not ok and tx_id is None
    assert TransactionService.list() == []


def test_mark_paid_unknown(store):
    ok, msg = TransactionService.mark_paid("tx-missing")
    assert not ok


def test_expense_builder_rejects_bad_lines():
    with pytest.raises(TransactionValidationError, match="Category"):
        build_expense_transaction("  ", 1000, tx_id="tx-1")
    with pytest.raises(TransactionValidationError, match="Amount"):
        build_expense_transaction("Fuel", "-20", tx_id="tx-1")

    tx = build_expense_transaction("Setor Mitra", "200000", tx_id="tx-1", related_id="p1", now=NOW)
    assert tx.status == TransactionStatus.PENDING
    assert not tx.is_income
