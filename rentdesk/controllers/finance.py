from flask import Blueprint, request, jsonify

from ..services.analytics_service import AnalyticsService
from ..services.transaction_service import TransactionService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required

bp = Blueprint("finance", __name__, url_prefix="/finance")


@bp.get("/transactions")
@login_required
@role_required(Role.SUPERADMIN, Role.ADMIN)
def list_transactions():
    txs = TransactionService.list(tx_type=request.args.get("type") or None,
                                  booking_id=request.args.get("booking_id") or None)
    return jsonify(ok=True, transactions=txs, summary=AnalyticsService.cashflow())


@bp.post("/expenses")
@login_required
def add_expense():
    """Record an expense; reimbursements and partner deposits start as Pending."""
    data = request.get_json(silent=True) or request.form.to_dict()
    ok, msg, tx_id = TransactionService.add_expense(
        category=data.get("category"),
        amount=data.get("amount"),
        description=data.get("description", ""),
        related_id=data.get("related_id") or None,
        receipt_image=data.get("receipt_image") or None,
    )
    return jsonify(ok=ok, message=msg, id=tx_id), (201 if ok else 400)


@bp.post("/transactions/<tx_id>/paid")
@login_required
@role_required(Role.SUPERADMIN, Role.ADMIN)
def mark_paid(tx_id):
    ok, msg = TransactionService.mark_paid(tx_id)
    return jsonify(ok=ok, message=msg), (200 if ok else 400)
