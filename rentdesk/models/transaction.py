from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional

from rentdesk.utils.constants import TransactionStatus, TransactionType
from rentdesk.utils.numbers import to_int_safe


@dataclass
class Transaction:
    """
    Ledger line. Income lines are written by the booking lifecycle; expense
    lines by staff, drivers (reimbursements) and partner deposits.
    """
    id: str
    date: str
    amount: int
    type: str  # "Income" | "Expense"
    category: str
    description: str = ""
    booking_id: Optional[str] = None
    receipt_image: Optional[str] = None
    status: str = TransactionStatus.PAID
    related_id: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @classmethod
    def from_dict(cls, d: dict) -> "Transaction":
        return cls(
            id=str(d.get("id")),
            date=d.get("date") or "",
            amount=to_int_safe(d.get("amount")),
            type=d.get("type") or TransactionType.EXPENSE,
            category=d.get("category") or "",
            description=d.get("description") or "",
            booking_id=d.get("booking_id") or None,
            receipt_image=d.get("receipt_image") or None,
            status=d.get("status") or TransactionStatus.PAID,
            related_id=d.get("related_id") or None,
        )

    def to_dict(self) -> dict:
        return asdict(self)
