from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Optional

from rentdesk.services.common import _store, bookings_repo, transactions_repo
from rentdesk.utils.constants import BookingStatus, TransactionStatus, TransactionType
from rentdesk.utils.dates import business_tz, fmt_iso_local, local_date_str, now_utc, parse_instant


class AnalyticsService:
    """Aggregations for the dashboard."""

    @staticmethod
    def dashboard(now: Optional[datetime] = None, store=None):
        st = store or _store()
        now = now or now_utc()
        bookings = bookings_repo(st).list()
        live = [b for b in bookings if b.get("status") != BookingStatus.CANCELLED]

        active = [b for b in bookings if b.get("status") == BookingStatus.ACTIVE]

        # Active rentals due back within the next 24 hours
        upcoming = []
        for b in active:
            due_in = parse_instant(b["end_date"]) - now
            if timedelta(0) < due_in < timedelta(hours=24):
                upcoming.append({
                    "booking_id": b.get("id"),
                    "customer_name": b.get("customer_name"),
                    "car_id": b.get("car_id"),
                    "end": fmt_iso_local(b["end_date"]),
                })

        # Revenue by start day (office time), last 7 days including today
        today = now.astimezone(business_tz()).date()
        days = [(today - timedelta(days=6 - i)).isoformat() for i in range(7)]
        rev_by_date = defaultdict(int)
        for b in live:
            rev_by_date[local_date_str(b["start_date"])] += int(b.get("total_price") or 0)
        revenue_by_date = [{"date": d, "total": rev_by_date.get(d, 0)} for d in days]

        return {
            "active_units": len(active),
            "upcoming_returns": upcoming,
            "today_revenue": rev_by_date.get(today.isoformat(), 0),
            "revenue_by_date": revenue_by_date,
            "bookings_by_status": dict(Counter(b.get("status") for b in bookings)),
        }

    @staticmethod
    def cashflow(store=None):
        """Settled income vs expenses, plus what is still pending."""
        income = expense = pending = 0
        for t in transactions_repo(store).list():
            amount = int(t.get("amount") or 0)
            if t.get("status") == TransactionStatus.PENDING:
                pending += amount
            elif t.get("type") == TransactionType.INCOME:
                income += amount
            else:
                expense += amount
        return {
            "income": income,
            "expense": expense,
            "net": income - expense,
            "pending": pending,
        }
