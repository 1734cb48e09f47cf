"""Shared service helpers and factories."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from rentdesk.models.repository import Repository
from rentdesk.models.store import Store
from rentdesk.utils.constants import Collection
from rentdesk.utils.dates import now_utc, to_millis


def _store() -> Store:
    """Get the singleton store instance."""
    return Store.instance()


def repo(key: str, store: Optional[Store] = None) -> Repository:
    return Repository(store or _store(), key)


def bookings_repo(store: Optional[Store] = None) -> Repository:
    return repo(Collection.BOOKINGS, store)


def transactions_repo(store: Optional[Store] = None) -> Repository:
    return repo(Collection.TRANSACTIONS, store)


# -------- date & id helpers --------
def overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """
    Check overlap between [a_start, a_end) and [b_start, b_end).
    Back-to-back windows (a_end == b_start) do not overlap.
    """
    return a_start < b_end and a_end > b_start


def time_based_id(existing: Iterable[str], now: Optional[datetime] = None, prefix: str = "") -> str:
    """Epoch-millis id, bumped forward until it does not collide with `existing`."""
    taken = set(existing)
    ms = to_millis(now or now_utc())
    while f"{prefix}{ms}" in taken:
        ms += 1
    return f"{prefix}{ms}"


def _lc(s):
    """Safe lowercase for case-insensitive compare."""
    return (s or "").lower()
