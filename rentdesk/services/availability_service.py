"""Schedule conflict checks for cars and drivers."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from rentdesk.services.common import bookings_repo, overlap
from rentdesk.utils.constants import BookingStatus
from rentdesk.utils.dates import parse_instant

RESOURCE_FIELDS = {"car": "car_id", "driver": "driver_id"}


def is_available(
        bookings: Iterable[dict],
        resource_id: Optional[str],
        start: datetime,
        end: datetime,
        kind: str,
        exclude_booking_id: Optional[str] = None,
) -> bool:
    """
    True if no non-cancelled booking holds `resource_id` for a window that
    overlaps [start, end).

    `kind` is "car" or "driver" and selects the booking field to match.
    `exclude_booking_id` lets a booking being edited ignore itself.
    Callers validate end > start before calling; an empty resource id
    matches nothing and is therefore available.
    """
    field_name = RESOURCE_FIELDS.get(kind)
    if field_name is None:
        raise ValueError(f"Unknown resource kind: {kind!r}")
    if not resource_id:
        return True

    for b in bookings:
        if exclude_booking_id and str(b.get("id")) == str(exclude_booking_id):
            continue
        if b.get("status") == BookingStatus.CANCELLED:
            continue
        if str(b.get(field_name) or "") != str(resource_id):
            continue
        if overlap(parse_instant(b["start_date"]), parse_instant(b["end_date"]), start, end):
            return False
    return True


def _filter_free(candidates, bookings, start, end, kind, exclude_booking_id):
    candidates = list(candidates)
    if start is None or end is None or end <= start:
        # Without a valid window every candidate stays selectable
        return candidates
    bookings = list(bookings)
    return [c for c in candidates
            if is_available(bookings, str(c.get("id")), start, end, kind, exclude_booking_id)]


def available_cars(cars, bookings, start, end, exclude_booking_id=None) -> list[dict]:
    """Cars still selectable for the window (live form filtering)."""
    return _filter_free(cars, bookings, start, end, "car", exclude_booking_id)


def available_drivers(drivers, bookings, start, end, exclude_booking_id=None) -> list[dict]:
    """Drivers not on duty during the window."""
    return _filter_free(drivers, bookings, start, end, "driver", exclude_booking_id)


class AvailabilityService:
    """Store-backed availability lookups."""

    @staticmethod
    def check(resource_id: str, start, end, kind: str = "car", exclude_booking_id: Optional[str] = None,
              store=None) -> bool:
        return is_available(
            bookings_repo(store).list(),
            resource_id,
            parse_instant(start),
            parse_instant(end),
            kind,
            exclude_booking_id,
        )

    @staticmethod
    def calendar(car_id: str, store=None) -> list[dict]:
        """
        Return the booked windows of a car (non-cancelled), sorted by start.
        Used by schedule views to block taken ranges.
        """
        ranges = []
        for b in bookings_repo(store).list():
            if str(b.get("car_id")) != str(car_id):
                continue
            if b.get("status") == BookingStatus.CANCELLED:
                continue
            ranges.append({
                "booking_id": b.get("id"),
                "start": b.get("start_date"),
                "end": b.get("end_date"),
                "status": b.get("status"),
                "customer_name": b.get("customer_name"),
            })
        ranges.sort(key=lambda r: parse_instant(r["start"]))
        return ranges
