"""Fleet catalogue: cars and drivers (filter, create/update, delete)."""
from __future__ import annotations

from typing import Optional

from rentdesk.exceptions import CarNotFoundError, DriverNotFoundError, FleetValidationError
from rentdesk.models.party import Driver
from rentdesk.models.vehicle import Car
from rentdesk.services.common import _lc, _store, bookings_repo, repo, time_based_id
from rentdesk.services.settings_service import SettingsService
from rentdesk.utils.constants import BookingStatus, CarStatus, Collection
from rentdesk.utils.numbers import parse_amount, to_int_safe

CAR_STATUSES = (CarStatus.AVAILABLE, CarStatus.RENTED, CarStatus.MAINTENANCE)

# Bookings in these states still need their car and driver
OPEN_BOOKING_STATES = {BookingStatus.BOOKED, BookingStatus.ACTIVE}


def open_bookings_for(field_name: str, record_id: str, store=None) -> list[dict]:
    """Booked/Active bookings referencing `record_id` through `field_name`."""
    return [
        b for b in bookings_repo(store).list()
        if str(b.get(field_name) or "") == str(record_id) and b.get("status") in OPEN_BOOKING_STATES
    ]


def _price_range(min_price, max_price):
    lo = to_int_safe(min_price, None) if min_price not in (None, "") else None
    hi = to_int_safe(max_price, None) if max_price not in (None, "") else None
    if lo is not None and hi is not None and lo > hi:
        lo, hi = hi, lo
    return lo, hi


class CarService:

    @staticmethod
    def filter_cars(car_type=None, keyword=None, min_price=None, max_price=None, status=None, *, store=None):
        """
        Filter cars by type, name/plate keyword, 24h price range and status.
        Invalid bounds are ignored; an inverted range is swapped.
        """
        res = repo(Collection.CARS, store).list()

        # 1. Type and status (case-insensitive)
        if car_type:
            res = [c for c in res if _lc(c.get("type")) == _lc(car_type).strip()]
        if status:
            res = [c for c in res if _lc(c.get("status")) == _lc(status).strip()]

        # 2. Keyword on name or plate (partial match)
        kw = _lc(keyword).strip()
        if kw:
            res = [c for c in res if kw in _lc(c.get("name")) or kw in _lc(c.get("plate"))]

        # 3. Price range on the 24h rate
        lo, hi = _price_range(min_price, max_price)
        if lo is not None:
            res = [c for c in res if to_int_safe(c.get("price_24h")) >= lo]
        if hi is not None:
            res = [c for c in res if to_int_safe(c.get("price_24h")) <= hi]
        return res

    @staticmethod
    def get_car(car_id: str, store=None) -> dict:
        car = repo(Collection.CARS, store).get_by_id(car_id)
        if car is None:
            raise CarNotFoundError(f"Error: car '{car_id}' not found")
        return car

    @staticmethod
    def admin_save_car(payload: dict, car_id: Optional[str] = None, store=None):
        """
        Create a car (car_id=None) or replace an existing one.

        Returns:
            (ok: bool, message: str, car_id: Optional[str])
        """
        st = store or _store()
        cars = repo(Collection.CARS, st)
        if car_id and cars.get_by_id(car_id) is None:
            return False, CarNotFoundError.default_message, None

        try:
            name = (payload.get("name") or "").strip()
            plate = (payload.get("plate") or "").strip().upper()
            if not name or not plate:
                raise FleetValidationError("Car name and plate are required")

            for other in cars.list():
                if _lc(other.get("plate")) == _lc(plate) and str(other.get("id")) != str(car_id):
                    raise FleetValidationError(f"Plate {plate} is already registered")

            car_type = (payload.get("type") or "").strip()
            categories = SettingsService.settings(st).get("car_categories") or []
            if car_type and categories and car_type not in categories:
                raise FleetValidationError(f"Type must be one of: {', '.join(categories)}")

            status = (payload.get("status") or CarStatus.AVAILABLE).strip()
            if status not in CAR_STATUSES:
                raise FleetValidationError(f"Status must be one of: {', '.join(CAR_STATUSES)}")

            partner_id = (payload.get("partner_id") or "").strip() or None
            if partner_id and repo(Collection.PARTNERS, st).get_by_id(partner_id) is None:
                raise FleetValidationError("Selected partner does not exist")

            # zero-priced packages fall back to the 24h rate, so they are not stored
            pricing = {}
            for label, price in (payload.get("pricing") or {}).items():
                value = parse_amount(price)
                if label and value:
                    pricing[str(label).strip()] = value
        except FleetValidationError as e:
            return False, e.message, None

        car = Car(
            id=car_id or time_based_id([str(c.get("id")) for c in cars.list()]),
            name=name,
            plate=plate,
            type=car_type,
            image=payload.get("image") or "",
            status=status,
            price_24h=parse_amount(payload.get("price_24h")),
            pricing=pricing,
            partner_id=partner_id,
        )
        cars.upsert(car.to_dict(), prepend=False)
        return True, "Car updated" if car_id else "Car created", car.id

    @staticmethod
    def delete_car(car_id: str, store=None):
        """
        Delete a car if and only if:
        - the car exists,
        - no Booked or Active booking still needs it.
        Past (Completed/Cancelled) bookings keep the id as history.
        """
        cars = repo(Collection.CARS, store)
        if cars.get_by_id(car_id) is None:
            return False, "Car not found"
        if open_bookings_for("car_id", car_id, store):
            return False, "Cannot delete: car has open bookings"
        cars.delete(car_id)
        return True, "Car deleted"


class DriverService:

    @staticmethod
    def all_drivers(store=None) -> list[dict]:
        return repo(Collection.DRIVERS, store).list()

    @staticmethod
    def get_driver(driver_id: str, store=None) -> dict:
        d = repo(Collection.DRIVERS, store).get_by_id(driver_id)
        if d is None:
            raise DriverNotFoundError(f"Error: driver '{driver_id}' not found")
        return d

    @staticmethod
    def admin_save_driver(payload: dict, driver_id: Optional[str] = None, store=None):
        """
        Returns:
            (ok: bool, message: str, driver_id: Optional[str])
        """
        drivers = repo(Collection.DRIVERS, store)
        if driver_id and drivers.get_by_id(driver_id) is None:
            return False, DriverNotFoundError.default_message, None

        name = (payload.get("name") or "").strip()
        if not name:
            return False, "Driver name is required", None

        driver = Driver(
            id=driver_id or time_based_id([str(d.get("id")) for d in drivers.list()]),
            name=name,
            phone=(payload.get("phone") or "").strip(),
            image=payload.get("image") or "",
            daily_rate=parse_amount(payload.get("daily_rate")),
        )
        drivers.upsert(driver.to_dict(), prepend=False)
        return True, "Driver updated" if driver_id else "Driver created", driver.id

    @staticmethod
    def delete_driver(driver_id: str, store=None):
        drivers = repo(Collection.DRIVERS, store)
        if drivers.get_by_id(driver_id) is None:
            return False, "Driver not found"
        if open_bookings_for("driver_id", driver_id, store):
            return False, "Cannot delete: driver has open bookings"
        drivers.delete(driver_id)
        return True, "Driver deleted"

    @staticmethod
    def schedule(driver_id: str, store=None) -> list[dict]:
        """A driver's open bookings, soonest first (what the driver account sees)."""
        return sorted(open_bookings_for("driver_id", driver_id, store), key=lambda b: b.get("start_date") or "")
