"""
Booking lifecycle: validate, check availability, price, derive statuses and
persist bookings; attach handover checklists.

The module-level functions are pure (lists in, lists out) and raise the
typed errors from rentdesk.exceptions. BookingService wires them to the
store through repositories.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from rentdesk.exceptions import (
    BookingNotFoundError,
    BookingValidationError,
    CarUnavailableError,
    ChecklistIncompleteError,
    DriverUnavailableError,
    InvalidDateRangeError,
    PermissionDeniedError,
    RentDeskError,
)
from rentdesk.models.booking import Booking, VehicleChecklist
from rentdesk.models.party import Customer, Driver
from rentdesk.models.user import UserBase
from rentdesk.models.vehicle import Car, HighSeason
from rentdesk.services.availability_service import is_available, available_cars, available_drivers
from rentdesk.services.common import _store, _lc, bookings_repo, repo, time_based_id
from rentdesk.services.pricing_service import PriceBreakdown, compute_pricing, derive_rate_per_day
from rentdesk.services.settings_service import SettingsService
from rentdesk.services.transaction_service import TransactionService, build_income_transaction
from rentdesk.utils.constants import (
    BookingStatus,
    PaymentStatus,
    Collection,
    CHECKLIST_SIDES,
    DEPOSIT_TYPES,
    DESTINATIONS,
    FUEL_LEVELS,
    DepositType,
    Destination,
)
from rentdesk.utils.dates import combine_local, local_date_str, now_utc, parse_instant, to_iso, to_millis
from rentdesk.utils.numbers import parse_amount

TRUTHY = {"1", "true", "yes", "on", "y"}


@dataclass
class BookingSaveResult:
    bookings: list[dict]
    booking: dict
    transaction: Optional[dict]
    message: str


# ------------------------- derivations -------------------------
def derive_payment_status(amount_paid, total_price: int) -> str:
    """
    Paid once the amount covers the total, Partial for any smaller positive
    amount, Unpaid otherwise. Invalid amounts count as 0.
    """
    paid = parse_amount(amount_paid)
    if paid >= total_price:
        return PaymentStatus.PAID
    if paid > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


def derive_status(actual_return_date, previous_status: Optional[str] = None) -> str:
    """
    Status after a form save. Cancelled is terminal and always carries
    over; otherwise a recorded return completes the booking, Active (set by
    the checklist) carries over and everything else is Booked.
    """
    if previous_status == BookingStatus.CANCELLED:
        return BookingStatus.CANCELLED
    if actual_return_date:
        return BookingStatus.COMPLETED
    if previous_status == BookingStatus.ACTIVE:
        return BookingStatus.ACTIVE
    return BookingStatus.BOOKED


# ------------------------- form helpers -------------------------
def _truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in TRUTHY


def _text(form: dict, key: str, default: str = "") -> str:
    value = form.get(key)
    if value is None:
        return default
    return str(value).strip()


def _form_instant(form: dict, name: str) -> Optional[datetime]:
    """
    Read an instant either from `name` (ISO string / datetime) or from the
    split `<name>_date` + `<name>_time` fields the booking form sends.
    """
    raw = form.get(name)
    try:
        if raw not in (None, ""):
            return parse_instant(raw)
        d = form.get(f"{name}_date")
        if not d:
            return None
        if isinstance(d, str) and len(d.strip()) == 10:
            return combine_local(d, form.get(f"{name}_time") or None)
        return parse_instant(d)
    except ValueError:
        raise BookingValidationError(f"Invalid {name.replace('_', ' ')} date/time")


def _find(records, record_id) -> Optional[dict]:
    if not record_id:
        return None
    for r in records:
        if str(r.get("id")) == str(record_id):
            return r
    return None


def validate_window(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is None or end is None:
        raise BookingValidationError("Start and end time are required")
    if end <= start:
        raise InvalidDateRangeError()


# ============================ lifecycle ============================
def save_booking(
        form: dict,
        bookings: list[dict],
        *,
        cars: list[dict],
        drivers: list[dict] = (),
        high_seasons: list[dict] = (),
        customers: list[dict] = (),
        editing_id: Optional[str] = None,
        default_package: str = "",
        transaction_ids=(),
        now: Optional[datetime] = None,
) -> BookingSaveResult:
    """
    Create (editing_id=None) or re-submit a booking.

    Steps: validate window and required fields, check car/driver
    availability, price, derive statuses, build the record (keeping
    checklist and created_at of the stored one), emit an Income line for
    any increase in amount paid, upsert. Nothing is returned or changed
    when a step fails.
    """
    now = now or now_utc()
    existing = None
    if editing_id:
        existing = _find(bookings, editing_id)
        if existing is None:
            raise BookingNotFoundError()

    # 1. window + required fields
    start = _form_instant(form, "start")
    end = _form_instant(form, "end")
    validate_window(start, end)
    actual_return = _form_instant(form, "actual_return")

    car_id = _text(form, "car_id")
    if not car_id:
        raise BookingValidationError("Please select a car")
    car = Car.from_dict(_find(cars, car_id))
    if car is None:
        raise BookingValidationError("Selected car does not exist")

    driver_id = _text(form, "driver_id")
    use_driver = _truthy(form["use_driver"]) if "use_driver" in form else bool(driver_id)
    driver = None
    if use_driver:
        if not driver_id:
            raise BookingValidationError("Please select a driver")
        driver = Driver.from_dict(_find(drivers, driver_id))
        if driver is None:
            raise BookingValidationError("Selected driver does not exist")

    customer_id = _text(form, "customer_id") or None
    customer_name = _text(form, "customer_name")
    customer_phone = _text(form, "customer_phone")
    customer = Customer.from_dict(_find(customers, customer_id))
    if customer is not None:
        customer_name, customer_phone = customer.name, customer.phone
    if not customer_name:
        raise BookingValidationError("Customer name is required")

    destination = _text(form, "destination") or Destination.IN_TOWN
    if destination not in DESTINATIONS:
        raise BookingValidationError(f"Destination must be one of: {', '.join(DESTINATIONS)}")
    deposit_type = _text(form, "security_deposit_type") or DepositType.CASH
    if deposit_type not in DEPOSIT_TYPES:
        raise BookingValidationError(f"Security deposit must be one of: {', '.join(DEPOSIT_TYPES)}")

    previous_status = (existing or {}).get("status")
    if previous_status == BookingStatus.COMPLETED and (existing or {}).get("checklist"):
        # return date cleared on a handed-over car
        previous_status = BookingStatus.ACTIVE
    status = derive_status(actual_return, previous_status)

    # 2. availability; a cancelled booking holds no claim on car or driver
    exclude = existing.get("id") if existing else None
    if status != BookingStatus.CANCELLED:
        if not is_available(bookings, car.id, start, end, "car", exclude):
            raise CarUnavailableError()
        if driver and not is_available(bookings, driver.id, start, end, "driver", exclude):
            raise DriverUnavailableError()

    # 3. pricing; an edited booking keeps its own per-day rate unless a new one is typed in
    package_type = _text(form, "package_type") or (existing or {}).get("package_type") or default_package
    base_rate = form.get("base_rate")
    if (base_rate is None or base_rate == "") and existing:
        base_rate = derive_rate_per_day(parse_amount(existing.get("base_price")),
                                        existing["start_date"], existing["end_date"])
    pricing = compute_pricing(
        car,
        driver,
        start,
        end,
        package_type,
        [HighSeason.from_dict(h) for h in high_seasons],
        delivery_fee=form.get("delivery_fee"),
        overtime_fee=form.get("overtime_fee"),
        base_rate_override=base_rate,
    )

    # 4-5. payment status
    paid = parse_amount(form.get("amount_paid"))
    payment_status = derive_payment_status(paid, pricing.total_price)

    # 6. record
    booking = Booking(
        id=existing["id"] if existing else time_based_id([str(b.get("id")) for b in bookings], now),
        created_at=(existing or {}).get("created_at") or to_millis(now),
        car_id=car.id,
        driver_id=driver.id if driver else None,
        customer_id=customer.id if customer else customer_id,
        customer_name=customer_name,
        customer_phone=customer_phone,
        start_date=to_iso(start),
        end_date=to_iso(end),
        actual_return_date=to_iso(actual_return) if actual_return else None,
        package_type=package_type,
        destination=destination,
        base_price=pricing.base_price,
        driver_fee=pricing.driver_fee,
        high_season_fee=pricing.high_season_fee,
        delivery_fee=pricing.delivery_fee,
        overtime_fee=pricing.overtime_fee,
        total_price=pricing.total_price,
        amount_paid=paid,
        notes=_text(form, "notes"),
        security_deposit_type=deposit_type,
        security_deposit_value=parse_amount(form.get("security_deposit_value")),
        security_deposit_description=_text(form, "security_deposit_description"),
        security_deposit_image=form.get("security_deposit_image") or None,
        status=status,
        payment_status=payment_status,
        checklist=(existing or {}).get("checklist"),
    ).to_dict()

    # 7. payment delta -> one Income line
    previous_paid = parse_amount((existing or {}).get("amount_paid"))
    transaction = None
    if paid > previous_paid:
        transaction = build_income_transaction(
            booking,
            paid - previous_paid,
            car_name=car.name,
            additional=existing is not None,
            receipt_image=form.get("payment_proof_image"),
            existing_ids=transaction_ids,
            now=now,
        ).to_dict()

    # 8. upsert
    if existing:
        updated = [booking if str(b.get("id")) == str(booking["id"]) else b for b in bookings]
        message = f"Booking updated (Status: {status}, Payment: {payment_status})"
    else:
        updated = [booking] + list(bookings)
        message = f"Booking saved (Status: {status}, Payment: {payment_status})"

    return BookingSaveResult(bookings=updated, booking=booking, transaction=transaction, message=message)


def attach_checklist(booking: dict, form: dict, *, checked_by: str, now: Optional[datetime] = None) -> dict:
    """
    Return a copy of `booking` with the handover checklist attached.
    Booked becomes Active; any other status is kept. Prices and payments
    are untouched.
    """
    speedometer = _text(form, "speedometer_image")
    if not speedometer:
        raise ChecklistIncompleteError()

    raw_odometer = form.get("odometer")
    try:
        odometer = int(float(raw_odometer)) if raw_odometer not in (None, "") else 0
    except (TypeError, ValueError):
        raise BookingValidationError("Odometer must be a number")
    if odometer < 0:
        raise BookingValidationError("Odometer cannot be negative")

    fuel_level = _text(form, "fuel_level") or "Full"
    if fuel_level not in FUEL_LEVELS:
        raise BookingValidationError(f"Fuel level must be one of: {', '.join(FUEL_LEVELS)}")

    nested = form.get("physical_images") or {}
    images = {side: (form.get(f"{side}_image") or nested.get(side) or None) for side in CHECKLIST_SIDES}

    checklist = VehicleChecklist(
        odometer=odometer,
        fuel_level=fuel_level,
        speedometer_image=speedometer,
        physical_images=images,
        notes=_text(form, "notes"),
        checked_at=to_millis(now or now_utc()),
        checked_by=checked_by or "",
    )

    updated = dict(booking)
    updated["checklist"] = checklist.to_dict()
    if booking.get("status") == BookingStatus.BOOKED:
        updated["status"] = BookingStatus.ACTIVE
    return updated


def save_checklist(bookings: list[dict], booking_id: str, form: dict, *, checked_by: str,
                   now: Optional[datetime] = None) -> list[dict]:
    """Attach a checklist to one booking of the list; returns the updated list."""
    booking = _find(bookings, booking_id)
    if booking is None:
        raise BookingNotFoundError()
    updated = attach_checklist(booking, form, checked_by=checked_by, now=now)
    return [updated if str(b.get("id")) == str(booking_id) else b for b in bookings]


# ============================ Service ============================
class BookingService:
    """
    Thin application service that:
    - Loads the collections the lifecycle needs
    - Runs the pure lifecycle functions
    - Persists bookings and ledger lines back through repositories
    Errors are raised as RentDeskError subclasses.
    """

    @staticmethod
    def _context(store=None) -> dict:
        st = store or _store()
        return dict(
            cars=repo(Collection.CARS, st).list(),
            drivers=repo(Collection.DRIVERS, st).list(),
            high_seasons=repo(Collection.HIGH_SEASONS, st).list(),
            customers=repo(Collection.CUSTOMERS, st).list(),
        )

    # --------------- Queries ---------------
    @staticmethod
    def get(booking_id: str, store=None) -> dict:
        b = bookings_repo(store).get_by_id(booking_id)
        if b is None:
            raise BookingNotFoundError(f"Error: booking '{booking_id}' not found")
        return b

    @staticmethod
    def list(start: Optional[str] = None, end: Optional[str] = None, status: Optional[str] = None,
             store=None) -> list[dict]:
        """
        Bookings whose start falls on a day within [start, end] (inclusive,
        'YYYY-MM-DD', office time), optionally of one status ('All' = any).
        """
        res = bookings_repo(store).list()
        if start or end:
            lo = start or "0000-00-00"
            hi = end or "9999-12-31"
            res = [b for b in res if lo <= local_date_str(b["start_date"]) <= hi]
        if status and _lc(status) != "all":
            res = [b for b in res if _lc(b.get("status")) == _lc(status)]
        return res

    @staticmethod
    def available_resources(start, end, exclude_booking_id: Optional[str] = None, store=None) -> dict:
        """Cars and drivers still selectable for a window."""
        st = store or _store()
        bookings = bookings_repo(st).list()
        s = parse_instant(start) if start else None
        e = parse_instant(end) if end else None
        return {
            "cars": available_cars(repo(Collection.CARS, st).list(), bookings, s, e, exclude_booking_id),
            "drivers": available_drivers(repo(Collection.DRIVERS, st).list(), bookings, s, e, exclude_booking_id),
        }

    @staticmethod
    def quote(form: dict, editing_id: Optional[str] = None, store=None) -> dict:
        """
        Live recompute while the form is being filled: price breakdown plus
        conflict messages. Never persists and never raises for conflicts.
        """
        st = store or _store()
        ctx = BookingService._context(st)
        bookings = bookings_repo(st).list()
        out = {"pricing": None, "date_error": "", "car_error": "", "driver_error": ""}
        try:
            start = _form_instant(form, "start")
            end = _form_instant(form, "end")
            validate_window(start, end)
        except RentDeskError as e:
            out["date_error"] = e.message
            return out

        editing = _find(bookings, editing_id)
        check = not (editing and editing.get("status") == BookingStatus.CANCELLED)
        car = Car.from_dict(_find(ctx["cars"], _text(form, "car_id")))
        driver = None
        if check and car and not is_available(bookings, car.id, start, end, "car", editing_id):
            out["car_error"] = CarUnavailableError.default_message
        driver_id = _text(form, "driver_id")
        if driver_id and (_truthy(form.get("use_driver", True))):
            driver = Driver.from_dict(_find(ctx["drivers"], driver_id))
            if check and driver and not is_available(bookings, driver.id, start, end, "driver", editing_id):
                out["driver_error"] = DriverUnavailableError.default_message

        pricing: PriceBreakdown = compute_pricing(
            car,
            driver,
            start,
            end,
            _text(form, "package_type") or SettingsService.default_package(st),
            [HighSeason.from_dict(h) for h in ctx["high_seasons"]],
            delivery_fee=form.get("delivery_fee"),
            overtime_fee=form.get("overtime_fee"),
            base_rate_override=form.get("base_rate"),
        )
        out["pricing"] = pricing.to_dict()
        out["payment_status"] = derive_payment_status(form.get("amount_paid"), pricing.total_price)
        return out

    # --------------- Commands ---------------
    @staticmethod
    def save(form: dict, editing_id: Optional[str] = None, store=None, now: Optional[datetime] = None
             ) -> BookingSaveResult:
        """Create or edit a booking and persist it with its payment line (if any)."""
        st = store or _store()
        bookings_r = bookings_repo(st)
        tx_ids = [str(t.get("id")) for t in TransactionService.list(store=st)]

        result = save_booking(
            form,
            bookings_r.list(),
            editing_id=editing_id,
            default_package=SettingsService.default_package(st),
            transaction_ids=tx_ids,
            now=now,
            **BookingService._context(st),
        )

        if result.transaction is not None:
            TransactionService.record(result.transaction, st)
        bookings_r.replace_all(result.bookings)
        return result

    @staticmethod
    def save_checklist(booking_id: str, form: dict, checked_by: str, store=None,
                       now: Optional[datetime] = None) -> dict:
        st = store or _store()
        r = bookings_repo(st)
        updated = save_checklist(r.list(), booking_id, form, checked_by=checked_by, now=now)
        r.replace_all(updated)
        return _find(updated, booking_id)

    @staticmethod
    def form_from_booking(booking: dict) -> dict:
        """Prefill of the edit form for a stored booking."""
        return {
            "car_id": booking.get("car_id"),
            "use_driver": bool(booking.get("driver_id")),
            "driver_id": booking.get("driver_id") or "",
            "customer_id": booking.get("customer_id") or "",
            "customer_name": booking.get("customer_name"),
            "customer_phone": booking.get("customer_phone"),
            "start": booking.get("start_date"),
            "end": booking.get("end_date"),
            "actual_return": booking.get("actual_return_date") or "",
            "package_type": booking.get("package_type"),
            "destination": booking.get("destination"),
            "base_rate": derive_rate_per_day(parse_amount(booking.get("base_price")),
                                             booking["start_date"], booking["end_date"]),
            "delivery_fee": booking.get("delivery_fee", 0),
            "overtime_fee": booking.get("overtime_fee", 0),
            "amount_paid": booking.get("amount_paid", 0),
            "notes": booking.get("notes", ""),
            "security_deposit_type": booking.get("security_deposit_type"),
            "security_deposit_value": booking.get("security_deposit_value", 0),
            "security_deposit_description": booking.get("security_deposit_description", ""),
            "security_deposit_image": booking.get("security_deposit_image") or "",
        }

    @staticmethod
    def complete(booking_id: str, store=None, now: Optional[datetime] = None, overtime_fee=None
                 ) -> BookingSaveResult:
        """Record the return now and re-submit the booking (-> Completed)."""
        now = now or now_utc()
        booking = BookingService.get(booking_id, store)
        if booking.get("status") in (BookingStatus.COMPLETED, BookingStatus.CANCELLED):
            raise BookingValidationError(f"Booking is already {booking.get('status').lower()}")
        form = BookingService.form_from_booking(booking)
        form["actual_return"] = to_iso(now)
        if overtime_fee is not None:
            form["overtime_fee"] = overtime_fee
        return BookingService.save(form, editing_id=booking_id, store=store, now=now)

    @staticmethod
    def pay_full(booking_id: str, receipt_image: Optional[str] = None, store=None,
                 now: Optional[datetime] = None) -> BookingSaveResult:
        """Settle the outstanding balance; the difference is booked as income."""
        booking = BookingService.get(booking_id, store)
        form = BookingService.form_from_booking(booking)
        form["amount_paid"] = booking.get("total_price", 0)
        form["payment_proof_image"] = receipt_image
        return BookingService.save(form, editing_id=booking_id, store=store, now=now)

    @staticmethod
    def cancel(booking_id: str, store=None) -> dict:
        """Manual status edit to Cancelled; frees the car and driver for the window."""
        r = bookings_repo(store)
        booking = BookingService.get(booking_id, store)
        status = booking.get("status")
        if status == BookingStatus.CANCELLED:
            raise BookingValidationError("Booking is already cancelled")
        if status == BookingStatus.COMPLETED:
            raise BookingValidationError("Completed bookings cannot be cancelled")
        booking["status"] = BookingStatus.CANCELLED
        r.upsert(booking)
        return booking

    @staticmethod
    def delete(booking_id: str, user: Optional[UserBase], store=None) -> None:
        """Hard delete (no tombstone). Superadmin only."""
        if user is None or not user.can_delete_bookings():
            raise PermissionDeniedError("Only a superadmin can delete bookings")
        if not bookings_repo(store).delete(booking_id):
            raise BookingNotFoundError(f"Error: booking '{booking_id}' not found")

    @staticmethod
    def reconcile_statuses(store=None) -> int:
        """
        Rebuild stored derived fields from the facts they depend on:
        total from the fee lines, payment status from amount/total,
        Completed from the actual return. Returns how many bookings changed.
        """
        r = bookings_repo(store)
        bookings = r.list()
        changed = 0
        for b in bookings:
            before = (b.get("status"), b.get("payment_status"), b.get("total_price"))
            b["total_price"] = Booking.from_dict(b).fee_sum
            b["payment_status"] = derive_payment_status(b.get("amount_paid"), b["total_price"])
            status = b.get("status")
            if b.get("actual_return_date"):
                if status != BookingStatus.CANCELLED:
                    b["status"] = BookingStatus.COMPLETED
            elif status == BookingStatus.COMPLETED:
                b["status"] = BookingStatus.ACTIVE if b.get("checklist") else BookingStatus.BOOKED
            if (b.get("status"), b.get("payment_status"), b.get("total_price")) != before:
                changed += 1
        if changed:
            r.replace_all(bookings)
        return changed
