from flask import Blueprint, request, session, jsonify

from ..services.availability_service import AvailabilityService
from ..services.booking_service import BookingService
from ..services.user_service import UserService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required

bp = Blueprint("bookings", __name__, url_prefix="/bookings")

STAFF = (Role.SUPERADMIN, Role.ADMIN)


def _payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


def _saved(result, code=200):
    return jsonify(ok=True, message=result.message, booking=result.booking,
                   transaction=result.transaction), code


@bp.get("")
@login_required
@role_required(*STAFF)
def list_bookings():
    """Bookings list with optional ?start=&end= (start day, inclusive) and ?status= filters."""
    q = {k: (v or "").strip() for k, v in request.args.items()}
    bookings = BookingService.list(start=q.get("start") or None, end=q.get("end") or None,
                                   status=q.get("status") or None)
    return jsonify(ok=True, bookings=bookings)


@bp.get("/availability")
@login_required
@role_required(*STAFF)
def availability():
    """Cars and drivers that are free for ?start=&end= (ignoring ?exclude= booking)."""
    res = BookingService.available_resources(
        request.args.get("start"),
        request.args.get("end"),
        exclude_booking_id=request.args.get("exclude") or None,
    )
    return jsonify(ok=True, **res)


@bp.get("/calendar/<car_id>")
@login_required
def calendar(car_id):
    return jsonify(ok=True, calendar=AvailabilityService.calendar(car_id))


@bp.post("/quote")
@login_required
@role_required(*STAFF)
def quote():
    """Price breakdown and conflict messages for the form as currently filled."""
    data = _payload()
    return jsonify(ok=True, **BookingService.quote(data, editing_id=data.get("editing_id") or None))


@bp.post("")
@login_required
@role_required(*STAFF)
def create_booking():
    return _saved(BookingService.save(_payload()), 201)


@bp.get("/<bid>")
@login_required
@role_required(*STAFF)
def booking_detail(bid):
    booking = BookingService.get(bid)
    return jsonify(ok=True, booking=booking, form=BookingService.form_from_booking(booking))


@bp.post("/<bid>")
@login_required
@role_required(*STAFF)
def edit_booking(bid):
    return _saved(BookingService.save(_payload(), editing_id=bid))


@bp.post("/<bid>/checklist")
@login_required
@role_required(*STAFF)
def save_checklist(bid):
    booking = BookingService.save_checklist(bid, _payload(), checked_by=session.get("name", ""))
    return jsonify(ok=True, message=f"Checklist saved (Status: {booking['status']})", booking=booking)


@bp.post("/<bid>/complete")
@login_required
@role_required(*STAFF)
def complete_booking(bid):
    data = _payload()
    return _saved(BookingService.complete(bid, overtime_fee=data.get("overtime_fee")))


@bp.post("/<bid>/pay-full")
@login_required
@role_required(*STAFF)
def pay_full(bid):
    data = _payload()
    return _saved(BookingService.pay_full(bid, receipt_image=data.get("payment_proof_image")))


@bp.post("/<bid>/cancel")
@login_required
@role_required(*STAFF)
def cancel_booking(bid):
    booking = BookingService.cancel(bid)
    return jsonify(ok=True, message="Booking cancelled", booking=booking)


@bp.post("/<bid>/delete")
@login_required
def delete_booking(bid):
    BookingService.delete(bid, UserService.get(session.get("uid")))
    return jsonify(ok=True, message="Booking deleted")
