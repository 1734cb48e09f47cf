from flask import Blueprint, request, session, jsonify

from ..services.fleet_service import CarService, DriverService
from ..services.party_service import CustomerService, PartnerService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required

bp = Blueprint("fleet", __name__, url_prefix="/fleet")

STAFF = (Role.SUPERADMIN, Role.ADMIN)


def _payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


def _saved(ok, msg, rid, created):
    return jsonify(ok=ok, message=msg, id=rid), ((201 if created else 200) if ok else 400)


# -------- cars --------
@bp.get("/cars")
@login_required
@role_required(*STAFF)
def list_cars():
    """Cars with optional ?type=&q=&min_price=&max_price=&status= filters."""
    a = request.args
    cars = CarService.filter_cars(a.get("type"), a.get("q"), a.get("min_price"), a.get("max_price"),
                                  a.get("status"))
    return jsonify(ok=True, cars=cars)


@bp.get("/cars/<car_id>")
@login_required
@role_required(*STAFF)
def car_detail(car_id):
    return jsonify(ok=True, car=CarService.get_car(car_id))


@bp.post("/cars")
@login_required
@role_required(*STAFF)
def add_car():
    return _saved(*CarService.admin_save_car(_payload()), created=True)


@bp.post("/cars/<car_id>")
@login_required
@role_required(*STAFF)
def update_car(car_id):
    return _saved(*CarService.admin_save_car(_payload(), car_id=car_id), created=False)


@bp.post("/cars/<car_id>/delete")
@login_required
@role_required(Role.SUPERADMIN)
def delete_car(car_id):
    ok, msg = CarService.delete_car(car_id)
    return jsonify(ok=ok, message=msg), (200 if ok else 400)


# -------- drivers --------
@bp.get("/drivers")
@login_required
@role_required(*STAFF)
def list_drivers():
    return jsonify(ok=True, drivers=DriverService.all_drivers())


@bp.get("/drivers/me/schedule")
@login_required
@role_required(Role.DRIVER)
def my_schedule():
    return jsonify(ok=True, bookings=DriverService.schedule(session.get("linked_id") or ""))


@bp.post("/drivers")
@login_required
@role_required(*STAFF)
def add_driver():
    return _saved(*DriverService.admin_save_driver(_payload()), created=True)


@bp.post("/drivers/<driver_id>")
@login_required
@role_required(*STAFF)
def update_driver(driver_id):
    return _saved(*DriverService.admin_save_driver(_payload(), driver_id=driver_id), created=False)


@bp.post("/drivers/<driver_id>/delete")
@login_required
@role_required(Role.SUPERADMIN)
def delete_driver(driver_id):
    ok, msg = DriverService.delete_driver(driver_id)
    return jsonify(ok=ok, message=msg), (200 if ok else 400)


# -------- customers --------
@bp.get("/customers")
@login_required
@role_required(*STAFF)
def list_customers():
    return jsonify(ok=True, customers=CustomerService.search(request.args.get("q")))


@bp.post("/customers")
@login_required
@role_required(*STAFF)
def add_customer():
    return _saved(*CustomerService.save_customer(_payload()), created=True)


@bp.post("/customers/<customer_id>")
@login_required
@role_required(*STAFF)
def update_customer(customer_id):
    return _saved(*CustomerService.save_customer(_payload(), customer_id=customer_id), created=False)


@bp.post("/customers/<customer_id>/delete")
@login_required
@role_required(*STAFF)
def delete_customer(customer_id):
    ok, msg = CustomerService.delete_customer(customer_id)
    return jsonify(ok=ok, message=msg), (200 if ok else 404)


# -------- partners --------
@bp.get("/partners")
@login_required
@role_required(*STAFF, Role.PARTNER)
def list_partners():
    """Staff see every partner; a partner account sees only its own record."""
    linked = (session.get("linked_id") or "") if session.get("role") == Role.PARTNER else None
    partners = PartnerService.partners(linked_id=linked)
    return jsonify(ok=True, partners=[dict(p, **PartnerService.income(p["id"])) for p in partners])


@bp.post("/partners")
@login_required
@role_required(*STAFF)
def add_partner():
    return _saved(*PartnerService.save_partner(_payload()), created=True)


@bp.post("/partners/<partner_id>")
@login_required
@role_required(*STAFF)
def update_partner(partner_id):
    return _saved(*PartnerService.save_partner(_payload(), partner_id=partner_id), created=False)


@bp.post("/partners/<partner_id>/delete")
@login_required
@role_required(Role.SUPERADMIN)
def delete_partner(partner_id):
    ok, msg = PartnerService.delete_partner(partner_id)
    return jsonify(ok=ok, message=msg), (200 if ok else 400)
