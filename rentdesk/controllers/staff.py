from __future__ import annotations

from flask import Blueprint, request, jsonify

from ..services.booking_service import BookingService
from ..services.settings_service import SettingsService
from ..services.user_service import UserService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required

bp = Blueprint("staff", __name__, url_prefix="/staff")


def _payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


@bp.get("/packages")
@login_required
def rental_packages():
    return jsonify(ok=True, packages=SettingsService.rental_packages(),
                   default=SettingsService.default_package())


@bp.post("/packages")
@login_required
@role_required(Role.SUPERADMIN)
def update_packages():
    data = request.get_json(silent=True) or {}
    packages = data.get("packages")
    if packages is None:
        packages = request.form.getlist("packages")
    ok, msg = SettingsService.set_rental_packages(packages)
    return jsonify(ok=ok, message=msg), (200 if ok else 400)


@bp.get("/high-seasons")
@login_required
def high_seasons():
    return jsonify(ok=True, high_seasons=[h.to_dict() for h in SettingsService.high_seasons()])


@bp.post("/high-seasons")
@login_required
@role_required(Role.SUPERADMIN, Role.ADMIN)
def add_high_season():
    data = _payload()
    ok, msg, sid = SettingsService.add_high_season(
        data.get("name", ""),
        data.get("start_date", ""),
        data.get("end_date", ""),
        data.get("price_increase"),
    )
    return jsonify(ok=ok, message=msg, id=sid), (201 if ok else 400)


@bp.post("/high-seasons/<sid>/delete")
@login_required
@role_required(Role.SUPERADMIN, Role.ADMIN)
def delete_high_season(sid):
    ok, msg = SettingsService.delete_high_season(sid)
    return jsonify(ok=ok, message=msg), (200 if ok else 404)


@bp.post("/users")
@login_required
@role_required(Role.SUPERADMIN)
def add_user():
    data = _payload()
    ok, msg, uid = UserService.admin_create_user(
        data.get("username", ""),
        data.get("role", ""),
        data.get("password", ""),
        name=data.get("name", ""),
        linked_id=data.get("linked_id") or None,
    )
    return jsonify(ok=ok, message=msg, id=uid), (201 if ok else 400)


@bp.post("/users/<uid>/delete")
@login_required
@role_required(Role.SUPERADMIN)
def delete_user(uid):
    ok, msg = UserService.admin_delete_user(uid)
    return jsonify(ok=ok, message=msg), (200 if ok else 404)


@bp.post("/reconcile")
@login_required
@role_required(Role.SUPERADMIN)
def reconcile():
    """Recompute stored booking and payment statuses from the stored amounts and dates."""
    changed = BookingService.reconcile_statuses()
    return jsonify(ok=True, message=f"{changed} booking(s) updated", changed=changed)
