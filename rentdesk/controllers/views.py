from flask import Blueprint, session, jsonify

from ..services.analytics_service import AnalyticsService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required

bp = Blueprint("views", __name__)


@bp.get("/")
def home():
    return jsonify(ok=True, app="rentdesk", logged_in="uid" in session, role=session.get("role"))


@bp.get("/dashboard")
@login_required
@role_required(Role.SUPERADMIN, Role.ADMIN)
def dashboard():
    return jsonify(ok=True, **AnalyticsService.dashboard())
