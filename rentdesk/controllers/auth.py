from flask import Blueprint, request, session, jsonify

from ..services.user_service import UserService
from ..utils.decorators import login_required

bp = Blueprint("auth", __name__, url_prefix="/")


def _payload():
    return request.get_json(silent=True) or request.form.to_dict()


@bp.post("login")
def login_submit():
    data = _payload()
    user = UserService.authenticate(data.get("username", ""), data.get("password", ""))
    if user is None:
        return jsonify(ok=False, message="Invalid credentials"), 401

    session.clear()
    session["uid"] = user.user_id
    session["role"] = user.role
    session["username"] = user.username
    session["name"] = user.name
    session["linked_id"] = user.linked_id
    return jsonify(ok=True, message=f"Welcome, {user.name}", role=user.role)


@bp.post("logout")
def logout():
    session.clear()
    return jsonify(ok=True, message="Logged out")


@bp.get("me")
@login_required
def me():
    return jsonify(
        ok=True,
        uid=session.get("uid"),
        username=session.get("username"),
        name=session.get("name"),
        role=session.get("role"),
    )
