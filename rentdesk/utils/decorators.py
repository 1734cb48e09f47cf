from functools import wraps

from flask import session, jsonify


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            return jsonify(ok=False, message="Please login first"), 401
        return fn(*args, **kwargs)

    return wrapper


def role_required(*roles):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            role = session.get("role")
            if role not in roles:
                return jsonify(ok=False, message="Insufficient permission"), 403
            return fn(*args, **kwargs)

        return wrapper

    return deco
