import os

from flask import Flask, jsonify

from .controllers.auth import bp as auth_bp
from .controllers.bookings import bp as bookings_bp
from .controllers.fleet import bp as fleet_bp
from .controllers.finance import bp as finance_bp
from .controllers.staff import bp as staff_bp
from .controllers.views import bp as views_bp
from .exceptions import RentDeskError, CONFLICT_ERRORS, NOT_FOUND_ERRORS, PermissionDeniedError
from .models.store import Store, DEFAULT_DATA_PATH


def _error_status(err: RentDeskError) -> int:
    if isinstance(err, CONFLICT_ERRORS):
        return 409
    if isinstance(err, NOT_FOUND_ERRORS):
        return 404
    if isinstance(err, PermissionDeniedError):
        return 403
    return 400


def create_app(config=None):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("RENTDESK_SECRET_KEY", "dev-secret-change-me")
    app.config["DATA_PATH"] = os.getenv("RENTDESK_DATA_PATH", str(DEFAULT_DATA_PATH))
    if config:
        app.config.update(config)

    Store.instance(app.config["DATA_PATH"])  # load data file or init default

    app.register_blueprint(auth_bp)
    app.register_blueprint(views_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(finance_bp)
    app.register_blueprint(fleet_bp)
    app.register_blueprint(staff_bp)

    @app.errorhandler(RentDeskError)
    def handle_rentdesk_error(err):
        # Validation and conflict errors are user-facing and never partially applied
        return jsonify(ok=False, message=err.message, error=type(err).__name__), _error_status(err)

    return app
