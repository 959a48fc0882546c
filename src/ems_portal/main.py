from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .auth.gate import current_gate
from .auth.session_store import flask_session_store
from .common import datetime_utils
from .common.listing import MONTH_OPTIONS, url_with
from .container import Container, build_container
from .core.constants import PAGE_SIZE_OPTIONS
from .core.exceptions import ApiError, ApiUnavailableError, AuthorizationError, SessionExpiredError
from .dashboards.controller import register as register_dashboards
from .employees.controller import register as register_employees
from .leaves.controller import register as register_leaves
from .shifts.controller import register as register_shifts
from .work_sessions.controller import register as register_work_sessions

logger = logging.getLogger(__name__)


def _register_filters(app: Flask, tz: str) -> None:
    app.jinja_env.filters["ampm"] = lambda v: datetime_utils.format_time_ampm(v, tz)
    app.jinja_env.filters["date_label"] = lambda v: datetime_utils.format_date_label(v, tz)
    app.jinja_env.filters["dmy"] = datetime_utils.format_date_dmy
    app.jinja_env.filters["shift_time"] = datetime_utils.format_shift_time
    app.jinja_env.filters["iso_duration"] = datetime_utils.format_iso_duration
    app.jinja_env.filters["hm"] = datetime_utils.format_duration_hm
    app.jinja_env.filters["hms"] = datetime_utils.format_hms
    app.jinja_env.globals["url_with"] = url_with
    app.jinja_env.globals["page_sizes"] = PAGE_SIZE_OPTIONS
    app.jinja_env.globals["month_options"] = MONTH_OPTIONS


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    api_config = getattr(settings, "API_CONFIG")
    tz = getattr(settings, "DISPLAY_TIMEZONE", "Asia/Karachi")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DISPLAY_TIMEZONE"] = tz
    app.config["DEFAULT_PAGE_SIZE"] = int(getattr(settings, "DEFAULT_PAGE_SIZE", 10))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", 1)))

    if app.config["DEBUG"]:
        logging.basicConfig(level=logging.INFO)
        app.logger.info("[ems-portal] settings=%s api=%s tz=%s", settings_module, api_config.get("base_url"), tz)

    if container is None:
        container = build_container(api_config=api_config, display_timezone=tz)

    @app.before_request
    def resolve_auth_gate():
        current_gate()

    @app.context_processor
    def inject_session_user():
        gate = current_gate()
        return {
            "current_user": {
                "name": gate.name,
                "role": gate.role.value if gate.role else None,
            },
            "auth_state": gate.state.value,
        }

    @app.errorhandler(SessionExpiredError)
    def session_expired(e: SessionExpiredError):
        flask_session_store().clear()
        if request.accept_mimetypes.best == "application/json":
            return jsonify({"error": e.message, "redirect": url_for("login")}), 401
        flash(e.message, "warning")
        return redirect(url_for("login"))

    @app.errorhandler(AuthorizationError)
    def role_denied(e: AuthorizationError):
        logger.info("Access denied on %s: %s", request.path, e)
        if request.accept_mimetypes.best == "application/json":
            return jsonify({"error": "Forbidden", "redirect": url_for("login")}), 403
        return redirect(url_for("login"))

    @app.errorhandler(ApiError)
    def api_failed(e: ApiError):
        logger.warning("Unhandled API error on %s: %s", request.path, e.message)
        if request.accept_mimetypes.best == "application/json":
            return jsonify({"error": e.message}), 502
        message = "Network or server error" if isinstance(e, ApiUnavailableError) else e.message
        return render_template("error.html", message=message), 502

    _register_filters(app, tz)

    register_auth(app, container)
    register_dashboards(app, container)
    register_employees(app, container)
    register_shifts(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_work_sessions(app, container)

    return app
