from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.exceptions import ApiError, ApiUnavailableError, AuthenticationError, ValidationError
from .gate import current_gate

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="index")
    def index():
        return redirect(current_gate().landing_route)

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        gate = current_gate()
        if gate.is_authenticated:
            return redirect(gate.landing_route)

        error = None
        username = ""
        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            try:
                result = container.auth_service.authenticate(username, password)
                landing = gate.login(result.token, result.name, role=result.role)
                session.permanent = True
                flash(f"Welcome, {result.name or username}!", "success")
                return redirect(landing)
            except (ValidationError, AuthenticationError) as e:
                error = str(e)
            except ApiUnavailableError:
                error = "Network or server error"
            except ApiError as e:
                error = e.message or "Login failed"
            except Exception:
                logger.exception("Unexpected error during login")
                error = "Something went wrong while logging in"

        return render_template("login.html", error=error, username=username)

    @app.route("/logout", endpoint="logout")
    def logout():
        current_gate().logout()
        flash("You have been logged out.", "info")
        return redirect(url_for("login"))

    @app.errorhandler(404)
    def not_found(_e):
        return redirect(current_gate().landing_route)
