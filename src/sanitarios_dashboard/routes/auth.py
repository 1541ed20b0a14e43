"""
Authentication routes (web forms).

The backend issues the bearer token; this side only stores it together
with the signed ``{id, roles}`` payload in two cookies.
"""

from __future__ import annotations

import logging

from flask import Blueprint, flash, make_response, redirect, render_template, request

from sanitarios_dashboard.actions import auth as auth_actions
from sanitarios_dashboard.decorators import web_login_required
from sanitarios_dashboard.utils.views import parse_form, run_action
from sanitarios_shared.audit_middleware import audit_action
from sanitarios_shared.errors import ApiError
from sanitarios_shared.schemas import ChangePasswordRequest, ForgotPasswordRequest, LoginRequest
from sanitarios_shared.security_middleware import rate_limit
from sanitarios_shared.session import (
    SessionState,
    check_session,
    clear_session_cookies,
    dashboard_url_for_roles,
    get_user_roles,
    set_session_cookies,
)

auth_bp = Blueprint("auth", __name__)
logger = logging.getLogger(__name__)


@auth_bp.get("/")
def index():
    state = check_session()
    if state is SessionState.VALID:
        return redirect(dashboard_url_for_roles(get_user_roles()) or "/no-autorizado")
    return redirect("/login")


@auth_bp.get("/login")
def login_page():
    """Login form; a user with a valid session goes straight to their dashboard."""
    state = check_session()
    if state is SessionState.VALID:
        target = dashboard_url_for_roles(get_user_roles())
        if target:
            return redirect(target)

    response = make_response(
        render_template("login.html", expired=request.args.get("expired") == "true")
    )
    if state is SessionState.INVALID_USER:
        clear_session_cookies(response)
    return response


@auth_bp.post("/login")
@rate_limit(max_requests=5, window_seconds=300)
def login():
    """
    Process login form and store the backend session in cookies.

    Security features:
    - Rate limiting: 5 attempts per 5 minutes
    - Role claims stored in a signed cookie
    """
    form = parse_form(LoginRequest)
    if form is None:
        return render_template("login.html", email=request.form.get("email", "")), 400

    logger.info(f"Login attempt for email: {form.email}")
    try:
        data = auth_actions.login_user(form.email, form.password)
    except ApiError as e:
        flash(e.message, "error")
        return render_template("login.html", email=form.email), 401

    user = dict(data["user"])
    user["roles"] = [str(r).upper() for r in user.get("roles") or []]
    target = dashboard_url_for_roles(user["roles"])
    if target is None:
        logger.warning(f"Login for {form.email} without a dashboard role: {user['roles']}")
        target = "/no-autorizado"

    audit_action("LOGIN", form.email)
    logger.info(f"Login successful: user {user.get('id')} with roles {user['roles']}")
    response = make_response(redirect(target))
    return set_session_cookies(response, data["access_token"], user)


@auth_bp.route("/logout", methods=["GET", "POST"])
def logout():
    """Logout - clears both session cookies."""
    audit_action("LOGOUT")
    flash("Sesión cerrada correctamente", "success")
    return clear_session_cookies(redirect("/login"))


@auth_bp.route("/forgot-password", methods=["GET", "POST"])
@rate_limit(max_requests=5, window_seconds=300)
def forgot_password():
    if request.method == "POST":
        form = parse_form(ForgotPasswordRequest)
        if form is not None and run_action(
            auth_actions.forgot_password,
            form.email,
            success="Si el email está registrado, recibirás las instrucciones para restablecer tu contraseña",
        ):
            return redirect("/login")
    return render_template("forgot_password.html")


@auth_bp.route("/change-password", methods=["GET", "POST"])
@web_login_required
def change_password():
    if request.method == "POST":
        form = parse_form(ChangePasswordRequest)
        if form is not None and run_action(
            auth_actions.change_password,
            form.oldPassword,
            form.newPassword,
            success="Contraseña actualizada correctamente",
            audit="CHANGE_PASSWORD",
        ):
            return redirect(dashboard_url_for_roles(get_user_roles()) or "/login")
    return render_template("change_password.html")


@auth_bp.get("/no-autorizado")
def not_authorized():
    """Show authorization error page."""
    return render_template(
        "no_autorizado.html", dashboard_url=dashboard_url_for_roles(get_user_roles())
    ), 403
