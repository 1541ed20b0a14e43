"""
Session API - polled by the browser to detect an expired session.

``static/js/session_check.js`` calls ``GET /api/session/status`` every
``SESSION_CHECK_INTERVAL_SECONDS``. A token about to expire is exchanged
through ``POST /api/session/refresh``; the page is left only when the
session is invalid or the refresh fails.
"""

from http import HTTPStatus

from flask import Blueprint, jsonify

from sanitarios_dashboard.actions import auth as auth_actions
from sanitarios_shared.audit_middleware import audit_action
from sanitarios_shared.constants import LOGIN_EXPIRED_URL
from sanitarios_shared.errors import ApiError, InvalidTokenError
from sanitarios_shared.jwt_service import seconds_until_expiry
from sanitarios_shared.logging_config import get_logger
from sanitarios_shared.serializers import error_response, success_response
from sanitarios_shared.session import (
    SessionState,
    check_session,
    clear_session_cookies,
    get_current_user,
    get_session_token,
    set_session_cookies,
)

session_api_bp = Blueprint("session_api", __name__, url_prefix="/api/session")
logger = get_logger(__name__)


def _expires_in(token: str | None) -> int | None:
    if not token:
        return None
    try:
        return seconds_until_expiry(token)
    except InvalidTokenError:
        return None


@session_api_bp.get("/status")
def status():
    """
    Estado de la sesión actual.

    A token inside the expiry margin that has not expired yet is reported
    with ``refresh: true`` and the cookies are kept, so the page can still
    call ``POST /api/session/refresh``.

    Returns:
        ``{"valid": bool, "refresh": bool, "redirect": str | None, "expiresIn": int | None}``
    """
    state = check_session()
    valid = state is SessionState.VALID
    expires_in = _expires_in(get_session_token())
    refreshable = state is SessionState.EXPIRED and expires_in is not None and expires_in > 0
    response = jsonify(
        {
            "valid": valid,
            "refresh": refreshable,
            "redirect": None if valid else LOGIN_EXPIRED_URL,
            "expiresIn": expires_in,
        }
    )
    if state is SessionState.INVALID_USER or (state is SessionState.EXPIRED and not refreshable):
        clear_session_cookies(response)
    return response


@session_api_bp.post("/refresh")
def refresh():
    """Exchange the current token for a new one and store it in the cookie."""
    user = get_current_user()
    if not get_session_token() or not user:
        response = jsonify(
            error_response("Token no encontrado", {"redirect": LOGIN_EXPIRED_URL})
        )
        response.status_code = HTTPStatus.UNAUTHORIZED
        return clear_session_cookies(response)

    try:
        data = auth_actions.refresh_token()
    except ApiError as e:
        if e.status == HTTPStatus.UNAUTHORIZED:
            raise
        logger.warning(f"Token refresh failed: {e.message}")
        return jsonify(error_response(e.message)), e.status or HTTPStatus.BAD_GATEWAY

    token = data["access_token"]
    audit_action("REFRESH_TOKEN")
    response = jsonify(success_response({"expiresIn": _expires_in(token)}))
    return set_session_cookies(response, token, user)
