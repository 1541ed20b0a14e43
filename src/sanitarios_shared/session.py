"""
Session middleware for Flask.

The session is two cookies: ``token`` holds the backend bearer token and
``user`` holds ``{id, roles[]}``. The ``user`` cookie is signed with the app
secret so role claims cannot be edited in the browser; a cookie that fails
the signature check is treated as no session at all.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from flask import current_app, flash, g, redirect, request
from itsdangerous import BadSignature, URLSafeSerializer

from sanitarios_shared.constants import LOGIN_EXPIRED_URL, TOKEN_COOKIE, USER_COOKIE, Roles
from sanitarios_shared.jwt_service import get_token_roles, is_token_expiring
from sanitarios_shared.logging_config import get_logger

if TYPE_CHECKING:
    from flask import Flask, Response

logger = get_logger(__name__)

USER_COOKIE_SALT = "sanitarios-user-cookie"


class SessionState(str, Enum):
    VALID = "valid"
    MISSING = "missing"
    EXPIRED = "expired"
    INVALID_USER = "invalid_user"


def _serializer() -> URLSafeSerializer:
    return URLSafeSerializer(current_app.config["SECRET_KEY"], salt=USER_COOKIE_SALT)


def encode_user_cookie(user: dict[str, Any]) -> str:
    """Sign the ``{id, roles}`` payload for the ``user`` cookie."""
    payload = {"id": user.get("id"), "roles": list(user.get("roles") or [])}
    for key in ("nombre", "email", "empleadoId"):
        if user.get(key) is not None:
            payload[key] = user[key]
    return _serializer().dumps(payload)


def decode_user_cookie(raw: str) -> dict[str, Any] | None:
    """Return the user payload, or None if the cookie is missing or tampered."""
    if not raw:
        return None
    try:
        user = _serializer().loads(raw)
    except BadSignature:
        logger.warning(f"Invalid user cookie signature on {request.path}")
        return None
    if not isinstance(user, dict) or not isinstance(user.get("roles", []), list):
        return None
    return user


def init_session_middleware(app: Flask) -> None:
    """
    Initialize session middleware for a Flask app.

    Sets up a before_request handler that stores the bearer token and the
    verified user payload on ``g``.
    """

    @app.before_request
    def load_session_user():
        g.session_token = request.cookies.get(TOKEN_COOKIE) or None
        g.current_user = None
        g.user_cookie_invalid = False

        raw_user = request.cookies.get(USER_COOKIE)
        if raw_user:
            user = decode_user_cookie(raw_user)
            if user is None:
                g.user_cookie_invalid = True
            else:
                g.current_user = user


def get_session_token() -> str | None:
    """Bearer token of the current request, or None."""
    if "session_token" in g:
        return g.session_token
    return request.cookies.get(TOKEN_COOKIE) or None


def get_current_user() -> dict[str, Any] | None:
    """
    Get current authenticated user from request context.

    Returns:
        User payload dict if present and correctly signed, None otherwise
    """
    if "current_user" not in g:
        raw_user = request.cookies.get(USER_COOKIE)
        g.current_user = decode_user_cookie(raw_user) if raw_user else None
        g.user_cookie_invalid = bool(raw_user) and g.current_user is None
    return g.current_user


def get_user_id() -> int | None:
    user = get_current_user()
    return user.get("id") if user else None


def get_user_roles() -> list[str]:
    """
    Roles of the current user, taken from the signed ``user`` cookie.

    The token is decoded without verifying its signature, so a ``roles``
    claim in it can only narrow the cookie roles, never add to them.
    """
    user = get_current_user()
    if not user:
        return []
    roles = [str(r).upper() for r in user.get("roles") or []]
    token = get_session_token()
    token_roles = get_token_roles(token) if token else None
    if token_roles:
        roles = [r for r in roles if r in token_roles]
    return roles


def has_any_role(allowed: set[str] | list[str]) -> bool:
    return bool(set(get_user_roles()) & set(allowed))


def dashboard_url_for_roles(roles: list[str]) -> str | None:
    """Landing page for a set of roles, None when no role grants a dashboard."""
    if Roles.is_admin(roles):
        return "/admin/dashboard"
    if Roles.OPERARIO.value in (roles or []):
        return "/operario/dashboard"
    return None


def check_session() -> SessionState:
    """
    Resolve the session of the current request.

    Mirrors the ``not-ready -> ready-valid | ready-invalid`` check the views
    rely on: no view runs unless this returns ``SessionState.VALID``.
    """
    token = get_session_token()
    if not token:
        return SessionState.MISSING

    get_current_user()
    if g.user_cookie_invalid:
        return SessionState.INVALID_USER

    margin = current_app.config.get("TOKEN_EXPIRY_MARGIN_SECONDS", 300)
    if is_token_expiring(token, margin_seconds=margin):
        return SessionState.EXPIRED

    return SessionState.VALID


def set_session_cookies(response: Response, token: str, user: dict[str, Any]) -> Response:
    """Attach both session cookies to a response."""
    max_age = current_app.config.get("SESSION_COOKIE_MAX_AGE", 86400)
    secure = request.is_secure
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        httponly=True,
        secure=secure,
        samesite="Lax",
        max_age=max_age,
        path="/",
    )
    response.set_cookie(
        USER_COOKIE,
        encode_user_cookie(user),
        httponly=True,
        secure=secure,
        samesite="Lax",
        max_age=max_age,
        path="/",
    )
    return response


def clear_session_cookies(response: Response) -> Response:
    response.delete_cookie(TOKEN_COOKIE, path="/")
    response.delete_cookie(USER_COOKIE, path="/")
    return response


def session_expired_response(notify: bool = True) -> Response:
    """Redirect to the login page with the expired flag and both cookies cleared."""
    if notify:
        flash("Tu sesión ha expirado. Por favor, inicia sesión nuevamente", "error")
    return clear_session_cookies(redirect(LOGIN_EXPIRED_URL))
