"""
Role Guard - session and role validation for dashboard blueprints.

Each protected blueprint registers a ``RoleGuard`` as its ``before_request``
hook. The view only runs once the session is resolved as valid and the
user holds one of the roles allowed behind the blueprint prefix.
"""

import logging

from flask import flash, g, redirect, request

from sanitarios_shared.constants import LOGIN_EXPIRED_URL, ROUTE_ROLES
from sanitarios_shared.session import (
    SessionState,
    check_session,
    clear_session_cookies,
    get_user_roles,
    session_expired_response,
)

logger = logging.getLogger(__name__)

NOT_AUTHORIZED_URL = "/no-autorizado"


def allowed_roles_for_path(path: str) -> set[str] | None:
    """Roles allowed behind the first matching prefix, None for public paths."""
    for prefix, roles in ROUTE_ROLES.items():
        if path == prefix or path.startswith(f"{prefix}/"):
            return roles
    return None


class RoleGuard:
    def __init__(self, allowed_roles=None):
        """
        Initialize the guard with the roles allowed behind the blueprint.

        Args:
            allowed_roles (set[str] | None): Roles accepted; when None they are
                looked up from the request path prefix
        """
        self.allowed_roles = set(allowed_roles) if allowed_roles else None

    def __call__(self):
        """
        Executed before_request in each protected Blueprint.

        1. Session token present and not expiring
        2. ``user`` cookie, when present, carries a valid signature
        3. User roles intersect the allowed roles
        """
        if request.endpoint and "static" in request.endpoint:
            return None

        state = check_session()
        g.session_state = state

        if state is SessionState.MISSING:
            logger.info(f"RoleGuard - No session token on {request.path}, redirecting to login")
            return redirect(LOGIN_EXPIRED_URL)

        if state is SessionState.INVALID_USER:
            logger.warning(f"RoleGuard - Unreadable user cookie on {request.path}")
            return clear_session_cookies(redirect("/login"))

        if state is SessionState.EXPIRED:
            logger.info(f"RoleGuard - Session expired on {request.path}")
            return session_expired_response()

        allowed = self.allowed_roles or allowed_roles_for_path(request.path)
        if allowed is None:
            return None

        roles = get_user_roles()
        if not set(roles) & allowed:
            logger.warning(
                f"RoleGuard - Roles {roles} not allowed on {request.path} (requires {sorted(allowed)})"
            )
            flash("No tienes permisos para acceder a esta sección.", "error")
            return redirect(NOT_AUTHORIZED_URL)

        return None
