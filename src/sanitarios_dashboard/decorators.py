"""Decorators for route protection outside the role-gated blueprints."""

from __future__ import annotations

from functools import wraps

from flask import redirect

from sanitarios_shared.constants import LOGIN_EXPIRED_URL
from sanitarios_shared.session import (
    SessionState,
    check_session,
    clear_session_cookies,
    session_expired_response,
)


def web_login_required(f):
    """Require a valid session for web routes (redirects to login)."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        state = check_session()
        if state is SessionState.MISSING:
            return redirect(LOGIN_EXPIRED_URL)
        if state is SessionState.INVALID_USER:
            return clear_session_cookies(redirect("/login"))
        if state is SessionState.EXPIRED:
            return session_expired_response()
        return f(*args, **kwargs)

    return decorated_function
