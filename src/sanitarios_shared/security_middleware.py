"""
Security middleware for response headers, rate limiting, and cookie security.
"""

import time
from collections import defaultdict
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus

from flask import current_app, flash, jsonify, redirect, request


def get_client_ip() -> str:
    """
    Get real client IP considering proxies.

    Returns:
        Client IP address string
    """
    forwarded_for = request.headers.get("X-Forwarded-For", "")
    if forwarded_for:
        # X-Forwarded-For: client, proxy1, proxy2
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP", "")
    if real_ip:
        return real_ip.strip()

    return request.remote_addr or "unknown"


class RateLimiter:
    """Simple in-memory rate limiter with IP awareness."""

    def __init__(self):
        self.requests: dict[str, list] = defaultdict(list)

    def is_allowed(self, key: str, max_requests: int, window_seconds: int) -> tuple[bool, int]:
        """
        Check if request is allowed based on rate limit.

        Args:
            key: Unique identifier (e.g., IP address + endpoint)
            max_requests: Maximum requests allowed in window
            window_seconds: Time window in seconds

        Returns:
            Tuple of (is_allowed, remaining_requests)
        """
        now = time.time()
        cutoff = now - window_seconds

        self.requests[key] = [t for t in self.requests[key] if t > cutoff]

        remaining = max_requests - len(self.requests[key])

        if len(self.requests[key]) >= max_requests:
            return False, 0

        self.requests[key].append(now)
        return True, remaining - 1

    def reset(self):
        self.requests.clear()


_rate_limiter = RateLimiter()


def _is_testing() -> bool:
    return bool(current_app.config.get("TESTING"))


def rate_limit(
    max_requests: int = 5,
    window_seconds: int = 60,
    key_prefix: str = "",
    methods: tuple[str, ...] = ("POST",),
):
    """
    Decorator to rate limit endpoints.

    Only the listed methods count against the limit. Browser requests are
    sent back to the page with a flash message; JSON clients get a 429.

    Args:
        max_requests: Maximum requests allowed per window
        window_seconds: Time window in seconds
        key_prefix: Optional prefix for the rate limit key
        methods: HTTP methods that are limited
    """

    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if _is_testing() or request.method not in methods:
                return f(*args, **kwargs)

            key = f"{get_client_ip()}:{key_prefix}{request.path}"
            is_allowed, remaining = _rate_limiter.is_allowed(key, max_requests, window_seconds)

            if not is_allowed:
                message = "Demasiados intentos. Intenta de nuevo más tarde."
                if request.accept_mimetypes.accept_html:
                    flash(message, "error")
                    response = redirect(request.path)
                else:
                    response = jsonify({"error": message, "retry_after": window_seconds})
                    response.status_code = HTTPStatus.TOO_MANY_REQUESTS
                response.headers["Retry-After"] = str(window_seconds)
                response.headers["X-RateLimit-Limit"] = str(max_requests)
                response.headers["X-RateLimit-Remaining"] = "0"
                return response

            response = f(*args, **kwargs)
            if hasattr(response, "headers"):
                response.headers["X-RateLimit-Limit"] = str(max_requests)
                response.headers["X-RateLimit-Remaining"] = str(remaining)
            return response

        return decorated_function

    return decorator


def configure_security_headers(app):
    """
    Configure security headers for Flask app.

    Args:
        app: Flask application instance
    """

    @app.after_request
    def add_security_headers(response):
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "same-origin"
        if request.is_secure:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        if request.path.startswith("/static/"):
            response.headers["Cache-Control"] = "public, max-age=86400"
        elif response.content_type and (
            "text/html" in response.content_type or "application/json" in response.content_type
        ):
            # Pages depend on the session cookies
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Vary"] = "Cookie"

        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; script-src 'self'; style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; frame-ancestors 'none'"
        )
        return response


def configure_session_security(app):
    """
    Configure secure settings for the cookie that carries flash messages.

    Args:
        app: Flask application instance
    """
    secure_cookie = app.config.get("SESSION_COOKIE_SECURE")
    if isinstance(secure_cookie, str):
        secure_cookie = secure_cookie.strip().lower() in {"1", "true", "yes", "on"}

    if secure_cookie is None:
        # Default to secure cookies unless running in debug mode.
        secure_cookie = not app.config.get("DEBUG_MODE", False)

    app.config["SESSION_COOKIE_SECURE"] = bool(secure_cookie)
    app.config.setdefault("SESSION_COOKIE_HTTPONLY", True)
    app.config.setdefault("SESSION_COOKIE_SAMESITE", "Lax")
