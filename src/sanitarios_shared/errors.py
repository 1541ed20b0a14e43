"""
Exceptions raised by the backend client and the session layer.
"""

from __future__ import annotations

from typing import Any

MISSING_TOKEN_MESSAGE = "Token no encontrado"
SESSION_EXPIRED_MESSAGE = "Tu sesión ha expirado. Por favor, inicia sesión nuevamente"


class ApiError(Exception):
    """Base exception for every failed backend call."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status = status
        self.context = context or {}
        super().__init__(message)


class MissingTokenError(ApiError):
    """No bearer token in the request cookies."""

    def __init__(self, message: str = MISSING_TOKEN_MESSAGE):
        super().__init__(message, 401)


class SessionExpiredError(ApiError):
    """Backend rejected the bearer token or the token is about to expire."""

    def __init__(self, message: str = SESSION_EXPIRED_MESSAGE, context: dict | None = None):
        super().__init__(message, 401, context)


class InvalidTokenError(Exception):
    """Token is malformed or its claims cannot be read."""

    def __init__(self, message: str = "Token inválido"):
        self.message = message
        super().__init__(message)
