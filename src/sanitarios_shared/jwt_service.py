"""
JWT Service - claim inspection for the backend bearer token.

The backend signs the tokens and verifies them on every call. This side only
reads the claims it needs to route the user: the ``exp`` timestamp to detect
an expired session before wasting a round trip, and the ``roles`` claim when
the backend includes it.
"""

from __future__ import annotations

import time
from typing import Any

import jwt

from sanitarios_shared.errors import InvalidTokenError
from sanitarios_shared.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_EXPIRY_MARGIN_SECONDS = 300


def decode_token_claims(token: str) -> dict[str, Any]:
    """
    Decode the payload of a bearer token without verifying its signature.

    Raises:
        InvalidTokenError: If the token is empty or not a well formed JWT
    """
    if not token or not isinstance(token, str) or not token.strip():
        raise InvalidTokenError("Token vacío")

    if token.count(".") != 2:
        raise InvalidTokenError("Formato de token inválido")

    try:
        claims = jwt.decode(
            token,
            options={"verify_signature": False},
            algorithms=["HS256", "HS384", "HS512", "RS256"],
        )
    except jwt.PyJWTError as e:
        raise InvalidTokenError(f"No se pudo decodificar el token: {e}") from e

    if not isinstance(claims, dict):
        raise InvalidTokenError("Payload de token inválido")
    return claims


def get_token_expiry(token: str) -> int | None:
    """Return the ``exp`` claim as a unix timestamp, or None when absent."""
    claims = decode_token_claims(token)
    exp = claims.get("exp")
    if exp is None:
        return None
    try:
        return int(exp)
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("Fecha de expiración inválida") from e


def seconds_until_expiry(token: str, now: float | None = None) -> int | None:
    """Seconds left before the token expires (negative once expired)."""
    exp = get_token_expiry(token)
    if exp is None:
        return None
    current = int(now if now is not None else time.time())
    return exp - current


def is_token_expiring(
    token: str | None,
    margin_seconds: int = DEFAULT_EXPIRY_MARGIN_SECONDS,
    now: float | None = None,
) -> bool:
    """
    Check whether a token is unusable or about to expire.

    A token counts as expiring when it is missing, malformed, has no ``exp``
    claim, is already expired, or has less than ``margin_seconds`` left.
    """
    if not token:
        return True

    try:
        remaining = seconds_until_expiry(token, now=now)
    except InvalidTokenError as e:
        logger.warning(f"Token check failed: {e.message}")
        return True

    if remaining is None:
        logger.warning("Token sin fecha de expiración")
        return True

    if remaining <= 0:
        logger.info("Token ya expirado")
        return True

    if remaining < margin_seconds:
        logger.info(f"Token a punto de expirar en {remaining} segundos")
        return True

    return False


def get_token_roles(token: str) -> list[str] | None:
    """
    Return the role claim carried by the token, if any.

    Accepts ``roles`` as a list or a comma separated string and ``role`` as a
    single value.
    """
    try:
        claims = decode_token_claims(token)
    except InvalidTokenError:
        return None

    roles = claims.get("roles", claims.get("role"))
    if roles is None:
        return None
    if isinstance(roles, str):
        return [r.strip().upper() for r in roles.split(",") if r.strip()]
    if isinstance(roles, (list, tuple)):
        return [str(r).upper() for r in roles]
    return None
