"""
Utilities to centralize configuration handling for the dashboard.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

INSECURE_SECRETS = {
    "change-me-please",
    "super-secret-change-me",
    "your-secret-key-here",
}


@dataclass
class AppConfig:
    """Simple container for application level settings."""

    app_name: str
    # Backend REST API
    api_url: str
    api_timeout_seconds: float
    # App settings
    secret_key: str
    log_level: str
    debug_mode: bool
    flask_debug: bool
    # Session settings
    token_expiry_margin_seconds: int
    session_check_interval_seconds: int
    session_cookie_max_age: int


def _read_env(name: str, default: str | None = None) -> str:
    """
    Internal helper to fetch environment variables with support for defaults.
    """
    value = os.getenv(name)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing required environment variable '{name}'")
        value = default
    return value


def read_bool(name: str, default: str = "false") -> bool:
    value = _read_env(name, default)
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_secret_key() -> str:
    # NEXTAUTH_SECRET is accepted so existing deployments keep their env files
    return _read_env("SECRET_KEY", os.getenv("NEXTAUTH_SECRET", "super-secret-change-me"))


def _read_api_url() -> str:
    url = _read_env("API_URL", os.getenv("NEXT_PUBLIC_API_URL", "http://localhost:3000"))
    return url.rstrip("/")


def validate_required_env_vars(skip_in_debug: bool = False) -> None:
    """
    Validate that all required environment variables are set.

    Designed to fail fast during startup rather than on the first request.

    Args:
        skip_in_debug: If True, skip validation when DEBUG_MODE=true

    Raises:
        RuntimeError: If any required variable is missing or has an invalid value
    """
    if skip_in_debug and read_bool("DEBUG_MODE", "false"):
        return

    errors = []

    secret_key = os.getenv("SECRET_KEY") or os.getenv("NEXTAUTH_SECRET") or ""
    if not secret_key or secret_key in INSECURE_SECRETS:
        errors.append(
            "SECRET_KEY (or NEXTAUTH_SECRET) must be configured with a secure random value. "
            'Generate with: python3 -c "import secrets; print(secrets.token_urlsafe(32))"'
        )

    api_url = os.getenv("API_URL") or os.getenv("NEXT_PUBLIC_API_URL") or ""
    if not api_url:
        errors.append("API_URL (or NEXT_PUBLIC_API_URL) must point to the backend REST API")
    elif not api_url.startswith(("http://", "https://")):
        errors.append(f"API_URL must be an http(s) URL, got: {api_url}")

    timeout = os.getenv("API_TIMEOUT_SECONDS", "")
    if timeout:
        try:
            if float(timeout) <= 0:
                errors.append(f"API_TIMEOUT_SECONDS must be positive, got: {timeout}")
        except ValueError:
            errors.append(f"API_TIMEOUT_SECONDS must be a number, got: {timeout}")

    if errors:
        error_msg = "\nConfiguration Errors - Missing or invalid environment variables:\n"
        for error in errors:
            error_msg += f"  - {error}\n"
        raise RuntimeError(error_msg)


def load_config(app_name: str) -> AppConfig:
    """
    Produce an AppConfig instance populated from environment variables.

    A local `.env` file is loaded first when present; real environment
    variables always win over it.
    """
    load_dotenv(override=False)

    return AppConfig(
        app_name=app_name,
        api_url=_read_api_url(),
        api_timeout_seconds=float(_read_env("API_TIMEOUT_SECONDS", "10")),
        secret_key=_read_secret_key(),
        log_level=_read_env("LOG_LEVEL", "INFO"),
        debug_mode=read_bool("DEBUG_MODE", "false"),
        flask_debug=read_bool("FLASK_DEBUG", "false"),
        token_expiry_margin_seconds=int(_read_env("TOKEN_EXPIRY_MARGIN_SECONDS", "300")),
        session_check_interval_seconds=int(_read_env("SESSION_CHECK_INTERVAL_SECONDS", "30")),
        session_cookie_max_age=int(_read_env("SESSION_COOKIE_MAX_AGE", "86400")),
    )
