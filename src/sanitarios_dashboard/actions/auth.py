"""
Auth actions - login, password recovery and token refresh against the backend.
"""

from sanitarios_shared.api_client import get_api_client, handle_api_response, server_action
from sanitarios_shared.errors import ApiError
from sanitarios_shared.logging_config import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Credenciales inválidas"


@server_action(INVALID_CREDENTIALS_MESSAGE, {"endpoint": "/api/auth/login", "method": "POST"})
def login_user(email: str, password: str) -> dict:
    """
    Authenticate against the backend.

    Returns:
        ``{"access_token": str, "user": {...}}``

    Raises:
        ApiError: "Credenciales inválidas" on any rejection
    """
    response = get_api_client().post(
        "/api/auth/login", json={"email": email, "password": password}, auth=False
    )
    if not response.ok:
        logger.warning(f"Login rejected for {email} ({response.status_code})")
        raise ApiError(INVALID_CREDENTIALS_MESSAGE, status=response.status_code)

    data = handle_api_response(response, INVALID_CREDENTIALS_MESSAGE)
    if not data.get("access_token") or not isinstance(data.get("user"), dict):
        raise ApiError("Respuesta de login incompleta", status=response.status_code)
    return data


@server_action("Error al solicitar el restablecimiento de contraseña")
def forgot_password(email: str) -> dict:
    response = get_api_client().post(
        "/api/auth/forgot_password", json={"email": email}, auth=False
    )
    return handle_api_response(response, "Error al solicitar el restablecimiento de contraseña")


@server_action("Error al cambiar la contraseña")
def change_password(old_password: str, new_password: str) -> dict:
    response = get_api_client().put(
        "/api/auth/change_password",
        json={"oldPassword": old_password, "newPassword": new_password},
    )
    return handle_api_response(response, "Error al cambiar la contraseña")


@server_action("Error al refrescar el token")
def refresh_token() -> dict:
    """Exchange the current token for a new one: ``{"access_token": str}``."""
    response = get_api_client().post("/api/auth/refresh")
    data = handle_api_response(response, "Error al refrescar el token")
    if not data.get("access_token"):
        raise ApiError("Error al refrescar el token", status=response.status_code)
    return data
