"""
Usuarios - system accounts and their roles.
"""

from sanitarios_shared.api_client import (
    get_api_client,
    handle_api_response,
    page_params,
    server_action,
)
from sanitarios_shared.constants import DEFAULT_PAGE_SIZE


@server_action("Error al obtener usuarios")
def get_users(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""):
    response = get_api_client().get("/api/users", params=page_params(page, limit, search))
    return handle_api_response(response, "Error al obtener usuarios")


@server_action("Error al obtener usuario")
def get_user_by_id(user_id: int):
    response = get_api_client().get(f"/api/users/{user_id}")
    return handle_api_response(response, "Error al obtener usuario")


@server_action("Error al crear usuario")
def create_user(data: dict):
    response = get_api_client().post("/api/users", json=data)
    return handle_api_response(response, "Error al crear usuario")


@server_action("Error al actualizar usuario")
def update_user(user_id: int, data: dict):
    """Partial update; a blank password keeps the current one."""
    payload = {k: v for k, v in data.items() if not (k == "password" and not v)}
    response = get_api_client().patch(f"/api/users/{user_id}", json=payload)
    return handle_api_response(response, "Error al actualizar usuario")


@server_action("Error al cambiar estado del usuario")
def change_user_status(user_id: int, estado: str):
    response = get_api_client().patch(f"/api/users/{user_id}/status", json={"estado": estado})
    return handle_api_response(response, "Error al cambiar estado del usuario")


@server_action("Error al eliminar usuario")
def delete_user(user_id: int):
    response = get_api_client().delete(f"/api/users/{user_id}")
    result = handle_api_response(response, "Error al eliminar usuario")
    return result or {"success": True}
