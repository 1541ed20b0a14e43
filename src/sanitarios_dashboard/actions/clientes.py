from sanitarios_shared.api_client import (
    get_api_client,
    handle_api_response,
    page_params,
    server_action,
)
from sanitarios_shared.constants import DEFAULT_PAGE_SIZE


@server_action("Error al obtener los clientes")
def get_clients(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""):
    response = get_api_client().get("/api/clients", params=page_params(page, limit, search))
    return handle_api_response(response, "Error al obtener los clientes")


@server_action("Error al obtener el cliente")
def get_client_by_id(client_id: int):
    response = get_api_client().get(f"/api/clients/{client_id}")
    return handle_api_response(response, "Error al obtener el cliente")


@server_action("Error al crear el cliente")
def create_client(data: dict):
    response = get_api_client().post("/api/clients", json=data)
    return handle_api_response(response, "Error al crear el cliente")


@server_action("Error al editar el cliente")
def edit_client(client_id: int, data: dict):
    response = get_api_client().put(f"/api/clients/{client_id}", json=data)
    return handle_api_response(response, "Error al editar el cliente")


@server_action("Error al eliminar el cliente")
def delete_client(client_id: int):
    response = get_api_client().delete(f"/api/clients/{client_id}")
    return handle_api_response(response, "Error al eliminar el cliente")
