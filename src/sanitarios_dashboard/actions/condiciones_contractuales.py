from sanitarios_shared.api_client import (
    get_api_client,
    handle_api_response,
    page_params,
    server_action,
)
from sanitarios_shared.constants import DEFAULT_PAGE_SIZE

BASE_PATH = "/api/contractual_conditions"


@server_action("Error al obtener las condiciones contractuales")
def get_all_contractual_conditions(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""):
    response = get_api_client().get(BASE_PATH, params=page_params(page, limit, search))
    return handle_api_response(response, "Error al obtener condiciones contractuales")


@server_action("Error al obtener la condición contractual")
def get_contractual_condition_by_id(condition_id: int):
    response = get_api_client().get(f"{BASE_PATH}/id/{condition_id}")
    return handle_api_response(
        response, f"Error al obtener la condición contractual con ID {condition_id}"
    )


@server_action("Error al obtener condiciones contractuales del cliente")
def get_contractual_conditions_by_client(client_id: int):
    response = get_api_client().get(f"{BASE_PATH}/client-id/{client_id}")
    return handle_api_response(
        response, f"Error al obtener condiciones contractuales del cliente {client_id}"
    )


@server_action("Error al crear la condición contractual")
def create_contractual_condition(data: dict):
    response = get_api_client().post(f"{BASE_PATH}/create", json=data)
    return handle_api_response(response, "Error al crear la condición contractual")


@server_action("Error al actualizar la condición contractual")
def update_contractual_condition(condition_id: int, data: dict):
    response = get_api_client().put(f"{BASE_PATH}/modify/{condition_id}", json=data)
    return handle_api_response(response, "Error al actualizar la condición contractual")


@server_action("Error al eliminar la condición contractual")
def delete_contractual_condition(condition_id: int):
    response = get_api_client().delete(f"{BASE_PATH}/delete/{condition_id}")
    return handle_api_response(
        response, f"Error al eliminar la condición contractual con ID {condition_id}"
    )
