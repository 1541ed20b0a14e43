"""
Sanitarios - chemical toilet inventory and toilet maintenance.
"""

from sanitarios_shared.api_client import (
    get_api_client,
    handle_api_response,
    page_params,
    server_action,
)
from sanitarios_shared.constants import DEFAULT_PAGE_SIZE

TOILETS_PATH = "/api/chemical_toilets"
MAINTENANCE_PATH = "/api/toilet_maintenance"


@server_action("Error al obtener los sanitarios")
def get_toilets(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""):
    response = get_api_client().get(TOILETS_PATH, params=page_params(page, limit, search))
    return handle_api_response(response, "Error al obtener los sanitarios")


@server_action("Error al obtener la lista de sanitarios")
def get_toilets_list():
    """Todos los sanitarios, sin paginar (para selects)."""
    response = get_api_client().get(TOILETS_PATH)
    return handle_api_response(response, "Error al obtener la lista de sanitarios")


@server_action("Error al obtener el sanitario")
def get_toilet_by_id(toilet_id: int):
    response = get_api_client().get(f"{TOILETS_PATH}/{toilet_id}")
    return handle_api_response(response, "Error al obtener el sanitario")


@server_action("Error al crear el sanitario")
def create_toilet(data: dict):
    response = get_api_client().post(TOILETS_PATH, json=data)
    return handle_api_response(response, "Error al crear el sanitario")


@server_action("Error al editar el sanitario")
def edit_toilet(toilet_id: int, data: dict):
    response = get_api_client().put(f"{TOILETS_PATH}/{toilet_id}", json=data)
    return handle_api_response(response, "Error al editar el sanitario")


@server_action("Error al eliminar el sanitario")
def delete_toilet(toilet_id: int):
    response = get_api_client().delete(f"{TOILETS_PATH}/{toilet_id}")
    return handle_api_response(response, "Error al eliminar el sanitario")


@server_action("Error al obtener sanitarios del cliente")
def get_toilets_by_client(client_id: int):
    response = get_api_client().get(f"{TOILETS_PATH}/by-client/{client_id}")
    return handle_api_response(response, f"Error al obtener sanitarios del cliente {client_id}")


@server_action("Error al obtener el total de sanitarios")
def get_total_toilets():
    response = get_api_client().get(f"{TOILETS_PATH}/total_chemical_toilets")
    return handle_api_response(response, "Error al obtener el total de sanitarios")


@server_action("Error al obtener los servicios del baño")
def get_toilet_services(toilet_id: int):
    response = get_api_client().get(f"{TOILETS_PATH}/{toilet_id}/services")
    return handle_api_response(response, "Error al obtener los servicios del baño")


# Maintenance


@server_action("Error al obtener sanitarios en mantenimiento")
def get_toilet_maintenances(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""):
    response = get_api_client().get(MAINTENANCE_PATH, params=page_params(page, limit, search))
    return handle_api_response(response, "Error al obtener sanitarios en mantenimiento")


@server_action("Error al crear el sanitario en mantenimiento")
def create_toilet_maintenance(data: dict):
    response = get_api_client().post(MAINTENANCE_PATH, json=data)
    return handle_api_response(response, "Error al crear el sanitario en mantenimiento")


@server_action("Error al editar el sanitario en mantenimiento")
def edit_toilet_maintenance(maintenance_id: int, data: dict):
    response = get_api_client().put(f"{MAINTENANCE_PATH}/{maintenance_id}", json=data)
    return handle_api_response(response, "Error al editar el sanitario en mantenimiento")


@server_action("Error al eliminar el sanitario en mantenimiento")
def delete_toilet_maintenance(maintenance_id: int):
    response = get_api_client().delete(f"{MAINTENANCE_PATH}/{maintenance_id}")
    return handle_api_response(response, "Error al eliminar el sanitario en mantenimiento")


@server_action("Error al completar el mantenimiento del sanitario")
def complete_toilet_maintenance(maintenance_id: int):
    response = get_api_client().patch(f"{MAINTENANCE_PATH}/{maintenance_id}/complete")
    return handle_api_response(response, "Error al completar el mantenimiento del sanitario")
