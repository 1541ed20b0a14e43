"""
Vehículos - fleet records.
"""

from sanitarios_shared.api_client import (
    get_api_client,
    handle_api_response,
    page_params,
    server_action,
)
from sanitarios_shared.constants import DEFAULT_PAGE_SIZE


@server_action("Error al obtener los vehículos")
def get_vehicles(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""):
    response = get_api_client().get("/api/vehicles", params=page_params(page, limit, search))
    return handle_api_response(response, "Error al obtener los vehículos")


@server_action("Error al obtener el vehículo")
def get_vehicle_by_id(vehicle_id: int):
    response = get_api_client().get(f"/api/vehicles/{vehicle_id}")
    return handle_api_response(response, "Error al obtener el vehículo")


@server_action("Error al obtener el vehículo por placa")
def get_vehicle_by_placa(placa: str):
    response = get_api_client().get(f"/api/vehicles/placa/{placa}")
    return handle_api_response(response, "Error al obtener el vehículo por placa")


@server_action("Error al crear el vehículo")
def create_vehicle(data: dict):
    response = get_api_client().post("/api/vehicles", json=data)
    return handle_api_response(response, "Error al crear el vehículo")


@server_action("Error al editar el vehículo")
def edit_vehicle(vehicle_id: int, data: dict) -> int:
    response = get_api_client().put(f"/api/vehicles/{vehicle_id}", json=data)
    handle_api_response(response, "Error al editar el vehículo")
    return response.status_code


@server_action("No se pudo eliminar el vehículo")
def delete_vehicle(vehicle_id: int) -> int:
    response = get_api_client().delete(f"/api/vehicles/{vehicle_id}")
    handle_api_response(response, "No se pudo eliminar el vehículo")
    return response.status_code


@server_action("Error al cambiar el estado del vehículo")
def change_vehicle_status(vehicle_id: int, estado: str) -> int:
    response = get_api_client().patch(f"/api/vehicles/{vehicle_id}/estado", json={"estado": estado})
    handle_api_response(response, "Error al cambiar el estado del vehículo")
    return response.status_code


@server_action("Error al obtener el total de vehículos")
def get_total_vehicles():
    response = get_api_client().get("/api/vehicles/total_vehicles")
    return handle_api_response(response, "Error al obtener el total de vehículos")
