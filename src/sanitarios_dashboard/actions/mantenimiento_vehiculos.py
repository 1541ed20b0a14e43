"""
Mantenimiento de vehículos - scheduled and completed fleet maintenance.
"""

from sanitarios_shared.api_client import (
    get_api_client,
    handle_api_response,
    page_params,
    server_action,
)
from sanitarios_shared.constants import DEFAULT_PAGE_SIZE


@server_action("Error al obtener mantenimientos de vehículos")
def get_vehicle_maintenances(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""):
    response = get_api_client().get(
        "/api/vehicle_maintenance", params=page_params(page, limit, search)
    )
    return handle_api_response(response, "Error al obtener mantenimientos de vehículos")


@server_action("Error al obtener mantenimientos programados")
def get_upcoming_maintenances():
    response = get_api_client().get("/api/vehicle_maintenance/upcoming")
    return handle_api_response(response, "Error al obtener mantenimientos programados")


@server_action("Error al obtener el mantenimiento del vehículo")
def get_vehicle_maintenance_by_id(maintenance_id: int):
    response = get_api_client().get(f"/api/vehicle_maintenance/{maintenance_id}")
    return handle_api_response(response, "Error al obtener el mantenimiento del vehículo")


@server_action("Error al obtener mantenimientos del vehículo")
def get_maintenances_by_vehicle(vehicle_id: int):
    response = get_api_client().get(f"/api/vehicle_maintenance/vehiculo/{vehicle_id}")
    return handle_api_response(response, "Error al obtener mantenimientos del vehículo")


@server_action("Error al programar el mantenimiento del vehículo")
def create_vehicle_maintenance(data: dict):
    response = get_api_client().post("/api/vehicle_maintenance", json=data)
    return handle_api_response(response, "Error al programar el mantenimiento del vehículo")


@server_action("Error al actualizar el mantenimiento del vehículo")
def edit_vehicle_maintenance(maintenance_id: int, data: dict):
    response = get_api_client().put(f"/api/vehicle_maintenance/{maintenance_id}", json=data)
    return handle_api_response(response, "Error al actualizar el mantenimiento del vehículo")


@server_action("Error al eliminar el mantenimiento del vehículo")
def delete_vehicle_maintenance(maintenance_id: int):
    response = get_api_client().delete(f"/api/vehicle_maintenance/{maintenance_id}")
    return handle_api_response(response, "Error al eliminar el mantenimiento del vehículo")


@server_action("Error al completar el mantenimiento del vehículo")
def complete_vehicle_maintenance(maintenance_id: int):
    response = get_api_client().patch(f"/api/vehicle_maintenance/{maintenance_id}/complete")
    return handle_api_response(response, "Error al completar el mantenimiento del vehículo")
