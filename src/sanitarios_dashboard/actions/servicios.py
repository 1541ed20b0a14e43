"""
Servicios - scheduled services (installation, cleaning, removal...).

A service is created either with automatic resource assignment, where the
backend picks employees, vehicles and toilets, or with a manual list of
assignments chosen in the form.
"""

from sanitarios_shared.api_client import (
    get_api_client,
    handle_api_response,
    page_params,
    server_action,
)
from sanitarios_shared.constants import DEFAULT_PAGE_SIZE
from sanitarios_shared.errors import ApiError


@server_action("Error al obtener servicios")
def get_services(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    search: str = "",
    filters: dict | None = None,
):
    """
    Listado paginado de servicios.

    Args:
        filters: extra query params (estado, tipoServicio, clienteId...);
            empty values are not sent
    """
    response = get_api_client().get(
        "/api/services", params=page_params(page, limit, search, **(filters or {}))
    )
    return handle_api_response(response, "Error al obtener servicios")


@server_action("Error al obtener el servicio")
def get_service_by_id(service_id: int):
    response = get_api_client().get(f"/api/services/{service_id}")
    return handle_api_response(response, "Error al obtener el servicio")


@server_action("Error al obtener servicios por rango de fechas")
def get_services_by_date_range(start_date: str, end_date: str):
    response = get_api_client().get(
        "/api/services/date-range", params={"startDate": start_date, "endDate": end_date}
    )
    return handle_api_response(response, "Error al obtener servicios por rango de fechas")


@server_action("Error al obtener servicios de hoy")
def get_today_services():
    response = get_api_client().get("/api/services/today")
    return handle_api_response(response, "Error al obtener servicios de hoy")


@server_action("Error al obtener servicios pendientes")
def get_pending_services():
    response = get_api_client().get("/api/services/pending")
    return handle_api_response(response, "Error al obtener servicios pendientes")


@server_action("Error al obtener servicios en progreso")
def get_in_progress_services():
    response = get_api_client().get("/api/services/in-progress")
    return handle_api_response(response, "Error al obtener servicios en progreso")


@server_action("Error al crear el servicio")
def create_service_automatic(data: dict):
    payload = {**data, "asignacionAutomatica": True}
    payload.pop("asignacionesManual", None)
    response = get_api_client().post("/api/services/create/automatic", json=payload)
    return handle_api_response(response, "Error al crear el servicio")


@server_action("Error al crear el servicio con asignación manual")
def create_service_manual(data: dict):
    """
    Create a service with explicitly chosen resources.

    Raises:
        ApiError: when ``asignacionesManual`` is empty (no request is sent)
            or the backend rejects the service
    """
    assignments = data.get("asignacionesManual") or []
    if not assignments:
        raise ApiError("Se requiere al menos una asignación manual de recursos", status=400)

    payload = {**data, "asignacionAutomatica": False, "asignacionesManual": assignments}
    response = get_api_client().post("/api/services/create/manual", json=payload)
    if response.status_code == 403:
        raise ApiError("No tienes permisos para crear servicios", status=403)
    return handle_api_response(response, "Error al crear el servicio con asignación manual")


@server_action("Error al obtener baños instalados para el cliente")
def get_client_installed_toilets(client_id: int):
    response = get_api_client().get(f"/api/chemical_toilets/by-client/{client_id}")
    return handle_api_response(
        response, f"Error al obtener baños instalados para el cliente {client_id}"
    )


@server_action("Error al actualizar el servicio")
def update_service(service_id: int, data: dict) -> int:
    response = get_api_client().put(f"/api/services/{service_id}", json=data)
    handle_api_response(response, "Error al actualizar el servicio")
    return response.status_code


@server_action("Error al cambiar el estado del servicio")
def change_service_status(service_id: int, estado: str) -> int:
    response = get_api_client().patch(f"/api/services/{service_id}/estado", json={"estado": estado})
    handle_api_response(response, "Error al cambiar el estado del servicio")
    return response.status_code


@server_action("Error al eliminar el servicio")
def delete_service(service_id: int) -> int:
    response = get_api_client().delete(f"/api/services/{service_id}")
    handle_api_response(response, "Error al eliminar el servicio")
    return response.status_code
