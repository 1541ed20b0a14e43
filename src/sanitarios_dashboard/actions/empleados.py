"""
Empleados - employee records and the services assigned to them.

Edit, delete and status changes answer without a body; those actions
return the HTTP status code.
"""

from sanitarios_shared.api_client import (
    get_api_client,
    handle_api_response,
    page_params,
    server_action,
)
from sanitarios_shared.constants import DEFAULT_PAGE_SIZE


@server_action("Error al obtener empleados")
def get_employees(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""):
    response = get_api_client().get("/api/employees", params=page_params(page, limit, search))
    return handle_api_response(response, "Error al obtener empleados")


@server_action("Error al obtener el empleado")
def get_employee_by_id(employee_id: int):
    response = get_api_client().get(f"/api/employees/{employee_id}")
    return handle_api_response(response, "Error al obtener el empleado")


@server_action("Error al obtener el empleado por documento")
def get_employee_by_documento(documento: str):
    response = get_api_client().get(f"/api/employees/documento/{documento}")
    return handle_api_response(response, "Error al obtener el empleado por documento")


@server_action("Error al crear el empleado")
def create_employee(data: dict):
    response = get_api_client().post("/api/employees", json=data)
    return handle_api_response(response, "Error al crear el empleado")


@server_action("Error al editar el empleado")
def edit_employee(employee_id: int, data: dict) -> int:
    response = get_api_client().put(f"/api/employees/{employee_id}", json=data)
    handle_api_response(response, "Error al editar el empleado")
    return response.status_code


@server_action("Error al eliminar el empleado")
def delete_employee(employee_id: int) -> int:
    response = get_api_client().delete(f"/api/employees/{employee_id}")
    handle_api_response(response, "Error al eliminar el empleado")
    return response.status_code


@server_action("Error al cambiar el estado del empleado")
def change_employee_status(employee_id: int, estado: str) -> int:
    response = get_api_client().patch(f"/api/employees/{employee_id}/estado", json={"estado": estado})
    handle_api_response(response, "Error al cambiar el estado del empleado")
    return response.status_code


@server_action("Error al obtener el total de empleados")
def get_total_employees():
    response = get_api_client().get("/api/employees/total_employees")
    return handle_api_response(response, "Error al obtener el total de empleados")


@server_action("Error al obtener los servicios asignados")
def get_pending_assigned_services(employee_id: int):
    """Servicios programados asignados al empleado."""
    response = get_api_client().get(f"/api/services/assigned/pendings/{employee_id}")
    return handle_api_response(response, "Error al obtener los servicios asignados")


@server_action("Error al obtener los servicios asignados")
def get_in_progress_assigned_services(employee_id: int):
    response = get_api_client().get(f"/api/services/assigned/inProgress/{employee_id}")
    return handle_api_response(response, "Error al obtener los servicios asignados")


@server_action("Error al obtener los servicios asignados")
def get_last_services(employee_id: int):
    response = get_api_client().get(f"/api/services/employee/{employee_id}/last")
    return handle_api_response(response, "Error al obtener los servicios asignados")


@server_action("Error al obtener los servicios completados del empleado")
def get_completed_services(
    employee_id: int, page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""
):
    response = get_api_client().get(
        f"/api/services/employee/{employee_id}/completed",
        params=page_params(page, limit, search),
    )
    return handle_api_response(response, "Error al obtener los servicios completados del empleado")
