"""
Licencias - driving licences of employees and employee leaves.

The backend calls both "licencia": driving licences live under
``/api/employees/licencia*`` and leaves (vacaciones, enfermedad...) under
``/api/employee-leaves``.
"""

from sanitarios_shared.api_client import (
    get_api_client,
    handle_api_response,
    page_params,
    server_action,
)
from sanitarios_shared.constants import DEFAULT_PAGE_SIZE

LEAVES_PATH = "/api/employee-leaves"


# Driving licences


@server_action("Error al obtener licencia de conducir del empleado")
def get_driver_license(employee_id: int):
    response = get_api_client().get(f"/api/employees/licencia/{employee_id}")
    return handle_api_response(response, "Error al obtener licencias de conducir")


@server_action("Error al crear licencia de conducir para el empleado")
def create_driver_license(employee_id: int, data: dict):
    response = get_api_client().post(f"/api/employees/licencia/{employee_id}", json=data)
    return handle_api_response(response, "Error al crear licencia de conducir")


@server_action("Error al actualizar licencia de conducir del empleado")
def update_driver_license(employee_id: int, data: dict):
    response = get_api_client().put(f"/api/employees/licencia/update/{employee_id}", json=data)
    return handle_api_response(response, "Error al actualizar licencia de conducir")


@server_action("Error al obtener listado de licencias de conducir")
def get_driver_licenses(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""):
    response = get_api_client().get(
        "/api/employees/licencias", params=page_params(page, limit, search)
    )
    return handle_api_response(response, "Error al obtener licencias de conducir")


@server_action("Error al obtener licencias próximas a vencer")
def get_licenses_to_expire(
    dias: int = 30, page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""
):
    response = get_api_client().get(
        "/api/employees/licencias/por-vencer",
        params=page_params(page, limit, search, dias=dias),
    )
    return handle_api_response(response, "Error al obtener licencias próximas a vencer")


# Employee leaves


@server_action("Error al obtener licencias de empleados")
def get_employee_leaves(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = ""):
    response = get_api_client().get(LEAVES_PATH, params=page_params(page, limit, search))
    return handle_api_response(response, "Error al obtener licencias de empleados")


@server_action("Error al obtener la licencia")
def get_employee_leave_by_id(leave_id: int):
    response = get_api_client().get(f"{LEAVES_PATH}/{leave_id}")
    return handle_api_response(response, "Error al obtener la licencia")


@server_action("Error al obtener licencias del empleado")
def get_leaves_by_employee(employee_id: int):
    response = get_api_client().get(f"{LEAVES_PATH}/employee/{employee_id}")
    return handle_api_response(response, "Error al obtener licencias del empleado")


@server_action("Error al crear la licencia")
def create_employee_leave(data: dict):
    response = get_api_client().post(LEAVES_PATH, json=data)
    return handle_api_response(response, "Error al crear la licencia")


@server_action("Error al actualizar la licencia")
def update_employee_leave(leave_id: int, data: dict):
    response = get_api_client().patch(f"{LEAVES_PATH}/{leave_id}", json=data)
    return handle_api_response(response, "Error al actualizar la licencia")


@server_action("Error al aprobar la licencia")
def approve_employee_leave(leave_id: int):
    response = get_api_client().patch(f"{LEAVES_PATH}/{leave_id}/approve")
    return handle_api_response(response, "Error al aprobar la licencia")


@server_action("Error al rechazar la licencia")
def reject_employee_leave(leave_id: int):
    response = get_api_client().patch(f"{LEAVES_PATH}/{leave_id}/reject")
    return handle_api_response(response, "Error al rechazar la licencia")


@server_action("Error al eliminar la licencia")
def delete_employee_leave(leave_id: int):
    response = get_api_client().delete(f"{LEAVES_PATH}/{leave_id}")
    return handle_api_response(response, "Error al eliminar la licencia")
