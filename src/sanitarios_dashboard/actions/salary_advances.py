"""
Adelantos de salario - requested by operarios, approved or rejected by admins.
"""

from sanitarios_shared.api_client import get_api_client, handle_api_response, server_action
from sanitarios_shared.constants import AdvanceStatus

BASE_PATH = "/api/salary-advances"


@server_action("Error al solicitar el adelanto de salario", {"endpoint": BASE_PATH, "method": "POST"})
def create_advance(data: dict):
    response = get_api_client().post(BASE_PATH, json=data)
    return handle_api_response(
        response,
        "Error al solicitar el adelanto de salario",
        {"endpoint": BASE_PATH, "method": "POST"},
    )


@server_action("Error al obtener los adelantos de salario")
def get_all_advances(status: str | None = None, page: int | None = None, limit: int | None = None):
    """Listado para administradores; ``status="all"`` no filtra."""
    params = {"page": page, "limit": limit}
    if status and status != "all":
        params["status"] = status
    response = get_api_client().get(BASE_PATH, params=params)
    return handle_api_response(response, "Error al obtener los adelantos de salario")


@server_action("Error al obtener tus adelantos de salario")
def get_my_advances():
    response = get_api_client().get(f"{BASE_PATH}/employee")
    return handle_api_response(response, "Error al obtener tus adelantos de salario")


def _set_status(advance_id: int, status: AdvanceStatus, default_message: str):
    response = get_api_client().patch(
        f"{BASE_PATH}/update/{advance_id}", json={"status": status.value}
    )
    return handle_api_response(response, default_message)


@server_action("Error al aprobar el adelanto de salario")
def approve_advance(advance_id: int):
    return _set_status(advance_id, AdvanceStatus.APPROVED, "Error al aprobar el adelanto de salario")


@server_action("Error al rechazar el adelanto de salario")
def reject_advance(advance_id: int):
    return _set_status(advance_id, AdvanceStatus.REJECTED, "Error al rechazar el adelanto de salario")


@server_action("Error al obtener el adelanto de salario")
def get_advance(advance_id: int):
    response = get_api_client().get(f"{BASE_PATH}/{advance_id}")
    return handle_api_response(response, "Error al obtener el adelanto de salario")


@server_action("Error al eliminar el adelanto de salario")
def delete_advance(advance_id: int):
    response = get_api_client().delete(f"{BASE_PATH}/{advance_id}")
    return handle_api_response(response, "Error al eliminar el adelanto de salario")
