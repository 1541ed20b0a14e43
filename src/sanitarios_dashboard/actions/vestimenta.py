"""
Vestimenta - clothing sizes of employees.
"""

from dataclasses import dataclass

from sanitarios_shared.api_client import get_api_client, handle_api_response, server_action
from sanitarios_shared.serializers import extract_items, extract_total

BASE_PATH = "/api/clothing"


@dataclass
class ClothingPage:
    data: list
    total: int
    page: int
    items_per_page: int


@server_action("Error al obtener los talles de empleados")
def get_employee_sizes(page: int = 1, items_per_page: int = 10) -> ClothingPage:
    """
    Talles de todos los empleados.

    The backend answers with a bare list, ``{data, totalItems, currentPage,
    itemsPerPage}`` or ``{items, total, page, limit}``; all three are
    normalized to ``ClothingPage``.
    """
    response = get_api_client().get(BASE_PATH, params={"page": page, "limit": items_per_page})
    payload = handle_api_response(response, "Error al obtener los talles de empleados")

    if isinstance(payload, list):
        return ClothingPage(data=payload, total=len(payload), page=1, items_per_page=len(payload))

    rows = extract_items(payload, "data", "items")
    if isinstance(payload, dict):
        return ClothingPage(
            data=rows,
            total=extract_total(payload) or len(rows),
            page=payload.get("currentPage") or payload.get("page") or page,
            items_per_page=payload.get("itemsPerPage") or payload.get("limit") or items_per_page,
        )
    return ClothingPage(data=[], total=0, page=page, items_per_page=items_per_page)


@server_action("Error al obtener los talles del empleado")
def get_sizes_by_employee(employee_id: int):
    response = get_api_client().get(f"{BASE_PATH}/{employee_id}")
    return handle_api_response(response, f"Error al obtener los talles del empleado {employee_id}")


@server_action("Error al crear los talles del empleado")
def create_sizes(employee_id: int, data: dict):
    response = get_api_client().post(f"{BASE_PATH}/create/{employee_id}", json=data)
    return handle_api_response(response, f"Error al crear los talles del empleado {employee_id}")


@server_action("Error al actualizar los talles del empleado")
def update_sizes(employee_id: int, data: dict):
    response = get_api_client().put(f"{BASE_PATH}/modify/{employee_id}", json=data)
    return handle_api_response(
        response, f"Error al actualizar los talles del empleado {employee_id}"
    )


@server_action("Error al eliminar los talles del empleado")
def delete_sizes(employee_id: int):
    response = get_api_client().delete(f"{BASE_PATH}/delete/{employee_id}")
    return handle_api_response(response, f"Error al eliminar los talles del empleado {employee_id}")


@server_action("Error al exportar los talles a Excel")
def export_sizes() -> tuple[bytes, str]:
    """Spreadsheet bytes and content type, streamed back as a download."""
    response = get_api_client().get(f"{BASE_PATH}/export")
    if not response.ok:
        handle_api_response(response, "Error al exportar los talles a Excel")
    content_type = response.headers.get(
        "Content-Type", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    return response.content, content_type
