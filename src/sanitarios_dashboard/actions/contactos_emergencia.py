from sanitarios_shared.api_client import get_api_client, handle_api_response, server_action

BASE_PATH = "/api/employees/emergency"


@server_action("Error al obtener los contactos del empleado")
def get_emergency_contacts(employee_id: int):
    response = get_api_client().get(f"{BASE_PATH}/{employee_id}")
    return handle_api_response(
        response, f"Error al obtener los contactos del empleado {employee_id}"
    )


@server_action("Error al crear el contacto de emergencia")
def create_emergency_contact(employee_id: int, data: dict):
    response = get_api_client().post(f"{BASE_PATH}/{employee_id}", json=data)
    return handle_api_response(response, "Error al crear el contacto de emergencia")


@server_action("Error al actualizar el contacto de emergencia")
def update_emergency_contact(contact_id: int, data: dict):
    response = get_api_client().put(f"{BASE_PATH}/modify/{contact_id}", json=data)
    return handle_api_response(response, "Error al actualizar el contacto de emergencia")


@server_action("Error al eliminar el contacto de emergencia")
def delete_emergency_contact(contact_id: int):
    response = get_api_client().delete(f"{BASE_PATH}/delete/{contact_id}")
    return handle_api_response(response, "Error al eliminar el contacto de emergencia")
