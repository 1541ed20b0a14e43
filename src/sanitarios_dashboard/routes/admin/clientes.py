from flask import Blueprint, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import clientes, condiciones_contractuales, sanitarios
from sanitarios_dashboard.utils.views import (
    Column,
    FormField,
    enum_options,
    fetch,
    fetch_listing,
    flash_partial,
    parse_form,
    run_action,
)
from sanitarios_shared.api_client import gather_settled
from sanitarios_shared.constants import ClientState
from sanitarios_shared.schemas import ClientForm
from sanitarios_shared.serializers import extract_items

clientes_bp = Blueprint("clientes", __name__, url_prefix="/clientes")

CLIENT_FIELDS = [
    FormField("nombre", "Nombre"),
    FormField("cuit", "CUIT", help_text="XX-XXXXXXXX-X o 11 dígitos"),
    FormField("direccion", "Dirección"),
    FormField("telefono", "Teléfono", "tel"),
    FormField("email", "Email", "email"),
    FormField("contacto_principal", "Contacto principal"),
    FormField("contacto_principal_telefono", "Teléfono del contacto principal", "tel", required=False),
    FormField("contactoObra1", "Contacto de obra 1", required=False),
    FormField("contacto_obra1_telefono", "Teléfono contacto de obra 1", "tel", required=False),
    FormField("contactoObra2", "Contacto de obra 2", required=False),
    FormField("contacto_obra2_telefono", "Teléfono contacto de obra 2", "tel", required=False),
    FormField("estado", "Estado", "select", enum_options(ClientState)),
]

CLIENT_COLUMNS = [
    Column("nombre", "Nombre"),
    Column("cuit", "CUIT"),
    Column("email", "Email"),
    Column("telefono", "Teléfono"),
    Column("contacto_principal", "Contacto"),
    Column("estado", "Estado"),
]


def _listado_url() -> str:
    return url_for(f"{request.blueprints[-1]}.clientes.listado")


@clientes_bp.get("")
def listado():
    return render_template(
        "listado.html",
        title="Clientes",
        columns=CLIENT_COLUMNS,
        listing=fetch_listing(clientes.get_clients),
        row_key="clienteId",
        create_endpoint=".clientes.crear",
        row_actions=[
            {"label": "Ficha", "endpoint": ".clientes.detalle", "arg": "client_id"},
            {"label": "Editar", "endpoint": ".clientes.editar", "arg": "client_id"},
            {
                "label": "Eliminar",
                "endpoint": ".clientes.eliminar",
                "arg": "client_id",
                "method": "post",
                "confirm": "¿Eliminar el cliente?",
            },
        ],
    )


@clientes_bp.route("/crear", methods=["GET", "POST"])
def crear():
    if request.method == "POST":
        form = parse_form(ClientForm)
        if form is not None and run_action(
            clientes.create_client,
            form.to_payload(),
            success="Cliente creado correctamente",
            audit="CREATE_CLIENT",
            audit_details=form.cuit,
        ):
            return redirect(_listado_url())
    return render_template(
        "form.html",
        title="Nuevo cliente",
        fields=CLIENT_FIELDS,
        values=request.form,
        cancel_endpoint=".clientes.listado",
    )


@clientes_bp.route("/<int:client_id>/editar", methods=["GET", "POST"])
def editar(client_id: int):
    if request.method == "POST":
        form = parse_form(ClientForm)
        if form is not None and run_action(
            clientes.edit_client,
            client_id,
            form.to_payload(),
            success="Cliente actualizado correctamente",
        ):
            return redirect(_listado_url())
        values = request.form
    else:
        values = fetch(clientes.get_client_by_id, client_id, default={})
    return render_template(
        "form.html",
        title="Editar cliente",
        fields=CLIENT_FIELDS,
        values=values,
        cancel_endpoint=".clientes.listado",
    )


@clientes_bp.post("/<int:client_id>/eliminar")
def eliminar(client_id: int):
    run_action(
        clientes.delete_client,
        client_id,
        success="Cliente eliminado correctamente",
        audit="DELETE_CLIENT",
        audit_details=str(client_id),
    )
    return redirect(_listado_url())


@clientes_bp.get("/<int:client_id>")
def detalle(client_id: int):
    """Cliente con sus condiciones contractuales y baños instalados."""
    results = gather_settled(
        lambda: clientes.get_client_by_id(client_id),
        lambda: condiciones_contractuales.get_contractual_conditions_by_client(client_id),
        lambda: sanitarios.get_toilets_by_client(client_id),
    )
    flash_partial(results)
    client, conditions, toilets = results
    if not client.ok:
        return redirect(_listado_url())
    return render_template(
        "admin/cliente_detalle.html",
        client=client.value,
        conditions=extract_items(conditions.value) if conditions.ok else [],
        toilets=extract_items(toilets.value) if toilets.ok else [],
    )
