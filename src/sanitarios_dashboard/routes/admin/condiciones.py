"""
Condiciones contractuales - tariffs and terms agreed with each client.
"""

from flask import Blueprint, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import clientes, condiciones_contractuales
from sanitarios_dashboard.utils.views import (
    Column,
    FormField,
    enum_options,
    fetch,
    fetch_listing,
    parse_form,
    run_action,
)
from sanitarios_shared.constants import ConditionState, Periodicity
from sanitarios_shared.schemas import ContractualConditionForm
from sanitarios_shared.serializers import extract_items

condiciones_bp = Blueprint("condiciones", __name__, url_prefix="/condiciones-contractuales")

CONTRACT_TYPES = [("Permanente", "Permanente"), ("Temporal", "Temporal"), ("Por Evento", "Por evento")]

CONDITION_COLUMNS = [
    Column("clientId", "Cliente"),
    Column("tipo_de_contrato", "Contrato"),
    Column("fecha_inicio", "Inicio"),
    Column("fecha_fin", "Fin"),
    Column("tarifa", "Tarifa"),
    Column("periodicidad", "Periodicidad"),
    Column("estado", "Estado"),
]


def _fields() -> list[FormField]:
    """The client select is filled from the backend on every render."""
    client_rows = extract_items(fetch(clientes.get_clients, 1, 100, default=[]))
    client_options = [
        (str(c.get("clienteId") or c.get("id")), c.get("nombre", "")) for c in client_rows
    ]
    return [
        FormField("clientId", "Cliente", "select", client_options),
        FormField("tipo_de_contrato", "Tipo de contrato", "select", CONTRACT_TYPES),
        FormField("tipo_servicio", "Tipo de servicio", required=False),
        FormField("fecha_inicio", "Fecha de inicio", "date"),
        FormField("fecha_fin", "Fecha de fin", "date", required=False),
        FormField("condiciones_especificas", "Condiciones específicas", "textarea", required=False),
        FormField("tarifa", "Tarifa", "number"),
        FormField("periodicidad", "Periodicidad", "select", enum_options(Periodicity)),
        FormField("estado", "Estado", "select", enum_options(ConditionState)),
    ]


def _listado_url() -> str:
    return url_for(f"{request.blueprints[-1]}.condiciones.listado")


@condiciones_bp.get("")
def listado():
    return render_template(
        "listado.html",
        title="Condiciones contractuales",
        columns=CONDITION_COLUMNS,
        listing=fetch_listing(condiciones_contractuales.get_all_contractual_conditions),
        row_key="condicionContractualId",
        create_endpoint=".condiciones.crear",
        row_actions=[
            {"label": "Editar", "endpoint": ".condiciones.editar", "arg": "condition_id"},
            {
                "label": "Eliminar",
                "endpoint": ".condiciones.eliminar",
                "arg": "condition_id",
                "method": "post",
                "confirm": "¿Eliminar la condición contractual?",
            },
        ],
    )


@condiciones_bp.route("/crear", methods=["GET", "POST"])
def crear():
    if request.method == "POST":
        form = parse_form(ContractualConditionForm)
        if form is not None and run_action(
            condiciones_contractuales.create_contractual_condition,
            form.to_payload(),
            success="Condición contractual creada correctamente",
            audit="CREATE_CONTRACTUAL_CONDITION",
            audit_details=str(form.clientId),
        ):
            return redirect(_listado_url())
    values = request.form if request.method == "POST" else {"clientId": request.args.get("cliente", "")}
    return render_template(
        "form.html",
        title="Nueva condición contractual",
        fields=_fields(),
        values=values,
        cancel_endpoint=".condiciones.listado",
    )


@condiciones_bp.route("/<int:condition_id>/editar", methods=["GET", "POST"])
def editar(condition_id: int):
    if request.method == "POST":
        form = parse_form(ContractualConditionForm)
        if form is not None and run_action(
            condiciones_contractuales.update_contractual_condition,
            condition_id,
            form.to_payload(),
            success="Condición contractual actualizada correctamente",
        ):
            return redirect(_listado_url())
        values = request.form
    else:
        values = fetch(
            condiciones_contractuales.get_contractual_condition_by_id, condition_id, default={}
        )
    return render_template(
        "form.html",
        title="Editar condición contractual",
        fields=_fields(),
        values=values,
        cancel_endpoint=".condiciones.listado",
    )


@condiciones_bp.post("/<int:condition_id>/eliminar")
def eliminar(condition_id: int):
    run_action(
        condiciones_contractuales.delete_contractual_condition,
        condition_id,
        success="Condición contractual eliminada correctamente",
    )
    return redirect(_listado_url())
