"""
Baños químicos y su mantenimiento.
"""

from flask import Blueprint, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import sanitarios
from sanitarios_dashboard.utils.views import (
    Column,
    FormField,
    enum_options,
    fetch,
    fetch_listing,
    parse_form,
    run_action,
)
from sanitarios_shared.constants import ToiletState
from sanitarios_shared.schemas import ToiletForm, ToiletMaintenanceForm
from sanitarios_shared.serializers import extract_items

sanitarios_bp = Blueprint("sanitarios", __name__, url_prefix="/sanitarios")

TOILET_FIELDS = [
    FormField("codigo_interno", "Código interno"),
    FormField("modelo", "Modelo"),
    FormField("fecha_adquisicion", "Fecha de adquisición", "date"),
    FormField("estado", "Estado", "select", enum_options(ToiletState)),
]

TOILET_COLUMNS = [
    Column("codigo_interno", "Código"),
    Column("modelo", "Modelo"),
    Column("fecha_adquisicion", "Adquisición"),
    Column("estado", "Estado"),
]

MAINTENANCE_COLUMNS = [
    Column("baño_id", "Baño"),
    Column("fecha_mantenimiento", "Fecha"),
    Column("tipo_mantenimiento", "Tipo"),
    Column("descripcion", "Descripción"),
    Column("costo", "Costo"),
    Column("completado", "Completado"),
]

SERVICE_COLUMNS = [
    Column("id", "Servicio"),
    Column("fechaProgramada", "Fecha"),
    Column("tipoServicio", "Tipo"),
    Column("estado", "Estado"),
]


def _maintenance_fields() -> list[FormField]:
    toilets = extract_items(fetch(sanitarios.get_toilets_list, default=[]))
    toilet_options = [
        (str(t.get("baño_id")), f"{t.get('codigo_interno', '')} ({t.get('estado', '')})")
        for t in toilets
    ]
    return [
        FormField("baño_id", "Baño", "select", toilet_options),
        FormField("fecha_mantenimiento", "Fecha", "date"),
        FormField(
            "tipo_mantenimiento",
            "Tipo",
            "select",
            [("Preventivo", "Preventivo"), ("Correctivo", "Correctivo")],
        ),
        FormField("descripcion", "Descripción", "textarea"),
        FormField("empleado_id", "Técnico responsable", "number"),
        FormField("costo", "Costo", "number"),
    ]


def _listado_url() -> str:
    return url_for(f"{request.blueprints[-1]}.sanitarios.listado")


def _maintenance_url() -> str:
    return url_for(f"{request.blueprints[-1]}.sanitarios.mantenimientos")


@sanitarios_bp.get("")
def listado():
    return render_template(
        "listado.html",
        title="Baños químicos",
        columns=TOILET_COLUMNS,
        listing=fetch_listing(sanitarios.get_toilets),
        row_key="baño_id",
        create_endpoint=".sanitarios.crear",
        row_actions=[
            {"label": "Servicios", "endpoint": ".sanitarios.servicios", "arg": "toilet_id"},
            {"label": "Editar", "endpoint": ".sanitarios.editar", "arg": "toilet_id"},
            {
                "label": "Eliminar",
                "endpoint": ".sanitarios.eliminar",
                "arg": "toilet_id",
                "method": "post",
                "confirm": "¿Eliminar el baño?",
            },
        ],
    )


@sanitarios_bp.route("/crear", methods=["GET", "POST"])
def crear():
    if request.method == "POST":
        form = parse_form(ToiletForm)
        if form is not None and run_action(
            sanitarios.create_toilet,
            form.to_payload(),
            success="Baño creado correctamente",
            audit="CREATE_TOILET",
            audit_details=form.codigo_interno,
        ):
            return redirect(_listado_url())
    return render_template(
        "form.html",
        title="Nuevo baño",
        fields=TOILET_FIELDS,
        values=request.form,
        cancel_endpoint=".sanitarios.listado",
    )


@sanitarios_bp.route("/<int:toilet_id>/editar", methods=["GET", "POST"])
def editar(toilet_id: int):
    if request.method == "POST":
        form = parse_form(ToiletForm)
        if form is not None and run_action(
            sanitarios.edit_toilet,
            toilet_id,
            form.to_payload(),
            success="Baño actualizado correctamente",
        ):
            return redirect(_listado_url())
        values = request.form
    else:
        values = fetch(sanitarios.get_toilet_by_id, toilet_id, default={})
    return render_template(
        "form.html",
        title="Editar baño",
        fields=TOILET_FIELDS,
        values=values,
        cancel_endpoint=".sanitarios.listado",
    )


@sanitarios_bp.post("/<int:toilet_id>/eliminar")
def eliminar(toilet_id: int):
    run_action(
        sanitarios.delete_toilet,
        toilet_id,
        success="Baño eliminado correctamente",
        audit="DELETE_TOILET",
        audit_details=str(toilet_id),
    )
    return redirect(_listado_url())


@sanitarios_bp.get("/<int:toilet_id>/servicios")
def servicios(toilet_id: int):
    rows = extract_items(fetch(sanitarios.get_toilet_services, toilet_id, default=[]))
    return render_template(
        "listado.html",
        title=f"Servicios del baño {toilet_id}",
        columns=SERVICE_COLUMNS,
        rows=rows,
        row_actions=[{"label": "Ver", "endpoint": ".servicios.detalle", "arg": "service_id"}],
    )


# Maintenance


@sanitarios_bp.get("/mantenimientos")
def mantenimientos():
    return render_template(
        "listado.html",
        title="Mantenimiento de baños",
        columns=MAINTENANCE_COLUMNS,
        listing=fetch_listing(sanitarios.get_toilet_maintenances),
        row_key="mantenimiento_id",
        create_endpoint=".sanitarios.crear_mantenimiento",
        row_actions=[
            {
                "label": "Editar",
                "endpoint": ".sanitarios.editar_mantenimiento",
                "arg": "maintenance_id",
            },
            {
                "label": "Completar",
                "endpoint": ".sanitarios.completar_mantenimiento",
                "arg": "maintenance_id",
                "method": "post",
            },
            {
                "label": "Eliminar",
                "endpoint": ".sanitarios.eliminar_mantenimiento",
                "arg": "maintenance_id",
                "method": "post",
                "confirm": "¿Eliminar el mantenimiento?",
            },
        ],
    )


@sanitarios_bp.route("/mantenimientos/crear", methods=["GET", "POST"])
def crear_mantenimiento():
    if request.method == "POST":
        form = parse_form(ToiletMaintenanceForm)
        if form is not None and run_action(
            sanitarios.create_toilet_maintenance,
            form.to_payload(),
            success="Mantenimiento programado correctamente",
            audit="CREATE_TOILET_MAINTENANCE",
            audit_details=str(form.baño_id),
        ):
            return redirect(_maintenance_url())
        values = request.form
    else:
        values = {"baño_id": request.args.get("bano", "")}
    return render_template(
        "form.html",
        title="Programar mantenimiento",
        fields=_maintenance_fields(),
        values=values,
        cancel_endpoint=".sanitarios.mantenimientos",
    )


@sanitarios_bp.route("/mantenimientos/<int:maintenance_id>/editar", methods=["GET", "POST"])
def editar_mantenimiento(maintenance_id: int):
    if request.method == "POST":
        form = parse_form(ToiletMaintenanceForm)
        if form is not None and run_action(
            sanitarios.edit_toilet_maintenance,
            maintenance_id,
            form.to_payload(),
            success="Mantenimiento actualizado correctamente",
        ):
            return redirect(_maintenance_url())
        values = request.form
    else:
        # No get-by-id endpoint for toilet maintenance; the form starts empty
        values = {}
    return render_template(
        "form.html",
        title="Editar mantenimiento",
        fields=_maintenance_fields(),
        values=values,
        cancel_endpoint=".sanitarios.mantenimientos",
    )


@sanitarios_bp.post("/mantenimientos/<int:maintenance_id>/completar")
def completar_mantenimiento(maintenance_id: int):
    run_action(
        sanitarios.complete_toilet_maintenance,
        maintenance_id,
        success="Mantenimiento completado",
    )
    return redirect(_maintenance_url())


@sanitarios_bp.post("/mantenimientos/<int:maintenance_id>/eliminar")
def eliminar_mantenimiento(maintenance_id: int):
    run_action(
        sanitarios.delete_toilet_maintenance,
        maintenance_id,
        success="Mantenimiento eliminado correctamente",
    )
    return redirect(_maintenance_url())
