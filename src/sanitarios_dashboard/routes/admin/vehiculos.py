"""
Vehículos y su mantenimiento.

The maintenance form of a vehicle is addressed by the vehicle id in the
URL (``/vehiculos/<id>/mantenimiento/programar``).
"""

from flask import Blueprint, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import mantenimiento_vehiculos, vehiculos
from sanitarios_dashboard.utils.views import (
    Column,
    FormField,
    back_url,
    enum_options,
    fetch,
    fetch_listing,
    flash_partial,
    parse_form,
    run_action,
)
from sanitarios_shared.api_client import gather_settled
from sanitarios_shared.constants import VehicleState
from sanitarios_shared.schemas import VehicleForm, VehicleMaintenanceForm
from sanitarios_shared.serializers import extract_items

vehiculos_bp = Blueprint("vehiculos", __name__, url_prefix="/vehiculos")

VEHICLE_FIELDS = [
    FormField("placa", "Placa"),
    FormField("marca", "Marca"),
    FormField("modelo", "Modelo"),
    FormField("anio", "Año", "number"),
    FormField("capacidadCarga", "Capacidad de carga", "number"),
    FormField("estado", "Estado", "select", enum_options(VehicleState)),
]

VEHICLE_COLUMNS = [
    Column("placa", "Placa"),
    Column("marca", "Marca"),
    Column("modelo", "Modelo"),
    Column("anio", "Año"),
    Column("capacidadCarga", "Capacidad"),
    Column("estado", "Estado"),
]

MAINTENANCE_TYPES = [("Preventivo", "Preventivo"), ("Correctivo", "Correctivo")]

MAINTENANCE_FIELDS = [
    FormField("vehiculoId", "Vehículo", "number"),
    FormField("fechaMantenimiento", "Fecha de mantenimiento", "date"),
    FormField("tipoMantenimiento", "Tipo", "select", MAINTENANCE_TYPES),
    FormField("descripcion", "Descripción", "textarea"),
    FormField("costo", "Costo", "number"),
    FormField("proximoMantenimiento", "Próximo mantenimiento", "date", required=False),
]

MAINTENANCE_COLUMNS = [
    Column("vehiculoId", "Vehículo"),
    Column("fechaMantenimiento", "Fecha"),
    Column("tipoMantenimiento", "Tipo"),
    Column("descripcion", "Descripción"),
    Column("costo", "Costo"),
    Column("completado", "Completado"),
]


def _listado_url() -> str:
    return url_for(f"{request.blueprints[-1]}.vehiculos.listado")


def _maintenance_url() -> str:
    return url_for(f"{request.blueprints[-1]}.vehiculos.mantenimientos")


@vehiculos_bp.get("")
def listado():
    return render_template(
        "listado.html",
        title="Vehículos",
        columns=VEHICLE_COLUMNS,
        listing=fetch_listing(vehiculos.get_vehicles),
        create_endpoint=".vehiculos.crear",
        row_actions=[
            {"label": "Historial", "endpoint": ".vehiculos.detalle", "arg": "vehicle_id"},
            {"label": "Editar", "endpoint": ".vehiculos.editar", "arg": "vehicle_id"},
            {
                "label": "Mantenimiento",
                "endpoint": ".vehiculos.programar_mantenimiento",
                "arg": "vehicle_id",
            },
            {
                "label": "Eliminar",
                "endpoint": ".vehiculos.eliminar",
                "arg": "vehicle_id",
                "method": "post",
                "confirm": "¿Eliminar el vehículo?",
            },
        ],
        status_change={
            "endpoint": ".vehiculos.cambiar_estado",
            "arg": "vehicle_id",
            "options": enum_options(VehicleState),
        },
    )


@vehiculos_bp.get("/buscar")
def buscar():
    placa = request.args.get("placa", "").strip().upper()
    vehicle = fetch(vehiculos.get_vehicle_by_placa, placa) if placa else None
    if vehicle and vehicle.get("id"):
        return redirect(
            url_for(f"{request.blueprints[-1]}.vehiculos.detalle", vehicle_id=vehicle["id"])
        )
    return redirect(url_for(f"{request.blueprints[-1]}.vehiculos.listado", search=placa))


@vehiculos_bp.route("/crear", methods=["GET", "POST"])
def crear():
    if request.method == "POST":
        form = parse_form(VehicleForm)
        if form is not None and run_action(
            vehiculos.create_vehicle,
            form.to_payload(),
            success="Vehículo creado correctamente",
            audit="CREATE_VEHICLE",
            audit_details=form.placa,
        ):
            return redirect(_listado_url())
    return render_template(
        "form.html",
        title="Nuevo vehículo",
        fields=VEHICLE_FIELDS,
        values=request.form,
        cancel_endpoint=".vehiculos.listado",
    )


@vehiculos_bp.route("/<int:vehicle_id>/editar", methods=["GET", "POST"])
def editar(vehicle_id: int):
    if request.method == "POST":
        form = parse_form(VehicleForm)
        if form is not None and run_action(
            vehiculos.edit_vehicle,
            vehicle_id,
            form.to_payload(),
            success="Vehículo actualizado correctamente",
        ):
            return redirect(_listado_url())
        values = request.form
    else:
        values = fetch(vehiculos.get_vehicle_by_id, vehicle_id, default={})
    return render_template(
        "form.html",
        title="Editar vehículo",
        fields=VEHICLE_FIELDS,
        values=values,
        cancel_endpoint=".vehiculos.listado",
    )


@vehiculos_bp.post("/<int:vehicle_id>/eliminar")
def eliminar(vehicle_id: int):
    run_action(
        vehiculos.delete_vehicle,
        vehicle_id,
        success="Vehículo eliminado correctamente",
        audit="DELETE_VEHICLE",
        audit_details=str(vehicle_id),
    )
    return redirect(_listado_url())


@vehiculos_bp.post("/<int:vehicle_id>/estado")
def cambiar_estado(vehicle_id: int):
    estado = request.form.get("estado", "")
    if estado in {s.value for s in VehicleState}:
        run_action(
            vehiculos.change_vehicle_status,
            vehicle_id,
            estado,
            success="Estado del vehículo actualizado",
        )
    return redirect(back_url(_listado_url()))


@vehiculos_bp.get("/<int:vehicle_id>")
def detalle(vehicle_id: int):
    vehicle, history = gather_settled(
        lambda: vehiculos.get_vehicle_by_id(vehicle_id),
        lambda: mantenimiento_vehiculos.get_maintenances_by_vehicle(vehicle_id),
    )
    flash_partial([vehicle, history])
    if not vehicle.ok:
        return redirect(_listado_url())
    return render_template(
        "admin/vehiculo_detalle.html",
        vehicle=vehicle.value,
        maintenances=extract_items(history.value) if history.ok else [],
        maintenance_columns=MAINTENANCE_COLUMNS,
    )


# Maintenance


@vehiculos_bp.get("/mantenimientos")
def mantenimientos():
    upcoming = request.args.get("proximos") == "1"
    if upcoming:
        rows = extract_items(fetch(mantenimiento_vehiculos.get_upcoming_maintenances, default=[]))
        listing = None
    else:
        rows = None
        listing = fetch_listing(mantenimiento_vehiculos.get_vehicle_maintenances)
    return render_template(
        "listado.html",
        title="Mantenimientos programados" if upcoming else "Mantenimiento de vehículos",
        columns=MAINTENANCE_COLUMNS,
        listing=listing,
        rows=rows,
        create_endpoint=".vehiculos.crear_mantenimiento",
        row_actions=[
            {"label": "Editar", "endpoint": ".vehiculos.editar_mantenimiento", "arg": "maintenance_id"},
            {
                "label": "Completar",
                "endpoint": ".vehiculos.completar_mantenimiento",
                "arg": "maintenance_id",
                "method": "post",
            },
            {
                "label": "Eliminar",
                "endpoint": ".vehiculos.eliminar_mantenimiento",
                "arg": "maintenance_id",
                "method": "post",
                "confirm": "¿Eliminar el mantenimiento?",
            },
        ],
    )


def _save_maintenance(title: str, vehicle_id: int | None = None):
    values = request.form if request.method == "POST" else {"vehiculoId": vehicle_id or ""}
    if request.method == "POST":
        form = parse_form(VehicleMaintenanceForm)
        if form is not None and run_action(
            mantenimiento_vehiculos.create_vehicle_maintenance,
            form.to_payload(),
            success="Mantenimiento programado correctamente",
            audit="CREATE_VEHICLE_MAINTENANCE",
            audit_details=str(form.vehiculoId),
        ):
            return redirect(_maintenance_url())
    return render_template(
        "form.html",
        title=title,
        fields=MAINTENANCE_FIELDS,
        values=values,
        cancel_endpoint=".vehiculos.mantenimientos",
    )


@vehiculos_bp.route("/mantenimientos/crear", methods=["GET", "POST"])
def crear_mantenimiento():
    return _save_maintenance("Programar mantenimiento")


@vehiculos_bp.route("/<int:vehicle_id>/mantenimiento/programar", methods=["GET", "POST"])
def programar_mantenimiento(vehicle_id: int):
    return _save_maintenance("Programar mantenimiento del vehículo", vehicle_id)


@vehiculos_bp.route("/mantenimientos/<int:maintenance_id>/editar", methods=["GET", "POST"])
def editar_mantenimiento(maintenance_id: int):
    if request.method == "POST":
        form = parse_form(VehicleMaintenanceForm)
        if form is not None and run_action(
            mantenimiento_vehiculos.edit_vehicle_maintenance,
            maintenance_id,
            form.to_payload(),
            success="Mantenimiento actualizado correctamente",
        ):
            return redirect(_maintenance_url())
        values = request.form
    else:
        values = fetch(
            mantenimiento_vehiculos.get_vehicle_maintenance_by_id, maintenance_id, default={}
        )
    return render_template(
        "form.html",
        title="Editar mantenimiento",
        fields=MAINTENANCE_FIELDS,
        values=values,
        cancel_endpoint=".vehiculos.mantenimientos",
    )


@vehiculos_bp.post("/mantenimientos/<int:maintenance_id>/completar")
def completar_mantenimiento(maintenance_id: int):
    run_action(
        mantenimiento_vehiculos.complete_vehicle_maintenance,
        maintenance_id,
        success="Mantenimiento completado",
    )
    return redirect(back_url(_maintenance_url()))


@vehiculos_bp.post("/mantenimientos/<int:maintenance_id>/eliminar")
def eliminar_mantenimiento(maintenance_id: int):
    run_action(
        mantenimiento_vehiculos.delete_vehicle_maintenance,
        maintenance_id,
        success="Mantenimiento eliminado correctamente",
    )
    return redirect(_maintenance_url())
