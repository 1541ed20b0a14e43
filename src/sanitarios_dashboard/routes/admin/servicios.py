"""
Servicios - programación de servicios a clientes.

The create form posts either automatic assignment, where the backend
picks the resources, or a table of manual assignment rows sent as
parallel lists (``asig_empleadoId``, ``asig_vehiculoId``, ``asig_banosIds``).
"""

from flask import Blueprint, flash, jsonify, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import clientes, servicios
from sanitarios_dashboard.utils.views import (
    Column,
    FormField,
    back_url,
    enum_options,
    fetch,
    fetch_listing,
    parse_form,
    parse_id_list,
    run_action,
)
from sanitarios_shared.audit_middleware import audit_action
from sanitarios_shared.constants import ServiceState, ServiceType
from sanitarios_shared.errors import ApiError, MissingTokenError, SessionExpiredError
from sanitarios_shared.schemas import ServiceForm
from sanitarios_shared.serializers import error_response, extract_items, success_response
from sanitarios_shared.validation import ValidationError, validate_date_range

servicios_bp = Blueprint("servicios", __name__, url_prefix="/servicios")

ASSIGNMENT_MODES = [("true", "Automática"), ("false", "Manual")]

SERVICE_COLUMNS = [
    Column("id", "N°"),
    Column("clienteId", "Cliente"),
    Column("fechaProgramada", "Fecha"),
    Column("tipoServicio", "Tipo"),
    Column("ubicacion", "Ubicación"),
    Column("estado", "Estado"),
]

# Rows of the manual assignment table rendered under the form
MANUAL_ROWS = 3


def _fields() -> list[FormField]:
    client_rows = extract_items(fetch(clientes.get_clients, 1, 100, default=[]))
    client_options = [
        (str(c.get("clienteId") or c.get("id")), c.get("nombre", "")) for c in client_rows
    ]
    return [
        FormField("clienteId", "Cliente", "select", client_options),
        FormField("fechaProgramada", "Fecha programada", "date"),
        FormField("tipoServicio", "Tipo de servicio", "select", enum_options(ServiceType)),
        FormField("ubicacion", "Ubicación"),
        FormField("cantidadBanos", "Cantidad de baños", "number"),
        FormField("cantidadEmpleados", "Cantidad de empleados", "number"),
        FormField("cantidadVehiculos", "Cantidad de vehículos", "number"),
        FormField("condicionContractualId", "Condición contractual", "number", required=False),
        FormField(
            "banosInstalados",
            "Baños instalados",
            required=False,
            help_text="IDs separados por coma; para retiro, limpieza o reemplazo",
        ),
        FormField("notas", "Notas", "textarea", required=False),
        FormField("asignacionAutomatica", "Asignación de recursos", "select", ASSIGNMENT_MODES),
    ]


def _listado_url() -> str:
    return url_for(f"{request.blueprints[-1]}.servicios.listado")


def _manual_assignments() -> list[dict]:
    """Assignment rows of the form; rows without an employee are skipped."""
    rows = zip(
        request.form.getlist("asig_empleadoId"),
        request.form.getlist("asig_vehiculoId"),
        request.form.getlist("asig_banosIds"),
    )
    assignments = []
    for empleado_id, vehiculo_id, banos in rows:
        empleado_id = empleado_id.strip()
        if not empleado_id.isdigit():
            continue
        vehiculo_id = vehiculo_id.strip()
        assignments.append(
            {
                "empleadoId": int(empleado_id),
                "vehiculoId": int(vehiculo_id) if vehiculo_id.isdigit() else None,
                "banosIds": parse_id_list(banos) or None,
            }
        )
    return assignments


def _service_form_data() -> dict:
    data = {
        key: value
        for key, value in request.form.items()
        if key != "csrf_token" and not key.startswith("asig_")
    }
    data["banosInstalados"] = parse_id_list(data.get("banosInstalados")) or None
    data["asignacionesManual"] = _manual_assignments() or None
    return data


def _render_form(title: str, values, service_id: int | None = None):
    return render_template(
        "admin/servicio_form.html",
        title=title,
        fields=_fields(),
        values=values,
        manual_rows=MANUAL_ROWS,
        service_id=service_id,
        cancel_endpoint=".servicios.listado",
    )


@servicios_bp.get("")
def listado():
    filters = {
        "estado": request.args.get("estado", ""),
        "tipoServicio": request.args.get("tipoServicio", ""),
    }
    return render_template(
        "listado.html",
        title="Servicios",
        columns=SERVICE_COLUMNS,
        listing=fetch_listing(servicios.get_services, filters=filters),
        filters=[
            FormField("estado", "Estado", "select", enum_options(ServiceState), required=False),
            FormField(
                "tipoServicio", "Tipo", "select", enum_options(ServiceType), required=False
            ),
        ],
        filter_values=filters,
        create_endpoint=".servicios.crear",
        row_actions=[
            {"label": "Ver", "endpoint": ".servicios.detalle", "arg": "service_id"},
            {"label": "Editar", "endpoint": ".servicios.editar", "arg": "service_id"},
            {
                "label": "Eliminar",
                "endpoint": ".servicios.eliminar",
                "arg": "service_id",
                "method": "post",
                "confirm": "¿Eliminar el servicio?",
            },
        ],
        status_change={
            "endpoint": ".servicios.cambiar_estado",
            "arg": "service_id",
            "options": enum_options(ServiceState),
        },
    )


@servicios_bp.get("/rango")
def rango():
    """Servicios entre dos fechas (``desde`` y ``hasta``)."""
    desde = request.args.get("desde", "")
    hasta = request.args.get("hasta", "")
    rows = []
    if desde and hasta:
        try:
            validate_date_range(desde, hasta)
        except ValidationError as e:
            flash(str(e), "error")
        else:
            rows = extract_items(
                fetch(servicios.get_services_by_date_range, desde, hasta, default=[])
            )
    return render_template(
        "listado.html",
        title="Servicios por rango de fechas",
        columns=SERVICE_COLUMNS,
        rows=rows,
        date_range={"desde": desde, "hasta": hasta},
        row_actions=[{"label": "Ver", "endpoint": ".servicios.detalle", "arg": "service_id"}],
    )


@servicios_bp.route("/crear", methods=["GET", "POST"])
def crear():
    if request.method == "POST":
        form = parse_form(ServiceForm, _service_form_data())
        if form is not None:
            action = (
                servicios.create_service_automatic
                if form.asignacionAutomatica
                else servicios.create_service_manual
            )
            if run_action(
                action,
                form.to_payload(),
                success="Servicio creado correctamente",
                audit="CREATE_SERVICE",
                audit_details=f"cliente={form.clienteId} tipo={form.tipoServicio}",
            ):
                return redirect(_listado_url())
        return _render_form("Nuevo servicio", request.form)
    return _render_form("Nuevo servicio", {"asignacionAutomatica": "true"})


@servicios_bp.route("/<int:service_id>/editar", methods=["GET", "POST"])
def editar(service_id: int):
    if request.method == "POST":
        data = _service_form_data()
        data["asignacionAutomatica"] = "true"
        form = parse_form(ServiceForm, data)
        if form is not None and run_action(
            servicios.update_service,
            service_id,
            form.to_payload(),
            success="Servicio actualizado correctamente",
        ):
            return redirect(_listado_url())
        values = request.form
    else:
        values = fetch(servicios.get_service_by_id, service_id, default={})
    return _render_form("Editar servicio", values, service_id)


@servicios_bp.post("/<int:service_id>/estado")
def cambiar_estado(service_id: int):
    estado = request.form.get("estado", "")
    if estado in {s.value for s in ServiceState}:
        run_action(
            servicios.change_service_status,
            service_id,
            estado,
            success="Estado del servicio actualizado",
            audit="CHANGE_SERVICE_STATUS",
            audit_details=f"{service_id}:{estado}",
        )
    return redirect(back_url(_listado_url()))


@servicios_bp.post("/<int:service_id>/eliminar")
def eliminar(service_id: int):
    run_action(
        servicios.delete_service,
        service_id,
        success="Servicio eliminado correctamente",
        audit="DELETE_SERVICE",
        audit_details=str(service_id),
    )
    return redirect(_listado_url())


@servicios_bp.get("/<int:service_id>")
def detalle(service_id: int):
    service = fetch(servicios.get_service_by_id, service_id)
    if not service:
        return redirect(_listado_url())
    return render_template("admin/servicio_detalle.html", service=service)


@servicios_bp.get("/banos-instalados/<int:client_id>")
def banos_instalados(client_id: int):
    """Baños instalados del cliente, para completar el formulario de servicio."""
    try:
        toilets = servicios.get_client_installed_toilets(client_id)
    except ApiError as e:
        if isinstance(e, (SessionExpiredError, MissingTokenError)):
            raise
        audit_action("GET_INSTALLED_TOILETS", e.message, status="ERROR")
        return jsonify(error_response(e.message)), e.status or 502
    return jsonify(success_response(extract_items(toilets)))
