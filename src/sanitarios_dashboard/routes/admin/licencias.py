"""
Licencias de empleados (vacaciones, enfermedad...) y licencias de conducir.
"""

from flask import Blueprint, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import licencias
from sanitarios_dashboard.utils.views import (
    Column,
    FormField,
    back_url,
    fetch,
    fetch_listing,
    parse_form,
    run_action,
)
from sanitarios_shared.schemas import LeaveForm

licencias_bp = Blueprint("licencias", __name__, url_prefix="/licencias")

LEAVE_TYPES = [
    ("VACACIONES", "Vacaciones"),
    ("ENFERMEDAD", "Enfermedad"),
    ("CASAMIENTO", "Casamiento"),
    ("NACIMIENTO", "Nacimiento"),
    ("FALLECIMIENTO_FAMILIAR", "Fallecimiento familiar"),
    ("ESTUDIO", "Estudio"),
    ("OTRO", "Otro"),
]

LEAVE_FIELDS = [
    FormField("employeeId", "Empleado", "number"),
    FormField("fechaInicio", "Desde", "date"),
    FormField("fechaFin", "Hasta", "date"),
    FormField("tipoLicencia", "Tipo", "select", LEAVE_TYPES),
    FormField("notas", "Notas", "textarea", required=False),
]

LEAVE_COLUMNS = [
    Column("employeeId", "Empleado"),
    Column("tipoLicencia", "Tipo"),
    Column("fechaInicio", "Desde"),
    Column("fechaFin", "Hasta"),
    Column("aprobado", "Aprobada"),
]

DRIVER_LICENSE_COLUMNS = [
    Column("empleadoId", "Empleado"),
    Column("categoria", "Categoría"),
    Column("fecha_expedicion", "Expedición"),
    Column("fecha_vencimiento", "Vencimiento"),
]


def _listado_url() -> str:
    return url_for(f"{request.blueprints[-1]}.licencias.listado")


@licencias_bp.get("")
def listado():
    return render_template(
        "listado.html",
        title="Licencias de empleados",
        columns=LEAVE_COLUMNS,
        listing=fetch_listing(licencias.get_employee_leaves),
        create_endpoint=".licencias.crear",
        row_actions=[
            {"label": "Editar", "endpoint": ".licencias.editar", "arg": "leave_id"},
            {
                "label": "Aprobar",
                "endpoint": ".licencias.aprobar",
                "arg": "leave_id",
                "method": "post",
            },
            {
                "label": "Rechazar",
                "endpoint": ".licencias.rechazar",
                "arg": "leave_id",
                "method": "post",
                "confirm": "¿Rechazar la licencia?",
            },
            {
                "label": "Eliminar",
                "endpoint": ".licencias.eliminar",
                "arg": "leave_id",
                "method": "post",
                "confirm": "¿Eliminar la licencia?",
            },
        ],
    )


@licencias_bp.route("/crear", methods=["GET", "POST"])
def crear():
    if request.method == "POST":
        form = parse_form(LeaveForm)
        if form is not None and run_action(
            licencias.create_employee_leave,
            form.to_payload(),
            success="Licencia creada correctamente",
            audit="CREATE_EMPLOYEE_LEAVE",
            audit_details=str(form.employeeId),
        ):
            return redirect(_listado_url())
        values = request.form
    else:
        values = {"employeeId": request.args.get("empleado", "")}
    return render_template(
        "form.html",
        title="Nueva licencia",
        fields=LEAVE_FIELDS,
        values=values,
        cancel_endpoint=".licencias.listado",
    )


@licencias_bp.route("/<int:leave_id>/editar", methods=["GET", "POST"])
def editar(leave_id: int):
    if request.method == "POST":
        form = parse_form(LeaveForm)
        if form is not None and run_action(
            licencias.update_employee_leave,
            leave_id,
            form.to_payload(),
            success="Licencia actualizada correctamente",
        ):
            return redirect(_listado_url())
        values = request.form
    else:
        values = fetch(licencias.get_employee_leave_by_id, leave_id, default={})
    return render_template(
        "form.html",
        title="Editar licencia",
        fields=LEAVE_FIELDS,
        values=values,
        cancel_endpoint=".licencias.listado",
    )


@licencias_bp.post("/<int:leave_id>/aprobar")
def aprobar(leave_id: int):
    run_action(
        licencias.approve_employee_leave,
        leave_id,
        success="Licencia aprobada",
        audit="APPROVE_EMPLOYEE_LEAVE",
        audit_details=str(leave_id),
    )
    return redirect(back_url(_listado_url()))


@licencias_bp.post("/<int:leave_id>/rechazar")
def rechazar(leave_id: int):
    run_action(
        licencias.reject_employee_leave,
        leave_id,
        success="Licencia rechazada",
        audit="REJECT_EMPLOYEE_LEAVE",
        audit_details=str(leave_id),
    )
    return redirect(back_url(_listado_url()))


@licencias_bp.post("/<int:leave_id>/eliminar")
def eliminar(leave_id: int):
    run_action(
        licencias.delete_employee_leave,
        leave_id,
        success="Licencia eliminada correctamente",
    )
    return redirect(_listado_url())


@licencias_bp.get("/conducir")
def licencias_conducir():
    return render_template(
        "listado.html",
        title="Licencias de conducir",
        columns=DRIVER_LICENSE_COLUMNS,
        listing=fetch_listing(licencias.get_driver_licenses),
    )


@licencias_bp.get("/conducir/por-vencer")
def por_vencer():
    """Licencias de conducir que vencen en los próximos ``dias`` (30 por defecto)."""
    dias = request.args.get("dias", 30, type=int)
    if dias < 1:
        dias = 30
    return render_template(
        "listado.html",
        title=f"Licencias que vencen en {dias} días",
        columns=DRIVER_LICENSE_COLUMNS,
        listing=fetch_listing(licencias.get_licenses_to_expire, dias),
    )
