"""
Operario area - the employee's own services, requests and records.

Every page works on the employee linked to the logged-in user
(``empleadoId`` in the ``user`` cookie).
"""

from flask import Blueprint, flash, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import (
    contactos_emergencia,
    empleados,
    licencias,
    salary_advances,
    vestimenta,
)
from sanitarios_dashboard.utils.views import (
    Column,
    FormField,
    fetch,
    fetch_listing,
    fetch_optional,
    flash_partial,
    parse_form,
    run_action,
)
from sanitarios_shared.api_client import gather_settled
from sanitarios_shared.logging_config import get_logger
from sanitarios_shared.role_guard import RoleGuard
from sanitarios_shared.schemas import (
    ClothingForm,
    EmergencyContactForm,
    LeaveForm,
    SalaryAdvanceForm,
)
from sanitarios_shared.serializers import extract_items
from sanitarios_shared.session import get_current_user

from .admin.empleados import CLOTHING_FIELDS, CONTACT_FIELDS
from .admin.licencias import LEAVE_TYPES

operario_bp = Blueprint("operario", __name__, url_prefix="/operario")
operario_bp.before_request(RoleGuard())
logger = get_logger(__name__)

NO_EMPLOYEE_MESSAGE = "Tu usuario no tiene un empleado asociado"

SERVICE_COLUMNS = [
    Column("id", "N°"),
    Column("fechaProgramada", "Fecha"),
    Column("tipoServicio", "Tipo"),
    Column("ubicacion", "Ubicación"),
    Column("estado", "Estado"),
]

ADVANCE_FIELDS = [
    FormField("amount", "Monto", "number"),
    FormField("reason", "Motivo", "textarea", help_text="Entre 10 y 500 caracteres"),
]

ADVANCE_COLUMNS = [
    Column("amount", "Monto"),
    Column("reason", "Motivo"),
    Column("createdAt", "Solicitado"),
    Column("status", "Estado"),
]

LEAVE_FIELDS = [
    FormField("fechaInicio", "Desde", "date"),
    FormField("fechaFin", "Hasta", "date"),
    FormField("tipoLicencia", "Tipo", "select", LEAVE_TYPES),
    FormField("notas", "Notas", "textarea", required=False),
]

LEAVE_COLUMNS = [
    Column("tipoLicencia", "Tipo"),
    Column("fechaInicio", "Desde"),
    Column("fechaFin", "Hasta"),
    Column("aprobado", "Aprobada"),
]


def _employee_id() -> int | None:
    user = get_current_user() or {}
    employee_id = user.get("empleadoId")
    try:
        return int(employee_id) if employee_id else None
    except (TypeError, ValueError):
        logger.warning(f"Invalid empleadoId in user cookie: {employee_id!r}")
        return None


def _require_employee():
    """Employee id of the session; flashes an error when the user has none."""
    employee_id = _employee_id()
    if employee_id is None:
        flash(NO_EMPLOYEE_MESSAGE, "error")
    return employee_id


@operario_bp.get("/")
def index():
    return redirect(url_for("operario.dashboard"))


@operario_bp.get("/dashboard")
def dashboard():
    """Servicios pendientes, en curso y últimos servicios del operario."""
    employee_id = _employee_id()
    pending = in_progress = last = []
    employee = None
    partial = False
    if employee_id is None:
        flash(NO_EMPLOYEE_MESSAGE, "warning")
    else:
        results = gather_settled(
            lambda: empleados.get_employee_by_id(employee_id),
            lambda: empleados.get_pending_assigned_services(employee_id),
            lambda: empleados.get_in_progress_assigned_services(employee_id),
            lambda: empleados.get_last_services(employee_id),
        )
        partial = flash_partial(results)
        employee_result, pending_result, in_progress_result, last_result = results
        employee = employee_result.value if employee_result.ok else None
        pending = extract_items(pending_result.value) if pending_result.ok else []
        in_progress = extract_items(in_progress_result.value) if in_progress_result.ok else []
        last = extract_items(last_result.value) if last_result.ok else []

    return render_template(
        "operario/dashboard.html",
        employee=employee,
        pending_services=pending,
        in_progress_services=in_progress,
        last_services=last,
        service_columns=SERVICE_COLUMNS,
        partial=partial,
    )


@operario_bp.get("/servicios-completados")
def servicios_completados():
    employee_id = _require_employee()
    if employee_id is None:
        return redirect(url_for("operario.dashboard"))
    return render_template(
        "listado.html",
        title="Servicios completados",
        columns=SERVICE_COLUMNS,
        listing=fetch_listing(empleados.get_completed_services, employee_id),
    )


@operario_bp.route("/adelantos", methods=["GET", "POST"])
def adelantos():
    """Mis adelantos de salario y el formulario de solicitud."""
    employee_id = _employee_id()
    if request.method == "POST":
        form = parse_form(SalaryAdvanceForm)
        payload = form.to_payload() if form is not None else {}
        # the backend resolves the employee from the token when absent
        if employee_id is not None:
            payload["employeeId"] = employee_id
        if form is not None and run_action(
            salary_advances.create_advance,
            payload,
            success="Solicitud de adelanto enviada",
            audit="REQUEST_SALARY_ADVANCE",
            audit_details=str(employee_id),
        ):
            return redirect(url_for("operario.adelantos"))

    advances = extract_items(
        fetch(salary_advances.get_my_advances, default=[]), "advances", "items", "data"
    )
    return render_template(
        "operario/solicitudes.html",
        title="Adelantos de salario",
        fields=ADVANCE_FIELDS,
        values=request.form,
        columns=ADVANCE_COLUMNS,
        rows=advances,
    )


@operario_bp.route("/licencias", methods=["GET", "POST"])
def mis_licencias():
    """Mis licencias y el formulario para solicitar una nueva."""
    employee_id = _require_employee()
    if employee_id is None:
        return redirect(url_for("operario.dashboard"))

    if request.method == "POST":
        data = request.form.to_dict()
        data["employeeId"] = employee_id
        form = parse_form(LeaveForm, data)
        if form is not None and run_action(
            licencias.create_employee_leave,
            form.to_payload(),
            success="Solicitud de licencia enviada",
            audit="REQUEST_EMPLOYEE_LEAVE",
            audit_details=str(employee_id),
        ):
            return redirect(url_for("operario.mis_licencias"))

    leaves = extract_items(fetch(licencias.get_leaves_by_employee, employee_id, default=[]))
    return render_template(
        "operario/solicitudes.html",
        title="Mis licencias",
        fields=LEAVE_FIELDS,
        values=request.form,
        columns=LEAVE_COLUMNS,
        rows=leaves,
    )


@operario_bp.get("/contactos")
def contactos():
    employee_id = _require_employee()
    if employee_id is None:
        return redirect(url_for("operario.dashboard"))
    contacts = extract_items(
        fetch(contactos_emergencia.get_emergency_contacts, employee_id, default=[])
    )
    return render_template("operario/contactos.html", contacts=contacts)


@operario_bp.route("/contactos/crear", methods=["GET", "POST"])
def crear_contacto():
    employee_id = _require_employee()
    if employee_id is None:
        return redirect(url_for("operario.dashboard"))
    if request.method == "POST":
        form = parse_form(EmergencyContactForm)
        if form is not None and run_action(
            contactos_emergencia.create_emergency_contact,
            employee_id,
            form.to_payload(),
            success="Contacto de emergencia creado correctamente",
        ):
            return redirect(url_for("operario.contactos"))
    return render_template(
        "form.html",
        title="Nuevo contacto de emergencia",
        fields=CONTACT_FIELDS,
        values=request.form,
        cancel_url=url_for("operario.contactos"),
    )


@operario_bp.route("/contactos/<int:contact_id>/editar", methods=["GET", "POST"])
def editar_contacto(contact_id: int):
    employee_id = _require_employee()
    if employee_id is None:
        return redirect(url_for("operario.dashboard"))
    if request.method == "POST":
        form = parse_form(EmergencyContactForm)
        if form is not None and run_action(
            contactos_emergencia.update_emergency_contact,
            contact_id,
            form.to_payload(),
            success="Contacto de emergencia actualizado correctamente",
        ):
            return redirect(url_for("operario.contactos"))
        values = request.form
    else:
        contacts = extract_items(
            fetch(contactos_emergencia.get_emergency_contacts, employee_id, default=[])
        )
        values = next((c for c in contacts if c.get("id") == contact_id), {})
    return render_template(
        "form.html",
        title="Editar contacto de emergencia",
        fields=CONTACT_FIELDS,
        values=values,
        cancel_url=url_for("operario.contactos"),
    )


@operario_bp.post("/contactos/<int:contact_id>/eliminar")
def eliminar_contacto(contact_id: int):
    run_action(
        contactos_emergencia.delete_emergency_contact,
        contact_id,
        success="Contacto de emergencia eliminado correctamente",
    )
    return redirect(url_for("operario.contactos"))


@operario_bp.route("/talles", methods=["GET", "POST"])
def talles():
    employee_id = _require_employee()
    if employee_id is None:
        return redirect(url_for("operario.dashboard"))
    current = fetch_optional(vestimenta.get_sizes_by_employee, employee_id)
    if request.method == "POST":
        form = parse_form(ClothingForm)
        action = vestimenta.update_sizes if current else vestimenta.create_sizes
        if form is not None and run_action(
            action, employee_id, form.to_payload(), success="Talles guardados correctamente"
        ):
            return redirect(url_for("operario.talles"))
    return render_template(
        "form.html",
        title="Mis talles",
        fields=CLOTHING_FIELDS,
        values=request.form if request.method == "POST" else (current or {}),
        cancel_url=url_for("operario.dashboard"),
    )


@operario_bp.get("/licencia-conducir")
def licencia_conducir():
    employee_id = _require_employee()
    if employee_id is None:
        return redirect(url_for("operario.dashboard"))
    driver_license = fetch_optional(licencias.get_driver_license, employee_id)
    return render_template("operario/licencia_conducir.html", driver_license=driver_license)
