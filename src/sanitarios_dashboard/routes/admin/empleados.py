"""
Empleados - listado, alta, edición y ficha del empleado.

The employee file groups everything the backend keeps per employee:
driving licence, emergency contacts, clothing sizes and leaves.
"""

from flask import Blueprint, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import contactos_emergencia, empleados, licencias, vestimenta
from sanitarios_dashboard.utils.views import (
    Column,
    FormField,
    back_url,
    enum_options,
    fetch,
    fetch_listing,
    fetch_optional,
    flash_partial,
    parse_form,
    run_action,
)
from sanitarios_shared.api_client import gather_settled
from sanitarios_shared.constants import EmployeeState
from sanitarios_shared.logging_config import get_logger
from sanitarios_shared.schemas import (
    ClothingForm,
    DriverLicenseForm,
    EmergencyContactForm,
    EmployeeForm,
)
from sanitarios_shared.serializers import extract_items

empleados_bp = Blueprint("empleados", __name__, url_prefix="/empleados")
logger = get_logger(__name__)

EMPLOYEE_FIELDS = [
    FormField("nombre", "Nombre"),
    FormField("apellido", "Apellido"),
    FormField("documento", "Documento"),
    FormField("fecha_nacimiento", "Fecha de nacimiento", "date"),
    FormField("direccion", "Dirección"),
    FormField("telefono", "Teléfono", "tel", help_text="xxx-xxxx-xxxx o 10 a 11 dígitos"),
    FormField("email", "Email", "email"),
    FormField("cargo", "Puesto"),
    FormField("estado", "Estado", "select", enum_options(EmployeeState)),
]

EMPLOYEE_COLUMNS = [
    Column("nombre", "Nombre"),
    Column("apellido", "Apellido"),
    Column("documento", "Documento"),
    Column("cargo", "Puesto"),
    Column("telefono", "Teléfono"),
    Column("estado", "Estado"),
]

LICENSE_FIELDS = [
    FormField("categoria", "Categoría"),
    FormField("fecha_expedicion", "Fecha de expedición", "date"),
    FormField("fecha_vencimiento", "Fecha de vencimiento", "date"),
]

CONTACT_FIELDS = [
    FormField("nombre", "Nombre"),
    FormField("apellido", "Apellido"),
    FormField("parentesco", "Parentesco"),
    FormField("telefono", "Teléfono", "tel"),
]

CLOTHING_FIELDS = [
    FormField("calzado_talle", "Calzado"),
    FormField("pantalon_talle", "Pantalón"),
    FormField("camisa_talle", "Camisa"),
    FormField("campera_bigNort_talle", "Campera BigNort"),
    FormField("pielBigNort_talle", "Piel BigNort"),
    FormField("medias_talle", "Medias"),
    FormField("pantalon_termico_bigNort_talle", "Pantalón térmico BigNort"),
    FormField("campera_polar_bigNort_talle", "Campera polar BigNort"),
    FormField("mameluco_talle", "Mameluco"),
]


def _area() -> str:
    return request.blueprints[-1]


def _detail_url(employee_id: int) -> str:
    return url_for(f"{_area()}.empleados.detalle", employee_id=employee_id)


@empleados_bp.get("")
def listado():
    listing = fetch_listing(empleados.get_employees)
    return render_template(
        "listado.html",
        title="Empleados",
        columns=EMPLOYEE_COLUMNS,
        listing=listing,
        create_endpoint=".empleados.crear",
        row_actions=[
            {"label": "Ficha", "endpoint": ".empleados.detalle", "arg": "employee_id"},
            {"label": "Editar", "endpoint": ".empleados.editar", "arg": "employee_id"},
            {
                "label": "Eliminar",
                "endpoint": ".empleados.eliminar",
                "arg": "employee_id",
                "method": "post",
                "confirm": "¿Eliminar el empleado?",
            },
        ],
        status_change={
            "endpoint": ".empleados.cambiar_estado",
            "arg": "employee_id",
            "options": enum_options(EmployeeState),
        },
    )


@empleados_bp.get("/buscar")
def buscar():
    """Busca un empleado por documento y abre su ficha."""
    documento = request.args.get("documento", "").strip()
    employee = fetch(empleados.get_employee_by_documento, documento) if documento else None
    if employee and employee.get("id"):
        return redirect(_detail_url(employee["id"]))
    return redirect(url_for(f"{_area()}.empleados.listado", search=documento))


@empleados_bp.route("/crear", methods=["GET", "POST"])
def crear():
    if request.method == "POST":
        form = parse_form(EmployeeForm)
        if form is not None and run_action(
            empleados.create_employee,
            form.to_payload(),
            success="Empleado creado correctamente",
            audit="CREATE_EMPLOYEE",
            audit_details=form.documento,
        ):
            return redirect(url_for(f"{_area()}.empleados.listado"))
    return render_template(
        "form.html",
        title="Nuevo empleado",
        fields=EMPLOYEE_FIELDS,
        values=request.form,
        cancel_endpoint=".empleados.listado",
    )


@empleados_bp.route("/<int:employee_id>/editar", methods=["GET", "POST"])
def editar(employee_id: int):
    if request.method == "POST":
        form = parse_form(EmployeeForm)
        if form is not None and run_action(
            empleados.edit_employee,
            employee_id,
            form.to_payload(),
            success="Empleado actualizado correctamente",
            audit="EDIT_EMPLOYEE",
            audit_details=str(employee_id),
        ):
            return redirect(url_for(f"{_area()}.empleados.listado"))
        values = request.form
    else:
        values = fetch(empleados.get_employee_by_id, employee_id, default={})
    return render_template(
        "form.html",
        title="Editar empleado",
        fields=EMPLOYEE_FIELDS,
        values=values,
        cancel_endpoint=".empleados.listado",
    )


@empleados_bp.post("/<int:employee_id>/eliminar")
def eliminar(employee_id: int):
    run_action(
        empleados.delete_employee,
        employee_id,
        success="Empleado eliminado correctamente",
        audit="DELETE_EMPLOYEE",
        audit_details=str(employee_id),
    )
    return redirect(url_for(f"{_area()}.empleados.listado"))


@empleados_bp.post("/<int:employee_id>/estado")
def cambiar_estado(employee_id: int):
    estado = request.form.get("estado", "")
    if estado in {s.value for s in EmployeeState}:
        run_action(
            empleados.change_employee_status,
            employee_id,
            estado,
            success="Estado del empleado actualizado",
        )
    return redirect(back_url(url_for(f"{_area()}.empleados.listado")))


@empleados_bp.get("/<int:employee_id>")
def detalle(employee_id: int):
    """Ficha del empleado con licencia, contactos, talles y licencias."""
    results = gather_settled(
        lambda: empleados.get_employee_by_id(employee_id),
        lambda: licencias.get_driver_license(employee_id),
        lambda: contactos_emergencia.get_emergency_contacts(employee_id),
        lambda: vestimenta.get_sizes_by_employee(employee_id),
        lambda: licencias.get_leaves_by_employee(employee_id),
    )
    employee, license_, contacts, sizes, leaves = results
    flash_partial(results)
    if not employee.ok:
        return redirect(url_for(f"{_area()}.empleados.listado"))

    return render_template(
        "admin/empleado_detalle.html",
        employee=employee.value,
        driver_license=license_.value if license_.ok else None,
        contacts=extract_items(contacts.value) if contacts.ok else [],
        sizes=sizes.value if sizes.ok else None,
        leaves=extract_items(leaves.value) if leaves.ok else [],
        clothing_fields=CLOTHING_FIELDS,
    )


@empleados_bp.route("/<int:employee_id>/licencia-conducir", methods=["GET", "POST"])
def licencia_conducir(employee_id: int):
    current = fetch_optional(licencias.get_driver_license, employee_id)
    if request.method == "POST":
        form = parse_form(DriverLicenseForm)
        action = licencias.update_driver_license if current else licencias.create_driver_license
        if form is not None and run_action(
            action,
            employee_id,
            form.to_payload(),
            success="Licencia de conducir guardada correctamente",
        ):
            return redirect(_detail_url(employee_id))
    return render_template(
        "form.html",
        title="Licencia de conducir",
        fields=LICENSE_FIELDS,
        values=request.form if request.method == "POST" else (current or {}),
        cancel_url=_detail_url(employee_id),
    )


@empleados_bp.route("/<int:employee_id>/contactos/crear", methods=["GET", "POST"])
def crear_contacto(employee_id: int):
    if request.method == "POST":
        form = parse_form(EmergencyContactForm)
        if form is not None and run_action(
            contactos_emergencia.create_emergency_contact,
            employee_id,
            form.to_payload(),
            success="Contacto de emergencia creado correctamente",
        ):
            return redirect(_detail_url(employee_id))
    return render_template(
        "form.html",
        title="Nuevo contacto de emergencia",
        fields=CONTACT_FIELDS,
        values=request.form,
        cancel_url=_detail_url(employee_id),
    )


@empleados_bp.route(
    "/<int:employee_id>/contactos/<int:contact_id>/editar", methods=["GET", "POST"]
)
def editar_contacto(employee_id: int, contact_id: int):
    if request.method == "POST":
        form = parse_form(EmergencyContactForm)
        if form is not None and run_action(
            contactos_emergencia.update_emergency_contact,
            contact_id,
            form.to_payload(),
            success="Contacto de emergencia actualizado correctamente",
        ):
            return redirect(_detail_url(employee_id))
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
        cancel_url=_detail_url(employee_id),
    )


@empleados_bp.post("/<int:employee_id>/contactos/<int:contact_id>/eliminar")
def eliminar_contacto(employee_id: int, contact_id: int):
    run_action(
        contactos_emergencia.delete_emergency_contact,
        contact_id,
        success="Contacto de emergencia eliminado correctamente",
    )
    return redirect(_detail_url(employee_id))


@empleados_bp.route("/<int:employee_id>/talles", methods=["GET", "POST"])
def talles(employee_id: int):
    current = fetch_optional(vestimenta.get_sizes_by_employee, employee_id)
    if request.method == "POST":
        form = parse_form(ClothingForm)
        action = vestimenta.update_sizes if current else vestimenta.create_sizes
        if form is not None and run_action(
            action, employee_id, form.to_payload(), success="Talles guardados correctamente"
        ):
            return redirect(_detail_url(employee_id))
    return render_template(
        "form.html",
        title="Talles del empleado",
        fields=CLOTHING_FIELDS,
        values=request.form if request.method == "POST" else (current or {}),
        cancel_url=_detail_url(employee_id),
    )


@empleados_bp.post("/<int:employee_id>/talles/eliminar")
def eliminar_talles(employee_id: int):
    run_action(
        vestimenta.delete_sizes, employee_id, success="Talles eliminados correctamente"
    )
    return redirect(_detail_url(employee_id))
