from flask import Blueprint, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import salary_advances
from sanitarios_dashboard.utils.views import (
    Column,
    FormField,
    Listing,
    back_url,
    fetch,
    list_args,
    run_action,
)
from sanitarios_shared.constants import AdvanceStatus
from sanitarios_shared.serializers import extract_items, extract_total

salary_advances_bp = Blueprint("salary_advances", __name__, url_prefix="/adelantos")

STATUS_OPTIONS = [
    ("all", "Todos"),
    (AdvanceStatus.PENDING.value, "Pendientes"),
    (AdvanceStatus.APPROVED.value, "Aprobados"),
    (AdvanceStatus.REJECTED.value, "Rechazados"),
]

ADVANCE_COLUMNS = [
    Column("employeeId", "Empleado"),
    Column("amount", "Monto"),
    Column("reason", "Motivo"),
    Column("createdAt", "Solicitado"),
    Column("status", "Estado"),
]


def _listado_url() -> str:
    return url_for(f"{request.blueprints[-1]}.salary_advances.listado")


@salary_advances_bp.get("")
def listado():
    """Adelantos de salario filtrados por estado (pendientes por defecto)."""
    status = request.args.get("status", AdvanceStatus.PENDING.value)
    page, limit, _ = list_args()
    payload = fetch(salary_advances.get_all_advances, status, page, limit, default=[])
    rows = extract_items(payload, "advances", "items", "data")
    return render_template(
        "listado.html",
        title="Adelantos de salario",
        columns=ADVANCE_COLUMNS,
        listing=Listing(rows=rows, total=extract_total(payload) or len(rows), page=page, limit=limit),
        filters=[FormField("status", "Estado", "select", STATUS_OPTIONS, required=False)],
        filter_values={"status": status},
        row_actions=[
            {
                "label": "Aprobar",
                "endpoint": ".salary_advances.aprobar",
                "arg": "advance_id",
                "method": "post",
                "confirm": "¿Aprobar el adelanto?",
            },
            {
                "label": "Rechazar",
                "endpoint": ".salary_advances.rechazar",
                "arg": "advance_id",
                "method": "post",
                "confirm": "¿Rechazar el adelanto?",
            },
            {
                "label": "Eliminar",
                "endpoint": ".salary_advances.eliminar",
                "arg": "advance_id",
                "method": "post",
                "confirm": "¿Eliminar el adelanto?",
            },
        ],
    )


@salary_advances_bp.post("/<int:advance_id>/aprobar")
def aprobar(advance_id: int):
    run_action(
        salary_advances.approve_advance,
        advance_id,
        success="Adelanto aprobado",
        audit="APPROVE_SALARY_ADVANCE",
        audit_details=str(advance_id),
    )
    return redirect(back_url(_listado_url()))


@salary_advances_bp.post("/<int:advance_id>/rechazar")
def rechazar(advance_id: int):
    run_action(
        salary_advances.reject_advance,
        advance_id,
        success="Adelanto rechazado",
        audit="REJECT_SALARY_ADVANCE",
        audit_details=str(advance_id),
    )
    return redirect(back_url(_listado_url()))


@salary_advances_bp.post("/<int:advance_id>/eliminar")
def eliminar(advance_id: int):
    run_action(
        salary_advances.delete_advance,
        advance_id,
        success="Adelanto eliminado",
        audit="DELETE_SALARY_ADVANCE",
        audit_details=str(advance_id),
    )
    return redirect(back_url(_listado_url()))
