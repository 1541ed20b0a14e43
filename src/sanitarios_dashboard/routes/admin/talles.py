from datetime import date

from flask import Blueprint, Response, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import vestimenta
from sanitarios_dashboard.utils.views import Column, Listing, fetch, list_args
from sanitarios_shared.audit_middleware import audit_action

talles_bp = Blueprint("talles", __name__, url_prefix="/talles")

SIZE_COLUMNS = [
    Column("empleadoId", "Empleado"),
    Column("calzado_talle", "Calzado"),
    Column("pantalon_talle", "Pantalón"),
    Column("camisa_talle", "Camisa"),
    Column("campera_bigNort_talle", "Campera"),
    Column("medias_talle", "Medias"),
    Column("mameluco_talle", "Mameluco"),
]


@talles_bp.get("")
def listado():
    page, limit, _ = list_args()
    sizes = fetch(vestimenta.get_employee_sizes, page, limit)
    listing = Listing(page=page, limit=limit)
    if sizes is not None:
        listing = Listing(
            rows=sizes.data, total=sizes.total, page=sizes.page, limit=sizes.items_per_page
        )
    return render_template(
        "listado.html",
        title="Talles de empleados",
        columns=SIZE_COLUMNS,
        listing=listing,
        row_key="empleadoId",
        row_actions=[
            {"label": "Editar", "endpoint": ".empleados.talles", "arg": "employee_id"},
        ],
        export_endpoint=".talles.exportar",
    )


@talles_bp.get("/exportar")
def exportar():
    """Planilla con los talles de todos los empleados."""
    exported = fetch(vestimenta.export_sizes)
    if exported is None:
        return redirect(url_for(f"{request.blueprints[-1]}.talles.listado"))
    content, content_type = exported
    audit_action("EXPORT_CLOTHING_SIZES")
    filename = f"talles_empleados_{date.today().isoformat()}.xlsx"
    return Response(
        content,
        mimetype=content_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
