"""
Admin home - totals and today's work at a glance.
"""

from flask import Blueprint, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import empleados, mantenimiento_vehiculos, sanitarios, servicios, vehiculos
from sanitarios_dashboard.utils.views import flash_partial
from sanitarios_shared.api_client import gather_settled
from sanitarios_shared.serializers import extract_items, extract_total

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.get("/")
def index():
    return redirect(url_for(f"{request.blueprints[-1]}.dashboard.home"))


@dashboard_bp.get("/dashboard")
def home():
    """Totales y servicios del día; cada bloque se carga en paralelo."""
    results = gather_settled(
        empleados.get_total_employees,
        vehiculos.get_total_vehicles,
        sanitarios.get_total_toilets,
        servicios.get_today_services,
        servicios.get_pending_services,
        servicios.get_in_progress_services,
        mantenimiento_vehiculos.get_upcoming_maintenances,
    )
    partial = flash_partial(results)
    totals_result, vehicles_result, toilets_result, today, pending, in_progress, upcoming = results

    def _total(result):
        return extract_total(result.value) if result.ok else None

    return render_template(
        "admin/dashboard.html",
        totals={
            "Empleados": _total(totals_result),
            "Vehículos": _total(vehicles_result),
            "Sanitarios": _total(toilets_result),
        },
        today_services=extract_items(today.value) if today.ok else [],
        pending_services=extract_items(pending.value) if pending.ok else [],
        in_progress_services=extract_items(in_progress.value) if in_progress.ok else [],
        upcoming_maintenances=extract_items(upcoming.value) if upcoming.ok else [],
        partial=partial,
    )
