"""
Admin dashboard - Modular Blueprint Structure

One sub-blueprint per domain. The whole tree is registered twice, under
``/admin`` and ``/supervisor``; ``RoleGuard`` resolves the allowed roles
from the path prefix.
"""

import logging

from flask import Blueprint

from sanitarios_shared.role_guard import RoleGuard

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)
admin_bp.before_request(RoleGuard())

from .clientes import clientes_bp
from .condiciones import condiciones_bp
from .dashboard import dashboard_bp
from .empleados import empleados_bp
from .licencias import licencias_bp
from .salary_advances import salary_advances_bp
from .sanitarios import sanitarios_bp
from .servicios import servicios_bp
from .talles import talles_bp
from .usuarios import usuarios_bp
from .vehiculos import vehiculos_bp

admin_bp.register_blueprint(dashboard_bp)
admin_bp.register_blueprint(empleados_bp)
admin_bp.register_blueprint(vehiculos_bp)
admin_bp.register_blueprint(clientes_bp)
admin_bp.register_blueprint(condiciones_bp)
admin_bp.register_blueprint(servicios_bp)
admin_bp.register_blueprint(sanitarios_bp)
admin_bp.register_blueprint(salary_advances_bp)
admin_bp.register_blueprint(licencias_bp)
admin_bp.register_blueprint(talles_bp)
admin_bp.register_blueprint(usuarios_bp)


def register_admin_areas(app):
    """Register the admin tree once per role-gated prefix."""
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(admin_bp, name="supervisor", url_prefix="/supervisor")
