"""
Usuarios del sistema y sus roles.
"""

from flask import Blueprint, flash, redirect, render_template, request, url_for

from sanitarios_dashboard.actions import usuarios
from sanitarios_dashboard.utils.views import (
    Column,
    FormField,
    back_url,
    fetch,
    fetch_listing,
    parse_form,
    run_action,
)
from sanitarios_shared.constants import Roles
from sanitarios_shared.schemas import UserForm

usuarios_bp = Blueprint("usuarios", __name__, url_prefix="/usuarios")

ROLE_OPTIONS = [(role.value, role.value.capitalize()) for role in Roles]

USER_STATES = [("ACTIVO", "Activo"), ("INACTIVO", "Inactivo")]

USER_FIELDS = [
    FormField("nombre", "Nombre"),
    FormField("email", "Email", "email"),
    FormField(
        "password",
        "Contraseña",
        "password",
        required=False,
        help_text="Al editar, dejar vacío para conservar la actual",
    ),
    FormField("roles", "Roles", "multiselect", ROLE_OPTIONS),
    FormField("empleadoId", "Empleado asociado", "number", required=False),
]

USER_COLUMNS = [
    Column("nombre", "Nombre"),
    Column("email", "Email"),
    Column("roles", "Roles"),
    Column("estado", "Estado"),
]


def _listado_url() -> str:
    return url_for(f"{request.blueprints[-1]}.usuarios.listado")


def _user_form_data() -> dict:
    data = request.form.to_dict()
    data.pop("csrf_token", None)
    data["roles"] = request.form.getlist("roles")
    return data


@usuarios_bp.get("")
def listado():
    return render_template(
        "listado.html",
        title="Usuarios",
        columns=USER_COLUMNS,
        listing=fetch_listing(usuarios.get_users),
        create_endpoint=".usuarios.crear",
        row_actions=[
            {"label": "Editar", "endpoint": ".usuarios.editar", "arg": "user_id"},
            {
                "label": "Eliminar",
                "endpoint": ".usuarios.eliminar",
                "arg": "user_id",
                "method": "post",
                "confirm": "¿Eliminar el usuario?",
            },
        ],
        status_change={"endpoint": ".usuarios.cambiar_estado", "arg": "user_id", "options": USER_STATES},
    )


@usuarios_bp.route("/crear", methods=["GET", "POST"])
def crear():
    if request.method == "POST":
        form = parse_form(UserForm, _user_form_data())
        if form is not None and not form.password:
            flash("La contraseña es requerida", "error")
        elif form is not None and run_action(
            usuarios.create_user,
            form.to_payload(),
            success="Usuario creado correctamente",
            audit="CREATE_USER",
            audit_details=f"{form.email} {','.join(r.value for r in form.roles)}",
        ):
            return redirect(_listado_url())
    return render_template(
        "form.html",
        title="Nuevo usuario",
        fields=USER_FIELDS,
        values=request.form,
        cancel_endpoint=".usuarios.listado",
    )


@usuarios_bp.route("/<int:user_id>/editar", methods=["GET", "POST"])
def editar(user_id: int):
    if request.method == "POST":
        form = parse_form(UserForm, _user_form_data())
        if form is not None and run_action(
            usuarios.update_user,
            user_id,
            form.to_payload(),
            success="Usuario actualizado correctamente",
            audit="UPDATE_USER",
            audit_details=str(user_id),
        ):
            return redirect(_listado_url())
        values = request.form
    else:
        values = fetch(usuarios.get_user_by_id, user_id, default={})
    return render_template(
        "form.html",
        title="Editar usuario",
        fields=USER_FIELDS,
        values=values,
        cancel_endpoint=".usuarios.listado",
    )


@usuarios_bp.post("/<int:user_id>/estado")
def cambiar_estado(user_id: int):
    estado = request.form.get("estado", "")
    if estado in {value for value, _ in USER_STATES}:
        run_action(
            usuarios.change_user_status,
            user_id,
            estado,
            success="Estado del usuario actualizado",
            audit="CHANGE_USER_STATUS",
            audit_details=f"{user_id}:{estado}",
        )
    return redirect(back_url(_listado_url()))


@usuarios_bp.post("/<int:user_id>/eliminar")
def eliminar(user_id: int):
    run_action(
        usuarios.delete_user,
        user_id,
        success="Usuario eliminado correctamente",
        audit="DELETE_USER",
        audit_details=str(user_id),
    )
    return redirect(_listado_url())
