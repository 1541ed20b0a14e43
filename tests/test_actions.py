"""
Server actions against the fake backend.

Every action runs inside a request whose ``token`` cookie carries a fresh
bearer token, the way the views call them.
"""

import pytest

from sanitarios_dashboard.actions import (
    auth,
    clientes,
    salary_advances,
    servicios,
    vehiculos,
    vestimenta,
)
from sanitarios_shared.errors import ApiError, MissingTokenError, SessionExpiredError


@pytest.fixture
def api_context(app, token_factory):
    """Request context with a valid token cookie."""
    with app.test_request_context(headers={"Cookie": f"token={token_factory()}"}):
        yield


@pytest.fixture
def anonymous_context(app):
    with app.test_request_context():
        yield


@pytest.mark.usefixtures("api_context")
class TestErrorMessages:
    """Backend messages are surfaced, defaults fill in when there is none."""

    def test_backend_message(self, backend):
        backend.add("POST", "/api/clients", status=400, body={"message": "El CUIT ya existe"})

        with pytest.raises(ApiError) as exc_info:
            clientes.create_client({"nombre": "Obras SA"})

        assert exc_info.value.message == "El CUIT ya existe"
        assert exc_info.value.status == 400

    def test_default_message(self, backend):
        backend.add("GET", "/api/clients", status=500)

        with pytest.raises(ApiError) as exc_info:
            clientes.get_clients()

        assert exc_info.value.message == "Error al obtener los clientes"

    def test_unreachable_backend(self, backend):
        with pytest.raises(ApiError) as exc_info:
            vehiculos.get_vehicles()

        assert exc_info.value.message == "Error al obtener los vehículos"
        assert exc_info.value.status is None

    def test_invalid_query_message(self, backend):
        backend.add("GET", "/api/services", status=400, body={"message": "Invalid query"})

        with pytest.raises(ApiError) as exc_info:
            servicios.get_services(filters={"estado": "PROGRAMADO"})

        assert exc_info.value.message == "Invalid query"
        assert backend.query(backend.calls[-1])["estado"] == "PROGRAMADO"

    def test_rejected_token_ends_session(self, backend):
        backend.add("GET", "/api/vehicles/4", status=401)

        with pytest.raises(SessionExpiredError):
            vehiculos.get_vehicle_by_id(4)


@pytest.mark.usefixtures("anonymous_context")
class TestWithoutToken:
    def test_missing_token_makes_no_call(self, backend):
        with pytest.raises(MissingTokenError):
            clientes.get_clients()

        assert backend.calls == []


@pytest.mark.usefixtures("anonymous_context")
class TestLogin:
    """Tests for auth.login_user."""

    def test_success(self, backend, token_factory):
        token = token_factory()
        backend.add(
            "POST",
            "/api/auth/login",
            body={"access_token": token, "user": {"id": 1, "roles": ["ADMIN"]}},
        )

        data = auth.login_user("admin@empresa.com", "secreto1")

        assert data["access_token"] == token
        assert backend.json_body(backend.calls[-1]) == {
            "email": "admin@empresa.com",
            "password": "secreto1",
        }
        assert "Authorization" not in backend.calls[-1].headers

    def test_rejected_credentials(self, backend):
        backend.add("POST", "/api/auth/login", status=401, body={"message": "Unauthorized"})

        with pytest.raises(ApiError) as exc_info:
            auth.login_user("admin@empresa.com", "mal")

        assert exc_info.value.message == "Credenciales inválidas"

    def test_network_error_reads_as_invalid_credentials(self, backend):
        with pytest.raises(ApiError) as exc_info:
            auth.login_user("admin@empresa.com", "secreto1")

        assert exc_info.value.message == "Credenciales inválidas"

    def test_incomplete_response(self, backend):
        backend.add("POST", "/api/auth/login", body={"access_token": "abc"})

        with pytest.raises(ApiError) as exc_info:
            auth.login_user("admin@empresa.com", "secreto1")

        assert exc_info.value.message == "Respuesta de login incompleta"


@pytest.mark.usefixtures("api_context")
class TestServices:
    """Tests for service creation."""

    def test_manual_without_assignments_makes_no_call(self, backend):
        with pytest.raises(ApiError) as exc_info:
            servicios.create_service_manual({"clienteId": 1, "asignacionesManual": []})

        assert exc_info.value.message == "Se requiere al menos una asignación manual de recursos"
        assert exc_info.value.status == 400
        assert backend.calls == []

    def test_manual_forbidden(self, backend):
        backend.add("POST", "/api/services/create/manual", status=403)

        with pytest.raises(ApiError) as exc_info:
            servicios.create_service_manual(
                {"clienteId": 1, "asignacionesManual": [{"empleadoId": 2}]}
            )

        assert exc_info.value.message == "No tienes permisos para crear servicios"

    def test_manual_payload(self, backend):
        backend.add("POST", "/api/services/create/manual", status=201, body={"id": 10})

        result = servicios.create_service_manual(
            {"clienteId": 1, "asignacionesManual": [{"empleadoId": 2, "vehiculoId": 3}]}
        )

        assert result == {"id": 10}
        body = backend.json_body(backend.calls[-1])
        assert body["asignacionAutomatica"] is False
        assert body["asignacionesManual"] == [{"empleadoId": 2, "vehiculoId": 3}]

    def test_automatic_payload_drops_manual_rows(self, backend):
        backend.add("POST", "/api/services/create/automatic", status=201, body={"id": 11})

        servicios.create_service_automatic(
            {"clienteId": 1, "asignacionesManual": [{"empleadoId": 2}]}
        )

        body = backend.json_body(backend.calls[-1])
        assert body["asignacionAutomatica"] is True
        assert "asignacionesManual" not in body

    def test_update_returns_status_code(self, backend):
        backend.add("PUT", "/api/services/5", status=204)

        assert servicios.update_service(5, {"notas": "x"}) == 204


@pytest.mark.usefixtures("api_context")
class TestClothing:
    """Tests for clothing size actions."""

    def test_page_object_is_normalized(self, backend):
        backend.add(
            "GET",
            "/api/clothing",
            body={
                "data": [{"empleadoId": 1, "calzado_talle": "42"}],
                "totalItems": 31,
                "currentPage": 2,
                "itemsPerPage": 15,
            },
        )

        page = vestimenta.get_employee_sizes(2, 15)

        assert page.data == [{"empleadoId": 1, "calzado_talle": "42"}]
        assert page.total == 31
        assert page.page == 2
        assert page.items_per_page == 15

    def test_bare_list(self, backend):
        backend.add("GET", "/api/clothing", body=[{"empleadoId": 1}, {"empleadoId": 2}])

        page = vestimenta.get_employee_sizes()

        assert page.total == 2
        assert page.page == 1

    def test_export_returns_bytes(self, backend):
        backend.add(
            "GET",
            "/api/clothing/export",
            content=b"PK\x03\x04",
            content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

        content, content_type = vestimenta.export_sizes()

        assert content == b"PK\x03\x04"
        assert content_type.endswith("spreadsheetml.sheet")


@pytest.mark.usefixtures("api_context")
class TestSalaryAdvances:
    def test_all_statuses_sends_no_filter(self, backend):
        backend.add("GET", "/api/salary-advances", body={"advances": [], "total": 0})

        salary_advances.get_all_advances("all", 1, 15)

        assert "status" not in backend.query(backend.calls[-1])

    def test_approve(self, backend):
        backend.add("PATCH", "/api/salary-advances/update/8", body={"id": 8})

        salary_advances.approve_advance(8)

        assert backend.json_body(backend.calls[-1]) == {"status": "approved"}

    def test_get_missing_advance(self, backend):
        backend.add("GET", "/api/salary-advances/99", status=404)

        with pytest.raises(ApiError) as exc_info:
            salary_advances.get_advance(99)

        assert exc_info.value.status == 404
        assert exc_info.value.message == "Error al obtener el adelanto de salario"


@pytest.mark.usefixtures("api_context")
class TestRefreshToken:
    def test_requires_access_token(self, backend):
        backend.add("POST", "/api/auth/refresh", body={})

        with pytest.raises(ApiError) as exc_info:
            auth.refresh_token()

        assert exc_info.value.message == "Error al refrescar el token"
