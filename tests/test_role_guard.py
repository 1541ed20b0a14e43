"""
Session and role gating of the admin, supervisor and operario areas.
"""

import time

import jwt
import pytest

from sanitarios_shared.constants import TOKEN_COOKIE
from sanitarios_shared.role_guard import allowed_roles_for_path


def _session_cleared(client) -> bool:
    return client.get_cookie("token") is None and client.get_cookie("user") is None


@pytest.fixture
def dashboard_backend(backend):
    backend.add("GET", "/api/employees/total_employees", body={"total": 12})
    backend.add("GET", "/api/vehicles/total_vehicles", body={"total": 4})
    backend.add("GET", "/api/chemical_toilets/total_chemical_toilets", body={"total": 30})
    backend.add("GET", "/api/services/today", body=[])
    backend.add("GET", "/api/services/pending", body=[])
    backend.add("GET", "/api/services/in-progress", body=[])
    backend.add("GET", "/api/vehicle_maintenance/upcoming", body=[])
    return backend


class TestAllowedRoles:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/admin/clientes", {"ADMIN", "SUPERVISOR"}),
            ("/supervisor/dashboard", {"ADMIN", "SUPERVISOR"}),
            ("/operario", {"OPERARIO"}),
            ("/operarios", None),
            ("/login", None),
        ],
    )
    def test_prefix_lookup(self, path, expected):
        assert allowed_roles_for_path(path) == expected


class TestSessionGate:
    """Nothing renders before the session resolves as valid."""

    def test_no_token_redirects_to_expired_login(self, client, backend):
        response = client.get("/admin/dashboard")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/login?expired=true")
        assert backend.calls == []

    def test_expiring_token_ends_session(self, client, backend, login_as, token_factory):
        login_as(["ADMIN"], token=token_factory(expires_in=120))

        response = client.get("/admin/dashboard")

        assert response.headers["Location"].endswith("/login?expired=true")
        assert _session_cleared(client)
        assert backend.calls == []

    def test_forged_user_cookie(self, client, backend, token_factory):
        client.set_cookie("token", token_factory())
        client.set_cookie("user", "forged.cookie")

        response = client.get("/admin/dashboard")

        assert response.headers["Location"].endswith("/login")
        assert _session_cleared(client)


class TestRoleGate:
    def test_admin_sees_dashboard(self, client, dashboard_backend, login_as):
        login_as(["ADMIN"], nombre="Laura")

        response = client.get("/admin/dashboard")

        assert response.status_code == 200
        page = response.get_data(as_text=True)
        assert "Panel de control" in page
        assert "data-session-check-url" in page

    def test_dashboard_closes_every_backend_session(
        self, client, dashboard_backend, login_as, session_counter
    ):
        created, closed = session_counter
        login_as(["ADMIN"])

        response = client.get("/admin/dashboard")

        assert response.status_code == 200
        assert created
        assert len(closed) == len(created)

    def test_supervisor_area(self, client, dashboard_backend, login_as):
        login_as(["SUPERVISOR"])

        response = client.get("/supervisor/dashboard")

        assert response.status_code == 200
        assert 'href="/supervisor/clientes"' in response.get_data(as_text=True)

    def test_operario_cannot_open_admin(self, client, backend, login_as):
        login_as(["OPERARIO"])

        response = client.get("/admin/clientes")

        assert response.headers["Location"].endswith("/no-autorizado")
        assert backend.calls == []

    def test_admin_cannot_open_operario(self, client, backend, login_as):
        login_as(["ADMIN"])

        response = client.get("/operario/dashboard")

        assert response.headers["Location"].endswith("/no-autorizado")

    def test_token_roles_cannot_widen_cookie_roles(self, client, backend, login_as):
        login_as(["OPERARIO"])
        forged = jwt.encode(
            {"exp": int(time.time()) + 3600, "roles": ["ADMIN"]}, "otra-clave", algorithm="HS256"
        )
        client.set_cookie(TOKEN_COOKIE, forged)

        response = client.get("/admin/dashboard")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/no-autorizado")
        assert backend.calls == []

    def test_not_authorized_page(self, client, login_as):
        login_as(["OPERARIO"])

        response = client.get("/no-autorizado")

        assert response.status_code == 403
        assert 'href="/operario/dashboard"' in response.get_data(as_text=True)


class TestUnauthorizedInterceptor:
    """A 401 from the backend ends the session wherever it happens."""

    def test_listing_401_redirects_and_clears_cookies(self, client, backend, login_as):
        login_as(["ADMIN"])
        backend.add("GET", "/api/clients", status=401)

        response = client.get("/admin/clientes")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/login?expired=true")
        assert _session_cleared(client)

    def test_concurrent_401_ends_session(self, client, dashboard_backend, login_as):
        login_as(["ADMIN"])
        dashboard_backend.add("GET", "/api/services/today", status=401)

        response = client.get("/admin/dashboard")

        assert response.headers["Location"].endswith("/login?expired=true")
        assert _session_cleared(client)

    def test_json_request_gets_401(self, client, backend, login_as):
        login_as(["ADMIN"])
        backend.add("GET", "/api/chemical_toilets/by-client/3", status=401)

        response = client.get(
            "/admin/servicios/banos-instalados/3", headers={"Accept": "application/json"}
        )

        assert response.status_code == 401
        assert response.get_json()["redirect"] == "/login?expired=true"


class TestPartialData:
    def test_failed_block_shows_warning(self, client, dashboard_backend, login_as):
        login_as(["ADMIN"])
        dashboard_backend.add("GET", "/api/vehicles/total_vehicles", status=500)

        response = client.get("/admin/dashboard")

        assert response.status_code == 200
        page = response.get_data(as_text=True)
        assert "Algunos datos pueden estar incompletos." in page
        assert "30" in page
