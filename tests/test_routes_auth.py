"""
Login, logout and password routes.
"""

import pytest

from sanitarios_shared.session import decode_user_cookie


@pytest.fixture
def login_backend(backend, token_factory):
    """Backend that accepts any credentials for the given roles."""

    def _accept(roles, **user):
        token = token_factory()
        backend.add(
            "POST",
            "/api/auth/login",
            body={"access_token": token, "user": {"id": 5, "roles": roles, **user}},
        )
        return token

    return _accept


class TestLoginPage:
    def test_renders_form(self, client):
        response = client.get("/login")

        assert response.status_code == 200
        assert "Iniciar sesión" in response.get_data(as_text=True)

    def test_expired_notice(self, client):
        response = client.get("/login?expired=true")

        assert "Tu sesión ha expirado" in response.get_data(as_text=True)

    def test_logged_in_user_goes_to_dashboard(self, client, login_as):
        login_as(["OPERARIO"])

        response = client.get("/login")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/operario/dashboard")

    def test_root_without_session(self, client):
        response = client.get("/")

        assert response.headers["Location"].endswith("/login")


class TestLogin:
    """Tests for POST /login."""

    def test_admin_login_sets_cookies(self, client, login_backend):
        token = login_backend(["admin"], nombre="Laura")

        response = client.post(
            "/login", data={"email": "Laura@Empresa.com", "password": "secreto1"}
        )

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/admin/dashboard")
        assert client.get_cookie("token").value == token
        assert client.get_cookie("user") is not None

    def test_user_cookie_carries_roles(self, app, client, login_backend):
        login_backend(["OPERARIO"], empleadoId=9)

        client.post("/login", data={"email": "op@empresa.com", "password": "secreto1"})

        with app.test_request_context():
            user = decode_user_cookie(client.get_cookie("user").value)
        assert user == {"id": 5, "roles": ["OPERARIO"], "empleadoId": 9}

    def test_email_is_normalized_before_sending(self, client, backend, login_backend):
        login_backend(["ADMIN"])

        client.post("/login", data={"email": " Laura@Empresa.com ", "password": "secreto1"})

        sent = backend.json_body(backend.calls_to("POST", "/api/auth/login")[-1])
        assert sent["email"] == "laura@empresa.com"

    def test_role_without_dashboard(self, client, login_backend):
        login_backend(["INVITADO"])

        response = client.post("/login", data={"email": "x@empresa.com", "password": "secreto1"})

        assert response.headers["Location"].endswith("/no-autorizado")

    def test_invalid_credentials(self, client, backend):
        backend.add("POST", "/api/auth/login", status=401, body={"message": "Unauthorized"})

        response = client.post("/login", data={"email": "x@empresa.com", "password": "mala"})

        assert response.status_code == 401
        assert "Credenciales inválidas" in response.get_data(as_text=True)
        assert client.get_cookie("token") is None

    def test_missing_password(self, client, backend):
        response = client.post("/login", data={"email": "x@empresa.com"})

        assert response.status_code == 400
        assert backend.calls == []


class TestLogout:
    def test_clears_both_cookies(self, client, login_as):
        login_as(["ADMIN"])

        response = client.post("/logout")

        assert response.headers["Location"].endswith("/login")
        assert client.get_cookie("token") is None
        assert client.get_cookie("user") is None


class TestPasswords:
    def test_change_password_requires_session(self, client):
        response = client.get("/change-password")

        assert response.headers["Location"].endswith("/login?expired=true")

    def test_change_password(self, client, backend, login_as):
        login_as(["ADMIN"])
        backend.add("PUT", "/api/auth/change_password", body={"message": "ok"})

        response = client.post(
            "/change-password",
            data={
                "oldPassword": "vieja123",
                "newPassword": "nueva123",
                "confirmPassword": "nueva123",
            },
        )

        assert response.headers["Location"].endswith("/admin/dashboard")
        assert backend.json_body(backend.calls[-1]) == {
            "oldPassword": "vieja123",
            "newPassword": "nueva123",
        }

    def test_weak_new_password_is_not_sent(self, client, backend, login_as):
        login_as(["ADMIN"])

        response = client.post(
            "/change-password", data={"oldPassword": "vieja123", "newPassword": "abcdefg"}
        )

        assert response.status_code == 200
        assert "La contraseña debe tener al menos un número" in response.get_data(as_text=True)
        assert backend.calls == []

    def test_forgot_password(self, client, backend):
        backend.add("POST", "/api/auth/forgot_password", body={})

        response = client.post("/forgot-password", data={"email": "ana@empresa.com"})

        assert response.headers["Location"].endswith("/login")
        assert backend.json_body(backend.calls[-1]) == {"email": "ana@empresa.com"}
