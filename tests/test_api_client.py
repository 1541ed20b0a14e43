"""
Unit tests for the backend client: headers, response handling, the
server action contract, the 401 interceptor and gather_settled.
"""

import pytest
import requests

from sanitarios_shared.api_client import (
    ApiClient,
    create_auth_headers,
    gather_settled,
    get_api_client,
    handle_api_response,
    page_params,
    server_action,
)
from sanitarios_shared.errors import ApiError, MissingTokenError, SessionExpiredError

BASE_URL = "http://backend.test"


@pytest.fixture
def prepared_get():
    return requests.Request("GET", f"{BASE_URL}/api/clients").prepare()


class TestCreateAuthHeaders:
    """Tests for create_auth_headers."""

    def test_bearer_and_content_type(self):
        headers = create_auth_headers("abc")

        assert headers == {"Authorization": "Bearer abc", "Content-Type": "application/json"}

    def test_custom_content_type(self):
        headers = create_auth_headers("abc", content_type="multipart/form-data")

        assert headers["Content-Type"] == "multipart/form-data"

    def test_missing_token_fails_before_any_call(self):
        with pytest.raises(MissingTokenError) as exc_info:
            create_auth_headers(None)

        assert exc_info.value.message == "Token no encontrado"
        assert exc_info.value.status == 401

    def test_reads_token_cookie_in_request_context(self, app):
        with app.test_request_context(headers={"Cookie": "token=from-cookie"}):
            headers = create_auth_headers()

        assert headers["Authorization"] == "Bearer from-cookie"


class TestHandleApiResponse:
    """Tests for handle_api_response."""

    def test_returns_parsed_body(self, prepared_get, response_factory):
        response = response_factory(prepared_get, body={"items": [1, 2]})

        assert handle_api_response(response, "Error") == {"items": [1, 2]}

    def test_no_content_yields_empty_dict(self, prepared_get, response_factory):
        response = response_factory(prepared_get, status=204)

        assert handle_api_response(response, "Error") == {}

    def test_backend_message_wins_over_default(self, prepared_get, response_factory):
        response = response_factory(prepared_get, status=400, body={"message": "CUIT duplicado"})

        with pytest.raises(ApiError) as exc_info:
            handle_api_response(response, "Error al crear el cliente")

        assert exc_info.value.message == "CUIT duplicado"
        assert exc_info.value.status == 400

    def test_message_list_is_joined(self, prepared_get, response_factory):
        response = response_factory(
            prepared_get, status=422, body={"message": ["nombre vacío", "email inválido"]}
        )

        with pytest.raises(ApiError) as exc_info:
            handle_api_response(response, "Error")

        assert exc_info.value.message == "nombre vacío, email inválido"

    def test_default_message_without_json_body(self, prepared_get, response_factory):
        response = response_factory(
            prepared_get, status=500, content=b"<html>boom</html>", content_type="text/html"
        )

        with pytest.raises(ApiError) as exc_info:
            handle_api_response(response, "Error al obtener los clientes")

        assert exc_info.value.message == "Error al obtener los clientes"
        assert exc_info.value.status == 500

    def test_invalid_json_on_success(self, prepared_get, response_factory):
        response = response_factory(prepared_get, content=b"not json")

        with pytest.raises(ApiError) as exc_info:
            handle_api_response(response, "Error")

        assert exc_info.value.message.startswith("Respuesta JSON inválida")


class TestServerAction:
    """Tests for the server_action decorator."""

    def test_api_error_propagates_with_context(self):
        @server_action("fallback")
        def failing():
            raise ApiError("from backend", status=409)

        with pytest.raises(ApiError) as exc_info:
            failing()

        assert exc_info.value.message == "from backend"
        assert exc_info.value.status == 409
        assert exc_info.value.context["action"].endswith("failing")

    def test_network_error_becomes_fallback(self):
        @server_action("No se pudo conectar")
        def unreachable():
            raise requests.ConnectionError("refused")

        with pytest.raises(ApiError) as exc_info:
            unreachable()

        assert exc_info.value.message == "No se pudo conectar"
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_unexpected_error_becomes_fallback(self):
        @server_action("Error inesperado")
        def broken():
            raise KeyError("access_token")

        with pytest.raises(ApiError) as exc_info:
            broken()

        assert exc_info.value.message == "Error inesperado"

    def test_session_errors_keep_their_type(self):
        @server_action("fallback")
        def expired():
            raise SessionExpiredError()

        with pytest.raises(SessionExpiredError):
            expired()

    def test_success_returns_value(self):
        @server_action("fallback")
        def ok():
            return {"id": 1}

        assert ok() == {"id": 1}


class TestApiClient:
    """Tests for ApiClient against the fake backend."""

    def test_sends_bearer_token(self, backend, token_factory):
        token = token_factory()
        backend.add("GET", "/api/clients", body=[])

        ApiClient(BASE_URL, token=token).get("/api/clients")

        sent = backend.calls[-1]
        assert sent.headers["Authorization"] == f"Bearer {token}"
        assert sent.headers["Accept"] == "application/json"

    def test_drops_empty_query_params(self, backend, token_factory):
        backend.add("GET", "/api/services", body=[])

        ApiClient(BASE_URL, token=token_factory()).get(
            "/api/services", params={"page": 2, "estado": "", "tipoServicio": None}
        )

        assert backend.query(backend.calls[-1]) == {"page": "2"}

    def test_unauthorized_response_raises_session_expired(self, backend, token_factory):
        backend.add("GET", "/api/clients", status=401, body={"message": "Unauthorized"})

        with pytest.raises(SessionExpiredError) as exc_info:
            ApiClient(BASE_URL, token=token_factory()).get("/api/clients")

        assert exc_info.value.context["endpoint"].endswith("/api/clients")

    def test_unauthenticated_401_is_returned(self, backend):
        backend.add("POST", "/api/auth/login", status=401, body={"message": "Unauthorized"})

        response = ApiClient(BASE_URL).post("/api/auth/login", json={}, auth=False)

        assert response.status_code == 401

    def test_expired_token_makes_no_call(self, backend, token_factory):
        with pytest.raises(SessionExpiredError):
            ApiClient(BASE_URL, token=token_factory(expires_in=-5)).get("/api/clients")

        assert backend.calls == []

    def test_token_close_to_expiry_still_reaches_backend(self, backend, token_factory):
        backend.add("POST", "/api/auth/refresh", body={"access_token": "new"})

        response = ApiClient(BASE_URL, token=token_factory(expires_in=60)).post("/api/auth/refresh")

        assert response.status_code == 200

    def test_missing_token_makes_no_call(self, backend):
        with pytest.raises(MissingTokenError):
            ApiClient(BASE_URL).get("/api/clients")

        assert backend.calls == []

    def test_build_url_adds_slash(self):
        assert ApiClient(f"{BASE_URL}/").build_url("api/users") == f"{BASE_URL}/api/users"

    def test_one_client_per_request(self, app):
        with app.test_request_context(headers={"Cookie": "token=abc"}):
            first = get_api_client()
            second = get_api_client()

        assert first is second
        assert first.token == "abc"
        assert first.base_url == BASE_URL


class TestPageParams:
    def test_extra_filters_are_merged(self):
        assert page_params(2, 10, "pérez", estado="ACTIVO") == {
            "page": 2,
            "limit": 10,
            "search": "pérez",
            "estado": "ACTIVO",
        }


class TestGatherSettled:
    """Tests for gather_settled."""

    def test_keeps_call_order(self):
        results = gather_settled(lambda: 1, lambda: 2, lambda: 3)

        assert [r.value for r in results] == [1, 2, 3]
        assert all(r.ok for r in results)

    def test_failure_does_not_cancel_the_others(self):
        def failing():
            raise ApiError("Error al obtener los vehículos", status=500)

        results = gather_settled(lambda: "empleados", failing, lambda: "baños")

        assert [r.ok for r in results] == [True, False, True]
        assert results[1].error.message == "Error al obtener los vehículos"
        assert results[2].value == "baños"

    def test_no_calls(self):
        assert gather_settled() == []

    def test_calls_see_the_request_cookies(self, app):
        from sanitarios_shared.session import get_session_token

        with app.test_request_context(headers={"Cookie": "token=abc"}):
            results = gather_settled(get_session_token, get_session_token)

        assert [r.value for r in results] == ["abc", "abc"]


class TestClientLifecycle:
    """The per-context client is closed on teardown, worker threads included."""

    def test_request_client_is_closed(self, app, session_counter):
        created, closed = session_counter

        with app.test_request_context(headers={"Cookie": "token=abc"}):
            client = get_api_client()

        assert created == [client.session]
        assert closed == [client.session]

    def test_concurrent_clients_are_closed(self, app, backend, session_counter, token_factory):
        created, closed = session_counter
        backend.add("GET", "/api/vehicles/total_vehicles", body={"total": 4})

        def total_vehicles():
            return get_api_client().get("/api/vehicles/total_vehicles").json()

        with app.test_request_context(headers={"Cookie": f"token={token_factory()}"}):
            results = gather_settled(total_vehicles, total_vehicles, total_vehicles)

        assert [r.value for r in results] == [{"total": 4}] * 3
        assert len(created) == 3
        assert {id(s) for s in closed} == {id(s) for s in created}
