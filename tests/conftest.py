"""
Shared fixtures for the dashboard tests.

The backend REST API is never contacted: the ``backend`` fixture patches
``requests.adapters.HTTPAdapter.send`` so every request made through
``ApiClient`` is answered from an in-memory route table. Session hooks
(the 401 interceptor) still run because only the transport is replaced.
"""

import json
import time
from urllib.parse import parse_qs, urlsplit
from unittest.mock import patch

import jwt
import pytest
import requests

from sanitarios_dashboard.app import create_app
from sanitarios_shared.constants import TOKEN_COOKIE, USER_COOKIE
from sanitarios_shared.session import encode_user_cookie

API_URL = "http://backend.test"
TOKEN_SIGNING_KEY = "backend-signing-key-used-only-in-tests"


def make_token(expires_in: int | None = 3600, **claims) -> str:
    """Backend style bearer token; ``expires_in=None`` leaves out ``exp``."""
    payload = {"sub": "1", **claims}
    if expires_in is not None:
        payload["exp"] = int(time.time()) + expires_in
    return jwt.encode(payload, TOKEN_SIGNING_KEY, algorithm="HS256")


def build_response(
    request: requests.PreparedRequest,
    status: int = 200,
    body=None,
    content: bytes | None = None,
    content_type: str = "application/json",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    if content is None:
        content = b"" if body is None else json.dumps(body).encode("utf-8")
    response._content = content
    response.headers["Content-Type"] = content_type
    response.url = request.url
    response.encoding = "utf-8"
    response.request = request
    return response


class FakeBackend:
    """Route table keyed by ``(METHOD, path)``; the query string is ignored."""

    def __init__(self):
        self.routes: dict[tuple[str, str], dict] = {}
        self.calls: list[requests.PreparedRequest] = []

    def add(self, method: str, path: str, status: int = 200, body=None, **kwargs) -> None:
        self.routes[(method.upper(), path)] = {"status": status, "body": body, **kwargs}

    def send(self, request: requests.PreparedRequest, **kwargs) -> requests.Response:
        self.calls.append(request)
        path = urlsplit(request.url).path
        route = self.routes.get((request.method, path))
        if route is None:
            raise requests.ConnectionError(f"No route for {request.method} {path}")
        return build_response(request, **route)

    def calls_to(self, method: str, path: str) -> list[requests.PreparedRequest]:
        return [
            c for c in self.calls if c.method == method.upper() and urlsplit(c.url).path == path
        ]

    @staticmethod
    def json_body(request: requests.PreparedRequest):
        return json.loads(request.body) if request.body else None

    @staticmethod
    def query(request: requests.PreparedRequest) -> dict[str, str]:
        return {k: v[0] for k, v in parse_qs(urlsplit(request.url).query).items()}


@pytest.fixture
def app():
    """Dashboard app wired to a fake backend URL, CSRF disabled for form posts."""
    return create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "API_URL": API_URL,
            "WTF_CSRF_ENABLED": False,
            "SESSION_COOKIE_SECURE": False,
        }
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def backend():
    """Answer backend calls from a route table instead of the network."""
    fake = FakeBackend()
    with patch("requests.adapters.HTTPAdapter.send", side_effect=fake.send):
        yield fake


@pytest.fixture
def login_as(app, client):
    """Store a session in the test client's cookies.

    Returns a function ``login_as(roles, token=None, **user)`` that gives
    back the token it stored.
    """

    def _login(roles=("ADMIN",), token: str | None = None, **user) -> str:
        token = token or make_token()
        payload = {"id": user.pop("id", 1), "roles": list(roles), **user}
        with app.app_context():
            cookie = encode_user_cookie(payload)
        client.set_cookie(TOKEN_COOKIE, token)
        client.set_cookie(USER_COOKIE, cookie)
        return token

    return _login


@pytest.fixture
def token_factory():
    """``make_token`` as a fixture, for tests that build their own tokens."""
    return make_token


@pytest.fixture
def response_factory():
    """``build_response`` as a fixture, for tests that drive the client hooks."""
    return build_response


@pytest.fixture
def session_counter():
    """Record every ``requests.Session`` created and closed while active."""
    created, closed = [], []

    class CountingSession(requests.Session):
        def __init__(self):
            super().__init__()
            created.append(self)

        def close(self):
            closed.append(self)
            super().close()

    with patch("requests.Session", CountingSession):
        yield created, closed
