"""
Authenticated client for the backend REST API.

Every server action goes through the same three pieces:

- ``create_auth_headers`` attaches the bearer token read from the session
  cookie, failing before any network call when there is none.
- ``handle_api_response`` turns non-2xx responses into ``ApiError`` carrying
  the backend ``message`` (or the action's default message).
- ``server_action`` wraps the action so every failure leaves it as an
  ``ApiError`` that has already been logged with its context.

``ApiClient`` owns a ``requests.Session`` whose response hook raises
``SessionExpiredError`` on 401, so an expired session is detected on any
authenticated call without patching anything global. The client lives on
``g`` and is closed when its app context is torn down.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import wraps
from http import HTTPStatus
from typing import Any, Callable

import requests
from flask import copy_current_request_context, current_app, g, has_request_context

from sanitarios_shared.constants import DEFAULT_PAGE_SIZE
from sanitarios_shared.errors import (
    ApiError,
    InvalidTokenError,
    MissingTokenError,
    SessionExpiredError,
)
from sanitarios_shared.jwt_service import seconds_until_expiry
from sanitarios_shared.logging_config import get_logger
from sanitarios_shared.session import get_session_token

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10


def create_auth_headers(
    token: str | None = None, content_type: str = "application/json"
) -> dict[str, str]:
    """
    Build the headers of an authenticated request.

    Args:
        token: Bearer token; read from the session cookie when omitted
        content_type: Value of the Content-Type header

    Raises:
        MissingTokenError: If there is no token to send
    """
    if token is None and has_request_context():
        token = get_session_token()
    if not token:
        raise MissingTokenError()

    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": content_type,
    }


def _error_message_from(response: requests.Response, default_message: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return default_message

    if not isinstance(data, dict):
        return default_message

    message = data.get("message") or data.get("error")
    if isinstance(message, list):
        message = ", ".join(str(m) for m in message)
    return str(message) if message else default_message


def handle_api_response(
    response: requests.Response,
    default_message: str,
    context: dict[str, Any] | None = None,
) -> Any:
    """
    Return the parsed body of a successful response or raise ``ApiError``.

    Successful responses without content (204 or an empty body) yield ``{}``.
    """
    if not response.ok:
        message = _error_message_from(response, default_message)
        logger.warning(
            f"Backend error {response.status_code} on {response.request.method if response.request else ''} "
            f"{response.url}: {message}"
        )
        raise ApiError(message, status=response.status_code, context=context)

    if response.status_code == HTTPStatus.NO_CONTENT or not response.content:
        return {}

    try:
        return response.json()
    except ValueError as e:
        snippet = response.text[:100]
        raise ApiError(
            f"Respuesta JSON inválida: {snippet}...", status=response.status_code, context=context
        ) from e


def server_action(fallback_message: str, context: dict[str, Any] | None = None):
    """
    Decorator factory giving an action a uniform failure contract.

    ``ApiError`` raised inside the action propagates unchanged; network
    errors and anything unexpected are logged and re-raised as
    ``ApiError(fallback_message)``.

    Args:
        fallback_message: Message used when the failure carries none
        context: Extra fields (endpoint, method, ...) added to the log line
    """

    def decorator(f: Callable) -> Callable:
        action_context = {"action": f"{f.__module__}.{f.__name__}", **(context or {})}

        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ApiError as e:
                if not e.context:
                    e.context = action_context
                logger.error(
                    f"{action_context['action']} failed: {e.message}",
                    extra={"status": e.status, "context": action_context},
                )
                raise
            except requests.RequestException as e:
                logger.error(
                    f"{action_context['action']} could not reach the backend: {e}",
                    extra={"context": action_context},
                )
                raise ApiError(fallback_message, context=action_context) from e
            except Exception as e:
                logger.error(
                    f"{action_context['action']} raised unexpectedly: {e}",
                    exc_info=True,
                    extra={"context": action_context},
                )
                raise ApiError(fallback_message, context=action_context) from e

        return decorated_function

    return decorator


class ApiClient:
    """HTTP client bound to one backend base URL and one bearer token."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.hooks["response"].append(self._intercept_unauthorized)

    def _intercept_unauthorized(self, response: requests.Response, *args, **kwargs):
        """Response hook: a 401 on an authenticated call ends the session."""
        sent_auth = "Authorization" in (response.request.headers if response.request else {})
        if response.status_code == HTTPStatus.UNAUTHORIZED and sent_auth:
            logger.warning(f"Backend rejected the session token on {response.url}")
            raise SessionExpiredError(
                context={"endpoint": response.url, "status": response.status_code}
            )
        return response

    def _ensure_not_expired(self) -> None:
        # Only JWTs with a readable exp claim are checked; opaque tokens go to the backend
        try:
            remaining = seconds_until_expiry(self.token)
        except InvalidTokenError:
            return
        if remaining is not None and remaining <= 0:
            logger.info("Skipping backend call: session token already expired")
            raise SessionExpiredError()

    def build_url(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        auth: bool = True,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """
        Send one request to the backend.

        Raises:
            MissingTokenError: ``auth`` is set and there is no token
            SessionExpiredError: the token is expired or the backend answers 401
            requests.RequestException: the backend could not be reached
        """
        if auth:
            request_headers = create_auth_headers(self.token)
            self._ensure_not_expired()
        else:
            request_headers = {"Content-Type": "application/json"}
        request_headers["Accept"] = "application/json"
        if headers:
            request_headers.update(headers)

        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}

        url = self.build_url(path)
        start = time.time()
        response = self.session.request(
            method.upper(),
            url,
            params=params or None,
            json=json,
            headers=request_headers,
            timeout=self.timeout,
        )
        duration = int((time.time() - start) * 1000)
        logger.debug(f"{method.upper()} {url} - {response.status_code} ({duration}ms)")
        return response

    def get(self, path: str, **kwargs) -> requests.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> requests.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> requests.Response:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs) -> requests.Response:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self.session.close()


def get_api_client() -> ApiClient:
    """
    Client for the current request, created on first use.

    The token is read from the session cookie at creation time.
    """
    client = g.get("api_client")
    if client is None:
        client = ApiClient(
            base_url=current_app.config["API_URL"],
            token=get_session_token(),
            timeout=current_app.config.get("API_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        )
        g.api_client = client
    return client


def init_api_client(app) -> None:
    """Close the per-context client (and its connection pool) on teardown."""

    @app.teardown_appcontext
    def close_api_client(exc):
        client = g.pop("api_client", None)
        if client is not None:
            client.close()


def page_params(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, search: str = "", **extra) -> dict:
    """Query string shared by every paginated listing."""
    params = {"page": page, "limit": limit, "search": search}
    params.update(extra)
    return params


@dataclass
class Settled:
    """Outcome of one call run by ``gather_settled``."""

    ok: bool
    value: Any = None
    error: Exception | None = None


def gather_settled(*calls: Callable[[], Any], max_workers: int | None = None) -> list[Settled]:
    """
    Run independent zero-argument calls concurrently and wait for all of them.

    A failing call never prevents the others from completing; results keep
    the order of ``calls``. Each call runs inside a copy of the current
    request context so it can read the session cookies.
    """
    if not calls:
        return []

    if has_request_context():
        runnable = [copy_current_request_context(call) for call in calls]
    else:
        runnable = list(calls)

    def _settle(call: Callable[[], Any]) -> Settled:
        try:
            return Settled(ok=True, value=call())
        except Exception as e:
            logger.warning(f"Concurrent call failed: {e}")
            return Settled(ok=False, error=e)

    with ThreadPoolExecutor(max_workers=max_workers or len(runnable)) as executor:
        return list(executor.map(_settle, runnable))
