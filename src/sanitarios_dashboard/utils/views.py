"""
Helpers shared by the dashboard views.

Views are fetch-then-render: they call one or more actions, turn any
``ApiError`` into a flash message and render whatever data they have.
Session errors are re-raised so the error handlers can end the session.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import urlsplit, urlunsplit

from flask import flash, request
from pydantic import ValidationError as PydanticValidationError

from sanitarios_shared.audit_middleware import audit_action
from sanitarios_shared.constants import DEFAULT_PAGE_SIZE
from sanitarios_shared.errors import ApiError, MissingTokenError, SessionExpiredError
from sanitarios_shared.logging_config import get_logger
from sanitarios_shared.schemas import FormModel, first_error_message
from sanitarios_shared.serializers import extract_items, extract_total
from sanitarios_shared.validation import validate_pagination

logger = get_logger(__name__)

PARTIAL_DATA_MESSAGE = "Algunos datos pueden estar incompletos."


@dataclass
class FormField:
    """One input of the generic form template."""

    name: str
    label: str
    type: str = "text"
    options: list[tuple[str, str]] = field(default_factory=list)
    required: bool = True
    help_text: str = ""


@dataclass
class Column:
    key: str
    label: str


@dataclass
class Listing:
    """Rows of one page of a backend listing plus what the pager needs."""

    rows: list = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    search: str = ""

    @property
    def pages(self) -> int:
        if not self.limit:
            return 1
        return max(1, math.ceil(self.total / self.limit))

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages


def enum_options(enum_cls) -> list[tuple[str, str]]:
    return [(member.value, member.value.replace("_", " ").capitalize()) for member in enum_cls]


def list_args() -> tuple[int, int, str]:
    """``page``, ``limit`` and ``search`` from the query string."""
    page, limit = validate_pagination(
        request.args.get("page", type=int), request.args.get("limit", type=int)
    )
    return page, limit, request.args.get("search", "").strip()


def _reraise_session_errors(e: ApiError) -> None:
    if isinstance(e, (SessionExpiredError, MissingTokenError)):
        raise e


def fetch(func: Callable, *args, default: Any = None, **kwargs) -> Any:
    """Run a read action; on failure flash its message and return ``default``."""
    try:
        return func(*args, **kwargs)
    except ApiError as e:
        _reraise_session_errors(e)
        flash(e.message, "error")
        return default


def fetch_listing(func: Callable, *args, **kwargs) -> Listing:
    """Run a paginated listing action with the pager arguments of the request."""
    page, limit, search = list_args()
    payload = fetch(func, *args, page=page, limit=limit, search=search, default=[], **kwargs)
    rows = extract_items(payload)
    return Listing(
        rows=rows,
        total=extract_total(payload) or len(rows),
        page=page,
        limit=limit,
        search=search,
    )


def run_action(
    func: Callable,
    *args,
    success: str,
    audit: str | None = None,
    audit_details: str = "",
    **kwargs,
) -> bool:
    """
    Run a mutating action and report the outcome as a flash message.

    Returns:
        True when the action succeeded
    """
    try:
        func(*args, **kwargs)
    except ApiError as e:
        _reraise_session_errors(e)
        flash(e.message, "error")
        if audit:
            audit_action(audit, e.message, status="ERROR")
        return False

    flash(success, "success")
    if audit:
        audit_action(audit, audit_details)
    return True


def back_url(fallback: str) -> str:
    """Referring page when it is on this host, otherwise ``fallback``."""
    referrer = request.referrer
    if not referrer:
        return fallback
    parts = urlsplit(referrer)
    if parts.scheme not in ("", "http", "https") or parts.netloc not in ("", request.host):
        return fallback
    if not parts.path.startswith("/") or parts.path.startswith("//") or "\\" in parts.path:
        return fallback
    return urlunsplit(("", "", parts.path, parts.query, ""))


def parse_form(model_cls: type[FormModel], data: dict | None = None) -> FormModel | None:
    """
    Validate the posted form against ``model_cls``.

    Returns None after flashing the first validation message when invalid.
    """
    raw = data if data is not None else request.form.to_dict()
    raw.pop("csrf_token", None)
    try:
        return model_cls.model_validate(raw)
    except PydanticValidationError as e:
        message = first_error_message(e)
        logger.info(f"Invalid {model_cls.__name__}: {message}")
        flash(message, "error")
        return None


def parse_id_list(value: str | None) -> list[int]:
    """``"1, 2,3"`` -> ``[1, 2, 3]``; non numeric parts are ignored."""
    if not value:
        return []
    return [int(part) for part in value.replace(" ", "").split(",") if part.isdigit()]


def flash_partial(results) -> bool:
    """
    Flash the incomplete data warning once if any concurrent call failed.

    A 404 means the record does not exist yet and is not a failure.
    """
    failed = [r for r in results if not r.ok and getattr(r.error, "status", None) != 404]
    for result in failed:
        if isinstance(result.error, ApiError):
            _reraise_session_errors(result.error)
    if failed:
        flash(PARTIAL_DATA_MESSAGE, "warning")
        return True
    return False


def fetch_optional(func: Callable, *args, **kwargs) -> Any:
    """Like ``fetch`` but a 404 silently yields None."""
    try:
        return func(*args, **kwargs)
    except ApiError as e:
        _reraise_session_errors(e)
        if e.status != 404:
            flash(e.message, "error")
        return None
