"""
Serializers for consistent JSON responses.
"""

from typing import Any


def success_response(data: Any = None, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"data": data, "error": None}
    if message:
        body["message"] = message
    return body


def error_response(message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Error body returned to JSON clients: ``{"error": message, ...details}``."""
    body: dict[str, Any] = {"error": message, "data": None}
    if details:
        body.update(details)
    return body


def extract_items(payload: Any, *keys: str) -> list:
    """
    Rows of a listing response.

    The backend answers listings either with a bare array or with a page
    object (``{items|data: [...], total, page, ...}``).
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []
    for key in keys or ("items", "data"):
        value = payload.get(key)
        if isinstance(value, list):
            return value
        if isinstance(value, dict):
            nested = extract_items(value, *keys)
            if nested:
                return nested
    return []


def extract_total(payload: Any) -> int:
    """Total row count of a listing, whatever its shape."""
    if isinstance(payload, list):
        return len(payload)
    if isinstance(payload, int):
        return payload
    if not isinstance(payload, dict):
        return 0
    for key in ("total", "totalItems", "count"):
        if isinstance(payload.get(key), int):
            return payload[key]
    meta = payload.get("meta") or payload.get("pagination")
    if isinstance(meta, dict):
        return extract_total(meta)
    return len(extract_items(payload))
