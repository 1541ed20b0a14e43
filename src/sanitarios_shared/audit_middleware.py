import logging
import time
import uuid
from datetime import datetime, timezone

from flask import Flask, Response, g, has_request_context, request

from sanitarios_shared.logging_config import LoggerAdapter
from sanitarios_shared.session import get_user_id

logger = logging.getLogger("audit")


def _request_id() -> str:
    return g.get("request_id") or request.headers.get("X-Request-ID") or "NO_REQUEST"


def init_audit_middleware(app: Flask):
    """
    Registra hooks para auditoría de requests y responses.
    Estándar: USER|ACTION|TYPE|CODE|RETVAL|REQUEST_ID|TIME

    Cada respuesta lleva los headers X-Request-ID y X-Timestamp.
    """

    @app.before_request
    def start_timer():
        g.start_time = time.time()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

    @app.after_request
    def log_request(response: Response):
        response.headers["X-Request-ID"] = _request_id()
        response.headers["X-Timestamp"] = datetime.now(timezone.utc).isoformat()

        if request.path.startswith("/static/"):
            return response

        user_id = get_user_id() or "ANONYMOUS"
        action = f"{request.method} {request.path}"

        duration = 0
        if hasattr(g, "start_time"):
            duration = int((time.time() - g.start_time) * 1000)

        status_code = response.status_code
        if response.direct_passthrough:
            content_length = 0
        else:
            content_length = response.content_length or 0
        retval = f"{content_length} bytes"

        log_line = f"{user_id}|{action}|RESPONSE|{status_code}|{retval}|{_request_id()}|{duration}ms"

        # Nivel de log: Error si 5xx, Warn si 4xx, Info si 2xx/3xx
        if status_code >= 500:
            logger.error(log_line)
        elif status_code >= 400:
            logger.warning(log_line)
        else:
            logger.info(log_line)

        return response


def audit_action(action_name: str, details: str = "", status: str = "OK"):
    """
    Registra una acción interna de negocio (alta, baja, aprobación...).
    Usa el mismo estándar con TYPE forzado a 'INTERNAL'.
    """
    if has_request_context():
        user_id = get_user_id() or "ANONYMOUS"
        request_id = _request_id()
        duration = int((time.time() - g.start_time) * 1000) if hasattr(g, "start_time") else 0
    else:
        user_id = "SYSTEM"
        request_id = "BACKGROUND"
        duration = 0

    adapter = LoggerAdapter(logger, {"request_id": request_id})
    adapter.info(f"{user_id}|{action_name}|INTERNAL|{status}|{details}|{request_id}|{duration}ms")
