"""
Centralized error handlers for Flask applications.
"""

from http import HTTPStatus

from flask import Flask, flash, jsonify, redirect, render_template, request
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from sanitarios_shared.constants import LOGIN_EXPIRED_URL
from sanitarios_shared.errors import ApiError, MissingTokenError, SessionExpiredError
from sanitarios_shared.logging_config import get_logger
from sanitarios_shared.schemas import first_error_message
from sanitarios_shared.serializers import error_response
from sanitarios_shared.session import clear_session_cookies
from sanitarios_shared.validation import ValidationError

logger = get_logger(__name__)


def should_return_json() -> bool:
    """
    Determine if the response should be JSON based on request context.
    Returns true if path starts with /api/ or client explicitly asks for JSON (and not HTML).
    """
    return request.path.startswith("/api/") or (
        request.accept_mimetypes.accept_json and not request.accept_mimetypes.accept_html
    )


def _render_error(message: str, code: int):
    return render_template("error.html", error=message, code=code), code


def register_error_handlers(app: Flask) -> None:
    """
    Register centralized error handlers for the Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(SessionExpiredError)
    @app.errorhandler(MissingTokenError)
    def handle_session_error(e: ApiError):
        """The backend rejected the token, or there was none: drop the session."""
        logger.warning(f"Session ended on {request.method} {request.path}: {e.message}")
        if should_return_json():
            response = jsonify(error_response(e.message, {"redirect": LOGIN_EXPIRED_URL}))
            response.status_code = HTTPStatus.UNAUTHORIZED
            return clear_session_cookies(response)
        flash(e.message, "error")
        return clear_session_cookies(redirect(LOGIN_EXPIRED_URL))

    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        """Backend failures that no view turned into a flash message."""
        logger.error(f"Unhandled backend error ({e.status}): {e.message}", extra={"context": e.context})
        status = e.status if e.status and e.status >= 400 else HTTPStatus.BAD_GATEWAY
        if should_return_json():
            return jsonify(error_response(e.message)), status
        return _render_error(e.message, status)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        """Handle custom validation errors."""
        logger.warning(f"Validation error: {e}")
        if should_return_json():
            return jsonify(error_response(str(e))), HTTPStatus.BAD_REQUEST
        return _render_error(str(e), 400)

    @app.errorhandler(PydanticValidationError)
    def handle_pydantic_validation_error(e: PydanticValidationError):
        """Handle Pydantic validation errors."""
        logger.warning(f"Pydantic validation error: {e}")
        message = first_error_message(e)
        if should_return_json():
            return jsonify(
                error_response(message, {"details": e.errors(include_url=False)})
            ), HTTPStatus.BAD_REQUEST
        return _render_error(message, 400)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        """Handle HTTP exceptions from Werkzeug."""
        messages = {
            404: "Recurso no encontrado",
            405: "Método no permitido",
        }
        message = messages.get(e.code, e.description or str(e))
        logger.warning(f"HTTP exception {e.code}: {e.description}")
        if should_return_json():
            return jsonify(error_response(message)), e.code
        return _render_error(message, e.code)

    @app.errorhandler(Exception)
    def handle_generic_exception(e: Exception):
        """Handle any unhandled exceptions."""
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        if should_return_json():
            return jsonify(
                error_response("Error interno del servidor")
            ), HTTPStatus.INTERNAL_SERVER_ERROR
        return _render_error("Error interno del servidor", 500)
