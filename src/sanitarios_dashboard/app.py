"""
Factory for the sanitation company Flask dashboard.

The dashboard keeps no data of its own: every page is rendered from the
backend REST API using the bearer token stored in the ``token`` cookie.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from flask import Flask, jsonify, request, url_for
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from sanitarios_shared.api_client import init_api_client
from sanitarios_shared.audit_middleware import init_audit_middleware
from sanitarios_shared.config import load_config, validate_required_env_vars
from sanitarios_shared.constants import Roles
from sanitarios_shared.error_handlers import register_error_handlers
from sanitarios_shared.extensions import csrf
from sanitarios_shared.logging_config import configure_logging
from sanitarios_shared.security_middleware import (
    configure_security_headers,
    configure_session_security,
)
from sanitarios_shared.session import get_current_user, get_user_roles, init_session_middleware

logger = logging.getLogger(__name__)

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5000",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5000",
]


def create_app(test_config: dict | None = None) -> Flask:
    """
    Build the Flask application that powers the dashboard.

    Args:
        test_config: settings applied over the environment, used by tests
    """
    app_root = Path(__file__).resolve().parent
    app = Flask(
        __name__,
        template_folder=str(app_root / "templates"),
        static_folder=str(app_root / "static"),
    )

    config = load_config("sanitarios-dashboard")
    configure_logging(config.app_name, config.log_level)

    app.config["APP_NAME"] = config.app_name
    app.config["SECRET_KEY"] = config.secret_key
    app.config["API_URL"] = config.api_url
    app.config["API_TIMEOUT_SECONDS"] = config.api_timeout_seconds
    app.config["TOKEN_EXPIRY_MARGIN_SECONDS"] = config.token_expiry_margin_seconds
    app.config["SESSION_CHECK_INTERVAL_SECONDS"] = config.session_check_interval_seconds
    app.config["SESSION_COOKIE_MAX_AGE"] = config.session_cookie_max_age
    app.config["DEBUG_MODE"] = config.debug_mode
    app.config["DEBUG"] = config.flask_debug

    # CSRF Protection configuration (BEFORE registering blueprints)
    app.config["WTF_CSRF_ENABLED"] = True
    app.config["WTF_CSRF_TIME_LIMIT"] = 3600  # 1 hour CSRF token validity

    if test_config:
        app.config.update(test_config)

    # Validate all required environment variables (fail-fast)
    if not app.config.get("TESTING"):
        validate_required_env_vars(skip_in_debug=True)

    init_session_middleware(app)
    init_audit_middleware(app)
    init_api_client(app)
    configure_security_headers(app)
    configure_session_security(app)
    register_error_handlers(app)

    # ProxyFix: Trust X-Forwarded-* headers from reverse proxy
    num_proxies = int(os.getenv("NUM_PROXIES", "0"))
    if num_proxies > 0:
        app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_for=num_proxies,
            x_proto=num_proxies,
            x_host=num_proxies,
            x_port=num_proxies,
        )

    csrf.init_app(app)

    # Register blueprints
    from sanitarios_dashboard.routes.admin import register_admin_areas
    from sanitarios_dashboard.routes.auth import auth_bp
    from sanitarios_dashboard.routes.operario import operario_bp
    from sanitarios_dashboard.routes.session_api import session_api_bp

    app.register_blueprint(auth_bp)
    register_admin_areas(app)
    app.register_blueprint(operario_bp)
    app.register_blueprint(session_api_bp)

    # The session API is called by fetch() without a form token
    csrf.exempt(session_api_bp)

    # Configure CORS with secure defaults
    allowed_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ]
    if config.debug_mode or not allowed_origins:
        allowed_origins = DEV_ORIGINS
    CORS(
        app,
        resources={r"/api/*": {"origins": allowed_origins, "supports_credentials": True}},
        supports_credentials=True,
    )

    @app.get("/health")
    def health():
        return jsonify({"status": "ok", "app": config.app_name})

    @app.template_filter("display")
    def display(value) -> str:
        """Render backend values in tables: lists joined, booleans in Spanish."""
        if value is None or value == "":
            return "-"
        if isinstance(value, bool):
            return "Sí" if value else "No"
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        if isinstance(value, str) and len(value) >= 19 and value[10] == "T":
            # ISO timestamps from the backend
            return value[:10]
        return str(value)

    def page_url(page: int) -> str:
        """Current URL with the query string kept and ``page`` replaced."""
        args = request.args.to_dict()
        args["page"] = page
        return url_for(request.endpoint, **(request.view_args or {}), **args)

    @app.context_processor
    def inject_globals():
        roles = get_user_roles()
        blueprints = request.blueprints
        return {
            "page_url": page_url,
            "app_name": config.app_name,
            "current_year": datetime.utcnow().year,
            "current_user": get_current_user(),
            "user_roles": roles,
            "is_admin": Roles.is_admin(roles),
            "area": blueprints[-1] if blueprints else None,
            "session_check_interval": app.config["SESSION_CHECK_INTERVAL_SECONDS"],
        }

    logger.info(f"{config.app_name} ready, backend at {app.config['API_URL']}")
    return app
