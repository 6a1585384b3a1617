"""
Factory for the WashDesk administration API.

Serves the general admin (``/admin/api``), franchise (``/franchise/api``)
and branch (``/branch/api``) dashboards. Authentication rides on Supabase
access tokens carried in a Bearer header or the ``sb-access-token`` cookie.
"""

from __future__ import annotations

import logging
import os

from flask import Flask, request
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from washdesk_admin.scope_guard import apply_scope_guard
from washdesk_shared.config import (
    load_config,
    read_bool,
    set_active_config,
    validate_required_env_vars,
)
from washdesk_shared.error_handlers import register_error_handlers
from washdesk_shared.jwt_middleware import init_jwt_middleware
from washdesk_shared.logging_config import configure_logging

logger = logging.getLogger(__name__)

DEFAULT_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def create_app() -> Flask:
    """
    Build the Flask application that powers the admin dashboards.
    """
    app = Flask(__name__)

    # Fail fast on missing Supabase credentials
    validate_required_env_vars(skip_in_debug=read_bool("DEBUG_MODE", "false"))

    config = load_config("washdesk-admin")
    set_active_config(config)

    configure_logging(config.app_name, config.log_level)

    app.config["SECRET_KEY"] = config.secret_key
    app.config["APP_NAME"] = config.app_name
    app.config["SUPABASE_JWT_SECRET"] = config.supabase_jwt_secret
    app.config["DEFAULT_LOCALE"] = config.default_locale
    app.config["DEBUG_MODE"] = config.debug_mode
    app.config["DEBUG"] = config.flask_debug

    init_jwt_middleware(app)
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

    from washdesk_admin.routes.api import api_bp
    from washdesk_admin.routes.auth import auth_bp
    from washdesk_admin.routes.branch import branch_api_bp
    from washdesk_admin.routes.franchise import franchise_api_bp
    from washdesk_admin.routes.proxy import proxy_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(proxy_bp)
    app.register_blueprint(api_bp, url_prefix="/admin/api")
    app.register_blueprint(franchise_api_bp, url_prefix="/franchise/api")
    app.register_blueprint(branch_api_bp, url_prefix="/branch/api")

    # Role and franchise checks per dashboard area
    apply_scope_guard(app)

    allowed_origins = config.cors_allowed_origins
    if config.debug_mode or not allowed_origins:
        allowed_origins = DEFAULT_DEV_ORIGINS
    cors_options = {"origins": allowed_origins, "supports_credentials": True}
    CORS(
        app,
        resources={
            r"/api/*": cors_options,
            r"/auth/*": cors_options,
            r"/admin/api/*": cors_options,
            r"/franchise/api/*": cors_options,
            r"/branch/api/*": cors_options,
        },
        supports_credentials=True,
    )

    @app.after_request
    def set_auth_cache_headers(response):
        if request.path.startswith("/auth/"):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Vary"] = "Cookie"
        return response

    logger.info(f"{config.app_name} started (debug={config.debug_mode})")
    return app
