"""Application factory and blueprint registration."""
from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from loguru import logger

from .api.health.routes import bp as health_bp
from .api.users.routes import bp as users_bp
from .config import BaseConfig
from .docs.routes import bp as docs_bp
from .errors import register_error_handlers
from .logging_setup import setup_logging
from .repositories.base import UserRepository
from .repositories.factory import init_storage


def create_app(
    config_class: type[BaseConfig] | BaseConfig | None = None,
    repository: UserRepository | None = None,
) -> Flask:
    """Create and configure the Flask application.

    ``repository`` replaces the configured storage backend, which lets
    callers (tests, embedding applications) hand in their own store.
    """
    config = config_class() if isinstance(config_class, type) else (config_class or BaseConfig())

    app = Flask(__name__)
    app.config.from_object(config)
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    setup_logging(app.config["LOG_LEVEL"], app.config.get("LOG_FILE"))

    prefix = app.config["API_PREFIX"].rstrip("/")
    origins = [o.strip() for o in app.config["CORS_ORIGINS"].split(",") if o.strip()]
    CORS(app, resources={rf"{prefix}/*": {"origins": origins}}, expose_headers=["Location"])

    # Init storage
    init_storage(app, repository)

    # Register blueprints
    app.register_blueprint(health_bp, url_prefix="/api/health")
    app.register_blueprint(users_bp, url_prefix=f"{prefix}/users")
    app.register_blueprint(docs_bp)

    # Global error handlers
    register_error_handlers(app)

    logger.info("User service ready at {}/users", prefix)
    return app
