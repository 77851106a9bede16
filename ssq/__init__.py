"""Double Color Ball draw history and number generation service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Flask

try:
    from dotenv import load_dotenv
except ImportError:  # pragma: no cover
    load_dotenv = None  # type: ignore[assignment]


def create_app(overrides: Mapping[str, Any] | None = None) -> Flask:
    """Application factory.

    Args:
        overrides: config values applied over the environment's config class.

    Returns:
        Configured Flask application.
    """
    if load_dotenv is not None:
        load_dotenv()

    from ssq.config import get_config
    from ssq.db import init_db
    from ssq.error_handlers import register_error_handlers
    from ssq.logging_config import configure_logging
    from ssq.routes.crawl import crawl_bp
    from ssq.routes.generate import generate_bp
    from ssq.routes.health import health_bp
    from ssq.routes.history import history_bp

    app = Flask(__name__)
    app.config.from_object(get_config())
    if overrides:
        app.config.update(overrides)

    configure_logging(app)
    init_db(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(history_bp, url_prefix="/api")
    app.register_blueprint(generate_bp, url_prefix="/api")
    app.register_blueprint(crawl_bp, url_prefix="/api")

    return app
