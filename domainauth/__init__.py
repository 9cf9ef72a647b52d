"""
Flask application factory for the domain authentication checker.

Creates and configures the Flask application, sets up logging, builds
the shared TXT resolver and registers the API blueprint.
"""

from __future__ import annotations

import logging
import sys

from flask import Flask, Response

from domainauth.checker.resolver import TxtResolver
from domainauth.config import Config
from domainauth.models import DnsSettings

RESOLVER_EXTENSION = "domainauth.resolver"


def _configure_logging(debug: bool) -> None:
    """Configure root logger for the application.

    Logging is sent to stdout so most WSGI hosts capture it
    automatically without requiring file handlers.

    Format: timestamp  level  logger-name  message

    Args:
        debug: When True, sets the root level to DEBUG.  Otherwise INFO.
    """
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
    )

    root_logger = logging.getLogger()
    # Avoid adding duplicate handlers if create_app() is called multiple times
    # (e.g. in tests).
    if not root_logger.handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def create_app(config_object: object = Config) -> Flask:
    """Application factory.

    Args:
        config_object: Configuration class or object to load settings from.

    Returns:
        A fully configured Flask application instance.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.json.sort_keys = False

    _configure_logging(debug=app.debug)

    # One resolver per app; it builds a fresh dnspython resolver per query
    settings = DnsSettings.from_config(app.config)
    app.extensions[RESOLVER_EXTENSION] = TxtResolver(settings)

    from domainauth.api import bp as api_bp

    app.register_blueprint(api_bp)

    @app.after_request
    def set_security_headers(response: Response) -> Response:
        """Attach security-related HTTP response headers."""
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    return app
