"""
Application factory for ServiceBook.

This module provides a function to create and configure the Flask
application. All extensions (SQLAlchemy, Migrate, JWT) are initialised
here. The blueprints for the ordered resources (pricing parameters,
exclude parameters and extras) are registered inside the factory to
allow for modular development and unit testing.

Environment variables control the database connection, the secret key,
the first order key of a collection and logging. In production set
``DATABASE_URL`` and ``JWT_SECRET_KEY``. A default configuration is
provided for development, using SQLite when no database URL is
available.
"""

from __future__ import annotations

import os
from datetime import timedelta

from flask import Flask
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager

# instantiate extensions without binding them to an app yet.  They will
# be bound in create_app().
from .db import db  # use shared db object from db.py
migrate = Migrate()
jwt = JWTManager()


def create_app(test_config: dict | None = None) -> Flask:
    """Create and configure a Flask application.

    Parameters
    ----------
    test_config: dict | None, optional
        Optional configuration overrides used when running tests.

    Returns
    -------
    Flask
        A configured Flask application instance.
    """
    app = Flask(__name__)

    # Default configuration. Override using environment variables or
    # by passing a ``test_config`` mapping.
    app.config.update(
        SQLALCHEMY_DATABASE_URI=os.environ.get("DATABASE_URL", "sqlite:///servicebook.db"),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        JWT_SECRET_KEY=os.environ.get("JWT_SECRET_KEY", "please-change-this-secret-key"),
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(days=1),
        ORDER_KEY_BASE=int(os.environ.get("ORDER_KEY_BASE", "0")),
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO"),
        LOG_FILE=os.environ.get("LOG_FILE"),
        LOG_MAX_BYTES=int(os.environ.get("LOG_MAX_BYTES", str(5 * 1024 * 1024))),
        LOG_BACKUP_COUNT=int(os.environ.get("LOG_BACKUP_COUNT", "3")),
    )

    if test_config:
        app.config.update(test_config)

    from .logging_config import setup_logging
    setup_logging(app)

    # Initialise extensions with the app
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # Register custom error handlers
    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints. Importing here avoids circular imports.
    from .routes.pricing_parameters import pricing_parameters_bp
    from .routes.exclude_parameters import exclude_parameters_bp
    from .routes.extras import extras_bp

    app.register_blueprint(pricing_parameters_bp, url_prefix="/api")
    app.register_blueprint(exclude_parameters_bp, url_prefix="/api")
    app.register_blueprint(extras_bp, url_prefix="/api")

    # Provide a simple health check route
    @app.route("/api/health")
    def health_check() -> dict[str, str]:
        """Return a simple health check response.

        This endpoint can be used by deployment platforms to verify
        that the application has started correctly.
        """
        return {"status": "ok"}

    return app
