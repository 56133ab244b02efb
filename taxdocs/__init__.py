"""
taxdocs/__init__.py

Flask application factory for the tax documents engine.

- SQLite for development, any SQLAlchemy URL in production (DATABASE_URL).
- Schema is managed with Flask-Migrate.
- Domain errors are rendered as JSON: {"error": code, "message": ...}.
"""

from __future__ import annotations

import logging

import click
from flask import Flask, jsonify
from flask.logging import default_handler

from .errors import TaxDocsError
from .extensions import db, migrate


def _configure_logging(app: Flask) -> None:
    """Route the taxdocs.* loggers through Flask's handler at LOG_LEVEL."""
    package_logger = logging.getLogger(__name__)
    package_logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    if default_handler not in package_logger.handlers:
        package_logger.addHandler(default_handler)


def create_app(config_object: str | object = "config.Config") -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    _configure_logging(app)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Models must be imported before migrations/create_all see the metadata.
    from . import models  # noqa: F401

    # ----------------------------------------------------------------------
    # Blueprints
    # ----------------------------------------------------------------------
    from .blueprints.documents import documents_bp

    app.register_blueprint(documents_bp)

    # ----------------------------------------------------------------------
    # Errors
    # ----------------------------------------------------------------------
    @app.errorhandler(TaxDocsError)
    def handle_domain_error(exc: TaxDocsError):
        return jsonify(exc.to_dict()), exc.status_code

    # ----------------------------------------------------------------------
    # CLI
    # ----------------------------------------------------------------------
    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Seed a demo company, counterparties and catalog items."""
        from .seed import seed_demo_data

        company = seed_demo_data()
        click.echo(f"Demo data seeded (company id {company.id}).")

    return app
