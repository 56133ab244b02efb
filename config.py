"""
Application configuration.
This module defines the configuration settings for the Flask application: database connection, secret key,
logging level and the request headers that carry the tenant and the acting user. Environment variables
override the development defaults; in production set DATABASE_URL and SECRET_KEY.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Base configuration shared by all environments."""

    # IMPORTANT: change this in production
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-change-me-please")

    # Database: SQLite for development (simple file in project folder)
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'taxdocs.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Level for the taxdocs.* loggers
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Tenant (company id) and actor are passed as request headers
    TENANT_HEADER = "X-Company-Id"
    ACTOR_HEADER = "X-Actor"

    APP_NAME = "Tax Documents"


class TestConfig(Config):
    """In-memory database for the test suite."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "DEBUG"
