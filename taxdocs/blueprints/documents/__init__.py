"""
taxdocs/blueprints/documents/__init__.py

Blueprint package export.

IMPORTANT:
- Must expose documents_bp for app factory registration.
- Keep import minimal to avoid side effects.
"""

from __future__ import annotations

from .routes import documents_bp  # noqa: F401
