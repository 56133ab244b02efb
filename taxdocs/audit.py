"""
taxdocs/audit.py

Audit logging helpers.

Goals:
- Capture WHO did WHAT to WHICH document, with BEFORE/AFTER snapshots.
- Store the actor as a plain string (taken from the request header
  configured as ACTOR_HEADER) and the remote address when available.

IMPORTANT:
- This helper ADDS AuditLog entries to the current SQLAlchemy session.
  The caller controls transaction boundaries (commit/rollback), so an
  audit row is never committed without the change it describes.
- Works outside a request (CLI, tests): actor and IP are then None.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from flask import current_app, has_request_context, request

from .extensions import db
from .models import AuditLog


def _safe_str(value: Any) -> Optional[str]:
    """
    Convert a value to a stable string for JSON storage.

    Decimal/date/datetime are rendered with str(); None stays None.
    """
    if value is None:
        return None
    return str(value)


def serialize_model(instance: Any) -> Dict[str, Optional[str]]:
    """
    Snapshot a model instance's scalar columns (not relationships).
    """
    data: Dict[str, Optional[str]] = {}
    for column in instance.__table__.columns:
        data[column.name] = _safe_str(getattr(instance, column.name))
    return data


def _request_actor() -> tuple[Optional[str], Optional[str]]:
    if not has_request_context():
        return None, None
    header = current_app.config.get("ACTOR_HEADER", "X-Actor")
    actor = (request.headers.get(header) or "").strip() or None
    return actor, request.remote_addr


def log_action(
    entity: Any,
    action: str,
    *,
    before: Optional[Dict[str, Any]] = None,
    after: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Add an AuditLog entry to the current db session.

    Parameters:
        entity: model instance with .id (flush first)
        action: CREATE / UPDATE / DELETE
        before: dict snapshot (optional)
        after: dict snapshot (optional)
    """
    entity_id = getattr(entity, "id", None)
    if entity_id is None:
        raise ValueError("log_action entity must have an 'id' attribute (after flush).")

    actor, ip_address = _request_actor()

    entry = AuditLog(
        actor=actor,
        company_id=getattr(entity, "company_id", None),
        entity_type=entity.__class__.__name__,
        entity_id=int(entity_id),
        action=str(action),
        before_data=json.dumps(before, ensure_ascii=False) if before else None,
        after_data=json.dumps(after, ensure_ascii=False) if after else None,
        ip_address=ip_address,
    )
    db.session.add(entry)
    return entry
