"""
taxdocs/errors.py

Typed errors raised by the tax documents engine.

Every error carries a class-level `code` so callers (the HTTP layer, CLI,
tests) can branch on the type instead of parsing messages.

    TaxDocsError
    +-- ValidationError    malformed or missing input
    +-- NotFoundError      referenced record missing, inactive or deleted
    +-- ConsistencyError   resolved data does not match what was requested

IMPORTANT:
- Errors are raised inside the unit of work. The lifecycle manager rolls
  back and re-raises; nothing is retried.
"""

from __future__ import annotations


class TaxDocsError(Exception):
    """Base error for the engine."""

    code: str = "TAXDOCS_ERROR"
    status_code: int = 500

    def to_dict(self) -> dict:
        return {"error": self.code, "message": str(self)}


class ValidationError(TaxDocsError):
    """Malformed or missing required input."""

    code: str = "VALIDATION_ERROR"
    status_code: int = 400


class NotFoundError(TaxDocsError):
    """A referenced record does not exist or is inactive/deleted."""

    code: str = "NOT_FOUND"
    status_code: int = 404

    def __init__(self, entity: str, identifier=None, message: str | None = None):
        self.entity = entity
        self.identifier = identifier
        if message is None:
            message = f"{entity} not found" if identifier is None else f"{entity} {identifier} not found"
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["entity"] = self.entity
        if self.identifier is not None:
            data["identifier"] = self.identifier
        return data


class ConsistencyError(TaxDocsError):
    """Resolved records do not match the request, or the row changed underneath us."""

    code: str = "CONSISTENCY_ERROR"
    status_code: int = 409
