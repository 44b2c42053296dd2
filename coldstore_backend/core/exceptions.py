# core/exceptions.py

"""
COLD STORAGE DOMAIN ERRORS (BASE)

Every service-level failure raises a subclass of ColdStoreError.
The API exception handler renders them as:

    {"success": false, "error": <message>, "code": <code>, "details": <optional>}

Domain-specific subclasses live next to the services that raise them
(inventory/services/exceptions.py, clearances/services/exceptions.py, ...).
"""

from __future__ import annotations


class ColdStoreError(Exception):
    """Base exception for all cold storage service failures."""

    code = "COLD_STORE_ERROR"
    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None, *, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_payload(self) -> dict:
        payload = {"success": False, "error": self.message, "code": self.code}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(ColdStoreError):
    """Schema-level or business-rule validation failure (field-attributed)."""

    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Invalid data"

    def __init__(self, message: str | None = None, *, field: str | None = None, details=None):
        if field and details is None:
            details = {field: [message or self.default_message]}
        self.field = field
        super().__init__(message, details=details)


class NotFound(ColdStoreError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Not found"
