"""
Error taxonomy for estate access checks and the activity trail.

Route handlers translate these into HTTP responses through the handlers in
``estate_core.api.errors``; nothing in this module knows about HTTP.
"""
from __future__ import annotations


class EstateCoreError(Exception):
    """Base error for domain/application exceptions."""


class NotFoundError(EstateCoreError):
    """Raised by callers when an estate or sub-resource does not exist."""


class ForbiddenError(EstateCoreError):
    """Raised when the caller has no usable access to an estate."""

    code = "ACCESS_DENIED"

    def __init__(self, message: str = "access denied", *, estate_id=None):
        super().__init__(message)
        self.estate_id = estate_id


class ValidationError(EstateCoreError):
    """Raised for domain-level validation beyond schema validation."""


class ActivityValidationError(ValidationError):
    """An activity record failed field constraints; nothing was written."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class InvalidCursorError(ValidationError):
    """A pagination cursor could not be decoded."""


class StoreUnavailableError(EstateCoreError):
    """An underlying store call failed (connection, timeout, outage)."""


class AuditWriteFailed(StoreUnavailableError, RuntimeWarning):
    """Appending an activity record failed after the primary action.

    Non-fatal: the caller may retry or proceed without a history entry.
    """

    fatal = False
