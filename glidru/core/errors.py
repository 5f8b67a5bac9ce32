"""
Domain errors.

Every error the services raise carries the HTTP status it maps to, so the
API layer needs one handler for the whole family.
"""

from __future__ import annotations

from typing import Any


class GlidrError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        """JSON body returned to the caller."""
        return {"error": self.message}


class ValidationError(GlidrError):
    """Caller-fixable input problem."""

    status_code = 400
    default_message = "Missing required fields"

    def __init__(
        self,
        message: str | None = None,
        missing: list[str] | None = None,
        invalid: dict[str, str] | None = None,
    ):
        self.missing = missing or []
        self.invalid = invalid or {}
        super().__init__(message)

    @property
    def fields(self) -> list[str]:
        return [*self.missing, *self.invalid]

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["fields"] = self.fields
        if self.missing:
            body["missing"] = self.missing
        if self.invalid:
            body["invalid"] = self.invalid
        return body


class Conflict(GlidrError):
    """Uniqueness violation."""

    status_code = 400
    default_message = "Question with this short name already exists"

    def __init__(self, message: str | None = None, field: str = "shortName"):
        self.field = field
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["field"] = self.field
        return body


class NotFound(GlidrError):
    """Missing resource, or one owned by somebody else."""

    status_code = 404
    default_message = "Not found"


class Unauthenticated(GlidrError):
    """No usable credential was presented."""

    status_code = 401
    default_message = "Unauthorized - Authentication required"


class Forbidden(GlidrError):
    """Credential is valid but lacks the required role."""

    status_code = 403
    default_message = "Forbidden - Insufficient permissions"


class UpstreamFailure(GlidrError):
    """The identity provider or the document store failed."""

    status_code = 500
    default_message = "Upstream service failure"
