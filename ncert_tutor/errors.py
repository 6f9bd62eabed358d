"""
Domain-specific exceptions for the NCERT Tutor.

These carry a user-safe message plus a machine-readable code, and know how to
turn themselves into an HTTP error for the web layer. Expected business
outcomes (an unavailable slot, a booking conflict) are raised only at the
service boundary; the resolver and detector return them as plain results.
"""

from typing import Any

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainError(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationError(DomainError):
    """Raised when a request is missing fields or is malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(DomainError):
    """Raised when the caller cannot be identified."""

    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(DomainError):
    """Raised when the caller has the wrong role for an operation."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DomainError):
    """Raised when a tutor, profile, document or chapter does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class DocumentNotFoundError(NotFoundError):
    """Raised when a PDF path does not resolve to a file."""


class BusinessRuleError(DomainError):
    """A request was understood but violates a booking rule."""

    status_code = status.HTTP_409_CONFLICT


class SlotUnavailableError(BusinessRuleError):
    """The requested time is outside the tutor's declared availability."""


class BookingConflictError(BusinessRuleError):
    """The requested time overlaps an existing booking."""


class DocumentParseError(DomainError):
    """The PDF exists but could not be opened."""

    status_code = HTTP_422_UNPROCESSABLE


class DocumentUnreadableError(DocumentParseError):
    """The PDF opened but carries no extractable text (e.g. a scan)."""


class LLMUnavailableError(DomainError):
    """The language model could not be reached or returned nothing."""

    status_code = status.HTTP_502_BAD_GATEWAY
