"""Domain exceptions raised by the service layer.

Each exception carries the HTTP status it maps to so that the API layer can
render every failure uniformly as ``{"message": ..., "errors"?: {...}}``.
"""

from __future__ import annotations

from fastapi import status


class CrushError(RuntimeError):
    """Base exception for all CrushConfessions domain failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body describing this error."""
        payload: dict[str, object] = {"message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class UnauthorizedError(CrushError):
    """Raised when the caller has no valid identity."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFoundError(CrushError):
    """Raised when a user, confession, comment or conversation is missing."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class AuthorizationError(CrushError):
    """Raised when the actor lacks permission on the target resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not authorized to perform this action"


class ValidationError(CrushError):
    """Raised for field-level input violations."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"

    @classmethod
    def for_field(cls, field: str, message: str) -> ValidationError:
        """Build an error reporting a single offending field."""
        return cls(message, errors={field: [message]})


class InvalidStateError(CrushError):
    """Raised when an operation does not fit the current resource state."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid state for this action"


class SelfActionError(CrushError):
    """Raised when a user targets themselves with a two-party action."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "You cannot perform this action on yourself"


class ConflictError(CrushError):
    """Raised when a unique resource already exists."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InternalError(CrushError):
    """Raised for unexpected store failures; never exposes internals."""
