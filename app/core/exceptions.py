"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception.

    ``code`` is a stable machine-readable identifier and ``context`` carries
    structured detail that is merged into the JSON error body.
    """

    code: str = "internal_error"

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.context = context or {}
        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.detail, "code": self.code, **self.context}


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_error"

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        context = {"errors": errors} if errors else None
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail, context=context)


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        self.resource = resource
        self.identifier = identifier
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            context={"resource": resource},
        )


class ConflictError(AppException):
    """Request conflicts with existing state."""

    code = "conflict"

    def __init__(self, detail: str = "Resource conflict", context: dict[str, Any] | None = None) -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail, context=context)


class BookingConflictError(ConflictError):
    """Requested dates overlap an occupying booking."""

    code = "booking_conflict"

    def __init__(
        self,
        conflicts: list[dict[str, Any]] | None = None,
        detail: str = "The selected dates are not available",
    ) -> None:
        self.conflicts = conflicts or []
        super().__init__(detail=detail, context={"conflicts": self.conflicts})


class DuplicateReviewError(ConflictError):
    """User has already reviewed this listing."""

    code = "duplicate_review"

    def __init__(self, detail: str = "You have already reviewed this listing") -> None:
        super().__init__(detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    code = "authentication_error"

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    code = "authorization_error"

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class StateError(AppException):
    """Operation not allowed in the entity's current state."""

    code = "invalid_state"

    def __init__(
        self,
        detail: str = "This operation is not allowed for the current booking status",
        current_status: str | None = None,
    ) -> None:
        self.current_status = current_status
        context = {"current_status": current_status} if current_status else None
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail, context=context)


class TransientStoreError(AppException):
    """Persistence layer temporarily unavailable; safe to retry."""

    code = "store_unavailable"

    def __init__(self, detail: str = "Database temporarily unavailable", retry_after: int = 5) -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            headers={"Retry-After": str(retry_after)},
        )


class RateLimitExceeded(AppException):
    """Rate limit exceeded exception."""

    code = "rate_limited"

    def __init__(self, detail: str = "Too many requests. Please try again later.") -> None:
        super().__init__(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=detail)
