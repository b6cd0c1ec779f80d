"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    BookingConflictError,
    ConflictError,
    DuplicateReviewError,
    NotFoundError,
    StateError,
    TransientStoreError,
    ValidationError,
)
from app.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
    verify_token,
)

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "BookingConflictError",
    "ConflictError",
    "DuplicateReviewError",
    "NotFoundError",
    "StateError",
    "TransientStoreError",
    "ValidationError",
    "create_access_token",
    "create_refresh_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
