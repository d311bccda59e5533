"""
Utility modules for the Estate Dashboard API.
"""

from .auth import (
    verify_token,
    has_permission,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    BadRequestError,
    TokenExpiredError,
    InvalidTokenError,
    InsufficientPermissionsError,
    ModerationStateError,
    DuplicateReviewError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "verify_token",
    "has_permission",
    "TokenPayload",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "BadRequestError",
    "TokenExpiredError",
    "InvalidTokenError",
    "InsufficientPermissionsError",
    "ModerationStateError",
    "DuplicateReviewError",
]
