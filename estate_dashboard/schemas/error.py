"""
Error response schemas for API documentation and consistent error formatting.
Provides standardized error response models for OpenAPI documentation.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["emailAddress"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["value is not a valid email address"]
    )

    type: Optional[str] = Field(
        None,
        description="Error type identifier",
        examples=["value_error"]
    )


class ErrorInfo(BaseModel):
    """Machine-readable part of an error response."""

    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    timestamp: str = Field(..., description="Error timestamp in ISO format", examples=["2026-01-01T00:00:00Z"])
    requestId: Optional[str] = Field(None, description="Request identifier for tracking", examples=["abc12345"])
    details: Optional[List[ErrorDetail]] = Field(
        None,
        description="Detailed error information for validation errors"
    )


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human-readable error message")
    error: ErrorInfo


def _example(code: str, message: str, **extra: Any) -> Dict[str, Any]:
    error = {"code": code, "timestamp": "2026-01-01T00:00:00Z", "requestId": "abc12345"}
    error.update(extra)
    return {"success": False, "message": message, "error": error}


def _response(description: str, examples: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "description": description,
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "examples": {
                    name: {"summary": summary, "value": value}
                    for name, (summary, value) in examples.items()
                }
            }
        }
    }


# Common error response examples for documentation
COMMON_ERROR_RESPONSES = {
    400: _response("Bad Request - Invalid request parameters", {
        "validation_error": ("Validation Error", _example(
            "VALIDATION_ERROR",
            "Request validation failed",
            details=[{"field": "query -> limit", "message": "Input should be a valid integer", "type": "int_parsing"}]
        )),
        "invalid_status": ("Invalid Moderation Status", _example(
            "VALIDATION_ERROR",
            "Invalid status. Must be one of: pending, approved, rejected, spam"
        )),
        "moderation_state": ("Moderation State", _example(
            "BAD_REQUEST",
            "Cannot change status from 'approved' to 'rejected'. Only pending items can be moderated"
        )),
    }),
    401: _response("Unauthorized - Authentication required", {
        "unauthorized": ("Authentication Required", _example("UNAUTHORIZED", "Authentication token required")),
        "invalid_token": ("Invalid Token", _example("UNAUTHORIZED", "Invalid token")),
        "token_expired": ("Token Expired", _example("UNAUTHORIZED", "Token has expired")),
    }),
    403: _response("Forbidden - Access denied", {
        "not_admin": ("Not An Admin", _example("FORBIDDEN", "Not an admin")),
        "insufficient_permissions": ("Insufficient Permissions", _example(
            "FORBIDDEN",
            "Insufficient permissions to view revenue statistics"
        )),
    }),
    404: _response("Not Found - Resource not found", {
        "not_found": ("Resource Not Found", _example(
            "NOT_FOUND",
            "Property not found with ID: 123e4567-e89b-12d3-a456-426614174000"
        )),
    }),
    409: _response("Conflict - Resource conflict", {
        "duplicate_review": ("Duplicate Review", _example("DUPLICATE_REVIEW", "You have already reviewed this property")),
        "integrity_error": ("Database Integrity Error", _example(
            "INTEGRITY_ERROR",
            "Constraint violation: Duplicate value for unique field"
        )),
    }),
    500: _response("Internal Server Error - Unexpected error", {
        "internal_error": ("Internal Server Error", _example(
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred. Please try again later."
        )),
        "database_error": ("Database Error", _example("DATABASE_ERROR", "Database operation failed")),
    }),
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get authentication and authorization error response schemas."""
    return get_error_responses(401, 403)


def get_common_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get common error response schemas for most endpoints."""
    return get_error_responses(400, 401, 403, 404, 500)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for CRUD operations."""
    return get_error_responses(400, 401, 403, 404, 409, 500)
