"""Error response schemas for OpenAPI documentation."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized API error response body."""

    code: str = Field(
        ...,
        description="Error code for client-side handling",
        examples=["ACCOUNT_NOT_FOUND"],
    )
    message: str = Field(
        ...,
        description="Localized human-readable error message",
        examples=["Account jdoe not found"],
    )
    error_id: Optional[str] = Field(
        None,
        description="Unique error ID for support tracking",
        examples=["a1b2c3d4"],
    )
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Additional error context",
    )
    path: Optional[str] = Field(
        None,
        description="Request path that caused the error",
        examples=["/api/v1/accounts/me"],
    )


class APIErrorResponse(BaseModel):
    """Wrapper for error responses (matches actual API error format)."""

    error: ErrorResponse = Field(..., description="Error details")


class NotFoundErrorResponse(APIErrorResponse):
    """404 Not Found error response."""


class BadRequestErrorResponse(APIErrorResponse):
    """400 Bad Request error response (already exists, creation failure)."""


class UnauthorizedErrorResponse(APIErrorResponse):
    """401 Unauthorized error response."""


class ForbiddenErrorResponse(APIErrorResponse):
    """403 Forbidden error response."""


class InternalServerErrorResponse(APIErrorResponse):
    """500 Internal Server Error response."""
