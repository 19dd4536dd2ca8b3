"""
Arboriza Backend - Shared Schemas
==================================

What:  Response models shared by every route: the error envelope and the
       health probe payload.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "success": false,
            "error": "forbidden",
            "message": "User is not a member of this room",
            "details": {"room_id": 3, "user_id": 7},
            "request_id": "a1b2c3d4"
        }
    """
    success: bool = Field(default=False)
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    """Bare `{"message": ...}` acknowledgement."""
    message: str


class HealthResponse(BaseModel):
    """Liveness payload. Fixed; never touches the store."""
    status: str = Field(default="healthy")
    version: str = Field(description="Application version")
