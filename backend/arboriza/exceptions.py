"""
Arboriza Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions, one per failure class the API reports.
How:   Each exception carries a message, an optional context dict, the HTTP
       status it maps to and a machine-readable error code. Global handlers
       registered in main.py turn them into JSON error bodies.
Who:   Raised by services and middleware; caught by the global handlers.

Every error body, whether rendered by a handler or by middleware, is built by
`error_body()` so it carries the same keys and the current request ID.

Exception Hierarchy:
    ArborizaError (base)
    ├── ValidationError          → 400 Bad Request
    ├── ConflictError            → 400 Bad Request (username already taken)
    ├── UnauthorizedError        → 401 Unauthorized (password mismatch)
    ├── ForbiddenError           → 403 Forbidden (not a room member)
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── StoreError               → 500 Internal Server Error
"""

from typing import Any, Dict, Optional

from arboriza.middleware.request_id import request_id_var


class ArborizaError(Exception):
    """
    Base exception for all Arboriza application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional info; returned as `details` by the handlers
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ArborizaError):
    """
    Raised when client input is missing or malformed.

    Detected before any store access.

    Example response:
        {
            "success": false,
            "error": "validation_error",
            "message": "Username and password are required",
            "details": {"fields": ["username", "password"]}
        }
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(ArborizaError):
    """Raised when a unique value (the username) is already in use."""

    status_code = 400
    error_code = "conflict"

    def __init__(
        self,
        message: str = "Username is already in use",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(ArborizaError):
    """Raised when the supplied password does not match the stored one."""

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Incorrect password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(ArborizaError):
    """Raised when a user acts on a room they are not a member of."""

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "User is not a member of this room",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ArborizaError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that into
    NotFoundError so the handler can answer 404.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        super().__init__(message=message, context=ctx)


class RateLimitExceededError(ArborizaError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    Response includes a Retry-After header with the seconds until the oldest
    request in the window expires.
    """

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class StoreError(ArborizaError):
    """
    Raised when a statement or transaction against the store fails.

    Nothing is retried. By default the client only sees the generic message;
    endpoints that report the driver's own text (plant registration, comments,
    room creation) set `expose_detail`, and the raw message plus the SQLSTATE
    code are returned under `details`.
    """

    status_code = 500
    error_code = "store_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        expose_detail: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.expose_detail = expose_detail

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        message: str,
        expose_detail: bool = False,
    ) -> "StoreError":
        """Wrap a driver/SQLAlchemy exception, keeping its text and SQLSTATE."""
        orig = getattr(exc, "orig", None) or exc
        code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        context: Dict[str, Any] = {"details": str(orig)}
        if code:
            context["code"] = code
        return cls(message=message, expose_detail=expose_detail, context=context)


def error_body(error: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    The JSON error envelope.

        {"success": false, "error": ..., "message": ..., "details": ..., "request_id": ...}

    `details` is omitted when empty.
    """
    body: Dict[str, Any] = {
        "success": False,
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body
