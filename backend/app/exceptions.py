"""
LocalBiz Directory — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, the auth/role gates and middleware; caught by
       global handlers.

Exception Hierarchy:
    DirectoryError (base)
    ├── ValidationError          → 400 Bad Request
    │   ├── InvalidCategoryError → 400 (category name does not resolve)
    │   └── InvalidSortError     → 400 (unknown sort column or direction)
    ├── UnauthenticatedError     → 401 Unauthorized
    ├── ForbiddenError           → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── DatabaseError            → 500 Internal Server Error

    InvalidTokenError is raised by the token codec only; the auth gate turns
    it into UnauthenticatedError.
"""

from typing import Any, Dict, Optional


class DirectoryError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info; returned as `details` for 4xx errors,
                  logged only for 5xx errors
        status_code / error_code: how main.register_exception_handlers
                  renders the error
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DirectoryError):
    """
    Raised when client input fails a business rule.

    When:    Duplicate email, unknown category, unknown sort column.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Email is already registered",
            "details": {"field": "email"}
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


class InvalidCategoryError(ValidationError):
    """Raised when a business names a category that does not exist."""

    error_code = "invalid_category"

    def __init__(self, category: Optional[str] = None):
        super().__init__(
            message="Invalid category",
            field="category",
            context={"category": category},
        )
        self.category = category


class InvalidSortError(ValidationError):
    """Raised when a list endpoint is asked to sort by something it cannot."""

    error_code = "invalid_sort"

    def __init__(self, message: str, field: str = "sortBy"):
        super().__init__(message=message, field=field)


class UnauthenticatedError(DirectoryError):
    """
    Raised when a request lacks a usable identity.

    When:    No bearer token, invalid/expired token, wrong login credentials.
    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    status_code = 401
    error_code = "unauthenticated"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(DirectoryError):
    """
    Raised when a resolved identity may not perform the action.

    When:    Role mismatch (role gate) or ownership mismatch (authorize).
    HTTP:    403 Forbidden
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(DirectoryError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records (not an exception); services
    convert None into NotFoundError.
    HTTP:    404 Not Found
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class DatabaseError(DirectoryError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is generic; the constraint or driver
    message is logged server-side only.
    """

    status_code = 500
    error_code = "database_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(DirectoryError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests (with Retry-After)
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


class InvalidTokenError(Exception):
    """Bad signature, malformed payload or expired session token."""

    def __init__(self, reason: str = "invalid token"):
        self.reason = reason
        super().__init__(reason)
