"""
KeepNotes Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and the identity dependency; caught by global handlers.

Exception Hierarchy:
    KeepNotesError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    └── StoreError               → 500 Internal Server Error

No retries anywhere: every failure is surfaced immediately to the caller.
"""

from typing import Any, Dict, Optional


class KeepNotesError(Exception):
    """
    Base exception for all KeepNotes application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(KeepNotesError):
    """
    Raised when client input fails validation.

    When:    A title or content that is only whitespace. Schema failures
             (missing fields, keys outside the update allow-list) arrive as
             FastAPI RequestValidationError and get the same 400 body.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "title must not be blank",
            "details": {"field": "title"}
        }
    """

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


class AuthenticationError(KeepNotesError):
    """
    Raised when the request carries no usable identity.

    When:    Missing bearer token, bad signature, expired token, no `sub` claim.
    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(KeepNotesError):
    """
    Raised when a requested resource does not exist.

    What:    No note matches the id, owner and not-deleted predicate.
    HTTP:    404 Not Found

    Notes owned by someone else and notes already in the trash are reported
    exactly like missing ones, so callers cannot probe for other users' ids.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreError(KeepNotesError):
    """
    Raised when the underlying persistence layer fails.

    What:    A database query, insert, or update failed.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
