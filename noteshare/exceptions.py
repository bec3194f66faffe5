"""
NoteShare Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers in main.py map them to status codes and JSON
       bodies; the context is logged but only returned for validation errors.
Who:   Raised by services and the access guard; caught by global handlers.

Exception Hierarchy:
    NoteShareError (base)
    ├── ValidationError       → 400 Bad Request
    ├── ConflictError         → 409 Conflict
    ├── AuthenticationError   → 401 Unauthorized
    ├── NotFoundError         → 404 Not Found
    ├── HashingError          → 500 Internal Server Error
    ├── StoreError            → 500 Internal Server Error
    ├── TokenError            (internal: converted by the access guard)
    └── DuplicateError        (internal: converted by the registration flow)

A failure never changes category on its way out: a note owned by someone
else is reported as NotFoundError, never as a permission error.
"""

from typing import Any, Dict, Optional


class NoteShareError(Exception):
    """
    Base exception for all NoteShare application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NoteShareError):
    """
    Raised when client input fails a business rule.

    When:    Username too short, password too short or too long, bad email.
    HTTP:    400 Bad Request
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


class ConflictError(NoteShareError):
    """
    Raised when a username or email is already registered.

    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(NoteShareError):
    """
    Raised for bad credentials and for missing, invalid or expired tokens.

    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NoteShareError):
    """
    Raised when a resource is absent or not visible to the caller.

    When:    Unknown note id, or a note owned by another user.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class HashingError(NoteShareError):
    """
    Raised when a password cannot be hashed (e.g. the OS random source fails).

    Fatal to the request, not to the process.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Failed to hash password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreError(NoteShareError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Driver errors,
    SQL and constraint names are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TokenError(NoteShareError):
    """
    Raised by TokenService.verify for any unusable token.

    Bad structure, wrong signature and expiry all produce the same message.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid or expired token", context=context)


class DuplicateError(NoteShareError):
    """
    Raised by the credential store when a unique constraint rejects an insert.

    Attributes:
        field: "username", "email" or None when the constraint is unknown
    """

    def __init__(
        self,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message="Duplicate identity", context=ctx)
        self.field = field
