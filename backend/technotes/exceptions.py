"""
TechNotes Backend - Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the error cases the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       structured JSON error responses with the matching HTTP status code.
Who:   Raised by services and middleware; caught by global handlers.

Exception Hierarchy:
    TechNotesError (base)
    ├── ValidationError          → 400 Bad Request (missing or malformed fields)
    ├── NotFoundError            → 400 Bad Request (referenced record is gone)
    ├── HasDependentsError       → 400 Bad Request (record still referenced)
    ├── ConflictError            → 409 Conflict (duplicate username / title)
    ├── CORSOriginError          → 403 Forbidden (origin not on the allow-list)
    └── DatabaseError            → 500 Internal Server Error

Missing records are reported as 400 rather than 404: clients address users
and notes by an id in the request body, so a stale id is a bad request.
"""

from typing import Any, Dict, Optional


class TechNotesError(Exception):
    """
    Base exception for all TechNotes application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but not always returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TechNotesError):
    """
    Raised when client input fails validation.

    When:    Required fields missing, role list empty, flag not a boolean.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "All fields are required",
            "details": {"fields": ["username", "password", "roles"]}
        }
    """

    def __init__(
        self,
        message: str = "All fields are required",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(TechNotesError):
    """
    Raised when a record addressed by id does not exist.

    HTTP:    400 Bad Request
    Message: "User not found" / "Note not found"
    """

    def __init__(
        self,
        resource: str = "Record",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource.lower()
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource = resource


class HasDependentsError(TechNotesError):
    """
    Raised when deleting a record that other records still reference.

    When:    DELETE /users for a user that still owns notes.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Record still has dependent records",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConflictError(TechNotesError):
    """
    Raised when a write would duplicate a value that must be unique.

    When:    Duplicate username on create/update, duplicate note title.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Duplicate record",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class CORSOriginError(TechNotesError):
    """
    Raised by the CORS policy when a browser origin is not on the allow-list.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        origin: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["origin"] = origin
        super().__init__(message="Not allowed by CORS", context=ctx)
        self.origin = origin


class DatabaseError(TechNotesError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the context
    (exception type, ids involved) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
