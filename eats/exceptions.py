"""
Eats Server: Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the failure modes of a request.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": <message>}` with the matching HTTP status code.
Who:   Raised by the record store and route handlers; caught by global handlers.

Exception Hierarchy:
    EatsError (base)          → 500 Internal Server Error
    ├── ValidationError       → 400 Bad Request (bad path id, bad JSON body)
    ├── NotFoundError         → 404 Not Found (no row for the given id)
    └── DatabaseError         → 500 Internal Server Error (driver failure)

Error text:
    The message is returned to the client verbatim. For DatabaseError that is
    the raw driver error text; the context dict is only logged.
"""

from typing import Any, Dict, Optional


class EatsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Client-facing error description (the `error` field)
        context:  Additional debug info (logged, never returned)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(EatsError):
    """
    Raised when client input fails validation.

    When:    Non-integer path id, malformed JSON body.
    HTTP:    400 Bad Request

    FastAPI's own RequestValidationError (body decoding) is mapped onto the
    same 400 response in main.py, so clients see one shape for both.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request payload",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(EatsError):
    """
    Raised when a requested resource does not exist.

    When:    get/update/delete/approve/disapprove with an id that matches no row.
    HTTP:    404 Not Found

    SQLAlchemy returns None (or a zero rowcount) for missing records; the
    store converts that into this exception.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Place",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource_id = resource_id


class DatabaseError(EatsError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost, constraint violation, malformed re-read, etc.
    HTTP:    500 Internal Server Error
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
