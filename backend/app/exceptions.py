"""
VisitorBook Backend: Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the two failure families the API
       exposes: bad client input and store failures.
How:   Each exception carries a user-safe message and an optional context dict.
       Global exception handlers (registered in main.py) map them to HTTP
       status codes and structured JSON error responses.
Who:   Raised by services; caught by the handlers in main.py.

Exception Hierarchy:
    VisitorBookError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    └── StoreError                   → 500 Internal Server Error
        ├── StoreUnavailable         → 500 (store cannot be reached)
        └── CounterNotInitialized    → 500 (visitor counter row missing)
"""

from typing import Any, Dict, Optional


class VisitorBookError(Exception):
    """
    Base exception for all VisitorBook application errors.

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


class ValidationError(VisitorBookError):
    """
    Raised when client input fails validation.

    When:    Missing or empty `name`/`content`, `name` over the column bound,
             malformed request body.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Name and content are required",
            "details": {"field": "name"}
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


class StoreError(VisitorBookError):
    """
    Raised when a persistence operation fails.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        The SQL error, constraint name, etc. live in `context` and are
        logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreUnavailable(StoreError):
    """The store could not be reached (connection refused, dropped, timed out)."""

    def __init__(
        self,
        message: str = "The database is currently unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class CounterNotInitialized(StoreError):
    """
    The visitor counter row does not exist.

    Should not happen once Database.init() has run; reported to the client
    as a generic store failure.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="The visitor counter has not been initialized.",
            context=context,
        )
