"""
VisitorBook Frontend: Client Exceptions
=========================================

Exception Hierarchy:
    VisitorBookClientError (base)
    └── TransportError    network failure, timeout, non-2xx or unreadable response

Mutations let TransportError reach the caller (the form turns it into a
blocking notice); queries store it in the cache entry (inline error state).
"""

from typing import Any, Dict, Optional


class VisitorBookClientError(Exception):
    """
    Base exception for all client-side errors.

    Attributes:
        message:  Human-readable description
        context:  Debug info (method, path, underlying error type)
    """

    def __init__(
        self,
        message: str = "An unexpected client error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class TransportError(VisitorBookClientError):
    """
    An API call did not produce a usable 2xx response.

    Attributes:
        status_code: HTTP status of the response, None when no response
                     arrived (connection refused, timeout, ...)
    """

    def __init__(
        self,
        message: str = "Request to the VisitorBook API failed",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
