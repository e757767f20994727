"""
RoomLedger Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the three failure classes the API
       distinguishes.
How:   Each exception carries a message and optional context dict. Global
       exception handlers (registered in main.py) turn them into responses.
Who:   Raised by services and routes; caught by global handlers.

Exception Hierarchy:
    RoomLedgerError (base)
    ├── ValidationError  → 400 {"error": message}   (client can fix)
    ├── NotFoundError    → 404 "Not Found"          (plain text)
    └── DatabaseError    → 500 "Internal Server Error" (plain text, details logged)
"""

from typing import Any, Dict, Optional


class RoomLedgerError(Exception):
    """
    Base exception for all RoomLedger application errors.

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


class ValidationError(RoomLedgerError):
    """
    Raised when a request body is missing a required field or holds an
    invalid value.

    HTTP: 400 Bad Request with body {"error": "<message>"}. The messages are
    short and stable ("name required", "invalid expense") so that clients
    can match on them.
    """

    def __init__(
        self,
        message: str = "invalid request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(RoomLedgerError):
    """
    Raised when no route matches the (method, path) pair.

    HTTP: 404 with plain-text body "Not Found".
    """

    def __init__(
        self,
        method: Optional[str] = None,
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if method:
            ctx["method"] = method
        if path:
            ctx["path"] = path
        super().__init__(message="Not Found", context=ctx)


class DatabaseError(RoomLedgerError):
    """
    Raised when a database statement fails.

    When:    Connection lost, unique violation on rename, schema problems.
    HTTP:    500 with a generic plain-text body.

    Security Note:
        Constraint names and SQL never reach the client; they are logged
        server-side from `context`.
    """

    def __init__(
        self,
        message: str = "A database error occurred.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
