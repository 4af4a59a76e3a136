"""
Bookmark Saver Backend — Custom Exception Hierarchy
====================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages, without leaking driver details.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the correct HTTP status code.
Who:   Raised by the database layer and services; caught by global handlers.

Exception Hierarchy:
    BookmarkSaverError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    └── StoreError               → 500 Internal Server Error
        └── StoreConnectionError → 500 (also aborts startup)
"""

from typing import Any, Dict, Optional


class BookmarkSaverError(Exception):
    """
    Base exception for all application errors.

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


class ValidationError(BookmarkSaverError):
    """
    Raised when client input fails validation.

    When:    Missing url/title, malformed URL, malformed request body.
    HTTP:    400 Bad Request

    Example response:
        {"error": "Invalid URL format", "request_id": "a1b2c3d4"}
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


class NotFoundError(BookmarkSaverError):
    """
    Raised when a requested resource does not exist.

    When:    GET /bookmarks/{id} with an unknown or malformed id.
    HTTP:    404 Not Found

    The gateway returns None for missing documents; the service converts
    that into this exception so HTTP concerns stay out of the data layer.
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


class StoreError(BookmarkSaverError):
    """
    Raised when a document store operation fails.

    What:    A find, insert, drop or aggregate failed in the driver.
    When:    Network loss, timeout, duplicate key, server-side query error.
    HTTP:    500 Internal Server Error

    Security Note:
        The client only ever sees a generic message. The collection name,
        operation and driver exception type travel in `context` and are
        logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreConnectionError(StoreError):
    """
    Raised when the store cannot be reached or rejects the credentials.

    When:    The startup ping fails, or the database handle is requested
             before `connect` (or after `close`).
    """

    def __init__(
        self,
        message: str = "Could not connect to the document store",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
