"""
KBlog Backend — Custom Exception Hierarchy
===========================================

What:  Defines application-specific exceptions for the blog API.
Why:   Route handlers raise these instead of building error responses by hand;
       global exception handlers (registered in main.py) turn them into JSON
       error bodies with the right status code.
How:   Each exception class carries a message and optional context dict.

Exception Hierarchy:
    KBlogError (base)             → 500 Internal Server Error
    ├── NotFoundError             → settings.not_found_status (500 by default, or 404)
    ├── DecodeError               → 500 Internal Server Error
    └── StorageError              → 500 Internal Server Error

Repositories never raise for a missing id: they return None / False and the
route handler decides to raise NotFoundError.
"""

from typing import Any, Dict, Optional


class KBlogError(Exception):
    """
    Base exception for all KBlog application errors.

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


class NotFoundError(KBlogError):
    """
    Raised when a post or comment with the requested id does not exist.

    HTTP: settings.not_found_status. The default (500) reproduces the
    behavior existing clients were built against, where a missing record is
    indistinguishable from a server fault.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DecodeError(KBlogError):
    """
    Raised when a request body or path parameter cannot be decoded.

    HTTP: 500 Internal Server Error. FastAPI's own RequestValidationError is
    mapped to the same response so malformed JSON, missing fields and
    non-integer ids all look alike to the client.
    """

    def __init__(
        self,
        message: str = "The request could not be decoded",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageError(KBlogError):
    """
    Raised when the SQL storage backend fails unexpectedly.

    Security Note:
        The message returned to the client is always generic. The original
        SQLAlchemy error is kept in context and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
