"""
Microblog Backend: Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the three failure outcomes of a
       post operation.
Why:   Route handlers raise these and the global handlers registered in
       main.py turn them into HTTP responses with the right status code.
How:   Each exception class carries a message and optional context dict.
Who:   Raised by PostRepository (storage errors) and by the posts routes
       (NotFoundError); caught by the global handlers.

Exception Hierarchy:
    MicroblogError (base)
    ├── StorageValidationError   → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    └── StorageUnavailableError  → 500 Internal Server Error

No layer retries. A failed storage call fails the request it belongs to
and nothing else.
"""

from typing import Any, Dict, Optional


class MicroblogError(Exception):
    """
    Base exception for all Microblog application errors.

    Attributes:
        message:  Human-readable error description (returned in the response)
        context:  Raw error detail from the storage driver, also returned to
                  the client for 400/500 responses
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class StorageValidationError(MicroblogError):
    """
    Raised when the store refuses the supplied fields or identifier.

    When:  Malformed post id (not an ObjectId), or a write the server rejects
           (document validation failure, bad update operator).
    HTTP:  400 Bad Request
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


class NotFoundError(MicroblogError):
    """
    Raised by a route when the repository signals that no post matches an id.

    The repository itself returns None for a missing post; the route converts
    that into this exception so the 404 body is built in one place.

    HTTP:  404 Not Found
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


class StorageUnavailableError(MicroblogError):
    """
    Raised when MongoDB cannot be reached or fails unexpectedly.

    When:  Server selection timeout, connection reset, any driver error that
           is not a rejected write.
    HTTP:  500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "The post store is unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
