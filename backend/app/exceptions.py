"""
Tasklane Backend — Custom Exception Hierarchy
===============================================

What:  Application exceptions for the board/column/item request layer.
How:   Each class names its HTTP status and machine-readable error code;
       the single handler registered in main.py turns any of them into
       the standard error body.

Exception Hierarchy:
    TasklaneError (base)   → 500 server_error
    ├── NotFoundError      → 404 not_found
    └── DatabaseError      → 500 server_error (generic message)

Input-shape errors never reach this hierarchy: FastAPI rejects malformed
bodies with 422 before a handler runs.
"""

from typing import Any, Dict, Optional


class TasklaneError(Exception):
    """
    Base exception for all Tasklane application errors.

    Attributes:
        message:  Error description
        context:  Debug info; always logged, returned to the client only
                  when `expose_context` is set
    """

    status_code = 500
    error_code = "server_error"
    expose_message = True
    expose_context = False

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def public_message(self) -> str:
        if self.expose_message:
            return self.message
        return "An internal error occurred. Please try again later."


class NotFoundError(TasklaneError):
    """
    A logical id does not resolve to a stored board, column or item.

    The message reads "missing <resource> <id>", e.g. "missing board 42".
    The request is aborted as a whole: the session dependency rolls back,
    so a handler that fails its second lookup leaves nothing half-applied.
    """

    status_code = 404
    error_code = "not_found"
    expose_context = True

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.resource = resource
        self.resource_id = resource_id

        ctx = dict(context or {}, resource=resource)
        if resource_id is None:
            message = f"missing {resource}"
        else:
            message = f"missing {resource} {resource_id}"
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(TasklaneError):
    """
    A query, insert, update or delete failed inside a service operation:
    lost connection, unique-index violation on a logical id, more than one
    row matching a logical id.

    The SQLAlchemy error is logged server-side only; clients get a generic
    message.
    """

    expose_message = False

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
