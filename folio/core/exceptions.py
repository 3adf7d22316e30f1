#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Folio project.

Every error the application raises on purpose derives from AppError,
which carries a machine-readable code and the HTTP status the API layer
should answer with.

Exception Hierarchy:
    Exception (built-in)
    └── AppError - Base for all application errors
        ├── AppValidationError (ValidationError) - Invalid input (400)
        ├── DatabaseError - Query or connection failures (500)
        ├── NotFoundError - Missing resource (404)
        ├── UnauthorizedError - Missing or bad credentials (401)
        ├── ForbiddenError - Authenticated but not allowed (403)
        ├── ConflictError - Unique constraint clash (409)
        └── RateLimitError - Too many requests (429)

Usage:
    from folio.core.exceptions import NotFoundError, ValidationError

    try:
        project = db.projects.get_or_raise(42)
    except NotFoundError as e:
        return e.to_dict()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable description
        code: Stable machine-readable error code
        status_code: HTTP status returned by the API layer
        is_operational: True for expected failures (bad input, missing
            rows); False for programming errors that deserve an alert
        context: Extra details safe to return to clients

    Examples:
        >>> raise AppError("Something broke")
        >>> raise AppError("Quota exceeded", code="QUOTA", status_code=402)
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        is_operational: bool = True,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.is_operational = is_operational
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for an API response."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.context or None,
            "timestamp": self.timestamp,
        }


class AppValidationError(AppError):
    """
    Exception for data validation failures.

    Raised when input is missing required fields, has the wrong type or
    falls outside an allowed set of values.

    Attributes:
        field: Name of the offending field, when known

    Examples:
        >>> raise AppValidationError("Title is required", field="title")
        >>> raise AppValidationError("Invalid status 'done'", field="status")
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(context or {})
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", 400, True, details)
        self.field = field


# Short name used throughout managers and validators
ValidationError = AppValidationError


class DatabaseError(AppError):
    """
    Exception for database-related errors.

    Raised when database operations fail due to connection issues,
    query errors or schema problems. Unique and foreign-key violations
    are translated to ConflictError/AppValidationError instead, see
    handle_database_error().

    Attributes:
        query: The failing statement or operation name, when known
        table: The table involved, when known

    Examples:
        >>> raise DatabaseError("Connection to database failed")
        >>> raise DatabaseError("Upgrade failed", table="blog_posts")
    """

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        table: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(context or {})
        if table:
            details["table"] = table
        super().__init__(message, "DATABASE_ERROR", 500, True, details)
        self.query = query
        self.table = table


class NotFoundError(AppError):
    """
    Exception for missing resources.

    Examples:
        >>> raise NotFoundError("Project", 42)
        NotFoundError: Project with id '42' not found
        >>> raise NotFoundError("Blog post")
        NotFoundError: Blog post not found
    """

    def __init__(self, resource: str, identifier: Any = None) -> None:
        if identifier is not None:
            message = f"{resource} with id '{identifier}' not found"
        else:
            message = f"{resource} not found"
        context = {"resource": resource}
        if identifier is not None:
            context["id"] = str(identifier)
        super().__init__(message, "NOT_FOUND", 404, True, context)
        self.resource = resource
        self.identifier = identifier


class UnauthorizedError(AppError):
    """Exception for missing, invalid or expired credentials."""

    def __init__(self, message: str = "Unauthorized access") -> None:
        super().__init__(message, "UNAUTHORIZED", 401, True)


class ForbiddenError(AppError):
    """Exception for authenticated users lacking permission."""

    def __init__(self, message: str = "Access forbidden") -> None:
        super().__init__(message, "FORBIDDEN", 403, True)


class ConflictError(AppError):
    """
    Exception for conflicting writes.

    Raised when a write would violate a uniqueness rule, such as a
    duplicate slug, email or filename.

    Examples:
        >>> raise ConflictError("Slug 'hello-world' is already taken")
    """

    def __init__(
        self, message: str = "Resource conflict", context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, "CONFLICT", 409, True, context)


class RateLimitError(AppError):
    """
    Exception for callers exceeding a request budget.

    Attributes:
        limit: Number of requests allowed per window
        window: Window length in seconds
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        limit: Optional[int] = None,
        window: Optional[float] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if limit is not None:
            context["limit"] = limit
        if window is not None:
            context["window"] = window
        super().__init__(message, "RATE_LIMIT_EXCEEDED", 429, True, context)
        self.limit = limit
        self.window = window


# ----- Helpers -----

def is_operational_error(error: BaseException) -> bool:
    """True when the error is an expected, client-caused failure."""
    return isinstance(error, AppError) and error.is_operational


def to_api_error(error: BaseException) -> Dict[str, Any]:
    """
    Convert any exception to the API error payload.

    Unknown exceptions are reported as INTERNAL_ERROR without leaking
    their message.
    """
    if isinstance(error, AppError):
        return error.to_dict()
    return {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
        "details": None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


_NOT_NULL_PATTERN = re.compile(r"NOT NULL constraint failed: (?:\w+\.)?(\w+)")
_UNIQUE_PATTERN = re.compile(r"UNIQUE constraint failed: (?:\w+\.)?(\w+)")


def handle_database_error(
    error: BaseException,
    query: Optional[str] = None,
    table: Optional[str] = None,
) -> AppError:
    """
    Translate a raw driver/ORM error into the application hierarchy.

    Args:
        error: Exception raised by SQLite or SQLAlchemy
        query: Operation or statement that failed
        table: Table involved, if known

    Returns:
        ConflictError for unique violations, AppValidationError for
        foreign-key and not-null violations, DatabaseError otherwise
    """
    if isinstance(error, AppError):
        return error

    message = str(error)

    unique = _UNIQUE_PATTERN.search(message)
    if unique or "UNIQUE constraint failed" in message:
        column = unique.group(1) if unique else None
        detail = f"Duplicate value for '{column}'" if column else "Duplicate entry"
        return ConflictError(
            detail, context={"column": column} if column else None
        )

    if "FOREIGN KEY constraint failed" in message:
        return AppValidationError("Referenced record does not exist")

    not_null = _NOT_NULL_PATTERN.search(message)
    if not_null:
        column = not_null.group(1)
        return AppValidationError(f"Field '{column}' is required", field=column)

    if "CHECK constraint failed" in message:
        return AppValidationError(f"Value violates a constraint: {message}")

    return DatabaseError(f"Database operation failed: {message}", query=query, table=table)
