#!/usr/bin/env python3
"""
Folio Database Package
----------------------
SQLite persistence for the portfolio backend.

- manager: FolioDB (engine, sessions, schema, seed, maintenance)
- models: SQLAlchemy ORM models
- managers: Entity managers (one per entity type)
- seeder: Default content loader
- pagination: PaginatedResult envelope
"""

from .manager import FolioDB
from folio.core.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from .decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from .pagination import PaginatedResult

__all__ = [
    # Main manager
    "FolioDB",
    # Exceptions
    "ConflictError",
    "DatabaseError",
    "NotFoundError",
    "ValidationError",
    # Decorators
    "handle_db_errors",
    "log_database_operation",
    "validate_metadata",
    # Results
    "PaginatedResult",
]
