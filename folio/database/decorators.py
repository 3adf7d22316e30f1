#!/usr/bin/env python3
"""
decorators.py
--------------------
Shared decorators for manager operations.

    @handle_db_errors          SQLAlchemy errors -> application errors
    @log_database_operation    timing and outcome in the component log
    @validate_metadata         required keys in the metadata argument
"""
from functools import wraps
from typing import Callable, List
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from folio.core.exceptions import AppError, handle_database_error
from folio.core.validators import DataValidator


def log_database_operation(operation_name: str):
    """
    Decorator to log manager operations with timing and context.

    Args:
        operation_name: Name of the operation being logged

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            logger = getattr(self, "logger", None)
            start_time = datetime.now()
            operation_id = f"{operation_name}_{start_time.strftime('%Y%m%d_%H%M%S_%f')}"

            if logger:
                logger.log_debug(
                    f"Starting {operation_name}",
                    {
                        "operation_id": operation_id,
                        "args_count": len(args),
                        "kwargs_keys": list(kwargs.keys()),
                    },
                )

            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                if logger:
                    logger.log_error(
                        e,
                        {
                            "operation": operation_name,
                            "operation_id": operation_id,
                            "duration_seconds": (datetime.now() - start_time).total_seconds(),
                        },
                    )
                raise

            if logger:
                logger.log_operation(
                    f"{operation_name}_completed",
                    {
                        "operation_id": operation_id,
                        "duration_seconds": (datetime.now() - start_time).total_seconds(),
                    },
                )
            return result

        return wrapper

    return decorator


def validate_metadata(required_fields: List[str]):
    """
    Decorator to check required keys of a metadata dict argument.

    The metadata dict is the 'metadata' keyword argument or the last
    positional dict argument.

    Args:
        required_fields: List of required field names
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            metadata = kwargs.get("metadata")
            if metadata is None:
                metadata = next((a for a in reversed(args) if isinstance(a, dict)), {})
            DataValidator.validate_required_fields(metadata, required_fields)
            return function(self, *args, **kwargs)

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Decorator translating SQLAlchemy errors to application errors.

    Unique violations become ConflictError, foreign-key and not-null
    violations AppValidationError, everything else DatabaseError.
    Application errors pass through untouched.
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except AppError:
            raise
        except SQLAlchemyError as e:
            raise handle_database_error(e, query=function.__name__) from e

    return wrapper
