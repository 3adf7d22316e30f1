#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing the query helpers shared by every entity manager.

Key Features:
    - Retry logic for SQLite lock contention
    - Get-or-create with race handling
    - Object resolution from instances or ids
    - LIKE search and whitelisted ordering for list endpoints
    - Collection replacement for many-to-many links inside the
      caller's transaction
    - Partial scalar updates that skip untouched fields

Usage:
    class SkillManager(BaseManager):
        model = Skill

        def get_by_name(self, name: str) -> Optional[Skill]:
            return self._get_by_field(Skill, "name", name)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from abc import ABC
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)

# --- Third party imports ---
from sqlalchemy import Select, asc, desc, func, or_, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Mapped, Session

# --- Local imports ---
from folio.core.exceptions import DatabaseError, ValidationError
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.core.validators import DataValidator


class HasId(Protocol):
    """Protocol for objects that have an id attribute."""

    id: Mapped[int]


T = TypeVar("T", bound=HasId)

# (field_name, normalizer) or (field_name, normalizer, allow_none)
FieldConfig = Union[Tuple[str, Callable[[Any], Any]], Tuple[str, Callable[[Any], Any], bool]]


class BaseManager(ABC):
    """
    Abstract base manager.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[FolioLogger] = None):
        self.session = session
        self.logger = logger

    # -------------------------------------------------------------------------
    # Core Helper Methods
    # -------------------------------------------------------------------------

    def _execute_with_retry(
        self,
        operation: Callable,
        max_retries: int = 3,
        retry_delay: float = 0.1,
    ) -> Any:
        """
        Execute a database operation, retrying while SQLite is locked.

        Args:
            operation: Callable that performs the operation
            max_retries: Maximum number of attempts
            retry_delay: Base delay between retries (exponential backoff)

        Returns:
            Result of the operation

        Raises:
            OperationalError: If the error is not a lock or retries ran out
        """
        for attempt in range(max_retries):
            try:
                return operation()
            except OperationalError as e:
                error_msg = str(e).lower()

                if (
                    "locked" in error_msg or "busy" in error_msg
                ) and attempt < max_retries - 1:
                    wait_time = retry_delay * (2**attempt)

                    safe_logger(self.logger).log_debug(
                        f"Database locked, retrying in {wait_time}s",
                        {"attempt": attempt + 1, "max_retries": max_retries},
                    )

                    time.sleep(wait_time)
                    continue

                raise

        raise DatabaseError("Retry loop completed without success")

    def _get_or_create(
        self,
        model_class: Type[T],
        lookup_fields: Dict[str, Any],
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Get a row matching lookup_fields or create it.

        A concurrent insert of the same row is resolved by re-reading
        after the IntegrityError, inside a savepoint so the caller's
        transaction survives.

        Args:
            model_class: ORM model class to query or create
            lookup_fields: Column values identifying the row
            extra_fields: Additional column values for a new row

        Returns:
            Existing or newly created instance
        """
        obj = self.session.query(model_class).filter_by(**lookup_fields).first()
        if obj:
            return obj

        fields = dict(lookup_fields)
        if extra_fields:
            fields.update(extra_fields)

        try:
            with self.session.begin_nested():
                obj = model_class(**fields)
                self.session.add(obj)
                self.session.flush()
            return obj
        except IntegrityError:
            obj = self.session.query(model_class).filter_by(**lookup_fields).first()
            if obj:
                return obj
            raise DatabaseError(
                f"Failed to create {model_class.__name__} even after handling race condition",
                table=getattr(model_class, "__tablename__", None),
            )

    def _resolve_object(self, item: Union[T, int], model_class: Type[T]) -> T:
        """
        Resolve an instance or id to a persisted ORM object.

        Raises:
            ValueError: If no row has the id, or the instance is not persisted
            TypeError: If item is neither an instance nor an int
        """
        if isinstance(item, model_class):
            if item.id is None:
                raise ValueError(f"{model_class.__name__} instance must be persisted")
            return item
        if isinstance(item, int) and not isinstance(item, bool):
            obj = self.session.get(model_class, item)
            if obj is None:
                raise ValueError(f"No {model_class.__name__} found with id: {item}")
            return obj
        if isinstance(item, str) and item.strip().isdigit():
            return self._resolve_object(int(item.strip()), model_class)
        raise TypeError(
            f"Expected {model_class.__name__} instance or int, got {type(item)}"
        )

    def _resolve_optional(
        self, item: Union[T, int, None], model_class: Type[T]
    ) -> Optional[T]:
        """Like _resolve_object but returns None instead of raising on a miss."""
        if item is None:
            return None
        try:
            return self._resolve_object(item, model_class)
        except ValueError:
            return None

    # -------------------------------------------------------------------------
    # Generic Read Helpers
    # -------------------------------------------------------------------------

    def _exists(
        self,
        model_class: Type[T],
        field_name: str,
        value: Any,
        exclude_id: Optional[int] = None,
    ) -> bool:
        """True when a row has field_name == value (optionally ignoring one id)."""
        if isinstance(value, str):
            value = DataValidator.normalize_string(value)
        if value is None:
            return False

        query = self.session.query(model_class.id).filter(
            getattr(model_class, field_name) == value
        )
        if exclude_id is not None:
            query = query.filter(model_class.id != exclude_id)
        return query.first() is not None

    def _get_by_id(self, model_class: Type[T], entity_id: Any) -> Optional[T]:
        """Get entity by primary key; non-numeric ids return None."""
        entity_id = DataValidator.normalize_int(entity_id)
        if entity_id is None:
            return None
        return self.session.get(model_class, entity_id)

    def _get_by_field(
        self,
        model_class: Type[T],
        field_name: str,
        value: Any,
        normalize: bool = True,
    ) -> Optional[T]:
        """Get the first entity whose field equals value."""
        if normalize and isinstance(value, str):
            value = DataValidator.normalize_string(value)
        if value is None:
            return None

        return (
            self.session.query(model_class)
            .filter(getattr(model_class, field_name) == value)
            .first()
        )

    def _count(self, model_class: Type[T], *criteria: Any) -> int:
        """Count rows matching optional SQL criteria."""
        stmt = select(func.count()).select_from(model_class)
        if criteria:
            stmt = stmt.where(*criteria)
        return self.session.execute(stmt).scalar_one()

    @staticmethod
    def _apply_search(
        statement: Select, term: Optional[str], columns: Sequence[Any]
    ) -> Select:
        """Add `(col1 LIKE %term% OR col2 LIKE %term% ...)` when term is given."""
        term = DataValidator.normalize_string(term)
        if not term:
            return statement
        pattern = f"%{term}%"
        return statement.where(or_(*[column.ilike(pattern) for column in columns]))

    @staticmethod
    def _apply_ordering(
        statement: Select,
        model_class: Type[Any],
        order_by: Optional[str],
        direction: Optional[str],
        allowed: Iterable[str],
        default: str = "created_at",
    ) -> Select:
        """
        Order by a whitelisted column name.

        Unknown columns fall back to default; the id is used as a stable
        tie-breaker.
        """
        column_name = order_by if order_by in set(allowed) else default
        column = getattr(model_class, column_name)
        ordering = asc if (direction or "").lower() == "asc" else desc
        return statement.order_by(ordering(column), ordering(model_class.id))

    # -------------------------------------------------------------------------
    # Write Helpers
    # -------------------------------------------------------------------------

    def _replace_collection(
        self,
        entity: Any,
        attr_name: str,
        items: Iterable[Any],
        model_class: Type[T],
    ) -> List[T]:
        """
        Replace a many-to-many collection.

        Runs in the caller's transaction: removing old pairs and inserting
        new ones commit or roll back together. Unresolvable items raise
        ValidationError before anything changes.

        Args:
            entity: Owner of the collection
            attr_name: Relationship attribute (e.g. 'skills')
            items: Instances or ids
            model_class: Model class for resolving ids

        Returns:
            The new collection contents
        """
        resolved: List[T] = []
        for item in items:
            try:
                obj = self._resolve_object(item, model_class)
            except (ValueError, TypeError) as e:
                raise ValidationError(str(e), field=attr_name) from e
            if obj not in resolved:
                resolved.append(obj)

        setattr(entity, attr_name, resolved)
        self.session.flush()
        return resolved

    def _update_scalar_fields(
        self,
        entity: Any,
        metadata: Dict[str, Any],
        field_configs: List[FieldConfig],
    ) -> List[str]:
        """
        Apply normalized values for the keys present in metadata.

        A key whose value is None is skipped unless the config allows
        None. Fields whose value does not change are not touched, so an
        update with nothing new issues no UPDATE statement.

        Args:
            entity: Entity to update
            metadata: Incoming values
            field_configs: (field_name, normalizer[, allow_none]) tuples

        Returns:
            Names of the fields that changed
        """
        changed: List[str] = []
        for config in field_configs:
            field_name, normalizer = config[0], config[1]
            allow_none = config[2] if len(config) > 2 else False

            if field_name not in metadata:
                continue
            raw = metadata[field_name]
            if raw is None and not allow_none:
                continue

            value = normalizer(raw) if raw is not None else None
            if value is None and not allow_none:
                continue
            if getattr(entity, field_name) != value:
                setattr(entity, field_name, value)
                changed.append(field_name)
        return changed
