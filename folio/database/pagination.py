#!/usr/bin/env python3
"""
pagination.py
-------------
Offset pagination for manager list queries.

A list query is a filtered SELECT. paginate() runs one COUNT over the
filtered statement and one LIMIT/OFFSET page, and wraps both in a
PaginatedResult whose derived fields always agree with total and limit:

    page        = offset // limit + 1
    total_pages = ceil(total / limit)
    has_next    = page < total_pages
    has_prev    = page > 1
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

# --- Third party ---
from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

T = TypeVar("T")

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass
class PaginatedResult(Generic[T]):
    """One page of results plus paging metadata."""

    data: List[T] = field(default_factory=list)
    total: int = 0
    limit: int = DEFAULT_LIMIT
    offset: int = 0

    @property
    def per_page(self) -> int:
        return self.limit

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):
        return iter(self.data)

    def map(self, convert: Callable[[T], Any]) -> "PaginatedResult[Any]":
        """Return the same page with every item converted."""
        return PaginatedResult(
            data=[convert(item) for item in self.data],
            total=self.total,
            limit=self.limit,
            offset=self.offset,
        )

    def to_dict(self, convert: Optional[Callable[[T], Any]] = None) -> Dict[str, Any]:
        items = [convert(item) for item in self.data] if convert else list(self.data)
        return {
            "data": items,
            "total": self.total,
            "page": self.page,
            "per_page": self.per_page,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }


def clamp_limit(limit: Optional[int], offset: Optional[int]) -> tuple:
    """Coerce limit to [1, MAX_LIMIT] and offset to >= 0."""
    safe_limit = DEFAULT_LIMIT if not limit or limit < 1 else min(int(limit), MAX_LIMIT)
    safe_offset = max(int(offset or 0), 0)
    return safe_limit, safe_offset


def paginate(
    session: Session,
    statement: Select,
    limit: Optional[int] = DEFAULT_LIMIT,
    offset: Optional[int] = 0,
) -> PaginatedResult:
    """
    Execute a filtered, ordered SELECT as a page.

    Args:
        session: Active session
        statement: select(Model) with filters and ordering applied
        limit: Page size (clamped to 1..MAX_LIMIT)
        offset: Rows to skip

    Returns:
        PaginatedResult with ORM instances in data
    """
    limit, offset = clamp_limit(limit, offset)

    count_stmt = select(func.count()).select_from(
        statement.order_by(None).subquery()
    )
    total = session.execute(count_stmt).scalar_one()

    rows = session.execute(statement.limit(limit).offset(offset)).scalars().unique().all()
    return PaginatedResult(data=list(rows), total=total, limit=limit, offset=offset)
