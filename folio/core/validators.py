#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities.

DataValidator normalizes raw values coming from JSON bodies, query
strings and seed files before they reach the ORM. The module-level
validate_* functions implement form-style checks that return an error
message (or None) so several fields can be validated in one pass with
validate_fields().
"""
from __future__ import annotations

import json
import re
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

from .exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
PASSWORD_SPECIALS = "!@#$%^&*"


class DataValidator:
    """Centralized normalization for manager input."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Validate that required fields are present and non-empty.

        Args:
            data: Data dictionary to validate
            required_fields: List of required field names

        Raises:
            ValidationError: If a field is missing or blank
        """
        for field in required_fields:
            value = data.get(field) if isinstance(data, dict) else None
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(
                    f"Required field '{field}' missing or empty", field=field
                )

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """Strip a value to a string; blank becomes None."""
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def normalize_text(value: Any) -> Optional[str]:
        """Like normalize_string but keeps inner whitespace and newlines."""
        if value is None:
            return None
        text = str(value)
        return text if text.strip() else None

    @staticmethod
    def normalize_bool(value: Any) -> Optional[bool]:
        """
        Convert various inputs to boolean.

        Raises:
            ValidationError: If the value is not recognisably boolean
        """
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            if value in (0, 1):
                return bool(value)
            raise ValidationError(f"Cannot convert numeric '{value}' to boolean")
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("true", "1", "yes", "on"):
                return True
            if lowered in ("false", "0", "no", "off"):
                return False
            raise ValidationError(f"Cannot convert '{value}' to boolean")
        return None

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        """Convert value to int, None when it is not numeric."""
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def normalize_date(value: Any) -> Optional[date]:
        """Normalize ISO strings, dates and datetimes to a date."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and value.strip():
            text = value.strip()
            try:
                return date.fromisoformat(text[:10])
            except ValueError:
                raise ValidationError(f"Invalid date '{value}'")
        return None

    @staticmethod
    def normalize_datetime(value: Any) -> Optional[datetime]:
        """Normalize ISO strings and dates to a timezone-aware UTC datetime."""
        if isinstance(value, datetime):
            result = value
        elif isinstance(value, date):
            result = datetime(value.year, value.month, value.day)
        elif isinstance(value, str) and value.strip():
            text = value.strip().replace("Z", "+00:00")
            try:
                result = datetime.fromisoformat(text)
            except ValueError:
                raise ValidationError(f"Invalid datetime '{value}'")
        else:
            return None

        if result.tzinfo is None:
            result = result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    @staticmethod
    def normalize_string_list(value: Any) -> List[str]:
        """
        Normalize a list-like value to a list of strings.

        Accepts lists, tuples, JSON array strings and comma-separated
        strings. Items are kept as given, in order and with repeats;
        only None and blank items are dropped. Comma-separated input is
        split and each piece stripped.
        """
        if value is None:
            return []
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return []
            if text.startswith("["):
                try:
                    value = json.loads(text)
                except json.JSONDecodeError:
                    value = [part.strip() for part in text.strip("[]").split(",")]
            else:
                value = [part.strip() for part in text.split(",")]
        if not isinstance(value, (list, tuple)):
            raise ValidationError(f"Expected a list, got {type(value).__name__}")

        return [
            str(item) for item in value if item is not None and str(item).strip()
        ]

    @staticmethod
    def normalize_enum(value: Any, allowed: Sequence[str], field: str) -> Optional[str]:
        """
        Validate a value against an allowed set.

        Raises:
            ValidationError: If the value is not in allowed
        """
        if value is None:
            return None
        text = str(getattr(value, "value", value)).strip()
        if text not in allowed:
            raise ValidationError(
                f"Invalid {field} '{text}'. Must be one of: {', '.join(allowed)}",
                field=field,
            )
        return text


# ----- Form-style validators -----
# Each returns an error message or None.

def validate_required(value: Any, field_name: str) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return f"{field_name} is required"
    return None


def validate_email(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value.strip()):
        return "Please enter a valid email address"
    return None


def validate_min_length(value: Any, minimum: int, field_name: str) -> Optional[str]:
    if value is not None and len(str(value)) < minimum:
        return f"{field_name} must be at least {minimum} characters"
    return None


def validate_max_length(value: Any, maximum: int, field_name: str) -> Optional[str]:
    if value is not None and len(str(value)) > maximum:
        return f"{field_name} must be no more than {maximum} characters"
    return None


def validate_url(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return "Please enter a valid URL"
    parsed = urlparse(value.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return "Please enter a valid URL"
    return None


def validate_slug(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not SLUG_PATTERN.match(value):
        return "Slug can only contain lowercase letters, numbers, and hyphens"
    return None


def validate_enum(value: Any, allowed: Iterable[str], field_name: str) -> Optional[str]:
    allowed = list(allowed)
    if value not in allowed:
        return f"{field_name} must be one of: {', '.join(allowed)}"
    return None


def validate_password_strength(password: Any) -> List[str]:
    """
    Check a password against the account policy.

    Returns:
        List of unmet requirements (empty when the password is acceptable)
    """
    text = password if isinstance(password, str) else ""
    errors = []
    if len(text) < 8:
        errors.append("Password must be at least 8 characters long")
    if not re.search(r"[a-z]", text):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"[A-Z]", text):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"\d", text):
        errors.append("Password must contain at least one number")
    if not any(ch in PASSWORD_SPECIALS for ch in text):
        errors.append(
            f"Password must contain at least one special character ({PASSWORD_SPECIALS})"
        )
    return errors


def validate_fields(
    data: Dict[str, Any],
    rules: Dict[str, List[Callable[[Any], Optional[str]]]],
) -> None:
    """
    Run several validators per field and raise on the first failure.

    Args:
        data: Input mapping
        rules: field name -> list of callables taking the value and
            returning an error message or None

    Raises:
        ValidationError: With the first failing field and message

    Example:
        validate_fields(body, {
            "email": [lambda v: validate_required(v, "Email"), validate_email],
        })
    """
    for field, validators in rules.items():
        value = data.get(field)
        for validator in validators:
            message = validator(value)
            if message:
                raise ValidationError(message, field=field)
