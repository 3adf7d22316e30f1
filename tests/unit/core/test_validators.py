#!/usr/bin/env python3
"""
test_validators.py
------------------
Tests for DataValidator normalization and the form-style validators.

Usage:
    python -m pytest tests/unit/core/test_validators.py -v
"""
# --- Standard library imports ---
from datetime import date, datetime, timezone

# --- Third-party imports ---
import pytest

# --- Local imports ---
from folio.core.exceptions import ValidationError
from folio.core.validators import (
    DataValidator,
    validate_email,
    validate_enum,
    validate_fields,
    validate_max_length,
    validate_min_length,
    validate_password_strength,
    validate_required,
    validate_slug,
    validate_url,
)


class TestRequiredFields:
    """Test DataValidator.validate_required_fields()."""

    def test_passes_when_present(self):
        """Test no error when every field has a value."""
        DataValidator.validate_required_fields({"title": "Hello"}, ["title"])

    @pytest.mark.parametrize("data", [{}, {"title": None}, {"title": "   "}])
    def test_missing_or_blank_raises(self, data):
        """Test missing, None and blank values are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            DataValidator.validate_required_fields(data, ["title"])
        assert exc_info.value.field == "title"


class TestScalarNormalization:
    """Test string, bool and int normalization."""

    def test_normalize_string_strips(self):
        """Test surrounding whitespace is removed and blanks become None."""
        assert DataValidator.normalize_string("  Svelte  ") == "Svelte"
        assert DataValidator.normalize_string("   ") is None
        assert DataValidator.normalize_string(None) is None

    def test_normalize_text_keeps_newlines(self):
        """Test multi-line text is kept as written."""
        assert DataValidator.normalize_text("# Title\n\nBody\n") == "# Title\n\nBody\n"
        assert DataValidator.normalize_text("\n  \n") is None

    @pytest.mark.parametrize(
        "value, expected",
        [(True, True), ("yes", True), ("ON", True), (1, True), ("false", False), ("0", False), (0, False)],
    )
    def test_normalize_bool(self, value, expected):
        """Test common boolean spellings."""
        assert DataValidator.normalize_bool(value) is expected

    @pytest.mark.parametrize("value", ["maybe", 2])
    def test_normalize_bool_rejects_unknown(self, value):
        """Test values that are not recognisably boolean raise."""
        with pytest.raises(ValidationError):
            DataValidator.normalize_bool(value)

    def test_normalize_int(self):
        """Test numeric strings convert and junk becomes None."""
        assert DataValidator.normalize_int("42") == 42
        assert DataValidator.normalize_int("abc") is None
        assert DataValidator.normalize_int(True) is None


class TestDateNormalization:
    """Test date and datetime normalization."""

    def test_normalize_date_from_iso_datetime(self):
        """Test only the date part of an ISO datetime is kept."""
        assert DataValidator.normalize_date("2024-03-01T05:00:00") == date(2024, 3, 1)

    def test_normalize_date_rejects_garbage(self):
        """Test invalid dates raise."""
        with pytest.raises(ValidationError):
            DataValidator.normalize_date("not a date")

    def test_normalize_datetime_zulu(self):
        """Test a trailing Z is read as UTC."""
        result = DataValidator.normalize_datetime("2024-01-15T10:00:00Z")
        assert result == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    def test_normalize_datetime_converts_offsets(self):
        """Test other offsets are converted to UTC."""
        result = DataValidator.normalize_datetime("2024-01-15T12:00:00+02:00")
        assert result.tzinfo == timezone.utc
        assert result.hour == 10

    def test_normalize_datetime_naive_is_utc(self):
        """Test naive values are assumed to be UTC."""
        result = DataValidator.normalize_datetime(datetime(2024, 1, 15, 9, 30))
        assert result == datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


class TestStringListNormalization:
    """Test DataValidator.normalize_string_list()."""

    def test_comma_separated(self):
        """Test comma lists are split and stripped, keeping repeats."""
        assert DataValidator.normalize_string_list("Python, FastAPI, Python") == [
            "Python",
            "FastAPI",
            "Python",
        ]

    def test_json_array(self):
        """Test JSON array strings are parsed."""
        assert DataValidator.normalize_string_list('["SvelteKit", "SQLite"]') == [
            "SvelteKit",
            "SQLite",
        ]

    def test_list_items_kept_as_given(self):
        """Test list items keep their spacing and repeats; blanks and None are dropped."""
        assert DataValidator.normalize_string_list(["a", "", None, " b ", "a"]) == [
            "a",
            " b ",
            "a",
        ]

    def test_rejects_non_lists(self):
        """Test scalars that are not strings raise."""
        with pytest.raises(ValidationError):
            DataValidator.normalize_string_list(5)


class TestEnumNormalization:
    """Test DataValidator.normalize_enum()."""

    def test_accepts_allowed_value(self):
        """Test an allowed value is returned stripped."""
        assert DataValidator.normalize_enum(" draft ", ["draft", "published"], "status") == "draft"

    def test_rejects_unknown_value(self):
        """Test an unknown value raises naming the field."""
        with pytest.raises(ValidationError) as exc_info:
            DataValidator.normalize_enum("done", ["draft", "published"], "status")
        assert exc_info.value.field == "status"
        assert "draft, published" in exc_info.value.message


class TestFormValidators:
    """Test the message-returning validators."""

    def test_required(self):
        """Test validate_required."""
        assert validate_required("", "Name") == "Name is required"
        assert validate_required("x", "Name") is None

    @pytest.mark.parametrize("email", ["me@leechy.dev", "first.last@example.co.uk"])
    def test_valid_emails(self, email):
        """Test well-formed addresses pass."""
        assert validate_email(email) is None

    @pytest.mark.parametrize("email", ["nope", "a@b", "@example.com", None])
    def test_invalid_emails(self, email):
        """Test malformed addresses fail."""
        assert validate_email(email) == "Please enter a valid email address"

    def test_lengths(self):
        """Test min and max length messages."""
        assert validate_min_length("ab", 3, "Title") == "Title must be at least 3 characters"
        assert validate_max_length("abcd", 3, "Title") == "Title must be no more than 3 characters"
        assert validate_min_length("abc", 3, "Title") is None

    def test_urls(self):
        """Test only http(s) URLs with a host pass."""
        assert validate_url("https://leechy.dev/blog") is None
        assert validate_url("ftp://leechy.dev") == "Please enter a valid URL"
        assert validate_url("leechy.dev") == "Please enter a valid URL"

    def test_slugs(self):
        """Test slugs allow lowercase letters, digits and hyphens only."""
        assert validate_slug("getting-started-2024") is None
        assert validate_slug("Bad Slug") is not None

    def test_enum(self):
        """Test validate_enum."""
        assert validate_enum("admin", ["admin", "editor"], "Role") is None
        assert validate_enum("owner", ["admin", "editor"], "Role") == "Role must be one of: admin, editor"


class TestPasswordStrength:
    """Test validate_password_strength()."""

    def test_strong_password(self):
        """Test a password meeting every rule has no problems."""
        assert validate_password_strength("Str0ng!pass") == []

    def test_weak_password_lists_every_problem(self):
        """Test every unmet rule is reported."""
        problems = validate_password_strength("abc")
        assert "Password must be at least 8 characters long" in problems
        assert "Password must contain at least one uppercase letter" in problems
        assert "Password must contain at least one number" in problems
        assert len(problems) == 4

    def test_non_string_password(self):
        """Test a missing password fails every rule."""
        assert len(validate_password_strength(None)) == 5


class TestValidateFields:
    """Test validate_fields()."""

    RULES = {
        "email": [lambda v: validate_required(v, "Email"), validate_email],
        "password": [lambda v: validate_required(v, "Password")],
    }

    def test_first_failure_raises(self):
        """Test the first failing validator raises with its field."""
        with pytest.raises(ValidationError) as exc_info:
            validate_fields({"email": "nope", "password": "x"}, self.RULES)
        assert exc_info.value.field == "email"
        assert exc_info.value.message == "Please enter a valid email address"

    def test_valid_data_passes(self):
        """Test valid data raises nothing."""
        validate_fields({"email": "me@leechy.dev", "password": "x"}, self.RULES)
