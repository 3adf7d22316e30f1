#!/usr/bin/env python3
"""
test_logging_manager.py
-----------------------
Tests for FolioLogger, NullLogger and the CLI error helpers.

Usage:
    python -m pytest tests/unit/core/test_logging_manager.py -v
"""
# --- Third-party imports ---
import click
import pytest
from click.testing import CliRunner

# --- Local imports ---
from folio.core.exceptions import DatabaseError
from folio.core.logging_manager import (
    FolioLogger,
    NullLogger,
    handle_cli_error,
    safe_logger,
    setup_logger,
)


@pytest.fixture
def logger(tmp_path):
    """FolioLogger writing into a temporary directory."""
    instance = FolioLogger(tmp_path / "logs", component_name="testing")
    yield instance
    instance.close()


def _flush(folio_logger):
    for handler in folio_logger.main_logger.handlers + folio_logger.error_logger.handlers:
        handler.flush()


class TestFolioLogger:
    """Test log file creation and content."""

    def test_creates_component_and_error_logs(self, logger, tmp_path):
        """Test both log files exist after setup."""
        assert (tmp_path / "logs" / "testing.log").exists()
        assert (tmp_path / "logs" / "errors.log").exists()

    def test_log_operation_writes_details(self, logger, tmp_path):
        """Test operations are written with JSON details."""
        logger.log_operation("project_created", {"project_id": 3})
        _flush(logger)

        content = (tmp_path / "logs" / "testing.log").read_text(encoding="utf-8")
        assert "OPERATION - project_created" in content
        assert '"project_id": 3' in content

    def test_log_error_writes_context(self, logger, tmp_path):
        """Test errors and their context go to errors.log."""
        try:
            raise DatabaseError("connection lost")
        except DatabaseError as e:
            logger.log_error(e, {"operation": "get_all"})
        _flush(logger)

        content = (tmp_path / "logs" / "errors.log").read_text(encoding="utf-8")
        assert "DatabaseError: connection lost" in content
        assert "operation=get_all" in content

    def test_log_cli_error_message(self, logger):
        """Test the terminal message names the error type."""
        message = logger.log_cli_error(DatabaseError("boom"))
        assert message == "❌ DatabaseError: boom"

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path):
        """Test a second logger for the same component replaces handlers."""
        first = FolioLogger(tmp_path, component_name="dup")
        second = FolioLogger(tmp_path, component_name="dup")
        try:
            assert len(second.main_logger.handlers) == 2
        finally:
            first.close()
            second.close()


class TestSafeLogger:
    """Test setup_logger and safe_logger."""

    def test_setup_logger_disabled(self):
        """Test None log_dir disables logging."""
        assert setup_logger(None, "api") is None

    def test_safe_logger_returns_null_logger(self):
        """Test a missing logger is replaced with a no-op logger."""
        null = safe_logger(None)
        assert isinstance(null, NullLogger)
        null.log_info("ignored")
        null.log_error(ValueError("ignored"))
        assert null.log_cli_error(ValueError("x")) == "❌ ValueError: x"

    def test_safe_logger_passes_through(self, logger):
        """Test an existing logger is returned unchanged."""
        assert safe_logger(logger) is logger


class TestHandleCliError:
    """Test handle_cli_error()."""

    def test_prints_and_exits(self):
        """Test the message is printed to stderr and the exit code is set."""

        @click.command()
        @click.pass_context
        def failing(ctx):
            ctx.obj = {"logger": None, "verbose": False}
            handle_cli_error(ctx, DatabaseError("no database"), "init", exit_code=3)

        result = CliRunner().invoke(failing)

        assert result.exit_code == 3
        assert "DatabaseError: no database" in result.output
