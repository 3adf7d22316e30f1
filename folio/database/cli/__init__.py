#!/usr/bin/env python3
"""
Folio Database Management CLI
-----------------------------

Command-line interface for the portfolio database and server.

This module provides the main CLI group and shared context setup
for all commands.

Command Structure:
    - Setup & Initialization (init, seed, reset)
    - Maintenance (validate, stats, create-user)
    - Server (serve)

Usage:
    # Get general help
    folio --help

    # Create the schema and default content
    folio init

    # Run the API
    folio serve --port 8000
"""
import click
import logging
from pathlib import Path

from folio.core.config import Settings
from folio.core.logging_manager import setup_logger
from folio.core.paths import DB_PATH, ALEMBIC_DIR, LOG_DIR
from folio.database import FolioDB


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--alembic-dir",
    type=click.Path(),
    default=str(ALEMBIC_DIR),
    help="Path to Alembic directory",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, alembic_dir, log_dir, verbose):
    """Folio portfolio database and server CLI"""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["alembic_dir"] = Path(alembic_dir)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(Path(log_dir), "cli")
    ctx.obj.setdefault("settings", Settings.from_env())


def get_db(ctx) -> FolioDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = FolioDB(
            db_path=ctx.obj["db_path"],
            alembic_dir=ctx.obj["alembic_dir"],
            log_dir=ctx.obj["log_dir"],
            settings=ctx.obj["settings"],
        )
    return ctx.obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init, seed, reset  # noqa: E402
from .maintenance import validate, stats, create_user  # noqa: E402
from .server import serve  # noqa: E402

cli.add_command(init)
cli.add_command(seed)
cli.add_command(reset)
cli.add_command(validate)
cli.add_command(stats)
cli.add_command(create_user)
cli.add_command(serve)


if __name__ == "__main__":
    cli(obj={})
