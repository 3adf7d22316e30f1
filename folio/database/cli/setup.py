"""
Setup & Initialization Commands
--------------------------------

Database schema and content initialization commands.

Commands:
    - init: Create or upgrade the schema, then seed default content
    - seed: Seed default content into empty tables
    - reset: Reset database (dangerous!)
"""
import click

from folio.core.logging_manager import handle_cli_error
from folio.core.exceptions import DatabaseError
from . import get_db


def _echo_counts(counts):
    inserted = {table: n for table, n in counts.items() if n}
    if not inserted:
        click.echo("  Nothing to seed, all tables already have content")
        return
    for table, count in inserted.items():
        click.echo(f"  • {table}: {count} added")


@click.command()
@click.option("--no-seed", is_flag=True, help="Create the schema without default content")
@click.pass_context
def init(ctx, no_seed):
    """Initialize database schema and default content."""
    try:
        db = get_db(ctx)

        click.echo("🚀 Initializing Folio database...")
        click.echo("🗄️  Creating schema...")
        result = db.initialize(seed=not no_seed)

        for column in result["columns_added"]:
            click.echo(f"  + column {column}")
        if not no_seed:
            click.echo("🌱 Seeding default content...")
            _echo_counts(result["seeded"])

        click.echo("✅ Database ready!")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "init")


@click.command()
@click.option("--no-samples", is_flag=True, help="Skip sample projects and posts")
@click.pass_context
def seed(ctx, no_samples):
    """Seed default content into empty tables."""
    try:
        db = get_db(ctx)
        click.echo("🌱 Seeding default content...")
        counts = db.seed(include_samples=not no_samples)
        _echo_counts(counts)
        click.echo("✅ Seeding complete!")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "seed")


@click.command()
@click.confirmation_option(prompt="⚠️  This will DELETE all content! Are you sure?")
@click.option("--no-seed", is_flag=True, help="Leave the database empty after reset")
@click.pass_context
def reset(ctx, no_seed):
    """Reset database (DANGEROUS - deletes all data!)."""
    try:
        db = get_db(ctx)

        click.echo("🗑️  Dropping all tables...")
        click.echo("🔄 Reinitializing...")
        result = db.reset(seed=not no_seed)
        if not no_seed:
            _echo_counts(result["seeded"])

        click.echo("✅ Database reset complete!")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "reset")
