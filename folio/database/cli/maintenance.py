"""
Maintenance & Monitoring Commands
----------------------------------

Database validation, statistics and account management.

Commands:
    - validate: Validate database integrity
    - stats: Display content statistics
    - create-user: Add an admin or editor account
"""
import json
import click

from folio.core.logging_manager import handle_cli_error
from folio.core.exceptions import ConflictError, DatabaseError, ValidationError
from folio.database.models import UserRole
from . import get_db


@click.command()
@click.pass_context
def validate(ctx):
    """Validate database integrity."""
    try:
        db = get_db(ctx)
        result = db.validate()

        click.echo("\n🔍 Database Validation")
        click.echo("=" * 50)

        if result["valid"]:
            click.echo("\n✅ No integrity issues found")
            return

        click.echo(f"\n⚠️  Found {len(result['issues'])} issues:")
        for issue in result["issues"]:
            click.echo(f"  • {issue}")
        ctx.exit(1)

    except DatabaseError as e:
        handle_cli_error(ctx, e, "validate")


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def stats(ctx, as_json):
    """Display content statistics."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            data = db.stats.get_database_stats()

        if as_json:
            click.echo(json.dumps(data, indent=2, default=str))
            return

        posts = data["blog_posts"]
        projects = data["projects"]
        skills = data["skills"]

        click.echo("\n📊 Content Statistics")
        click.echo("=" * 50)

        click.echo("\nBlog posts:")
        click.echo(f"  Total:      {posts['total']}")
        click.echo(f"  Published:  {posts['published']}")
        click.echo(f"  Drafts:     {posts['drafts']}")
        click.echo(f"  Archived:   {posts['archived']}")
        click.echo(f"  Featured:   {posts['featured']}")

        click.echo("\nProjects:")
        click.echo(f"  Total:       {projects['total']}")
        click.echo(f"  Completed:   {projects['completed']}")
        click.echo(f"  In progress: {projects['in_progress']}")
        click.echo(f"  Featured:    {projects['featured']}")

        click.echo(f"\nSkills: {skills['total']}")
        for category, count in sorted(skills["by_category"].items()):
            click.echo(f"  • {category}: {count}")

        click.echo(f"\nTotal views: {data['total_views']:,}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "stats")


@click.command("create-user")
@click.option("--email", prompt=True, help="Login email")
@click.option("--name", prompt=True, help="Display name")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password (8+ chars, mixed case, digit, one of !@#$%^&*)",
)
@click.option(
    "--role",
    type=click.Choice(UserRole.choices()),
    default=UserRole.EDITOR.value,
    show_default=True,
)
@click.pass_context
def create_user(ctx, email, name, password, role):
    """Create an admin or editor account."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            user = db.users.create(
                {"email": email, "name": name, "password": password, "role": role}
            )
            role_name = getattr(user.role, "value", user.role)
            click.echo(f"✅ Created {role_name} account {user.email} (id {user.id})")

    except (ValidationError, ConflictError, DatabaseError) as e:
        handle_cli_error(ctx, e, "create-user", {"email": email})
