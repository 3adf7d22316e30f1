"""
Server Commands
---------------

Commands:
    - serve: Run the JSON API with uvicorn
"""
import click
import uvicorn

from folio.core.logging_manager import handle_cli_error
from folio.core.exceptions import DatabaseError
from . import get_db


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
@click.option("--no-init", is_flag=True, help="Skip schema check and seeding on start")
@click.pass_context
def serve(ctx, host, port, no_init):
    """Run the portfolio API server."""
    from folio.api.app import create_app

    try:
        db = get_db(ctx)
        if not no_init:
            db.initialize()

        settings = ctx.obj["settings"]
        if settings.secret_generated:
            ctx.obj["logger"].log_warning("Serving without JWT_SECRET")
            click.echo(
                "⚠️  JWT_SECRET is not set: tokens are signed with a random secret "
                "and stop working when the server restarts",
                err=True,
            )

        app = create_app(db, settings, log_dir=ctx.obj["log_dir"])
        click.echo(f"🌐 Serving on http://{host}:{port}")
        uvicorn.run(app, host=host, port=port, log_level="info")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "serve")
