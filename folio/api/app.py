#!/usr/bin/env python3
"""
app.py
------
FastAPI application factory.

create_app() receives an already constructed FolioDB and keeps it on
app.state; nothing here opens a database on import. The CLI `serve`
command and the tests both build the app this way.

Usage:
    db = FolioDB(db_path=DB_PATH)
    db.initialize()
    app = create_app(db, Settings.from_env(), log_dir=LOG_DIR)
"""
# --- Standard library imports ---
from pathlib import Path
from typing import Optional

# --- Third-party imports ---
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

# --- Local imports ---
from folio import __version__
from folio.api.routers import (
    auth,
    blogs,
    media,
    pages,
    projects,
    search,
    sitemap,
    skills,
)
from folio.api.schemas import error_body
from folio.core.config import Settings
from folio.core.exceptions import AppError
from folio.core.logging_manager import safe_logger, setup_logger
from folio.core.throttle import create_rate_limiter
from folio.database import FolioDB
from folio.utils.sitemap import SitemapRenderer

LOGIN_ATTEMPTS = 5
LOGIN_WINDOW = 15 * 60

_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def create_app(
    db: FolioDB,
    settings: Optional[Settings] = None,
    log_dir: Optional[Path] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        db: Initialized database handle
        settings: Runtime settings (default: Settings.from_env())
        log_dir: Base log directory; None disables the api log file
    """
    settings = settings or Settings.from_env()

    app = FastAPI(title=f"{settings.site_name} API", version=__version__)
    app.state.db = db
    app.state.settings = settings
    app.state.logger = setup_logger(Path(log_dir) / "api", "api") if log_dir else None
    app.state.login_limiter = create_rate_limiter(LOGIN_ATTEMPTS, LOGIN_WINDOW)
    app.state.sitemap_renderer = SitemapRenderer()

    if settings.secret_generated:
        safe_logger(app.state.logger).log_warning(
            "JWT_SECRET is not set; admin tokens are signed with a per-process secret"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for module in (projects, blogs, skills, media, auth, search, pages, sitemap):
        app.include_router(module.router)

    app.mount(
        "/uploads",
        StaticFiles(directory=str(db.upload_dir), check_dir=False),
        name="uploads",
    )
    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Answer every error with the failure envelope."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        log = safe_logger(request.app.state.logger)
        if exc.status_code >= 500:
            log.log_error(exc, {"path": request.url.path, "method": request.method})
        else:
            log.log_debug(
                f"{exc.code}: {exc.message}",
                {"path": request.url.path, "status": exc.status_code},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.code, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = jsonable_encoder(exc.errors())
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", [])[1:]) or None
        message = f"Invalid value for '{field}'" if field else "Invalid request"
        return JSONResponse(
            status_code=400,
            content=error_body(message, "VALIDATION_ERROR", {"errors": errors}),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        safe_logger(request.app.state.logger).log_error(
            exc, {"path": request.url.path, "method": request.method}
        )
        return JSONResponse(
            status_code=500,
            content=error_body("An unexpected error occurred", "INTERNAL_ERROR"),
        )
