"""
Folio HTTP API
--------------

FastAPI application serving the portfolio content.

Modules:
    - app: create_app() factory and exception handlers
    - deps: Session-per-request and manager dependencies
    - auth: Signed tokens and role checks
    - schemas: Request/response models and the response envelope
    - routers: Endpoint groups

Usage:
    from folio.api import create_app
    app = create_app(db, settings)
"""
from .app import create_app

__all__ = ["create_app"]
