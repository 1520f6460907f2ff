"""
Main entrypoint for the Help Request API.

``create_app`` configures logging, builds the store and services
around a connection factory, registers exception handlers and mounts
the routers under ``/api``.  The module‑level ``app`` lets the service
run directly with uvicorn::

    uvicorn helprequest_api.app.main:app --reload
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .api.v1.router import build_router
from .core.config import settings
from .core.db import get_connection, init_db
from .core.exceptions import register_exception_handlers
from .core.logging_config import setup_logging
from .services.audit_service import AuditService
from .services.helprequest_service import HelpRequestService
from .services.user_service import UserService
from .stores.helprequest_store import HelpRequestStore


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Every store and service receives ``core.db.get_connection`` as its
    connection factory, so they all use ``settings.database_url``.

    Returns
    -------
    FastAPI
        A configured application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)
    audit_service = AuditService(get_connection)
    help_request_service = HelpRequestService(HelpRequestStore(get_connection), audit_service)
    user_service = UserService(get_connection)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Creates the database file on first start and applies pending migrations.
        init_db()
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    app.include_router(build_router(help_request_service, user_service, audit_service), prefix="/api")

    return app


app = create_app()
