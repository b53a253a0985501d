"""
Main entrypoint for the Library Catalog API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``.  Importing the app here makes it easy to run with uvicorn
or another ASGI server, e.g.::

    uvicorn library_catalog_api.app.main:app --reload

The document store is opened when the application starts and closed
when it shuts down; services receive it through ``app.state``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .api.error_handlers import register_error_handlers
from .api.v1.router import router as v1_router
from .core.config import Settings, load_settings
from .core.db import DocumentStore
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use.  Defaults to a fresh ``load_settings()`` so
        that the current environment is honoured.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or load_settings()
    # Initialise logging before anything else so that startup can log.
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = DocumentStore(app_settings.database_url).open()
        app.state.store = store
        try:
            yield
        finally:
            store.close()

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    register_error_handlers(app)

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        store = getattr(app.state, "store", None)
        db_ok = store is not None and store.ping()
        return {"status": "healthy" if db_ok else "degraded", "db": db_ok}

    logger.info("%s %s configured", app_settings.project_name, app_settings.api_version)
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
