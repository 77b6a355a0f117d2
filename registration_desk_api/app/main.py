"""
Main entrypoint for the Registration Desk API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``, e.g.::

    uvicorn registration_desk_api.app.main:app --reload

``create_app`` accepts a store so tests (or another backend) can
replace the SQLite adapter.
"""

import logging
from typing import Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.exceptions import FetchError
from .core.logging_config import setup_logging
from .services.record_service import RegistrationCatalog
from .services.status_service import StatusTransitionManager
from .services.store import RegistrationStore, SQLiteRegistrationStore


def create_app(store: Optional[RegistrationStore] = None, load_on_startup: Optional[bool] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[RegistrationStore]
        Backend to read registrations from and write statuses to.
        Defaults to the SQLite database from settings.
    load_on_startup : Optional[bool]
        Load the catalog when the app starts.  Defaults to
        ``settings.load_on_startup``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)
    logger = logging.getLogger(__name__)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    store = store if store is not None else SQLiteRegistrationStore()
    catalog = RegistrationCatalog()
    app.state.store = store
    app.state.catalog = catalog
    app.state.transition_manager = StatusTransitionManager(catalog, store)

    app.include_router(v1_router, prefix="/api/v1")

    if load_on_startup is None:
        load_on_startup = settings.load_on_startup

    if load_on_startup:
        @app.on_event("startup")
        async def startup_event() -> None:
            # A failed first load is not fatal: requests get 503 until
            # POST /registrations/refresh succeeds.
            try:
                await catalog.refresh(store)
            except FetchError as exc:
                logger.error("Initial registration load failed: %s", exc)

    return app


app = create_app()
