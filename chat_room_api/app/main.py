"""
Main entrypoint for the Chat Room API.

``create_app`` builds the FastAPI application together with its
collaborators: one ``ChatStore``, the message and participant
services and the ``InactivitySweeper``.  They are attached to
``app.state`` and wired into the routes through dependencies.  The
lifespan hook connects the store and starts the sweeper on startup,
and stops the sweeper and closes the store on shutdown.

An application built from environment settings is created at import
time as ``app``, so it can be served directly::

    uvicorn chat_room_api.app.main:app
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import ChatStore, StoreError
from .core.logging_config import setup_logging
from .services.liveness_service import InactivitySweeper
from .services.message_service import MessageService
from .services.participant_service import ParticipantService


logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ChatStore] = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the environment-derived
        module settings.
    store : Optional[ChatStore]
        Store client; by default one is created for
        ``settings.database_url``.
    clock : Callable[[], float]
        Source of the current time in epoch seconds, shared by the
        services and the sweeper.

    Returns
    -------
    FastAPI
        A configured application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    store = store or ChatStore(settings.database_url)
    message_service = MessageService(store, clock=clock)
    participant_service = ParticipantService(store, message_service, clock=clock)
    sweeper = InactivitySweeper(
        store,
        message_service,
        interval=settings.sweep_interval_seconds,
        timeout=settings.inactivity_timeout_seconds,
        clock=clock,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.connect()
        sweeper.start()
        try:
            yield
        finally:
            await sweeper.stop()
            store.close()

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.message_service = message_service
    app.state.participant_service = participant_service
    app.state.sweeper = sweeper

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        # Details stay in the server log; callers only see a generic 500.
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok", "store_connected": store.connected, "sweeper_running": sweeper.running}

    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


# Create the application instance at import time so that uvicorn can
# discover it without calling create_app manually.
app = create_app()
