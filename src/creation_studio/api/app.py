"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from creation_studio.api.auth import router as auth_router
from creation_studio.api.creations import router as creations_router
from creation_studio.api.errors import register_error_handlers
from creation_studio.api.media import router as media_router
from creation_studio.api.sessions import SessionRegistry
from creation_studio.app_logging import configure_logging
from creation_studio.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Application started")
        yield
        sessions: SessionRegistry = app.state.sessions
        await sessions.close()
        state_container: AppContainer = app.state.container
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.state.sessions = SessionRegistry(container.auth_session_factory)
    register_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(creations_router)
    app.include_router(media_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
