# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutoring Orchestrator API application.

Run with:
    uvicorn src.api.app:create_app --factory
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src import __version__
from src.api.dependencies import close_session_manager, init_session_manager
from src.api.routes import health
from src.api.v1 import router as v1_router
from src.core.agents.profiles import AgentProfileLoadError
from src.core.config import get_settings
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Set up logging and the session manager; drop all sessions on exit.

    A broken agent profile does not stop the process: the API starts
    degraded and session endpoints answer 503.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Tutoring Orchestrator API starting (environment=%s, provider=%s)",
        settings.environment,
        settings.llm.default_provider,
    )

    try:
        init_session_manager()
    except AgentProfileLoadError as e:
        logger.warning("Session manager unavailable: %s", e)

    yield

    close_session_manager()
    logger.info("Tutoring Orchestrator API stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application.

    Returns:
        Application with the health route and the versioned API router.
    """
    settings = get_settings()
    docs_enabled = settings.debug

    app = FastAPI(
        title=settings.api.title,
        description="Multi-agent tutoring sessions with a human in the loop",
        version=__version__,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router, prefix=settings.api.prefix)

    return app
