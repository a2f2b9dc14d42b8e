# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Liveness endpoint.

Reports whether the tutoring session manager came up (agent profiles
loaded) and how many sessions are held in memory.
"""

import time
from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from src import __version__
from src.api import dependencies
from src.core.config import get_settings
from src.utils.datetime import utc_now

router = APIRouter()

_started = time.monotonic()


class HealthResponse(BaseModel):
    """Liveness report."""

    status: str = Field(description="'healthy', or 'degraded' without a session manager")
    timestamp: datetime = Field(description="Server time (UTC)")
    version: str = Field(description="Service version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Seconds since the process started")
    llm_provider: str = Field(description="Default LLM provider")
    active_sessions: int = Field(description="Tutoring sessions held in memory")


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    settings = get_settings()
    manager = dependencies.current_session_manager()

    return HealthResponse(
        status="healthy" if manager is not None else "degraded",
        timestamp=utc_now(),
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.monotonic() - _started),
        llm_provider=settings.llm.default_provider,
        active_sessions=len(manager.list_sessions()) if manager is not None else 0,
    )
