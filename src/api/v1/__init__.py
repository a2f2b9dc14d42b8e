# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    tutoring_sessions: Multi-agent tutoring session endpoints.
"""

from fastapi import APIRouter

from src.api.v1 import tutoring_sessions

# Create the main v1 router, mounted under settings.api.prefix
router = APIRouter()

# Include domain routers
router.include_router(
    tutoring_sessions.router,
    prefix="/tutoring-sessions",
    tags=["Tutoring Sessions"],
)
