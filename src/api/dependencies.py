# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependencies.

This module provides the tutoring session manager singleton used by the
API endpoints. It is initialized once at application startup.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status

from src.core.config import get_settings
from src.domains.tutoring_session import TutoringSessionManager

logger = logging.getLogger(__name__)

# Tutoring session manager singleton
_session_manager: TutoringSessionManager | None = None


def init_session_manager() -> TutoringSessionManager:
    """Initialize the tutoring session manager from settings.

    Returns:
        Initialized TutoringSessionManager.

    Raises:
        AgentProfileLoadError: If the agent profiles cannot be loaded.
    """
    global _session_manager

    if _session_manager is not None:
        logger.warning("Session manager already initialized, returning existing instance")
        return _session_manager

    _session_manager = TutoringSessionManager.from_settings(get_settings())
    logger.info("Tutoring session manager initialized")
    return _session_manager


def close_session_manager() -> None:
    """Drop the session manager and all in-memory sessions."""
    global _session_manager
    _session_manager = None


def current_session_manager() -> TutoringSessionManager | None:
    """Return the session manager, or None before startup."""
    return _session_manager


def get_session_manager() -> TutoringSessionManager:
    """Get the tutoring session manager singleton.

    Returns:
        TutoringSessionManager instance.

    Raises:
        HTTPException: If not initialized.
    """
    if _session_manager is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Tutoring session manager not initialized",
        )
    return _session_manager


# =========================================================================
# Type Aliases for Cleaner Endpoint Signatures
# =========================================================================

SessionManager = Annotated[TutoringSessionManager, Depends(get_session_manager)]
