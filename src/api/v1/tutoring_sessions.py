# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutoring session API endpoints.

This module provides endpoints for multi-agent tutoring sessions:
- POST / - Start a session and run it to the first pause
- GET /{session_id} - Get the session view
- GET /{session_id}/activity - Get the activity log
- POST /{session_id}/human-input - Answer the quiz or give supervisor guidance
- POST /{session_id}/retry - Retry after a failed agent turn

Every call that drives the loop returns once the session is waiting for a
human, halted by a failure, or completed.

Example:
    POST /api/v1/tutoring-sessions
    {
        "topic": "Photosynthesis",
        "difficulty": "Beginner"
    }
"""

import logging

from fastapi import APIRouter, HTTPException, status

from src.api.dependencies import SessionManager
from src.domains.tutoring_session import (
    InvalidInputError,
    SessionBusyError,
    SessionNotFoundError,
    SessionNotSuspendedError,
    TutoringSession,
    TutoringSessionError,
)
from src.domains.tutoring_session.schemas import (
    ActivityLogResponse,
    HumanInputRequest,
    StartTutoringSessionRequest,
    TutoringSessionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_http_exception(error: TutoringSessionError) -> HTTPException:
    """Map a session error to its HTTP status."""
    if isinstance(error, SessionNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, (SessionNotSuspendedError, SessionBusyError)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, InvalidInputError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(error))


def _get_session(manager: SessionManager, session_id: str) -> TutoringSession:
    try:
        return manager.get_session(session_id)
    except SessionNotFoundError as e:
        raise _to_http_exception(e)


@router.post(
    "",
    response_model=TutoringSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start tutoring session",
    description="Start a tutoring session and run the agents until a human is needed or the session ends.",
)
async def start_session(
    request: StartTutoringSessionRequest,
    manager: SessionManager,
) -> TutoringSessionResponse:
    """Start a tutoring session.

    Args:
        request: Topic, difficulty and optional turn cap.
        manager: Tutoring session manager.

    Returns:
        TutoringSessionResponse at the first pause.

    Raises:
        HTTPException: 400 if topic, difficulty or max_turns is invalid.
    """
    session = manager.create_session()

    try:
        await session.start(request.topic, request.difficulty, max_turns=request.max_turns)
    except TutoringSessionError as e:
        manager.remove_session(session.session_id)
        raise _to_http_exception(e)

    logger.info(
        "Tutoring session started: session=%s, status=%s",
        session.session_id,
        session.status,
    )
    return TutoringSessionResponse.from_session(session)


@router.get(
    "/{session_id}",
    response_model=TutoringSessionResponse,
    summary="Get tutoring session",
)
async def get_session(
    session_id: str,
    manager: SessionManager,
) -> TutoringSessionResponse:
    """Get the current view of a session.

    Raises:
        HTTPException: 404 if the session is unknown.
    """
    return TutoringSessionResponse.from_session(_get_session(manager, session_id))


@router.get(
    "/{session_id}/activity",
    response_model=ActivityLogResponse,
    summary="Get activity log",
)
async def get_activity(
    session_id: str,
    manager: SessionManager,
) -> ActivityLogResponse:
    """Get the activity log of a session, oldest entry first.

    Raises:
        HTTPException: 404 if the session is unknown.
    """
    return ActivityLogResponse.from_session(_get_session(manager, session_id))


@router.post(
    "/{session_id}/human-input",
    response_model=TutoringSessionResponse,
    summary="Submit human input",
    description="Answer the quiz as student, or give guidance as supervisor after a rejected review.",
)
async def submit_human_input(
    session_id: str,
    request: HumanInputRequest,
    manager: SessionManager,
) -> TutoringSessionResponse:
    """Deliver human input to a suspended session.

    Args:
        session_id: Session identifier.
        request: Human input text.
        manager: Tutoring session manager.

    Returns:
        TutoringSessionResponse at the next pause.

    Raises:
        HTTPException: 400 if the text is empty.
        HTTPException: 404 if the session is unknown.
        HTTPException: 409 if the session is not awaiting input or busy.
    """
    session = _get_session(manager, session_id)

    try:
        await session.submit_human_input(request.text)
    except TutoringSessionError as e:
        raise _to_http_exception(e)

    return TutoringSessionResponse.from_session(session)


@router.post(
    "/{session_id}/retry",
    response_model=TutoringSessionResponse,
    summary="Retry failed turn",
)
async def retry_session(
    session_id: str,
    manager: SessionManager,
) -> TutoringSessionResponse:
    """Retry the agent turn that halted a session.

    Raises:
        HTTPException: 404 if the session is unknown.
        HTTPException: 409 if the session is not halted or busy.
    """
    session = _get_session(manager, session_id)

    try:
        await session.retry()
    except TutoringSessionError as e:
        raise _to_http_exception(e)

    return TutoringSessionResponse.from_session(session)
