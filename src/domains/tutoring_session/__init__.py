# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutoring session domain.

This domain runs multi-agent tutoring sessions: a supervisor loop drives
specialist agents through plan, explanation, quiz, feedback, motivation and
review, pausing for a human as student or supervisor.
"""

from src.domains.tutoring_session.exceptions import (
    InvalidInputError,
    SessionBusyError,
    SessionNotFoundError,
    SessionNotSuspendedError,
    TutoringSessionError,
)
from src.domains.tutoring_session.service import TutoringSession, TutoringSessionManager

__all__ = [
    "InvalidInputError",
    "SessionBusyError",
    "SessionNotFoundError",
    "SessionNotSuspendedError",
    "TutoringSession",
    "TutoringSessionError",
    "TutoringSessionManager",
]
