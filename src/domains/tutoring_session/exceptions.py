# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutoring session domain exceptions.

These errors are raised synchronously to the caller of a session
operation. They never reach the session's activity log.
"""


class TutoringSessionError(Exception):
    """Base exception for tutoring session errors."""

    pass


class InvalidInputError(TutoringSessionError):
    """Raised when an operation is called with invalid input."""

    pass


class SessionNotSuspendedError(InvalidInputError):
    """Raised when input or a retry is submitted to a session not waiting for it."""

    pass


class SessionBusyError(InvalidInputError):
    """Raised when an operation is called while an agent turn is in progress."""

    pass


class SessionNotFoundError(TutoringSessionError):
    """Raised when a session id is unknown."""

    pass
