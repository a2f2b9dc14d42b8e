# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Timestamps for session state and activity log entries.

Always timezone-aware UTC, serialized as ISO 8601 strings so checkpointed
state stays plain data.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string, e.g. '2025-03-01T09:30:00.123456+00:00'."""
    return utc_now().isoformat()
