# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cross-cutting utilities.

- logging: structlog setup and context binding
- datetime: UTC timestamps
"""

from src.utils.datetime import utc_now, utc_now_iso
from src.utils.logging import bind_context, get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "bind_context",
    "utc_now",
    "utc_now_iso",
]
