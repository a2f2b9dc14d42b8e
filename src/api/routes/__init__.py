# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unversioned API routes.

Only the liveness check lives outside the versioned router.
"""

from src.api.routes import health

__all__ = ["health"]
