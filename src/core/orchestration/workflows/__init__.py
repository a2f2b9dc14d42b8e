# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LangGraph workflow implementations.

Workflows:
    TutoringSessionWorkflow: Supervisor loop over the tutoring agents
"""

from src.core.orchestration.workflows.tutoring_session import (
    StateObserver,
    TutoringSessionWorkflow,
)

__all__ = [
    "StateObserver",
    "TutoringSessionWorkflow",
]
