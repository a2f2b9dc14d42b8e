# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Workflow orchestration using LangGraph.

This package runs a tutoring session as a supervisor loop over a roster of
specialist agents:
- A pure selection function picks the next agent from the shared state
- Each agent's output is folded into its designated artifact
- The loop suspends for human input and halts on failed turns

Architecture:
    API -> Service -> Workflow -> AgentInvoker -> LLM
                         |
                  State (checkpointed)

Usage:
    from src.core.orchestration import TutoringSessionWorkflow

    workflow = TutoringSessionWorkflow(invoker)
    result = await workflow.run(initial_state, thread_id="tutoring_abc")
"""

from src.core.orchestration.checkpointer import (
    create_checkpointer,
    create_session_thread_id,
    create_thread_config,
)
from src.core.orchestration.states import (
    ActivityLogEntry,
    Difficulty,
    HumanRole,
    TutoringSessionState,
    create_initial_tutoring_session_state,
    select_next,
)
from src.core.orchestration.workflows import TutoringSessionWorkflow

__all__ = [
    # Checkpointer
    "create_checkpointer",
    "create_session_thread_id",
    "create_thread_config",
    # Tutoring Session State
    "ActivityLogEntry",
    "Difficulty",
    "HumanRole",
    "TutoringSessionState",
    "create_initial_tutoring_session_state",
    "select_next",
    # Workflows
    "TutoringSessionWorkflow",
]
