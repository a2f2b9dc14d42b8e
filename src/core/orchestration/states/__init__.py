# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Workflow state definitions.

This module provides TypedDict-based state definitions for LangGraph workflows.
Each state type defines the structure of data that flows through the workflow.

States:
    TutoringSessionState: State for multi-agent tutoring session workflows
"""

from src.core.orchestration.states.tutoring_session import (
    AGENT_OUTPUT_APPLIERS,
    APPROVAL_CONFIDENCE_THRESHOLD,
    DEFAULT_MAX_TURNS,
    HUMAN_PROMPTS,
    ActivityLogEntry,
    Difficulty,
    HumanRole,
    ReviewerJudgment,
    TutoringSessionState,
    apply_agent_output,
    create_initial_tutoring_session_state,
    human_role_for,
    make_log_entry,
    select_next,
    session_snapshot,
)

__all__ = [
    "AGENT_OUTPUT_APPLIERS",
    "APPROVAL_CONFIDENCE_THRESHOLD",
    "DEFAULT_MAX_TURNS",
    "HUMAN_PROMPTS",
    "ActivityLogEntry",
    "Difficulty",
    "HumanRole",
    "ReviewerJudgment",
    "TutoringSessionState",
    "apply_agent_output",
    "create_initial_tutoring_session_state",
    "human_role_for",
    "make_log_entry",
    "select_next",
    "session_snapshot",
]
