# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Checkpoint storage and thread addressing for session workflows.

A LangGraph checkpoint is what a suspended session resumes from, both at
the human gate and after a failed turn. Checkpoints are kept in process
memory, so sessions do not survive a restart.

Usage:
    checkpointer = create_checkpointer()
    workflow = TutoringSessionWorkflow(invoker, checkpointer=checkpointer)

    thread_id = create_session_thread_id("tutoring", f"{session_id}_1")
    snapshot = await workflow.compile().aget_state(create_thread_config(thread_id))
"""

import logging

from langgraph.checkpoint.memory import MemorySaver

logger = logging.getLogger(__name__)


def create_checkpointer() -> MemorySaver:
    """New in-memory checkpoint store, usually one per process."""
    logger.debug("Creating in-memory checkpointer")
    return MemorySaver()


def create_thread_config(thread_id: str) -> dict:
    """Runnable config addressing one workflow thread.

    Callers may add run options such as recursion_limit to the returned dict.
    """
    return {"configurable": {"thread_id": thread_id}}


def create_session_thread_id(session_type: str, session_id: str) -> str:
    """Thread id of a session run.

    Example:
        >>> create_session_thread_id("tutoring", "abc123_1")
        'tutoring_abc123_1'
    """
    return f"{session_type}_{session_id}"
