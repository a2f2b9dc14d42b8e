# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Scripted agent invoker standing in for LLM calls
- Tutoring session workflow and session handles
"""

from collections.abc import Callable, Mapping
from typing import Any

import pytest

from src.core.agents.roster import AgentId
from src.core.orchestration.checkpointer import create_checkpointer
from src.core.orchestration.workflows import TutoringSessionWorkflow
from src.domains.tutoring_session import TutoringSession, TutoringSessionManager

APPROVED_REVIEW = '{"approved": true, "comments": "Clear and accurate.", "confidence": 0.9}'


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an HTTP-level integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Scripted Invoker
# =============================================================================


class ScriptedInvoker:
    """Agent invoker returning canned outputs.

    Each agent has a queue of responses. A response is either a string or
    an exception instance, which is raised instead. When an agent's queue
    has a single item left it is reused for every later call.

    Attributes:
        calls: Agents in invocation order.
        snapshots: State snapshots received, in invocation order.
    """

    def __init__(
        self,
        responses: dict[AgentId, list[Any]] | None = None,
        on_invoke: Callable[[AgentId], Any] | None = None,
    ):
        self._responses: dict[AgentId, list[Any]] = {
            AgentId.CURRICULUM_PLANNER: ["1. Light 2. Chlorophyll 3. Glucose"],
            AgentId.CONCEPT_EXPLAINER: ["Plants turn light into sugar."],
            AgentId.QUIZ_GENERATOR: ["Q1: What pigment absorbs light?"],
            AgentId.FEEDBACK_ANALYZER: ["Correct, chlorophyll absorbs light."],
            AgentId.MOTIVATOR: ["Great work, keep going!"],
            AgentId.QUALITY_REVIEWER: [APPROVED_REVIEW],
        }
        if responses:
            self._responses.update(responses)
        self._on_invoke = on_invoke
        self.calls: list[AgentId] = []
        self.snapshots: list[dict[str, Any]] = []

    async def invoke(self, agent: AgentId, state: Mapping[str, Any]) -> str:
        self.calls.append(agent)
        self.snapshots.append(dict(state))
        if self._on_invoke is not None:
            self._on_invoke(agent)

        queue = self._responses[agent]
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response


# =============================================================================
# Workflow Fixtures
# =============================================================================


@pytest.fixture
def scripted_invoker() -> ScriptedInvoker:
    """Invoker whose reviewer approves with high confidence."""
    return ScriptedInvoker()


@pytest.fixture
def tutoring_workflow(scripted_invoker: ScriptedInvoker) -> TutoringSessionWorkflow:
    """Workflow without pacing delay."""
    return TutoringSessionWorkflow(
        scripted_invoker,
        checkpointer=create_checkpointer(),
        turn_delay_seconds=0.0,
    )


@pytest.fixture
def tutoring_session(tutoring_workflow: TutoringSessionWorkflow) -> TutoringSession:
    """Session handle that has not been started."""
    return TutoringSession(tutoring_workflow, session_id="session_123")


@pytest.fixture
def session_manager(tutoring_workflow: TutoringSessionWorkflow) -> TutoringSessionManager:
    """Session manager sharing the scripted workflow."""
    return TutoringSessionManager(tutoring_workflow, default_max_turns=15)


@pytest.fixture
def make_invoker() -> type[ScriptedInvoker]:
    """Factory for invokers with custom responses."""
    return ScriptedInvoker


@pytest.fixture
def make_workflow() -> Callable[[ScriptedInvoker], TutoringSessionWorkflow]:
    """Factory for workflows around a given invoker."""

    def factory(invoker: ScriptedInvoker) -> TutoringSessionWorkflow:
        return TutoringSessionWorkflow(
            invoker,
            checkpointer=create_checkpointer(),
            turn_delay_seconds=0.0,
        )

    return factory
