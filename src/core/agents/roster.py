# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Closed roster of tutoring session agents.

Each invocable agent is backed by a single inference call and owns exactly
one artifact of the session. Three ids are not invocable:

- SUPERVISOR: author of orchestration log entries
- HUMAN_APPROVAL: the "await human input" decision
- END: the "terminate session" decision
"""

from enum import Enum


class AgentId(str, Enum):
    """Identifier of a tutoring session agent."""

    SUPERVISOR = "SUPERVISOR"
    CURRICULUM_PLANNER = "CURRICULUM_PLANNER"
    CONCEPT_EXPLAINER = "CONCEPT_EXPLAINER"
    QUIZ_GENERATOR = "QUIZ_GENERATOR"
    FEEDBACK_ANALYZER = "FEEDBACK_ANALYZER"
    MOTIVATOR = "MOTIVATOR"
    QUALITY_REVIEWER = "QUALITY_REVIEWER"
    HUMAN_APPROVAL = "HUMAN_APPROVAL"
    END = "END"

    @property
    def is_invocable(self) -> bool:
        """Whether this id names an agent backed by an inference call."""
        return self in INVOCABLE_AGENTS


# Decisions that are not agent invocations
AWAIT_HUMAN = AgentId.HUMAN_APPROVAL
TERMINATE = AgentId.END

INVOCABLE_AGENTS: frozenset[AgentId] = frozenset(
    {
        AgentId.CURRICULUM_PLANNER,
        AgentId.CONCEPT_EXPLAINER,
        AgentId.QUIZ_GENERATOR,
        AgentId.FEEDBACK_ANALYZER,
        AgentId.MOTIVATOR,
        AgentId.QUALITY_REVIEWER,
    }
)
