# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutoring session workflow state.

This module defines the shared state of a multi-agent tutoring session and
the pure functions the orchestration loop is built on:

- TutoringSessionState: single source of truth for session progress
- ActivityLogEntry: append-only observability record
- select_next: next-agent decision function
- human_role_for: context of a pending human input
- AGENT_OUTPUT_APPLIERS: how each agent's output is folded into state

Artifacts are produced in a fixed order (plan, explanation, quiz, student
answers, feedback, motivational message, review). A string artifact counts
as unset while it is None or empty. The reviewer verdict is tri-state:
None means "not reviewed yet" and routes to the Quality-Reviewer, False
routes to a human supervisor.
"""

import operator
from collections.abc import Callable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Literal, TypedDict
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.core.agents.invoker import InvocationError
from src.core.agents.roster import AWAIT_HUMAN, TERMINATE, AgentId
from src.utils.datetime import utc_now_iso

APPROVAL_CONFIDENCE_THRESHOLD = 0.8
DEFAULT_MAX_TURNS = 15


class Difficulty(str, Enum):
    """Ordered difficulty levels of a session."""

    TODDLER = "Toddler"
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


class HumanRole(str, Enum):
    """Role a human plays when the loop is suspended."""

    STUDENT = "student"
    SUPERVISOR = "supervisor"


HUMAN_PROMPTS: dict[HumanRole, str] = {
    HumanRole.STUDENT: "Acting as student: answer the quiz",
    HumanRole.SUPERVISOR: "Acting as supervisor: provide guidance or override",
}

LogEntryType = Literal["status", "output", "decision", "error"]
SessionStatus = Literal["pending", "active", "awaiting_human", "halted", "completed"]


class ActivityLogEntry(TypedDict, total=False):
    """A single activity log record."""

    id: str
    timestamp: str  # ISO format
    agent: str  # AgentId value
    content: str
    type: LogEntryType
    reason: str | None


class TutoringSessionState(TypedDict, total=False):
    """State for the multi-agent tutoring session workflow.

    Attributes:
        # Session Identity
        session_id: Identifier of the owning session handle.
        topic: Subject of the session, set once at start.
        difficulty: Difficulty level value.

        # Artifacts
        lesson_plan: Curriculum-Planner output.
        explanation: Concept-Explainer output.
        quiz: Quiz-Generator output.
        student_answers: Human-supplied answers to the quiz.
        feedback: Feedback-Analyzer output.
        motivator_message: Motivator output.
        reviewer_approved: Quality verdict (None = not reviewed).
        reviewer_comments: Reviewer rationale.
        confidence: Reviewer confidence in [0, 1].
        supervisor_guidance: Last guidance given by a human supervisor.

        # Turn Accounting
        turn_count: Completed agent invocations.
        max_turns: Hard cap on turn_count.

        # Loop Status
        status: Current loop status.
        awaiting_human: Whether the loop waits for human input.
        human_role: Role of the pending human input.
        pending_human_input: Input injected via aupdate_state on resume.
        next_action: Last supervisor decision, used for routing.
        active_agent: Agent whose turn is in flight.
        error: Message of the last failed invocation.

        # Observability
        activity_log: Append-only activity log.

        # Timestamps
        started_at: Session start time.
        completed_at: Session completion time.
    """

    # Session Identity
    session_id: str
    topic: str
    difficulty: str

    # Artifacts
    lesson_plan: str | None
    explanation: str | None
    quiz: str | None
    student_answers: str | None
    feedback: str | None
    motivator_message: str | None
    reviewer_approved: bool | None
    reviewer_comments: str | None
    confidence: float
    supervisor_guidance: str | None

    # Turn Accounting
    turn_count: int
    max_turns: int

    # Loop Status
    status: SessionStatus
    awaiting_human: bool
    human_role: str | None
    pending_human_input: str | None
    next_action: str | None
    active_agent: str | None
    error: str | None

    # Observability
    activity_log: Annotated[list[ActivityLogEntry], operator.add]

    # Timestamps
    started_at: str
    completed_at: str | None


# Fields an agent may read; orchestration bookkeeping is not exposed
SNAPSHOT_FIELDS: tuple[str, ...] = (
    "topic",
    "difficulty",
    "lesson_plan",
    "explanation",
    "quiz",
    "student_answers",
    "feedback",
    "motivator_message",
    "reviewer_approved",
    "reviewer_comments",
    "confidence",
    "supervisor_guidance",
    "turn_count",
    "max_turns",
)


def create_initial_tutoring_session_state(
    session_id: str,
    topic: str,
    difficulty: Difficulty | str,
    max_turns: int = DEFAULT_MAX_TURNS,
) -> TutoringSessionState:
    """Create fresh state for a tutoring session.

    All artifacts are unset, turn_count is 0 and the activity log is empty.

    Args:
        session_id: Identifier of the owning session handle.
        topic: Subject of the session.
        difficulty: Difficulty level.
        max_turns: Hard cap on completed agent turns.

    Returns:
        Initial TutoringSessionState ready for workflow execution.

    Raises:
        ValueError: If max_turns is not positive or difficulty is unknown.
    """
    if max_turns < 1:
        raise ValueError(f"max_turns must be positive, got {max_turns}")

    return TutoringSessionState(
        # Session Identity
        session_id=session_id,
        topic=topic,
        difficulty=Difficulty(difficulty).value,
        # Artifacts
        lesson_plan=None,
        explanation=None,
        quiz=None,
        student_answers=None,
        feedback=None,
        motivator_message=None,
        reviewer_approved=None,
        reviewer_comments=None,
        confidence=0.0,
        supervisor_guidance=None,
        # Turn Accounting
        turn_count=0,
        max_turns=max_turns,
        # Loop Status
        status="pending",
        awaiting_human=False,
        human_role=None,
        pending_human_input=None,
        next_action=None,
        active_agent=None,
        error=None,
        # Observability
        activity_log=[],
        # Timestamps
        started_at=utc_now_iso(),
        completed_at=None,
    )


def make_log_entry(
    agent: AgentId,
    content: str,
    entry_type: LogEntryType,
    reason: str | None = None,
) -> ActivityLogEntry:
    """Build an activity log entry with a unique id and current timestamp."""
    return ActivityLogEntry(
        id=uuid4().hex,
        timestamp=utc_now_iso(),
        agent=agent.value,
        content=content,
        type=entry_type,
        reason=reason,
    )


def session_snapshot(state: Mapping[str, Any]) -> Mapping[str, Any]:
    """Read-only view of the session fields handed to agents."""
    return MappingProxyType({key: state.get(key) for key in SNAPSHOT_FIELDS})


def _is_set(value: str | None) -> bool:
    return bool(value)


# =============================================================================
# Next-Agent Selection
# =============================================================================


def select_next(state: Mapping[str, Any]) -> AgentId:
    """Decide what the loop does next.

    Rules are evaluated in order, the first match wins:
    1. turn_count >= max_turns -> TERMINATE
    2. no lesson plan -> CURRICULUM_PLANNER
    3. no explanation -> CONCEPT_EXPLAINER
    4. no quiz -> QUIZ_GENERATOR
    5. quiz but no student answers -> AWAIT_HUMAN (student)
    6. answers but no feedback -> FEEDBACK_ANALYZER
    7. feedback but no motivational message -> MOTIVATOR
    8. motivational message, not reviewed yet -> QUALITY_REVIEWER
    9. approved with confidence >= 0.8 -> TERMINATE
    10. rejected -> AWAIT_HUMAN (supervisor)
    11. otherwise -> TERMINATE

    Rule 11 is reached when the reviewer approves with low confidence. It
    ends the session instead of asking for improvements; kept as is until
    a product decision says otherwise.

    Args:
        state: Current session state.

    Returns:
        An invocable agent, AWAIT_HUMAN or TERMINATE.
    """
    if state["turn_count"] >= state["max_turns"]:
        return TERMINATE

    if not _is_set(state.get("lesson_plan")):
        return AgentId.CURRICULUM_PLANNER
    if not _is_set(state.get("explanation")):
        return AgentId.CONCEPT_EXPLAINER
    if not _is_set(state.get("quiz")):
        return AgentId.QUIZ_GENERATOR

    if not _is_set(state.get("student_answers")):
        return AWAIT_HUMAN
    if not _is_set(state.get("feedback")):
        return AgentId.FEEDBACK_ANALYZER
    if not _is_set(state.get("motivator_message")):
        return AgentId.MOTIVATOR

    approved = state.get("reviewer_approved")
    if approved is None:
        return AgentId.QUALITY_REVIEWER

    if approved is True and state.get("confidence", 0.0) >= APPROVAL_CONFIDENCE_THRESHOLD:
        return TERMINATE

    if approved is False:
        return AWAIT_HUMAN

    return TERMINATE


def human_role_for(state: Mapping[str, Any]) -> HumanRole:
    """Role of the human when the loop awaits input.

    The human answers as the student while a quiz is unanswered; in every
    other suspension the human acts as supervisor.
    """
    if _is_set(state.get("quiz")) and not _is_set(state.get("student_answers")):
        return HumanRole.STUDENT
    return HumanRole.SUPERVISOR


# =============================================================================
# Agent Output Folding
# =============================================================================


class ReviewerJudgment(BaseModel):
    """Structured verdict returned by the Quality-Reviewer."""

    model_config = ConfigDict(strict=True)

    approved: bool
    comments: str
    confidence: float = Field(ge=0.0, le=1.0)


def _write_field(field_name: str) -> Callable[[str], dict[str, Any]]:
    def apply(output: str) -> dict[str, Any]:
        return {field_name: output}

    return apply


def _apply_review(output: str) -> dict[str, Any]:
    judgment = ReviewerJudgment.model_validate_json(output.strip())
    return {
        "reviewer_approved": judgment.approved,
        "reviewer_comments": judgment.comments,
        "confidence": judgment.confidence,
    }


AGENT_OUTPUT_APPLIERS: dict[AgentId, Callable[[str], dict[str, Any]]] = {
    AgentId.CURRICULUM_PLANNER: _write_field("lesson_plan"),
    AgentId.CONCEPT_EXPLAINER: _write_field("explanation"),
    AgentId.QUIZ_GENERATOR: _write_field("quiz"),
    AgentId.FEEDBACK_ANALYZER: _write_field("feedback"),
    AgentId.MOTIVATOR: _write_field("motivator_message"),
    AgentId.QUALITY_REVIEWER: _apply_review,
}


def apply_agent_output(agent: AgentId, output: str) -> dict[str, Any]:
    """Translate an agent's raw output into state updates.

    Args:
        agent: Invocable agent that produced the output.
        output: Raw text returned by the invoker.

    Returns:
        Field updates for the agent's designated artifact(s).

    Raises:
        InvocationError: If the reviewer output is not a valid judgment.
        KeyError: If agent is not invocable.
    """
    applier = AGENT_OUTPUT_APPLIERS[agent]
    try:
        return applier(output)
    except ValidationError as e:
        raise InvocationError(
            agent,
            f"Unparseable reviewer judgment: {e.error_count()} validation error(s)",
            original_error=e,
        ) from e
