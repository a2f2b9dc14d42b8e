# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutoring session API schemas.

Request fields are validated by the session service rather than by pydantic
constraints, so invalid input is reported uniformly as 400.
"""

from typing import Literal

from pydantic import BaseModel, Field

from src.domains.tutoring_session.service import TutoringSession


class StartTutoringSessionRequest(BaseModel):
    """Request to start a tutoring session."""

    topic: str = Field(description="Subject of the session, e.g. 'Photosynthesis'.")
    difficulty: str = Field(
        description="One of Toddler, Beginner, Intermediate, Advanced, Expert.",
    )
    max_turns: int | None = Field(
        default=None,
        description="Cap on completed agent turns. Uses the configured default if omitted.",
    )


class HumanInputRequest(BaseModel):
    """Human input for a suspended session."""

    text: str = Field(description="Quiz answers as student, or guidance as supervisor.")


class ActivityLogEntryResponse(BaseModel):
    """A single activity log entry."""

    id: str
    timestamp: str
    agent: str
    content: str
    type: Literal["status", "output", "decision", "error"]
    reason: str | None = None


class ActivityLogResponse(BaseModel):
    """Activity log of a session, oldest entry first."""

    session_id: str
    entries: list[ActivityLogEntryResponse]
    total: int

    @classmethod
    def from_session(cls, session: TutoringSession) -> "ActivityLogResponse":
        entries = [ActivityLogEntryResponse(**entry) for entry in session.activity_log]
        return cls(session_id=session.session_id, entries=entries, total=len(entries))


class TutoringSessionResponse(BaseModel):
    """Observable view of a tutoring session."""

    session_id: str
    status: str
    topic: str | None = None
    difficulty: str | None = None

    # Artifacts
    lesson_plan: str | None = None
    explanation: str | None = None
    quiz: str | None = None
    student_answers: str | None = None
    feedback: str | None = None
    motivator_message: str | None = None
    reviewer_approved: bool | None = None
    reviewer_comments: str | None = None
    confidence: float = 0.0
    supervisor_guidance: str | None = None

    # Loop
    turn_count: int = 0
    max_turns: int | None = None
    awaiting_human: bool = False
    human_role: str | None = None
    human_prompt: str | None = None
    active_agent: str | None = None
    is_processing: bool = False
    error: str | None = None

    started_at: str | None = None
    completed_at: str | None = None

    @classmethod
    def from_session(cls, session: TutoringSession) -> "TutoringSessionResponse":
        state = session.state
        role = session.human_role
        agent = session.active_agent
        return cls(
            session_id=session.session_id,
            status=session.status,
            topic=state.get("topic"),
            difficulty=state.get("difficulty"),
            lesson_plan=state.get("lesson_plan"),
            explanation=state.get("explanation"),
            quiz=state.get("quiz"),
            student_answers=state.get("student_answers"),
            feedback=state.get("feedback"),
            motivator_message=state.get("motivator_message"),
            reviewer_approved=state.get("reviewer_approved"),
            reviewer_comments=state.get("reviewer_comments"),
            confidence=state.get("confidence", 0.0),
            supervisor_guidance=state.get("supervisor_guidance"),
            turn_count=state.get("turn_count", 0),
            max_turns=state.get("max_turns"),
            awaiting_human=session.awaiting_human,
            human_role=role.value if role else None,
            human_prompt=session.human_prompt,
            active_agent=agent.value if agent else None,
            is_processing=session.is_processing,
            error=state.get("error"),
            started_at=state.get("started_at"),
            completed_at=state.get("completed_at"),
        )
