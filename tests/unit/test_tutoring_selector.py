# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for next-agent selection.

Tests cover:
- Every selection rule in priority order
- Turn cap precedence
- Human role for the two suspension points
- Determinism
"""

from typing import Any

import pytest

from src.core.agents.roster import AWAIT_HUMAN, TERMINATE, AgentId
from src.core.orchestration.states.tutoring_session import (
    HumanRole,
    TutoringSessionState,
    create_initial_tutoring_session_state,
    human_role_for,
    select_next,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fresh_state() -> TutoringSessionState:
    """Create a fresh session state."""
    return create_initial_tutoring_session_state(
        session_id="session_123",
        topic="Photosynthesis",
        difficulty="Beginner",
        max_turns=15,
    )


def _with(state: TutoringSessionState, **fields: Any) -> TutoringSessionState:
    return {**state, **fields}


@pytest.fixture
def quizzed_state(fresh_state) -> TutoringSessionState:
    """State with plan, explanation and quiz produced."""
    return _with(
        fresh_state,
        lesson_plan="1. Light 2. Chlorophyll",
        explanation="Plants turn light into sugar.",
        quiz="Q1: What pigment absorbs light?",
        turn_count=3,
    )


@pytest.fixture
def motivated_state(quizzed_state) -> TutoringSessionState:
    """State with every artifact up to the motivational message."""
    return _with(
        quizzed_state,
        student_answers="B, A, C",
        feedback="Two out of three correct.",
        motivator_message="Nice progress!",
        turn_count=5,
    )


# =============================================================================
# Artifact Order
# =============================================================================


class TestSelectNextArtifactOrder:
    """Tests for the artifact production order."""

    def test_fresh_state_selects_curriculum_planner(self, fresh_state):
        """Test a fresh session starts with the lesson plan."""
        assert select_next(fresh_state) == AgentId.CURRICULUM_PLANNER

    def test_plan_set_selects_concept_explainer(self, fresh_state):
        """Test explanation follows the plan."""
        state = _with(fresh_state, lesson_plan="plan", turn_count=1)

        assert select_next(state) == AgentId.CONCEPT_EXPLAINER

    def test_explanation_set_selects_quiz_generator(self, fresh_state):
        """Test quiz follows the explanation."""
        state = _with(fresh_state, lesson_plan="plan", explanation="text", turn_count=2)

        assert select_next(state) == AgentId.QUIZ_GENERATOR

    def test_unanswered_quiz_awaits_student(self, quizzed_state):
        """Test an unanswered quiz suspends for the student."""
        assert select_next(quizzed_state) == AWAIT_HUMAN
        assert human_role_for(quizzed_state) == HumanRole.STUDENT

    def test_answers_set_selects_feedback_analyzer(self, quizzed_state):
        """Test feedback follows the student answers."""
        state = _with(quizzed_state, student_answers="B, A, C")

        assert select_next(state) == AgentId.FEEDBACK_ANALYZER

    def test_feedback_set_selects_motivator(self, quizzed_state):
        """Test motivation follows the feedback."""
        state = _with(quizzed_state, student_answers="B, A, C", feedback="Good", turn_count=4)

        assert select_next(state) == AgentId.MOTIVATOR

    def test_unreviewed_session_selects_quality_reviewer(self, motivated_state):
        """Test the review follows the motivational message."""
        assert motivated_state["reviewer_approved"] is None
        assert select_next(motivated_state) == AgentId.QUALITY_REVIEWER

    def test_empty_string_counts_as_unset(self, fresh_state):
        """Test an empty artifact is produced again."""
        state = _with(fresh_state, lesson_plan="plan", explanation="", turn_count=2)

        assert select_next(state) == AgentId.CONCEPT_EXPLAINER

    def test_missing_plan_wins_over_later_artifacts(self, motivated_state):
        """Test earlier rules take precedence over later artifacts."""
        state = _with(motivated_state, lesson_plan=None)

        assert select_next(state) == AgentId.CURRICULUM_PLANNER


# =============================================================================
# Review Outcomes
# =============================================================================


class TestSelectNextReviewOutcomes:
    """Tests for decisions after the quality review."""

    def test_confident_approval_terminates(self, motivated_state):
        """Test approval with confidence 0.92 ends the session."""
        state = _with(motivated_state, reviewer_approved=True, confidence=0.92)

        assert select_next(state) == TERMINATE

    def test_approval_at_threshold_terminates(self, motivated_state):
        """Test the confidence threshold is inclusive."""
        state = _with(motivated_state, reviewer_approved=True, confidence=0.8)

        assert select_next(state) == TERMINATE

    def test_low_confidence_approval_terminates(self, motivated_state):
        """Test approval with confidence 0.5 falls through to termination."""
        state = _with(motivated_state, reviewer_approved=True, confidence=0.5)

        assert select_next(state) == TERMINATE

    def test_rejection_awaits_supervisor(self, motivated_state):
        """Test a rejected review suspends for a supervisor."""
        state = _with(motivated_state, reviewer_approved=False, confidence=0.95)

        assert select_next(state) == AWAIT_HUMAN
        assert human_role_for(state) == HumanRole.SUPERVISOR


# =============================================================================
# Turn Cap
# =============================================================================


class TestSelectNextTurnCap:
    """Tests for the max turns rule."""

    @pytest.mark.parametrize("turn_count", [15, 16, 100])
    def test_cap_reached_terminates_fresh_session(self, fresh_state, turn_count):
        """Test the cap overrides a missing lesson plan."""
        state = _with(fresh_state, turn_count=turn_count)

        assert select_next(state) == TERMINATE

    def test_cap_reached_terminates_unanswered_quiz(self, quizzed_state):
        """Test the cap overrides the student gate."""
        state = _with(quizzed_state, turn_count=3, max_turns=3)

        assert select_next(state) == TERMINATE

    def test_cap_reached_terminates_rejected_review(self, motivated_state):
        """Test the cap overrides the supervisor gate."""
        state = _with(motivated_state, reviewer_approved=False, turn_count=15)

        assert select_next(state) == TERMINATE

    def test_one_turn_left_still_selects_agent(self, fresh_state):
        """Test the cap is only reached at max_turns."""
        state = _with(fresh_state, turn_count=14)

        assert select_next(state) == AgentId.CURRICULUM_PLANNER


# =============================================================================
# Purity
# =============================================================================


class TestSelectNextPurity:
    """Tests for deterministic, side-effect free selection."""

    def test_same_state_same_decision(self, motivated_state):
        """Test repeated calls agree."""
        decisions = {select_next(motivated_state) for _ in range(5)}

        assert decisions == {AgentId.QUALITY_REVIEWER}

    def test_state_is_not_mutated(self, quizzed_state):
        """Test selection leaves the state untouched."""
        before = dict(quizzed_state)

        select_next(quizzed_state)
        human_role_for(quizzed_state)

        assert quizzed_state == before

    def test_decision_is_never_supervisor(self, fresh_state, quizzed_state, motivated_state):
        """Test SUPERVISOR is never returned as a decision."""
        states = [
            fresh_state,
            quizzed_state,
            motivated_state,
            _with(motivated_state, reviewer_approved=False),
            _with(motivated_state, reviewer_approved=True, confidence=0.3),
        ]

        assert AgentId.SUPERVISOR not in {select_next(state) for state in states}
