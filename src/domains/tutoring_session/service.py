# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutoring session service.

This service owns the lifecycle of multi-agent tutoring sessions:
- Start a session for a topic and difficulty
- Deliver human input when the loop is suspended
- Retry a turn after an agent failure
- Expose a read-only view of state, activity log and loop status

Each TutoringSession is a handle over one LangGraph thread. Restarting a
session allocates a new thread, so state and activity log are replaced
wholesale. Operations on one handle are serialized; a call made while an
agent turn is in flight is rejected.
"""

import asyncio
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional
from uuid import uuid4

from src.core.agents.invoker import AgentInvoker, LLMAgentInvoker
from src.core.agents.roster import AgentId
from src.core.config.settings import Settings, get_settings
from src.core.intelligence.llm import LLMClient
from src.core.orchestration.checkpointer import create_checkpointer, create_session_thread_id
from src.core.orchestration.states.tutoring_session import (
    HUMAN_PROMPTS,
    ActivityLogEntry,
    Difficulty,
    HumanRole,
    TutoringSessionState,
    create_initial_tutoring_session_state,
)
from src.core.orchestration.workflows import TutoringSessionWorkflow
from src.domains.tutoring_session.exceptions import (
    InvalidInputError,
    SessionBusyError,
    SessionNotFoundError,
    SessionNotSuspendedError,
)
from src.utils.logging import bind_context, get_logger

logger = get_logger(__name__)

_EMPTY_STATE: Mapping[str, Any] = MappingProxyType({})


class TutoringSession:
    """Handle of one tutoring session.

    Attributes:
        session_id: Stable identifier of the handle.

    Example:
        >>> session = TutoringSession(workflow)
        >>> await session.start("Photosynthesis", "Beginner")
        >>> session.human_prompt
        'Acting as student: answer the quiz'
        >>> await session.submit_human_input("Chlorophyll absorbs light")
    """

    def __init__(
        self,
        workflow: TutoringSessionWorkflow,
        session_id: Optional[str] = None,
        default_max_turns: int = 15,
    ):
        self.session_id = session_id or uuid4().hex
        self._workflow = workflow
        self._default_max_turns = default_max_turns
        self._thread_id: Optional[str] = None
        self._state: Optional[TutoringSessionState] = None
        self._runs = 0
        self._lock = asyncio.Lock()

    # =========================================================================
    # Control
    # =========================================================================

    async def start(
        self,
        topic: str,
        difficulty: Difficulty | str,
        max_turns: Optional[int] = None,
    ) -> Mapping[str, Any]:
        """Start (or restart) the session and run it to the first pause.

        Args:
            topic: Subject of the session.
            difficulty: One of the Difficulty values.
            max_turns: Turn cap, defaults to the configured value.

        Returns:
            Read-only view of the state at the first suspension or the end.

        Raises:
            InvalidInputError: If topic is empty, difficulty is unknown or
                max_turns is not positive.
            SessionBusyError: If a turn is in progress.
        """
        self._ensure_idle()

        topic = (topic or "").strip()
        if not topic:
            raise InvalidInputError("Topic must not be empty")
        try:
            level = Difficulty(difficulty)
        except ValueError as e:
            allowed = ", ".join(d.value for d in Difficulty)
            raise InvalidInputError(
                f"Unknown difficulty: {difficulty!r} (expected one of {allowed})"
            ) from e
        if max_turns is None:
            max_turns = self._default_max_turns
        if max_turns < 1:
            raise InvalidInputError(f"max_turns must be positive, got {max_turns}")

        async with self._lock:
            bind_context(session_id=self.session_id)
            self._runs += 1
            self._thread_id = create_session_thread_id(
                "tutoring", f"{self.session_id}_{self._runs}"
            )
            self._state = create_initial_tutoring_session_state(
                session_id=self.session_id,
                topic=topic,
                difficulty=level,
                max_turns=max_turns,
            )

            logger.info(
                "tutoring_session_started",
                topic=topic,
                difficulty=level.value,
                max_turns=max_turns,
                run=self._runs,
            )

            self._state = await self._workflow.run(
                self._state, self._thread_id, observer=self._observe
            )
            self._log_outcome()
            return self.state

    async def submit_human_input(self, text: str) -> Mapping[str, Any]:
        """Deliver human input and resume the loop.

        Args:
            text: Quiz answers as student, or guidance as supervisor.

        Returns:
            Read-only view of the state at the next pause or the end.

        Raises:
            InvalidInputError: If text is empty.
            SessionNotSuspendedError: If the session is not awaiting input.
            SessionBusyError: If a turn is in progress.
        """
        self._ensure_idle()

        if not text or not text.strip():
            raise InvalidInputError("Human input must not be empty")
        if not self.awaiting_human:
            raise SessionNotSuspendedError("Session is not awaiting human input")

        async with self._lock:
            bind_context(session_id=self.session_id)
            logger.info("human_input_received", role=self._state.get("human_role"))

            self._state = await self._workflow.submit_human_input(
                self._thread_id, text, observer=self._observe
            )
            self._log_outcome()
            return self.state

    async def retry(self) -> Mapping[str, Any]:
        """Retry the turn that halted the session.

        Returns:
            Read-only view of the state at the next pause or the end.

        Raises:
            SessionNotSuspendedError: If the session is not halted.
            SessionBusyError: If a turn is in progress.
        """
        self._ensure_idle()

        if not self.is_halted:
            raise SessionNotSuspendedError("Session is not halted by a failed turn")

        async with self._lock:
            bind_context(session_id=self.session_id)
            logger.info("tutoring_session_retry", error=self._state.get("error"))

            self._state = await self._workflow.retry(self._thread_id, observer=self._observe)
            self._log_outcome()
            return self.state

    def _ensure_idle(self) -> None:
        if self._lock.locked():
            raise SessionBusyError("An agent turn is in progress")

    def _observe(self, values: TutoringSessionState) -> None:
        self._state = values

    def _log_outcome(self) -> None:
        state = self._state or {}
        logger.info(
            "tutoring_session_paused",
            status=state.get("status"),
            turn_count=state.get("turn_count"),
            human_role=state.get("human_role"),
        )

    # =========================================================================
    # Observation
    # =========================================================================

    @property
    def state(self) -> Mapping[str, Any]:
        """Read-only view of the current session state."""
        if self._state is None:
            return _EMPTY_STATE
        return MappingProxyType(dict(self._state))

    @property
    def activity_log(self) -> tuple[ActivityLogEntry, ...]:
        """Activity log entries in insertion order."""
        if self._state is None:
            return ()
        return tuple(self._state.get("activity_log", []))

    @property
    def status(self) -> str:
        if self._state is None:
            return "pending"
        return self._state.get("status", "pending")

    @property
    def awaiting_human(self) -> bool:
        return bool(self._state and self._state.get("awaiting_human"))

    @property
    def human_role(self) -> Optional[HumanRole]:
        if not self.awaiting_human:
            return None
        role = self._state.get("human_role")
        return HumanRole(role) if role else None

    @property
    def human_prompt(self) -> Optional[str]:
        """Prompt telling the human which role to act in."""
        role = self.human_role
        return HUMAN_PROMPTS[role] if role else None

    @property
    def active_agent(self) -> Optional[AgentId]:
        """Agent whose invocation is in flight, if any."""
        if self._state is None:
            return None
        agent = self._state.get("active_agent")
        return AgentId(agent) if agent else None

    @property
    def is_processing(self) -> bool:
        return self._lock.locked()

    @property
    def is_terminated(self) -> bool:
        return self.status == "completed"

    @property
    def is_halted(self) -> bool:
        return self.status == "halted"


class TutoringSessionManager:
    """Registry of tutoring sessions sharing one workflow.

    Sessions live in memory. Unfinished sessions are kept for the lifetime
    of the process; completed ones are kept up to max_completed_sessions,
    oldest dropped first when a new session is created.

    Example:
        >>> manager = TutoringSessionManager.from_settings(get_settings())
        >>> session = manager.create_session()
        >>> manager.get_session(session.session_id) is session
        True
    """

    def __init__(
        self,
        workflow: TutoringSessionWorkflow,
        default_max_turns: int = 15,
        max_completed_sessions: int = 100,
    ):
        self._workflow = workflow
        self._default_max_turns = default_max_turns
        self._max_completed_sessions = max_completed_sessions
        self._sessions: dict[str, TutoringSession] = {}

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        invoker: Optional[AgentInvoker] = None,
    ) -> "TutoringSessionManager":
        """Build a manager with the LiteLLM invoker and an in-memory checkpointer.

        Args:
            settings: Application settings. Uses get_settings() if None.
            invoker: Agent invoker. An LLMAgentInvoker is built if None.

        Returns:
            Configured TutoringSessionManager.
        """
        settings = settings or get_settings()
        if invoker is None:
            invoker = LLMAgentInvoker(
                LLMClient(llm_settings=settings.llm),
                tutoring_settings=settings.tutoring,
            )

        workflow = TutoringSessionWorkflow(
            invoker,
            checkpointer=create_checkpointer(),
            turn_delay_seconds=settings.tutoring.turn_delay_seconds,
        )
        return cls(
            workflow,
            default_max_turns=settings.tutoring.max_turns,
            max_completed_sessions=settings.tutoring.max_completed_sessions,
        )

    def create_session(self) -> TutoringSession:
        """Register a new, not yet started session."""
        self._prune_completed()
        session = TutoringSession(self._workflow, default_max_turns=self._default_max_turns)
        self._sessions[session.session_id] = session
        logger.debug("tutoring_session_created", session_id=session.session_id)
        return session

    def _prune_completed(self) -> None:
        # dict order is creation order, so the oldest completed go first
        completed = [sid for sid, s in self._sessions.items() if s.is_terminated]
        excess = len(completed) - self._max_completed_sessions
        for session_id in completed[:max(excess, 0)]:
            del self._sessions[session_id]
            logger.debug("tutoring_session_evicted", session_id=session_id)

    def get_session(self, session_id: str) -> TutoringSession:
        """Look up a session by id.

        Raises:
            SessionNotFoundError: If the id is unknown.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Tutoring session not found: {session_id}")
        return session

    def list_sessions(self) -> list[TutoringSession]:
        return list(self._sessions.values())

    def remove_session(self, session_id: str) -> None:
        """Forget a session.

        Raises:
            SessionNotFoundError: If the id is unknown.
        """
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(f"Tutoring session not found: {session_id}")
