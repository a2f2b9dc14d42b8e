# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Multi-agent tutoring session workflow using LangGraph.

A supervisor loop repeatedly selects the next agent from the session state,
invokes it, and folds its output back into the state until the session
ends or needs a human.

Workflow Structure:
    initialize
        ↓
    supervise ←─────────────────────────┐
        ↓                               │
    [conditional: select_next]          │
        ├─ agent → run_agent ───────────┤ (success)
        │              ↓ (failure)      │
        │          await_retry [INTERRUPT]
        ├─ human → await_human [INTERRUPT]
        └─ end   → end_session → END

A failed agent turn halts the loop at await_retry. Nothing is retried
until retry() is called explicitly.

The workflow uses checkpointing with interrupt_before pattern: human input
is injected with aupdate_state and the loop resumes with ainvoke(None).
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Literal, Optional

from langchain_core.runnables import RunnableConfig
from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.graph import END, StateGraph

from src.core.agents.invoker import AgentInvoker, InvocationError
from src.core.agents.roster import AWAIT_HUMAN, TERMINATE, AgentId
from src.core.orchestration.checkpointer import create_checkpointer, create_thread_config
from src.core.orchestration.states.tutoring_session import (
    DEFAULT_MAX_TURNS,
    HumanRole,
    TutoringSessionState,
    apply_agent_output,
    human_role_for,
    make_log_entry,
    select_next,
    session_snapshot,
)
from src.utils.datetime import utc_now_iso

logger = logging.getLogger(__name__)

StateObserver = Callable[[TutoringSessionState], Awaitable[None] | None]

_INTERRUPT_NODES = ["await_human", "await_retry"]
_RECURSION_HEADROOM = 10


class TutoringSessionWorkflow:
    """LangGraph workflow for multi-agent tutoring sessions.

    Each call to run(), submit_human_input() or retry() drives the loop
    until it suspends at a human gate, halts on a failed turn, or ends.

    Attributes:
        invoker: Agent invocation boundary.
        turn_delay_seconds: Pause between consecutive agent turns.

    Example:
        >>> workflow = TutoringSessionWorkflow(LLMAgentInvoker(LLMClient()))
        >>> state = create_initial_tutoring_session_state("s1", "Fractions", "Beginner")
        >>> state = await workflow.run(state, thread_id="tutoring_s1")
        >>> # Paused at await_human, the quiz is waiting for answers
        >>> state = await workflow.submit_human_input("tutoring_s1", "1/2, 3/4")
    """

    def __init__(
        self,
        invoker: AgentInvoker,
        checkpointer: Optional[BaseCheckpointSaver] = None,
        turn_delay_seconds: float = 0.0,
    ):
        """Initialize the workflow.

        Args:
            invoker: Agent invocation boundary.
            checkpointer: Checkpointer for state persistence. A new
                in-memory one is created if None.
            turn_delay_seconds: Pause before every agent turn but the first.
        """
        self._invoker = invoker
        self._checkpointer = checkpointer or create_checkpointer()
        self._turn_delay_seconds = turn_delay_seconds

        self._observers: dict[str, StateObserver] = {}

        self._graph = self._build_graph()
        self._compiled: Any = None

    def _build_graph(self) -> StateGraph:
        """Build the LangGraph state graph.

        Returns:
            StateGraph configured for tutoring sessions.
        """
        graph = StateGraph(TutoringSessionState)

        # Add nodes
        graph.add_node("initialize", self._initialize)
        graph.add_node("supervise", self._supervise)
        graph.add_node("run_agent", self._run_agent)
        graph.add_node("await_human", self._await_human)
        graph.add_node("await_retry", self._await_retry)
        graph.add_node("end_session", self._end_session)

        # Set entry point
        graph.set_entry_point("initialize")

        # Add edges
        graph.add_edge("initialize", "supervise")
        graph.add_conditional_edges(
            "supervise",
            self._route_decision,
            {
                "agent": "run_agent",
                "human": "await_human",
                "end": "end_session",
            },
        )
        graph.add_conditional_edges(
            "run_agent",
            self._route_after_turn,
            {
                "continue": "supervise",
                "halt": "await_retry",
            },
        )
        graph.add_edge("await_human", "supervise")
        graph.add_edge("await_retry", "supervise")
        graph.add_edge("end_session", END)

        return graph

    def compile(self) -> Any:
        """Compile the workflow graph with interrupt support.

        Uses interrupt_before on await_human and await_retry so the loop
        pauses for human input or for an explicit retry.

        Returns:
            Compiled workflow that can be executed.
        """
        if self._compiled is None:
            self._compiled = self._graph.compile(
                checkpointer=self._checkpointer,
                interrupt_before=_INTERRUPT_NODES,
            )
        return self._compiled

    async def run(
        self,
        initial_state: TutoringSessionState,
        thread_id: str,
        observer: Optional[StateObserver] = None,
    ) -> TutoringSessionState:
        """Run the workflow from initial state.

        Args:
            initial_state: Starting state for the workflow.
            thread_id: Thread ID for checkpointing.
            observer: Called with the full state after every step and
                before every agent invocation.

        Returns:
            Workflow state at the first suspension point or at the end.
        """
        logger.info("Starting tutoring session workflow: thread=%s", thread_id)
        return await self._drive(initial_state, thread_id, observer)

    async def submit_human_input(
        self,
        thread_id: str,
        text: str,
        observer: Optional[StateObserver] = None,
    ) -> TutoringSessionState:
        """Deliver human input to a suspended session and resume it.

        Uses aupdate_state + ainvoke(None) pattern. The update is applied
        as the supervise node so the pending route to await_human is kept,
        and await_human consumes the pending input when the loop resumes.

        Args:
            thread_id: Thread ID of the session.
            text: Student answers or supervisor guidance.
            observer: Called with the full state after every step and
                before every agent invocation.

        Returns:
            Workflow state at the next suspension point or at the end.

        Raises:
            ValueError: If the thread is not paused at the human gate.
        """
        compiled = self.compile()
        config = create_thread_config(thread_id)

        snapshot = await compiled.aget_state(config)
        if not snapshot or not snapshot.values:
            raise ValueError(f"No state found for thread {thread_id}")
        if "await_human" not in snapshot.next:
            raise ValueError(f"Thread {thread_id} is not awaiting human input")

        await compiled.aupdate_state(
            config,
            {
                "pending_human_input": text,
                "awaiting_human": False,
            },
            as_node="supervise",
        )

        logger.info("Resuming workflow for thread=%s with human input: %s...", thread_id, text[:50])
        return await self._drive(None, thread_id, observer)

    async def retry(
        self,
        thread_id: str,
        observer: Optional[StateObserver] = None,
    ) -> TutoringSessionState:
        """Resume a session halted by a failed agent turn.

        Args:
            thread_id: Thread ID of the session.
            observer: Called with the full state after every step and
                before every agent invocation.

        Returns:
            Workflow state at the next suspension point or at the end.

        Raises:
            ValueError: If the thread is not halted.
        """
        compiled = self.compile()
        config = create_thread_config(thread_id)

        snapshot = await compiled.aget_state(config)
        if not snapshot or "await_retry" not in snapshot.next:
            raise ValueError(f"Thread {thread_id} is not halted")

        logger.info("Retrying halted workflow: thread=%s", thread_id)
        return await self._drive(None, thread_id, observer)

    async def get_state(self, thread_id: str) -> Optional[TutoringSessionState]:
        """Get the checkpointed state of a thread, or None if unknown."""
        snapshot = await self.compile().aget_state(create_thread_config(thread_id))
        if not snapshot or not snapshot.values:
            return None
        return snapshot.values

    async def _drive(
        self,
        graph_input: Optional[TutoringSessionState],
        thread_id: str,
        observer: Optional[StateObserver],
    ) -> TutoringSessionState:
        compiled = self.compile()
        config = create_thread_config(thread_id)

        # Two graph steps per agent turn plus the gate and bookkeeping nodes
        if graph_input is None:
            resume_state = (await compiled.aget_state(config)).values
        else:
            resume_state = graph_input
        max_turns = resume_state.get("max_turns", DEFAULT_MAX_TURNS)
        config["recursion_limit"] = 2 * max_turns + _RECURSION_HEADROOM

        if observer is not None:
            self._observers[thread_id] = observer
        try:
            async for values in compiled.astream(graph_input, config=config, stream_mode="values"):
                await self._notify(thread_id, values)
        finally:
            self._observers.pop(thread_id, None)

        snapshot = await compiled.aget_state(config)
        return snapshot.values

    async def _notify(self, thread_id: str, values: TutoringSessionState) -> None:
        observer = self._observers.get(thread_id)
        if observer is None:
            return
        result = observer(values)
        if inspect.isawaitable(result):
            await result

    # =========================================================================
    # Node Implementations
    # =========================================================================

    async def _initialize(self, state: TutoringSessionState) -> dict:
        """Mark the session active and record its start."""
        logger.info(
            "Initializing tutoring session: session=%s, topic=%s, difficulty=%s",
            state.get("session_id"),
            state.get("topic"),
            state.get("difficulty"),
        )

        entry = make_log_entry(
            AgentId.SUPERVISOR,
            f"Initializing session for: {state['topic']} ({state['difficulty']})",
            "status",
        )
        return {
            "status": "active",
            "activity_log": [entry],
        }

    async def _supervise(self, state: TutoringSessionState) -> dict:
        """Select the next step of the loop.

        Records the decision in next_action for routing. When an agent is
        selected it becomes the active agent before it is invoked.

        Args:
            state: Current workflow state.

        Returns:
            State updates for the selected step.
        """
        decision = select_next(state)

        if decision == TERMINATE:
            return {"next_action": decision.value, "active_agent": None}

        if decision == AWAIT_HUMAN:
            role = human_role_for(state)
            logger.info(
                "Awaiting human input: session=%s, role=%s",
                state.get("session_id"),
                role.value,
            )
            entry = make_log_entry(
                AgentId.SUPERVISOR,
                "Awaiting human intervention.",
                "decision",
                reason=f"human input required ({role.value})",
            )
            return {
                "next_action": decision.value,
                "status": "awaiting_human",
                "awaiting_human": True,
                "human_role": role.value,
                "active_agent": None,
                "activity_log": [entry],
            }

        if self._turn_delay_seconds > 0 and state.get("turn_count", 0) > 0:
            await asyncio.sleep(self._turn_delay_seconds)

        return {
            "next_action": decision.value,
            "status": "active",
            "active_agent": decision.value,
            "activity_log": [make_log_entry(decision, f"Agent {decision.value} starting...", "status")],
        }

    def _route_decision(self, state: TutoringSessionState) -> Literal["agent", "human", "end"]:
        """Route on the decision stored by supervise."""
        action = state.get("next_action")
        if action == AWAIT_HUMAN.value:
            return "human"
        if action == TERMINATE.value:
            return "end"
        return "agent"

    async def _run_agent(self, state: TutoringSessionState, config: RunnableConfig) -> dict:
        """Invoke the active agent and fold its output into the state.

        turn_count is only incremented on success. A failure records the
        error and leaves every artifact untouched.

        Args:
            state: Current workflow state.
            config: Run configuration carrying the thread id.

        Returns:
            State updates from the agent turn.
        """
        agent = AgentId(state["active_agent"])
        await self._notify(config["configurable"]["thread_id"], state)

        try:
            output = await self._invoker.invoke(agent, session_snapshot(state))
            updates = apply_agent_output(agent, output)
        except InvocationError as e:
            return self._halt_turn(state, e)
        except Exception as e:
            logger.exception(
                "Unexpected error from agent: session=%s, agent=%s",
                state.get("session_id"),
                agent.value,
            )
            return self._halt_turn(
                state, InvocationError(agent, f"Unexpected error: {e}", original_error=e)
            )

        logger.info(
            "Agent turn completed: session=%s, agent=%s, turn=%d",
            state.get("session_id"),
            agent.value,
            state["turn_count"] + 1,
        )

        return {
            **updates,
            "turn_count": state["turn_count"] + 1,
            "active_agent": None,
            "error": None,
            "activity_log": [make_log_entry(agent, output, "output")],
        }

    def _halt_turn(self, state: TutoringSessionState, error: InvocationError) -> dict:
        """Updates for a failed turn: halt, log the error, keep every artifact."""
        logger.warning(
            "Agent turn failed: session=%s, agent=%s, error=%s",
            state.get("session_id"),
            error.agent.value,
            error.message,
        )
        return {
            "status": "halted",
            "error": str(error),
            "active_agent": None,
            "activity_log": [
                make_log_entry(
                    error.agent, f"Execution failed: {error.message}", "error", reason=str(error)
                ),
            ],
        }

    def _route_after_turn(self, state: TutoringSessionState) -> Literal["continue", "halt"]:
        """Halt on a failed turn, otherwise return to the supervisor."""
        if state.get("error"):
            return "halt"
        return "continue"

    async def _await_human(self, state: TutoringSessionState) -> dict:
        """Consume human input (interrupt point).

        As student, the input becomes the quiz answers. As supervisor, it
        is stored as guidance and the last review is discarded so the
        Quality-Reviewer judges the session again.

        Args:
            state: Current workflow state.

        Returns:
            State updates from the human input.
        """
        text = state.get("pending_human_input") or ""
        role = HumanRole(state.get("human_role") or human_role_for(state).value)

        if role == HumanRole.STUDENT:
            updates: dict[str, Any] = {"student_answers": text}
            content = f"Student Answer: {text}"
        else:
            updates = {
                "supervisor_guidance": text,
                "reviewer_approved": None,
                "reviewer_comments": None,
                "confidence": 0.0,
            }
            content = f"Human feedback: {text}"

        logger.info(
            "Human input applied: session=%s, role=%s",
            state.get("session_id"),
            role.value,
        )

        return {
            **updates,
            "pending_human_input": None,
            "awaiting_human": False,
            "human_role": None,
            "status": "active",
            "activity_log": [make_log_entry(AgentId.HUMAN_APPROVAL, content, "output")],
        }

    async def _await_retry(self, state: TutoringSessionState) -> dict:
        """Clear the failure of a halted session (interrupt point)."""
        return {
            "error": None,
            "status": "active",
            "activity_log": [
                make_log_entry(AgentId.SUPERVISOR, "Retrying after failure.", "status"),
            ],
        }

    async def _end_session(self, state: TutoringSessionState) -> dict:
        """Mark the session completed."""
        logger.info(
            "Tutoring session ended: session=%s, turns=%d, approved=%s",
            state.get("session_id"),
            state.get("turn_count", 0),
            state.get("reviewer_approved"),
        )

        return {
            "status": "completed",
            "completed_at": utc_now_iso(),
            "active_agent": None,
            "awaiting_human": False,
            "activity_log": [
                make_log_entry(
                    AgentId.END,
                    "Learning objective reached or max turns exceeded.",
                    "status",
                ),
            ],
        }
