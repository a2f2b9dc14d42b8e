# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Agent invocation boundary.

The orchestration loop treats an agent as an opaque asynchronous call:
given an agent id and a read-only snapshot of the session, it returns the
agent's raw text output or raises InvocationError. For the Quality-Reviewer
the text is a JSON judgment that the loop parses itself.

LLMAgentInvoker is the production implementation, one LiteLLM chat
completion per call using the agent's YAML profile.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Protocol

from src.core.agents.profiles import AgentProfile, load_agent_profiles
from src.core.agents.roster import AgentId
from src.core.config.settings import TutoringSettings, get_settings
from src.core.intelligence.llm import LLMClient, LLMError

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_PLACEHOLDER = "No response generated."


class InvocationError(Exception):
    """An agent call failed or returned unusable output.

    Attributes:
        agent: Agent whose invocation failed.
        message: Error description.
        original_error: Underlying exception if any.
    """

    def __init__(
        self,
        agent: AgentId,
        message: str,
        original_error: Optional[Exception] = None,
    ):
        self.agent = agent
        self.message = message
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.agent.value}] {self.message}"


class AgentInvoker(Protocol):
    """Produces one agent's output for the current session snapshot."""

    async def invoke(self, agent: AgentId, state: Mapping[str, Any]) -> str:
        """Run a single agent.

        Raises:
            InvocationError: On transport or service failure.
        """
        ...


class LLMAgentInvoker:
    """Invokes agents through the LiteLLM client.

    Attributes:
        llm_client: Client used for completions.
        profiles: Agent profiles keyed by agent id.

    Example:
        >>> invoker = LLMAgentInvoker(LLMClient())
        >>> plan = await invoker.invoke(AgentId.CURRICULUM_PLANNER, snapshot)
    """

    def __init__(
        self,
        llm_client: LLMClient,
        profiles: Optional[dict[AgentId, AgentProfile]] = None,
        tutoring_settings: Optional[TutoringSettings] = None,
    ):
        """Initialize the invoker.

        Args:
            llm_client: LLM client for completions.
            profiles: Agent profiles. Loaded from config/agents if None.
            tutoring_settings: Sampling defaults. Uses get_settings() if None.
        """
        self._llm_client = llm_client
        self._settings = tutoring_settings or get_settings().tutoring
        if profiles is None:
            profiles_dir = self._settings.agent_profiles_dir
            profiles = load_agent_profiles(Path(profiles_dir) if profiles_dir else None)
        self._profiles = profiles

    def build_prompt(self, state: Mapping[str, Any]) -> str:
        """Render the user prompt shared by all agents."""
        return (
            f"Current State: {json.dumps(dict(state), default=str)}. "
            f"Topic: {state.get('topic')}. "
            f"Difficulty: {state.get('difficulty')}. "
            "Please perform your task."
        )

    async def invoke(self, agent: AgentId, state: Mapping[str, Any]) -> str:
        """Run one agent as a single chat completion.

        Args:
            agent: Invocable agent id.
            state: Read-only session snapshot.

        Returns:
            Raw text output of the agent.

        Raises:
            InvocationError: If the agent has no profile or the call fails.
        """
        profile = self._profiles.get(agent)
        if profile is None:
            raise InvocationError(agent, "No profile configured for agent")

        temperature = (
            profile.temperature
            if profile.temperature is not None
            else self._settings.agent_temperature
        )

        logger.debug("Invoking agent=%s, temperature=%.2f", agent.value, temperature)

        try:
            response = await self._llm_client.complete(
                prompt=self.build_prompt(state),
                system_prompt=profile.system_instruction,
                temperature=temperature,
                max_tokens=self._settings.max_output_tokens,
                json_output=profile.structured_output,
            )
        except LLMError as e:
            raise InvocationError(agent, e.message, original_error=e) from e

        return response.content or EMPTY_RESPONSE_PLACEHOLDER
