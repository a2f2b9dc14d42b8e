# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Agent roster and invocation for tutoring sessions.

Components:
    AgentId: Closed set of agents known to the orchestration loop.
    AgentProfile: YAML-configured system instruction and sampling options.
    AgentInvoker: Protocol of the agent call boundary.
    LLMAgentInvoker: LiteLLM-backed invoker.

Usage:
    from src.core.agents import AgentId, LLMAgentInvoker
    from src.core.intelligence.llm import LLMClient

    invoker = LLMAgentInvoker(LLMClient())
    plan = await invoker.invoke(AgentId.CURRICULUM_PLANNER, snapshot)
"""

from src.core.agents.invoker import (
    EMPTY_RESPONSE_PLACEHOLDER,
    AgentInvoker,
    InvocationError,
    LLMAgentInvoker,
)
from src.core.agents.profiles import (
    AgentProfile,
    AgentProfileLoadError,
    load_agent_profile,
    load_agent_profiles,
)
from src.core.agents.roster import AWAIT_HUMAN, INVOCABLE_AGENTS, TERMINATE, AgentId

__all__ = [
    # Roster
    "AgentId",
    "AWAIT_HUMAN",
    "INVOCABLE_AGENTS",
    "TERMINATE",
    # Profiles
    "AgentProfile",
    "AgentProfileLoadError",
    "load_agent_profile",
    "load_agent_profiles",
    # Invocation
    "AgentInvoker",
    "EMPTY_RESPONSE_PLACEHOLDER",
    "InvocationError",
    "LLMAgentInvoker",
]
