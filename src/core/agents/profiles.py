# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Agent profile YAML loader.

Every invocable agent has a profile in config/agents/<agent_id>.yaml holding
its system instruction and sampling options. Profiles are validated against
the AgentProfile model.

Example YAML:
    agent:
      id: QUIZ_GENERATOR
      name: Quiz Generator
      system_instruction: >
        You are a Quiz Generator...
      temperature: 0.7
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from src.core.agents.roster import INVOCABLE_AGENTS, AgentId
from src.utils.logging import get_logger

logger = get_logger(__name__)


class AgentProfileLoadError(Exception):
    """Raised when an agent profile fails to load or validate."""

    pass


class AgentProfile(BaseModel):
    """Prompting configuration of one agent."""

    id: AgentId
    name: str
    system_instruction: str = Field(min_length=1)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    structured_output: bool = False


def get_agent_profiles_directory() -> Path:
    """Get the default agent profiles directory (config/agents)."""
    return Path(__file__).parent.parent.parent.parent / "config" / "agents"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise AgentProfileLoadError(f"Failed to read agent profile '{path}': {e}") from e

    if not isinstance(parsed, dict):
        raise AgentProfileLoadError(f"Agent profile '{path}' must be a mapping")
    return parsed


def load_agent_profile(path: Path) -> AgentProfile:
    """Load and validate a single agent profile file.

    Args:
        path: Path to the YAML file.

    Returns:
        Validated AgentProfile.

    Raises:
        AgentProfileLoadError: If the file is missing, unreadable or invalid.
    """
    if not path.is_file():
        raise AgentProfileLoadError(f"Agent profile file not found: {path}")

    data = _read_yaml(path)
    profile_data = data.get("agent", data)
    profile_data.setdefault("id", path.stem.upper())

    try:
        profile = AgentProfile.model_validate(profile_data)
    except ValidationError as e:
        raise AgentProfileLoadError(
            f"Validation failed for agent profile '{path.name}': {e}"
        ) from e

    logger.debug("loaded_agent_profile", agent_id=profile.id.value, name=profile.name)
    return profile


def load_agent_profiles(profiles_dir: Optional[Path] = None) -> dict[AgentId, AgentProfile]:
    """Load the profiles of all invocable agents.

    Args:
        profiles_dir: Directory to load from (defaults to config/agents).

    Returns:
        Mapping from agent id to profile.

    Raises:
        AgentProfileLoadError: If the directory is missing, a file is invalid,
            or an invocable agent has no profile.
    """
    if profiles_dir is None:
        profiles_dir = get_agent_profiles_directory()

    if not profiles_dir.is_dir():
        raise AgentProfileLoadError(f"Agent profiles directory not found: {profiles_dir}")

    profiles: dict[AgentId, AgentProfile] = {}
    for path in sorted(profiles_dir.glob("*.yaml")):
        profile = load_agent_profile(path)
        profiles[profile.id] = profile

    missing = sorted(agent.value for agent in INVOCABLE_AGENTS - profiles.keys())
    if missing:
        raise AgentProfileLoadError(f"Missing agent profiles: {', '.join(missing)}")

    logger.info("agent_profiles_loaded", profile_count=len(profiles), path=str(profiles_dir))
    return profiles
