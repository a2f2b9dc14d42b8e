# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Language model access for tutoring agents.

Completions go through LiteLLM so the same agent code runs against Gemini,
OpenAI, Anthropic or a local Ollama server.
"""

from src.core.intelligence.llm import LLMClient, LLMError, LLMResponse

__all__ = [
    "LLMClient",
    "LLMError",
    "LLMResponse",
]
