# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the LiteLLM client wrapper."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from src.core.config.settings import LLMSettings
from src.core.intelligence.llm import LLMClient, LLMError


def _completion(content, finish_reason="stop"):
    return SimpleNamespace(
        choices=[
            SimpleNamespace(
                message=SimpleNamespace(content=content),
                finish_reason=finish_reason,
            )
        ],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=30),
    )


@pytest.fixture
def client():
    """Client with an explicit model and no credentials."""
    return LLMClient(model="gpt-4o-mini", timeout=5.0, max_retries=0, llm_settings=LLMSettings())


class TestLLMClientComplete:
    """Tests for LLMClient.complete."""

    @pytest.mark.asyncio
    async def test_builds_messages_and_parses_response(self, client):
        """Test system and user messages are sent and usage is read."""
        mock = AsyncMock(return_value=_completion("Plants use light."))

        with patch("src.core.intelligence.llm.client.acompletion", mock):
            response = await client.complete(
                "Explain photosynthesis",
                system_prompt="You are a Concept Explainer.",
                temperature=0.3,
            )

        assert response.content == "Plants use light."
        assert response.total_tokens == 42
        call_kwargs = mock.call_args.kwargs
        assert call_kwargs["model"] == "gpt-4o-mini"
        assert call_kwargs["messages"] == [
            {"role": "system", "content": "You are a Concept Explainer."},
            {"role": "user", "content": "Explain photosynthesis"},
        ]
        assert call_kwargs["temperature"] == 0.3
        assert call_kwargs["num_retries"] == 0
        assert "response_format" not in call_kwargs

    @pytest.mark.asyncio
    async def test_json_output_requests_json_object(self, client):
        """Test structured output sets the response format."""
        mock = AsyncMock(return_value=_completion('{"approved": true}'))

        with patch("src.core.intelligence.llm.client.acompletion", mock):
            await client.complete("Review", json_output=True)

        assert mock.call_args.kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_none_content_becomes_empty_string(self, client):
        """Test a missing message body is returned as empty text."""
        mock = AsyncMock(return_value=_completion(None))

        with patch("src.core.intelligence.llm.client.acompletion", mock):
            response = await client.complete("Motivate")

        assert response.content == ""

    @pytest.mark.asyncio
    async def test_provider_failure_raises_llm_error(self, client):
        """Test LiteLLM exceptions are wrapped."""
        mock = AsyncMock(side_effect=RuntimeError("503 Service Unavailable"))

        with patch("src.core.intelligence.llm.client.acompletion", mock):
            with pytest.raises(LLMError) as exc_info:
                await client.complete("Explain photosynthesis")

        assert exc_info.value.model == "gpt-4o-mini"
        assert "503" in exc_info.value.message
        assert isinstance(exc_info.value.original_error, RuntimeError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw",
        [
            SimpleNamespace(choices=[], usage=None),
            SimpleNamespace(choices=[SimpleNamespace(finish_reason="stop")], usage=None),
        ],
    )
    async def test_malformed_response_raises_llm_error(self, client, raw):
        """Test a response without a usable message is wrapped."""
        mock = AsyncMock(return_value=raw)

        with patch("src.core.intelligence.llm.client.acompletion", mock):
            with pytest.raises(LLMError) as exc_info:
                await client.complete("Explain photosynthesis")

        assert exc_info.value.model == "gpt-4o-mini"
        assert isinstance(exc_info.value.original_error, (IndexError, AttributeError))

    @pytest.mark.asyncio
    async def test_empty_prompt_rejected(self, client):
        """Test empty prompts raise ValueError."""
        with pytest.raises(ValueError):
            await client.complete("   ")
