# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Chat completion client for tutoring agents, backed by LiteLLM.

One agent turn is one chat completion: the agent's system instruction plus
a user prompt describing the session. LiteLLM picks the provider from the
model prefix (gemini/, ollama/, claude-..., gpt-...) and LLMSettings
supplies the credentials.

Example:
    >>> from src.core.intelligence.llm import LLMClient
    >>> client = LLMClient()
    >>> reply = await client.complete(
    ...     "Topic: Fractions. Difficulty: Beginner. Please perform your task.",
    ...     system_prompt="You are a Curriculum Planner.",
    ... )
    >>> reply.content
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import litellm
from litellm import acompletion

from src.core.config.settings import LLMSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Text of one completion with its token accounting.

    Attributes:
        content: Assistant message text, empty if the provider sent none.
        model: LiteLLM model string that served the request.
        tokens_input: Prompt tokens billed.
        tokens_output: Completion tokens billed.
        finish_reason: Provider stop reason.
        raw_response: LiteLLM response object, kept for debugging.
    """

    content: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0
    finish_reason: str = "stop"
    raw_response: Optional[object] = field(default=None, repr=False)

    @property
    def total_tokens(self) -> int:
        return self.tokens_input + self.tokens_output


class LLMError(Exception):
    """A completion request could not be served.

    Attributes:
        message: What went wrong.
        model: Model the request was sent to.
        original_error: Exception raised by LiteLLM.
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.model = model
        self.original_error = original_error


def _build_messages(prompt: str, system_prompt: Optional[str]) -> list[dict[str, str]]:
    messages = [{"role": "user", "content": prompt}]
    if system_prompt:
        messages.insert(0, {"role": "system", "content": system_prompt})
    return messages


def _to_response(raw: Any, model: str) -> LLMResponse:
    choice = raw.choices[0]
    usage = getattr(raw, "usage", None)
    return LLMResponse(
        content=choice.message.content or "",
        model=model,
        tokens_input=getattr(usage, "prompt_tokens", 0) or 0,
        tokens_output=getattr(usage, "completion_tokens", 0) or 0,
        finish_reason=choice.finish_reason or "stop",
        raw_response=raw,
    )


class LLMClient:
    """Async chat completions through LiteLLM.

    Retries are delegated to LiteLLM (num_retries). An agent turn that
    still fails surfaces as LLMError and is not retried again here.

    Attributes:
        model: Model used when a request does not name one.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        llm_settings: Optional[LLMSettings] = None,
    ):
        """Create a client.

        Args:
            model: LiteLLM model string. Defaults to the configured provider's model.
            timeout: Seconds per request. Defaults to LLMSettings.request_timeout.
            max_retries: LiteLLM retry count. Defaults to LLMSettings.max_retries.
            llm_settings: Provider configuration. Uses get_settings().llm if None.
        """
        self._settings = llm_settings or get_settings().llm
        self._model = model or self._settings.get_default_model()
        self._timeout = timeout if timeout is not None else self._settings.request_timeout
        self._max_retries = (
            max_retries if max_retries is not None else self._settings.max_retries
        )

        # Providers reject parameters they do not know, e.g. response_format on Ollama
        litellm.drop_params = True

        logger.info(
            "LLM client ready: model=%s, timeout=%.1fs, retries=%d",
            self._model,
            self._timeout,
            self._max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def timeout(self) -> float:
        return self._timeout

    async def complete(
        self,
        prompt: str,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        json_output: bool = False,
        **kwargs: Any,
    ) -> LLMResponse:
        """Run one chat completion.

        Args:
            prompt: User message.
            model: Model for this request only.
            system_prompt: System instruction, usually the agent profile's.
            temperature: Sampling temperature.
            max_tokens: Completion token limit.
            json_output: Request a JSON object (used by the Quality-Reviewer).
            **kwargs: Passed through to litellm.acompletion.

        Returns:
            LLMResponse with the assistant text.

        Raises:
            ValueError: If prompt is blank.
            LLMError: If the provider call fails.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        target = model or self._model
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            raw = await acompletion(
                model=target,
                messages=_build_messages(prompt, system_prompt),
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=self._timeout,
                num_retries=self._max_retries,
                **self._settings.get_provider_params(target),
                **kwargs,
            )
            response = _to_response(raw, target)
        except Exception as e:
            logger.error("Completion request to %s failed: %s", target, e)
            raise LLMError(f"Completion failed: {e}", model=target, original_error=e) from e

        logger.debug(
            "Completion from %s: tokens_in=%d, tokens_out=%d, finish=%s",
            target,
            response.tokens_input,
            response.tokens_output,
            response.finish_reason,
        )
        return response
