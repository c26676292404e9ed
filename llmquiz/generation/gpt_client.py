"""
OpenAI chat-completions helper for the generation pipeline.

Used by:
  - question_generator.py   (Step 2)

The client is built from an explicit Settings object. The SDK's automatic
retries are disabled: a failed call is reported, not repeated.
"""

import logging
from typing import NamedTuple, Optional

import httpx
import openai
from openai import OpenAI

from llmquiz.config import Settings
from llmquiz.errors import GenerationError, MissingCredentialError

log = logging.getLogger(__name__)


class TokenUsage(NamedTuple):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class ChatResult(NamedTuple):
    content: str
    usage: Optional[TokenUsage]


class GPTClient:
    """
    Lazily-built OpenAI client bound to one Settings instance.

    Args:
        settings:    LLM configuration (API key, model, token cap, timeout)
        http_client: Optional httpx.Client, e.g. with a mock transport in tests
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        self.settings = settings
        self._http_client = http_client
        self._client: Optional[OpenAI] = None

    def ensure_credential(self) -> None:
        """Raise MissingCredentialError if no API key is configured."""
        if not self.settings.has_credential:
            raise MissingCredentialError()

    def _get_client(self) -> OpenAI:
        self.ensure_credential()
        if self._client is None:
            kwargs = {
                "api_key": self.settings.openai_api_key,
                "max_retries": 0,
            }
            if self.settings.request_timeout is not None:
                kwargs["timeout"] = self.settings.request_timeout
            if self.settings.openai_base_url:
                kwargs["base_url"] = self.settings.openai_base_url
            if self._http_client is not None:
                kwargs["http_client"] = self._http_client
            self._client = OpenAI(**kwargs)
        return self._client

    def chat(self, prompt: str, system: str, max_tokens: Optional[int] = None) -> ChatResult:
        """
        Call Chat Completions with one system and one user message.

        Returns:
            The assistant message text and the token usage counters (if reported)

        Raises:
            MissingCredentialError: No API key configured (no request is made)
            GenerationError: Request failed, timed out, or returned no content
        """
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=self.settings.gpt_model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens or self.settings.max_tokens,
            )
        except openai.APITimeoutError as e:
            raise GenerationError(f"LLM request timed out: {e}") from e
        except openai.OpenAIError as e:
            raise GenerationError(f"LLM request failed: {e}") from e

        choices = getattr(response, "choices", None)
        if not choices:
            raise GenerationError("LLM response contained no choices")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None) if message is not None else None
        if not isinstance(content, str) or not content.strip():
            raise GenerationError("LLM response contained no message content")

        usage = None
        raw_usage = getattr(response, "usage", None)
        if raw_usage is not None:
            usage = TokenUsage(
                prompt_tokens=raw_usage.prompt_tokens or 0,
                completion_tokens=raw_usage.completion_tokens or 0,
                total_tokens=raw_usage.total_tokens or 0,
            )
        return ChatResult(content=content, usage=usage)
