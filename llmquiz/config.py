"""
Runtime settings for the quiz generator.

Settings are read once from the environment (and a local .env file) by
load_settings() and then passed explicitly to the components that need them.

  OPENAI_API_KEY       — required for generation
  GPT_MODEL            — chat model (default gpt-4o-mini)
  LLM_MAX_TOKENS       — completion cap (default 2500)
  LLM_TIMEOUT_SECONDS  — request timeout; unset keeps the transport default
  OPENAI_BASE_URL      — optional API base URL (proxies, compatible servers)
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from llmquiz.errors import ConfigurationError

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 2500

_ENV_NAMES = {
    "openai_api_key": "OPENAI_API_KEY",
    "gpt_model": "GPT_MODEL",
    "max_tokens": "LLM_MAX_TOKENS",
    "request_timeout": "LLM_TIMEOUT_SECONDS",
    "openai_base_url": "OPENAI_BASE_URL",
}


class Settings(BaseModel):
    """LLM configuration handed to QuestionGenerator at construction."""

    model_config = ConfigDict(frozen=True)

    openai_api_key: Optional[str] = Field(None, repr=False)
    gpt_model: str = DEFAULT_MODEL
    max_tokens: int = Field(DEFAULT_MAX_TOKENS, ge=1)
    request_timeout: Optional[float] = Field(None, gt=0)
    openai_base_url: Optional[str] = None

    @property
    def has_credential(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.strip())


def _env_number(name: str, cast, default=None):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return cast(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def load_settings() -> Settings:
    """
    Build Settings from environment variables (after loading .env).

    Raises:
        ConfigurationError: A numeric setting is malformed or out of range
    """
    load_dotenv()

    try:
        return Settings(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            gpt_model=os.getenv("GPT_MODEL", DEFAULT_MODEL),
            max_tokens=_env_number("LLM_MAX_TOKENS", int, DEFAULT_MAX_TOKENS),
            request_timeout=_env_number("LLM_TIMEOUT_SECONDS", float),
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
        )
    except ValidationError as e:
        names = ", ".join(_ENV_NAMES.get(str(err["loc"][0]), str(err["loc"][0])) for err in e.errors())
        raise ConfigurationError(f"Invalid value for {names}") from e
