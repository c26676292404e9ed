"""
Step 2 — Question Generation

Sends the extracted report text to the LLM with a fixed instruction template
and returns the raw completion. The output format pinned by SYSTEM_PROMPT is
exactly what question_parser.py expects:

  - 10 questions, separated by a blank line
  - question text on its own line, prefixed "N."
  - three options on their own lines, prefixed "a)", "b)", "c)"
  - exactly one option followed by the marker "(ok)"

Long inputs are sent as-is; the completion is capped at max_tokens (2500 by
default), so very long reports may get a truncated answer.
"""

import logging
from typing import Optional

import httpx

from llmquiz.config import Settings
from llmquiz.generation.gpt_client import GPTClient

log = logging.getLogger(__name__)

QUESTION_COUNT = 10


# ─── Prompt ────────────────────────────────────────────────────────────────────

SYSTEM_PROMPT = f"""You will be provided with a text to generate {QUESTION_COUNT} questions based on its content. \
Each question must have 3 answer options with only one correct answer, the correct answer must be marked \
in brackets as correct with "ok". The questions must be separated by two line breaks and the question text \
and its options must be on separate lines. Please ensure that the language of the responses corresponds to \
the language of the provided text. The structure must be as follows:

1. Question text
a) Option 1
b) Option 2
c) Option 3 (ok)

2. Question text
a) Option 1
b) Option 2 (ok)
c) Option 3

3. Question text
a) Option 1 (ok)
b) Option 2
c) Option 3

and so on..."""

USER_PROMPT = f"Generate the {QUESTION_COUNT} questions based on the following content: {{text}}"


# ─── Generator ─────────────────────────────────────────────────────────────────

class QuestionGenerator:
    """
    Produces the raw question text for one report.

    Args:
        settings:    Explicit LLM configuration (credential, model, token cap)
        http_client: Optional httpx.Client used as the OpenAI transport
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        self.settings = settings
        self.client = GPTClient(settings, http_client=http_client)

    def ensure_credential(self) -> None:
        """Fail early, before any document work, when no API key is configured."""
        self.client.ensure_credential()

    def generate(self, source_text: str) -> str:
        """
        Ask the LLM for the question block text.

        Raises:
            ValueError: source_text is empty
            MissingCredentialError: no API key (checked before the request)
            GenerationError: request failed or returned no content
        """
        if not source_text or not source_text.strip():
            raise ValueError("Source text is empty; nothing to generate questions from")

        self.ensure_credential()
        log.info("[LLM] model=%s input_chars=%s", self.settings.gpt_model, len(source_text))

        result = self.client.chat(
            USER_PROMPT.format(text=source_text),
            system=SYSTEM_PROMPT,
            max_tokens=self.settings.max_tokens,
        )

        if result.usage:
            log.info(
                "[LLM] usage prompt=%s completion=%s total=%s",
                result.usage.prompt_tokens,
                result.usage.completion_tokens,
                result.usage.total_tokens,
            )
        return result.content
