"""
Error taxonomy for the quiz generation pipeline.

Each stage raises its own error type and the caller decides how to surface it:
  - ExtractionError        — document could not be turned into text
  - ConfigurationError     — an LLM setting in the environment is invalid
  - MissingCredentialError — no LLM API key configured
  - GenerationError        — LLM call failed or returned an unusable payload
  - PersistenceError       — quiz storage failed (the build is rolled back)
"""


class QuizGenerationError(Exception):
    """Base class for every pipeline failure."""


class ExtractionError(QuizGenerationError):
    """Raised when a document cannot be parsed into plain text."""


class ConfigurationError(QuizGenerationError):
    """Raised when an environment setting cannot be turned into a valid value."""


class MissingCredentialError(QuizGenerationError):
    """Raised when the LLM API key is not configured."""

    def __init__(self, message: str = "OPENAI_API_KEY is not set. Add it to your .env file."):
        super().__init__(message)


class GenerationError(QuizGenerationError):
    """Raised when the chat completion call errors or its response is unusable."""


class PersistenceError(QuizGenerationError):
    """Raised when a quiz build could not be written to storage."""
