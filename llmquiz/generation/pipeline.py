"""
Quiz generation pipeline

  document bytes ─► PdfTextExtractor ─► text
  pasted text ───────────────────────► text
  text ─► QuestionGenerator ─► raw completion ─► QuestionParser ─► questions
  questions ─► QuizBuilder ─► persisted quiz

Runs synchronously on the calling thread. The credential is checked before
any document work so a misconfigured install fails without side effects.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel

from llmquiz.generation.question_generator import QuestionGenerator
from llmquiz.generation.question_parser import QuestionParser
from llmquiz.generation.quiz_builder import QuizBuilder
from llmquiz.generation.schemas import CoursePosition, PersistedQuizHandle, Question, QuizSpec
from llmquiz.ingestion import PdfTextExtractor

log = logging.getLogger("llmquiz.pipeline")

QUIZ_NAME_PREFIX = "LLM Quiz"


class PipelineResult(BaseModel):
    handle: PersistedQuizHandle
    quiz_name: str
    questions: List[Question]
    format_error_count: int


def default_quiz_name(source_name: Optional[str]) -> str:
    """'LLM Quiz - report.pdf', truncated to the 255 chars a quiz name allows."""
    if not source_name:
        return QUIZ_NAME_PREFIX
    return f"{QUIZ_NAME_PREFIX} - {source_name}"[:255]


class QuizPipeline:
    """
    Wires the four stages together.

    Args:
        generator: QuestionGenerator bound to explicit settings
        builder:   QuizBuilder bound to a repository
        extractor: document text extractor (PdfTextExtractor by default)
        parser:    completion parser (QuestionParser by default)
    """

    def __init__(
        self,
        generator: QuestionGenerator,
        builder: QuizBuilder,
        extractor: Optional[PdfTextExtractor] = None,
        parser: Optional[QuestionParser] = None,
    ):
        self.generator = generator
        self.builder = builder
        self.extractor = extractor or PdfTextExtractor()
        self.parser = parser or QuestionParser()

    def run_from_document(
        self,
        document_bytes: bytes,
        position: CoursePosition,
        source_name: Optional[str] = None,
        name: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> PipelineResult:
        """Extract a PDF's text and build a quiz from it."""
        self.generator.ensure_credential()

        log.info("[STEP 1] Extracting text from %s (%s bytes)...", source_name or "document", len(document_bytes))
        text = self.extractor.extract(document_bytes)
        log.info("[STEP 1] OK — %s chars", len(text))

        return self.run_from_text(text, position, source_name=source_name, name=name, user_id=user_id)

    def run_from_text(
        self,
        text: str,
        position: CoursePosition,
        source_name: Optional[str] = None,
        name: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> PipelineResult:
        """Build a quiz from already-available text (pasted content or an extracted PDF)."""
        self.generator.ensure_credential()

        log.info("[STEP 2] Generating questions via LLM...")
        raw = self.generator.generate(text)

        log.info("[STEP 3] Parsing completion...")
        questions = self.parser.parse(raw)
        errors = sum(1 for q in questions if q.format_error)
        log.info("[STEP 3] OK — %s question(s), %s format error(s)", len(questions), errors)

        quiz_name = name or default_quiz_name(source_name)
        spec = QuizSpec(
            position=position,
            name=quiz_name,
            questions=questions,
            source_name=source_name,
            user_id=user_id,
            model=self.generator.settings.gpt_model,
        )

        log.info("[STEP 4] Saving quiz...")
        handle = self.builder.build(spec)
        log.info("[DONE] quiz_id=%s items=%s", handle.quiz_id, handle.item_count)

        return PipelineResult(
            handle=handle,
            quiz_name=quiz_name,
            questions=questions,
            format_error_count=errors,
        )
