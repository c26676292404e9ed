"""
Quiz Router — /quizzes

Endpoints:
  POST /quizzes/generate        — generate a quiz from an uploaded PDF or pasted text
  GET  /quizzes/features        — static capability descriptor
  GET  /quizzes/question-sets   — generation history (optionally per course)
  GET  /quizzes/{quiz_id}       — persisted quiz with items and answer credits
"""

import logging
from functools import lru_cache
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel
from sqlalchemy.orm import Session

from llmquiz.capabilities import SUPPORTED_FEATURES
from llmquiz.config import Settings, load_settings
from llmquiz.database.database import get_db
from llmquiz.database.repository import SqlQuizRepository
from llmquiz.database.schemas import QuestionSetSummary, QuizView
from llmquiz.errors import (
    ConfigurationError,
    ExtractionError,
    GenerationError,
    MissingCredentialError,
    PersistenceError,
)
from llmquiz.generation import CoursePosition, Question, QuestionGenerator, QuizBuilder, QuizPipeline

router = APIRouter(prefix="/quizzes", tags=["quizzes"])

log = logging.getLogger("llmquiz.routers.quizzes")

ALLOWED_EXTENSIONS = {"pdf"}


# ─── Schemas ───────────────────────────────────────────────────────────────────

class GenerateQuizResponse(BaseModel):
    quiz_id: int
    placement_id: int
    category_id: int
    quiz_name: str
    question_count: int
    format_error_count: int
    questions: List[Question]


# ─── Dependencies ──────────────────────────────────────────────────────────────

@lru_cache
def get_settings() -> Settings:
    """Settings are read from the environment once per process."""
    try:
        return load_settings()
    except ConfigurationError as e:
        log.error("[CONFIG] %s", e)
        raise HTTPException(status_code=503, detail=f"LLM is not configured: {e}")


def get_question_generator(settings: Settings = Depends(get_settings)) -> QuestionGenerator:
    return QuestionGenerator(settings)


def _allowed_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


# ─── Routes ────────────────────────────────────────────────────────────────────

@router.post("/generate", response_model=GenerateQuizResponse, status_code=201)
def generate_quiz(
    course_id: int = Form(..., gt=0),
    section_id: int = Form(..., ge=0),
    sequence: int = Form(0, ge=0),
    name: Optional[str] = Form(None, max_length=255),
    user_id: Optional[int] = Form(None),
    report_content: Optional[str] = Form(None, description="Pasted report text (used when no file is sent)"),
    file: Optional[UploadFile] = File(None, description="PDF report"),
    generator: QuestionGenerator = Depends(get_question_generator),
    db: Session = Depends(get_db),
):
    """
    **Generate a multiple-choice quiz from a report.**

    Send either a PDF as `file` or the report text as `report_content`.
    The quiz is created in the given course section with 10 LLM-generated
    questions (3 options each, one correct).
    """
    has_file = file is not None and bool(file.filename)
    if not has_file and not (report_content and report_content.strip()):
        raise HTTPException(status_code=400, detail="Provide a PDF file or report_content")
    if has_file and not _allowed_file(file.filename):
        raise HTTPException(status_code=400, detail=f"Only PDF files are supported: {file.filename}")

    position = CoursePosition(course_id=course_id, section_id=section_id, sequence=sequence)
    pipeline = QuizPipeline(generator=generator, builder=QuizBuilder(SqlQuizRepository(db)))

    log.info("=" * 60)
    log.info("[GENERATE START] course=%s section=%s source=%s", course_id, section_id,
             file.filename if has_file else "pasted text")

    try:
        if has_file:
            result = pipeline.run_from_document(
                file.file.read(), position, source_name=file.filename, name=name, user_id=user_id,
            )
        else:
            result = pipeline.run_from_text(report_content, position, name=name, user_id=user_id)
    except MissingCredentialError as e:
        log.error("[GENERATE] %s", e)
        raise HTTPException(status_code=503, detail=f"LLM is not configured: {e}")
    except ExtractionError as e:
        log.error("[GENERATE] extraction failed: %s", e)
        raise HTTPException(status_code=422, detail=f"Could not read the document: {e}")
    except GenerationError as e:
        log.error("[GENERATE] generation failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Question generation failed: {e}")
    except PersistenceError as e:
        log.error("[GENERATE] storage failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Could not save the quiz: {e}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    log.info("[GENERATE DONE] quiz_id=%s", result.handle.quiz_id)
    log.info("=" * 60)

    return GenerateQuizResponse(
        quiz_id=result.handle.quiz_id,
        placement_id=result.handle.placement_id,
        category_id=result.handle.category_id,
        quiz_name=result.quiz_name,
        question_count=result.handle.item_count,
        format_error_count=result.format_error_count,
        questions=result.questions,
    )


@router.get("/features")
def get_features():
    """Static feature descriptor for the host platform."""
    return dict(SUPPORTED_FEATURES)


@router.get("/question-sets", response_model=List[QuestionSetSummary])
def list_question_sets(
    course_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """List generation history, newest first."""
    return SqlQuizRepository(db).list_question_sets(course_id=course_id, skip=skip, limit=limit)


@router.get("/{quiz_id}", response_model=QuizView)
def get_quiz(quiz_id: int, db: Session = Depends(get_db)):
    """Get a persisted quiz with its slots, questions and answer credits."""
    quiz = SqlQuizRepository(db).get_quiz(quiz_id)
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz
