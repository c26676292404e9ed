"""
Quiz storage repository
One method per creation step used by QuizBuilder, a unit of work that makes a
whole build all-or-nothing, and read-back queries.
"""

import logging
from contextlib import contextmanager
from typing import ContextManager, Iterator, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from llmquiz.database import models, schemas
from llmquiz.errors import PersistenceError

log = logging.getLogger(__name__)


class QuizRepository(Protocol):
    """Storage collaborator used by QuizBuilder."""

    def unit_of_work(self) -> ContextManager["QuizRepository"]: ...
    def create_quiz(self, quiz: schemas.QuizContainer) -> int: ...
    def create_section(self, section: schemas.SectionRecord) -> int: ...
    def create_placement(self, placement: schemas.PlacementRecord) -> int: ...
    def create_category(self, category: schemas.CategoryRecord) -> int: ...
    def create_question(self, question: schemas.QuestionRecord) -> int: ...
    def create_answer(self, answer: schemas.AnswerRecord) -> int: ...
    def create_multichoice_options(self, options: schemas.OptionsRecord) -> int: ...
    def add_slot(self, slot: schemas.SlotRecord) -> int: ...
    def save_question_set(self, question_set: schemas.QuestionSetRecord) -> int: ...


class SqlQuizRepository:
    """
    SQLAlchemy implementation of QuizRepository.

    Create methods only flush (to obtain ids); nothing is committed until the
    enclosing unit_of_work() exits cleanly.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def unit_of_work(self) -> Iterator["SqlQuizRepository"]:
        """Commit everything written inside the block, or roll all of it back."""
        try:
            yield self
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error("[DB] rolled back quiz build: %s", e)
            raise PersistenceError(f"Quiz storage failed: {e}") from e
        except Exception:
            self.db.rollback()
            raise

    def _insert(self, row) -> int:
        self.db.add(row)
        self.db.flush()
        return row.id

    # ==========================================
    # CREATE
    # ==========================================

    def create_quiz(self, quiz: schemas.QuizContainer) -> int:
        return self._insert(models.Quiz(**quiz.model_dump()))

    def create_section(self, section: schemas.SectionRecord) -> int:
        return self._insert(models.QuizSection(**section.model_dump()))

    def create_placement(self, placement: schemas.PlacementRecord) -> int:
        return self._insert(models.CourseModule(**placement.model_dump()))

    def create_category(self, category: schemas.CategoryRecord) -> int:
        return self._insert(models.QuestionCategory(**category.model_dump()))

    def create_question(self, question: schemas.QuestionRecord) -> int:
        return self._insert(models.QuizQuestion(**question.model_dump()))

    def create_answer(self, answer: schemas.AnswerRecord) -> int:
        return self._insert(models.QuestionAnswer(**answer.model_dump()))

    def create_multichoice_options(self, options: schemas.OptionsRecord) -> int:
        return self._insert(models.MultichoiceOptions(**options.model_dump()))

    def add_slot(self, slot: schemas.SlotRecord) -> int:
        return self._insert(models.QuizSlot(**slot.model_dump()))

    def save_question_set(self, question_set: schemas.QuestionSetRecord) -> int:
        data = question_set.model_dump()
        data["question_count"] = len(question_set.questions)
        return self._insert(models.GeneratedQuestionSet(**data))

    # ==========================================
    # READ
    # ==========================================

    def get_quiz(self, quiz_id: int) -> Optional[schemas.QuizView]:
        """Load a quiz with its slots, questions and answers in slot order"""
        quiz = self.db.query(models.Quiz).options(
            selectinload(models.Quiz.slots)
            .selectinload(models.QuizSlot.question)
            .selectinload(models.QuizQuestion.answers),
            selectinload(models.Quiz.slots)
            .selectinload(models.QuizSlot.question)
            .selectinload(models.QuizQuestion.multichoice_options),
        ).filter(models.Quiz.id == quiz_id).first()
        if not quiz:
            return None

        placement = self.db.query(models.CourseModule).filter(
            models.CourseModule.module_name == "quiz",
            models.CourseModule.instance_id == quiz.id,
        ).first()
        category = None
        if placement:
            category = self.db.query(models.QuestionCategory).filter(
                models.QuestionCategory.context_id == placement.id
            ).first()

        items = []
        for slot in quiz.slots:
            question = slot.question
            mc = question.multichoice_options
            items.append(schemas.QuizItemView(
                slot=slot.slot,
                page=slot.page,
                question_id=question.id,
                question_text=question.question_text,
                qtype=question.qtype,
                default_mark=question.default_mark,
                penalty=question.penalty,
                single=mc.single if mc else True,
                answer_numbering=mc.answer_numbering if mc else "abc",
                answers=[schemas.AnswerView.model_validate(a) for a in question.answers],
            ))

        return schemas.QuizView(
            quiz_id=quiz.id,
            course_id=quiz.course_id,
            name=quiz.name,
            placement_id=placement.id if placement else None,
            category_id=category.id if category else None,
            attempts=quiz.attempts,
            grade=quiz.grade,
            sum_grades=quiz.sum_grades,
            preferred_behaviour=quiz.preferred_behaviour,
            shuffle_questions=quiz.shuffle_questions,
            shuffle_answers=quiz.shuffle_answers,
            items=items,
        )

    def list_question_sets(
        self, course_id: Optional[int] = None, skip: int = 0, limit: int = 100
    ) -> List[schemas.QuestionSetSummary]:
        """Question-set history, newest first"""
        q = self.db.query(models.GeneratedQuestionSet)
        if course_id is not None:
            q = q.filter(models.GeneratedQuestionSet.course_id == course_id)
        rows = q.order_by(models.GeneratedQuestionSet.id.desc()).offset(skip).limit(limit).all()
        return [schemas.QuestionSetSummary.model_validate(r) for r in rows]
