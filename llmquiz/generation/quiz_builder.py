"""
Step 4 — Quiz Builder

Persists a parsed question batch as a gradable quiz:

  1. quiz container with the fixed grading policy
  2. one section spanning every slot
  3. placement in the course section
  4. question category scoped to the placement
  5. per question: question record, 3 answers, multichoice options, slot
  6. question-set history row

All steps run inside a single repository unit of work, so a failure leaves
nothing behind. Every build creates new rows; nothing is updated in place.
"""

import logging
import uuid

from llmquiz.database import schemas
from llmquiz.database.repository import QuizRepository
from llmquiz.generation.schemas import PersistedQuizHandle, Question, QuizSpec

log = logging.getLogger(__name__)

# ─── Fixed grading policy ──────────────────────────────────────────────────────

QUIZ_GRADE = 10.0
QUESTIONS_PER_PAGE = 10
DEFAULT_MARK = 1.0
PENALTY = 0.2
CATEGORY_NAME = "LLM Quiz Category"
CATEGORY_SORT_ORDER = 500

CORRECT_FEEDBACK = "The answer you selected is correct."
PARTIALLY_CORRECT_FEEDBACK = "The answer you selected is partially correct."
INCORRECT_FEEDBACK = "The answer you selected is incorrect."


def _stamp() -> str:
    return uuid.uuid4().hex


class QuizBuilder:
    """Writes one QuizSpec through a QuizRepository."""

    def __init__(self, repository: QuizRepository):
        self.repository = repository

    def build(self, spec: QuizSpec) -> PersistedQuizHandle:
        """
        Create the quiz and all its items.

        Raises:
            ValueError: spec has no questions (nothing is written)
            PersistenceError: storage failed; the whole build is rolled back
        """
        if not spec.questions:
            raise ValueError("Cannot build a quiz without questions")

        position = spec.position
        log.info(
            "[DB] building quiz '%s' course=%s section=%s questions=%s",
            spec.name, position.course_id, position.section_id, len(spec.questions),
        )

        with self.repository.unit_of_work() as repo:
            quiz = schemas.QuizContainer(
                course_id=position.course_id,
                name=spec.name,
                questions_per_page=QUESTIONS_PER_PAGE,
                sum_grades=QUIZ_GRADE,
                grade=QUIZ_GRADE,
            )
            quiz_id = repo.create_quiz(quiz)

            section_id = repo.create_section(schemas.SectionRecord(
                quiz_id=quiz_id,
                first_slot=1,
                shuffle_questions=quiz.shuffle_questions,
            ))

            placement_id = repo.create_placement(schemas.PlacementRecord(
                course_id=position.course_id,
                instance_id=quiz_id,
                section_id=position.section_id,
                sequence=position.sequence,
            ))

            category_id = repo.create_category(schemas.CategoryRecord(
                course_id=position.course_id,
                context_id=placement_id,
                name=CATEGORY_NAME,
                sort_order=CATEGORY_SORT_ORDER,
                stamp=_stamp(),
            ))

            question_ids = []
            for slot_no, question in enumerate(spec.questions, start=1):
                question_id = self._add_question(repo, quiz_id, category_id, slot_no, question)
                question_ids.append(question_id)

            question_set_id = repo.save_question_set(schemas.QuestionSetRecord(
                course_id=position.course_id,
                quiz_id=quiz_id,
                user_id=spec.user_id,
                source_name=spec.source_name,
                model=spec.model,
                questions=[q.model_dump() for q in spec.questions],
                format_error_count=sum(1 for q in spec.questions if q.format_error),
            ))

        log.info("[DB] saved quiz_id=%s placement_id=%s items=%s", quiz_id, placement_id, len(question_ids))
        return PersistedQuizHandle(
            quiz_id=quiz_id,
            section_id=section_id,
            placement_id=placement_id,
            category_id=category_id,
            question_ids=question_ids,
            question_set_id=question_set_id,
        )

    @staticmethod
    def _add_question(
        repo: QuizRepository,
        quiz_id: int,
        category_id: int,
        slot_no: int,
        question: Question,
    ) -> int:
        question_id = repo.create_question(schemas.QuestionRecord(
            category_id=category_id,
            name=question.text[:255],
            question_text=question.text,
            stamp=_stamp(),
            default_mark=DEFAULT_MARK,
            penalty=PENALTY,
        ))

        for key, text in question.options.items():
            repo.create_answer(schemas.AnswerRecord(
                question_id=question_id,
                label=key,
                answer=text,
                fraction=1.0 if key == question.correct_key else 0.0,
            ))

        repo.create_multichoice_options(schemas.OptionsRecord(
            question_id=question_id,
            single=True,
            shuffle_answers=True,
            correct_feedback=CORRECT_FEEDBACK,
            partially_correct_feedback=PARTIALLY_CORRECT_FEEDBACK,
            incorrect_feedback=INCORRECT_FEEDBACK,
            answer_numbering="abc",
        ))

        repo.add_slot(schemas.SlotRecord(
            quiz_id=quiz_id,
            slot=slot_no,
            page=(slot_no - 1) // QUESTIONS_PER_PAGE + 1,
            question_id=question_id,
            max_mark=DEFAULT_MARK,
        ))
        return question_id
