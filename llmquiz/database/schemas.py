"""
Pydantic records for quiz storage
One record per entity written by QuizBuilder, plus read-back views.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ==========================================
# CREATE RECORDS (one per creation step)
# ==========================================

class QuizContainer(BaseModel):
    """Quiz container with its grading policy"""
    course_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=255)
    intro: str = ""
    time_open: int = 0
    time_close: int = 0
    time_limit: int = 0
    overdue_handling: str = "autosubmit"
    grace_period: int = 0
    preferred_behaviour: str = "deferredfeedback"
    attempts: int = 1
    attempt_on_last: bool = False
    grade_method: int = 1
    decimal_points: int = 2
    question_decimal_points: int = -1
    review_attempt: bool = True
    review_correctness: bool = True
    review_marks: bool = True
    review_overall_feedback: bool = True
    questions_per_page: int = Field(10, ge=1)
    shuffle_questions: bool = True
    shuffle_answers: bool = True
    sum_grades: float = 10.0
    grade: float = 10.0


class SectionRecord(BaseModel):
    """Quiz section spanning all slots"""
    quiz_id: int
    first_slot: int = 1
    heading: str = ""
    shuffle_questions: bool = True


class PlacementRecord(BaseModel):
    """Course module entry that places the quiz in a course section"""
    course_id: int
    instance_id: int
    section_id: int
    sequence: int = 0
    module_name: str = "quiz"
    visible: bool = True
    id_number: str = ""


class CategoryRecord(BaseModel):
    """Question category scoped to a placement context"""
    course_id: int
    context_id: int
    name: str
    stamp: str
    info: str = ""
    parent_id: int = 0
    sort_order: int = 500


class QuestionRecord(BaseModel):
    """Multichoice question record"""
    category_id: int
    name: str = Field(..., max_length=255)
    question_text: str
    stamp: str
    general_feedback: str = ""
    default_mark: float = 1.0
    penalty: float = 0.2
    qtype: str = "multichoice"
    length: int = 1


class AnswerRecord(BaseModel):
    """One answer option and the credit it awards"""
    question_id: int
    label: str
    answer: str
    fraction: float = Field(..., ge=0.0, le=1.0)
    feedback: str = ""


class OptionsRecord(BaseModel):
    """Multichoice-specific options of a question"""
    question_id: int
    layout: int = 0
    single: bool = True
    shuffle_answers: bool = True
    correct_feedback: str
    partially_correct_feedback: str
    incorrect_feedback: str
    answer_numbering: str = "abc"


class SlotRecord(BaseModel):
    """Question attached to a quiz position"""
    quiz_id: int
    slot: int = Field(..., ge=1)
    page: int = Field(1, ge=1)
    question_id: int
    max_mark: float = 1.0


class QuestionSetRecord(BaseModel):
    """History entry for one parsed batch"""
    course_id: int
    questions: List[Dict[str, Any]]
    quiz_id: Optional[int] = None
    user_id: Optional[int] = None
    source_name: Optional[str] = None
    model: Optional[str] = None
    format_error_count: int = 0


# ==========================================
# READ-BACK VIEWS
# ==========================================

class AnswerView(BaseModel):
    label: str
    answer: str
    fraction: float

    model_config = ConfigDict(from_attributes=True)


class QuizItemView(BaseModel):
    """One slot of a persisted quiz with its question and answers"""
    slot: int
    page: int
    question_id: int
    question_text: str
    qtype: str
    default_mark: float
    penalty: float
    single: bool
    answer_numbering: str
    answers: List[AnswerView]


class QuizView(BaseModel):
    """Persisted quiz as seen by a grader"""
    quiz_id: int
    course_id: int
    name: str
    placement_id: Optional[int] = None
    category_id: Optional[int] = None
    attempts: int
    grade: float
    sum_grades: float
    preferred_behaviour: str
    shuffle_questions: bool
    shuffle_answers: bool
    items: List[QuizItemView]


class QuestionSetSummary(BaseModel):
    id: int
    course_id: int
    user_id: Optional[int] = None
    quiz_id: Optional[int] = None
    source_name: Optional[str] = None
    model: Optional[str] = None
    question_count: int
    format_error_count: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
