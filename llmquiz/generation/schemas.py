"""
Pydantic schemas for the quiz generation pipeline.

Question      — one parsed multiple-choice item (parser output)
QuizSpec      — everything QuizBuilder needs for one build
PersistedQuizHandle — ids of what a build wrote
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

OPTION_KEYS = ("a", "b", "c")

FORMAT_ERROR_TEXT = "Question format error"
FORMAT_ERROR_OPTIONS = {
    "a": "Error format",
    "b": "Error match",
    "c": "Error answer",
}


class Question(BaseModel):
    """One multiple-choice question with exactly three lettered options."""

    model_config = ConfigDict(frozen=True)

    text: str
    options: Dict[str, str]          # {"a": ..., "b": ..., "c": ...} in that order
    correct_key: str                 # "a" | "b" | "c"
    format_error: bool = False       # True only for the sentinel placeholder

    @model_validator(mode="after")
    def _check_shape(self) -> "Question":
        if tuple(self.options) != OPTION_KEYS:
            raise ValueError(f"options must have exactly the keys {OPTION_KEYS}, got {tuple(self.options)}")
        if self.correct_key not in self.options:
            raise ValueError(f"correct_key {self.correct_key!r} is not an option key")
        return self

    @classmethod
    def format_error_sentinel(cls) -> "Question":
        """Placeholder emitted for a block that matched no known shape."""
        return cls(
            text=FORMAT_ERROR_TEXT,
            options=dict(FORMAT_ERROR_OPTIONS),
            correct_key="a",
            format_error=True,
        )


# Ordered, one entry per block of the LLM output
QuestionBatch = List[Question]


class CoursePosition(BaseModel):
    """Where in the course the new quiz is placed."""

    model_config = ConfigDict(frozen=True)

    course_id: int = Field(..., gt=0)
    section_id: int = Field(..., ge=0, description="Course section (topic) the quiz goes into")
    sequence: int = Field(0, ge=0, description="Ordering inherited from the insertion point")


class QuizSpec(BaseModel):
    """Input to QuizBuilder. Built once per request and never mutated."""

    model_config = ConfigDict(frozen=True)

    position: CoursePosition
    name: str = Field(..., min_length=1, max_length=255)
    questions: List[Question]
    # History metadata, stored alongside the quiz
    source_name: Optional[str] = None
    user_id: Optional[int] = None
    model: Optional[str] = None


class PersistedQuizHandle(BaseModel):
    """Identifiers of everything one successful build created."""

    quiz_id: int
    section_id: int
    placement_id: int
    category_id: int
    question_ids: List[int]
    question_set_id: Optional[int] = None

    @property
    def item_count(self) -> int:
        return len(self.question_ids)
