"""
SQLAlchemy models for generated quizzes
Quiz → Section / Slots → Question → Answers + Multichoice options

A quiz is placed in a course through a CourseModule row; its question
category is scoped to that placement. Every generation run creates a new
set of rows, nothing is updated in place.
"""

from sqlalchemy import (
    Column, Integer, String, Boolean, ForeignKey, DateTime, Text, Float, JSON,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from llmquiz.database.database import Base

TEXT_FORMAT_HTML = "html"


# ==========================================
# QUIZ CONTAINER
# ==========================================

class Quiz(Base):
    """
    Gradable quiz container. Grading policy columns mirror the fixed policy
    applied by QuizBuilder (deferred feedback, single attempt, shuffled).
    """
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    intro = Column(Text, nullable=False, default="")
    intro_format = Column(String(10), nullable=False, default=TEXT_FORMAT_HTML)

    # Timing (0 = disabled)
    time_open = Column(Integer, nullable=False, default=0)
    time_close = Column(Integer, nullable=False, default=0)
    time_limit = Column(Integer, nullable=False, default=0)
    overdue_handling = Column(String(20), nullable=False, default="autosubmit")
    grace_period = Column(Integer, nullable=False, default=0)

    # Attempts & grading
    preferred_behaviour = Column(String(32), nullable=False, default="deferredfeedback")
    attempts = Column(Integer, nullable=False, default=1)
    attempt_on_last = Column(Boolean, nullable=False, default=False)
    grade_method = Column(Integer, nullable=False, default=1)
    decimal_points = Column(Integer, nullable=False, default=2)
    question_decimal_points = Column(Integer, nullable=False, default=-1)
    sum_grades = Column(Float, nullable=False, default=10.0)
    grade = Column(Float, nullable=False, default=10.0)

    # Review options
    review_attempt = Column(Boolean, nullable=False, default=True)
    review_correctness = Column(Boolean, nullable=False, default=True)
    review_marks = Column(Boolean, nullable=False, default=True)
    review_overall_feedback = Column(Boolean, nullable=False, default=True)

    # Layout
    questions_per_page = Column(Integer, nullable=False, default=10)
    shuffle_questions = Column(Boolean, nullable=False, default=True)
    shuffle_answers = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    sections = relationship("QuizSection", back_populates="quiz", cascade="all, delete-orphan")
    slots = relationship(
        "QuizSlot", back_populates="quiz", cascade="all, delete-orphan", order_by="QuizSlot.slot"
    )

    def __repr__(self):
        return f"<Quiz(id={self.id}, course_id={self.course_id}, name='{self.name}')>"


class QuizSection(Base):
    """Section of a quiz; a generated quiz has a single section starting at slot 1."""
    __tablename__ = "quiz_sections"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    first_slot = Column(Integer, nullable=False, default=1)
    heading = Column(String(255), nullable=False, default="")
    shuffle_questions = Column(Boolean, nullable=False, default=True)

    quiz = relationship("Quiz", back_populates="sections")

    def __repr__(self):
        return f"<QuizSection(id={self.id}, quiz_id={self.quiz_id}, first_slot={self.first_slot})>"


# ==========================================
# PLACEMENT
# ==========================================

class CourseModule(Base):
    """
    Placement of an activity inside a course section.
    For generated quizzes module_name is 'quiz' and instance_id is the quiz id.
    """
    __tablename__ = "course_modules"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, nullable=False, index=True)
    module_name = Column(String(50), nullable=False, default="quiz")
    instance_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    section_id = Column(Integer, nullable=False, index=True)  # course section (topic)
    sequence = Column(Integer, nullable=False, default=0)  # ordering within the section
    visible = Column(Boolean, nullable=False, default=True)
    id_number = Column(String(100), nullable=False, default="")
    added_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    quiz = relationship("Quiz")

    def __repr__(self):
        return f"<CourseModule(id={self.id}, course_id={self.course_id}, instance_id={self.instance_id})>"


# ==========================================
# QUESTION BANK
# ==========================================

class QuestionCategory(Base):
    """Groups the questions of one generation run, scoped to the quiz placement."""
    __tablename__ = "question_categories"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, nullable=False, index=True)
    context_id = Column(Integer, ForeignKey("course_modules.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    info = Column(Text, nullable=False, default="")
    info_format = Column(String(10), nullable=False, default=TEXT_FORMAT_HTML)
    parent_id = Column(Integer, nullable=False, default=0)
    sort_order = Column(Integer, nullable=False, default=500)
    stamp = Column(String(64), nullable=False, unique=True)

    questions = relationship("QuizQuestion", back_populates="category", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<QuestionCategory(id={self.id}, context_id={self.context_id}, name='{self.name}')>"


class QuizQuestion(Base):
    """Multiple-choice question record."""
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("question_categories.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    question_text = Column(Text, nullable=False)
    question_text_format = Column(String(10), nullable=False, default=TEXT_FORMAT_HTML)
    general_feedback = Column(Text, nullable=False, default="")
    general_feedback_format = Column(String(10), nullable=False, default=TEXT_FORMAT_HTML)
    default_mark = Column(Float, nullable=False, default=1.0)
    penalty = Column(Float, nullable=False, default=0.2)  # deducted per repeated attempt
    qtype = Column(String(20), nullable=False, default="multichoice")
    length = Column(Integer, nullable=False, default=1)
    stamp = Column(String(64), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    category = relationship("QuestionCategory", back_populates="questions")
    answers = relationship(
        "QuestionAnswer", back_populates="question", cascade="all, delete-orphan", order_by="QuestionAnswer.id"
    )
    multichoice_options = relationship(
        "MultichoiceOptions", back_populates="question", uselist=False, cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<QuizQuestion(id={self.id}, category_id={self.category_id}, qtype='{self.qtype}')>"


class QuestionAnswer(Base):
    """One answer option; fraction is the credit awarded (1.0 correct, 0.0 wrong)."""
    __tablename__ = "question_answers"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String(5), nullable=False)  # "a", "b", "c"
    answer = Column(Text, nullable=False)
    answer_format = Column(String(10), nullable=False, default=TEXT_FORMAT_HTML)
    fraction = Column(Float, nullable=False, default=0.0)
    feedback = Column(Text, nullable=False, default="")
    feedback_format = Column(String(10), nullable=False, default=TEXT_FORMAT_HTML)

    question = relationship("QuizQuestion", back_populates="answers")

    def __repr__(self):
        return f"<QuestionAnswer(id={self.id}, question_id={self.question_id}, label='{self.label}', fraction={self.fraction})>"


class MultichoiceOptions(Base):
    """Multichoice-specific settings of a question."""
    __tablename__ = "qtype_multichoice_options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, unique=True)
    layout = Column(Integer, nullable=False, default=0)
    single = Column(Boolean, nullable=False, default=True)
    shuffle_answers = Column(Boolean, nullable=False, default=True)
    correct_feedback = Column(Text, nullable=False, default="")
    correct_feedback_format = Column(String(10), nullable=False, default=TEXT_FORMAT_HTML)
    partially_correct_feedback = Column(Text, nullable=False, default="")
    partially_correct_feedback_format = Column(String(10), nullable=False, default=TEXT_FORMAT_HTML)
    incorrect_feedback = Column(Text, nullable=False, default="")
    incorrect_feedback_format = Column(String(10), nullable=False, default=TEXT_FORMAT_HTML)
    answer_numbering = Column(String(10), nullable=False, default="abc")

    question = relationship("QuizQuestion", back_populates="multichoice_options")


class QuizSlot(Base):
    """Ordered position of a question within a quiz."""
    __tablename__ = "quiz_slots"
    __table_args__ = (UniqueConstraint("quiz_id", "slot", name="uq_quiz_slot"),)

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    slot = Column(Integer, nullable=False)  # 1-based
    page = Column(Integer, nullable=False, default=1)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    max_mark = Column(Float, nullable=False, default=1.0)

    quiz = relationship("Quiz", back_populates="slots")
    question = relationship("QuizQuestion")

    def __repr__(self):
        return f"<QuizSlot(quiz_id={self.quiz_id}, slot={self.slot}, question_id={self.question_id})>"


# ==========================================
# GENERATION HISTORY
# ==========================================

class GeneratedQuestionSet(Base):
    """
    Parsed question batch of one generation run, kept as JSON for history.
    questions: [{"text": ..., "options": {"a": ..., "b": ..., "c": ...}, "correct_key": "b", ...}, ...]
    """
    __tablename__ = "generated_question_sets"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="SET NULL"), nullable=True, index=True)
    source_name = Column(String(255), nullable=True)
    model = Column(String(100), nullable=True)
    questions = Column(JSON, nullable=False)
    question_count = Column(Integer, nullable=False, default=0)
    format_error_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    quiz = relationship("Quiz")

    def __repr__(self):
        return f"<GeneratedQuestionSet(id={self.id}, course_id={self.course_id}, quiz_id={self.quiz_id})>"
