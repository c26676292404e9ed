"""
Quiz Generation Pipeline
llmquiz/generation/

Steps:
1. Text extraction     — PDF bytes → plain text (llmquiz.ingestion)
2. Question Generator  — LLM call with the fixed question-format prompt
3. Question Parser     — raw completion → Question list (format-error sentinels)
4. Quiz Builder        — quiz, section, placement, category, questions, slots
"""

from .pipeline import PipelineResult, QuizPipeline
from .question_generator import QuestionGenerator
from .question_parser import QuestionParser, parse_questions
from .quiz_builder import QuizBuilder
from .schemas import CoursePosition, PersistedQuizHandle, Question, QuizSpec

__all__ = [
    "CoursePosition",
    "PersistedQuizHandle",
    "PipelineResult",
    "Question",
    "QuestionGenerator",
    "QuestionParser",
    "QuizBuilder",
    "QuizPipeline",
    "QuizSpec",
    "parse_questions",
]
