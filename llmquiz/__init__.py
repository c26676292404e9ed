"""
LLM Quiz — multiple-choice quizzes generated from PDF reports.
"""

__version__ = "1.0.0"
