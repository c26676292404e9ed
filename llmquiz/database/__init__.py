"""
Database Package

SQLAlchemy models and the repository QuizBuilder writes through.
"""

from .database import Base, SessionLocal, engine, get_db, make_engine
from .repository import QuizRepository, SqlQuizRepository

__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "get_db",
    "make_engine",
    "QuizRepository",
    "SqlQuizRepository",
]
