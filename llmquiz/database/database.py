"""
Database connection and session management
Relational storage for generated quizzes
"""

import os

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Database URL from environment; a local SQLite file when unset
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./llmquiz.db")


def make_engine(url: str = DATABASE_URL):
    """Create an engine; SQLite needs the same-thread check relaxed for FastAPI."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10
    )


# Create engine
engine = make_engine()

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for declarative models
Base = declarative_base()


def get_db():
    """
    Database session dependency for FastAPI
    Yields a database session and ensures it's closed after use
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
