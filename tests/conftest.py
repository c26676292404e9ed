from __future__ import annotations

import io
import json
from typing import Any, Callable, Dict, List

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from llmquiz.config import Settings
from llmquiz.database.database import Base
from llmquiz.database import models  # noqa: F401


# ====================
# LLM output fixtures
# ====================

WATER_BLOCK = "1. At what temperature does water boil?\na) 50C\nb) 100C (ok)\nc) 200C"

TEN_QUESTION_KEYS = ["a", "b", "c", "c", "b", "a", "b", "c", "a", "b"]


def make_block(number: int, correct_key: str) -> str:
    lines = [f"{number}. Question number {number}?"]
    for key in ("a", "b", "c"):
        marker = " (ok)" if key == correct_key else ""
        lines.append(f"{key}) Option {key.upper()} of {number}{marker}")
    return "\n".join(lines)


def make_completion(keys: List[str]) -> str:
    return "\n\n".join(make_block(i, key) for i, key in enumerate(keys, start=1))


def completion_payload(content: Any) -> Dict[str, Any]:
    """Chat Completions response envelope as returned by the API."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 120, "completion_tokens": 340, "total_tokens": 460},
    }


class MockLLM:
    """Records every request sent through an httpx.MockTransport."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._handler = handler
        self.client = httpx.Client(transport=httpx.MockTransport(self._handle))

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def mock_llm() -> Callable[..., MockLLM]:
    """Factory: mock_llm(content) answers every request with that completion."""

    def factory(content: Any = WATER_BLOCK, status_code: int = 200, payload: Dict[str, Any] | None = None) -> MockLLM:
        body = payload if payload is not None else completion_payload(content)
        return MockLLM(lambda request: httpx.Response(status_code, json=body))

    return factory


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="sk-test", gpt_model="gpt-4o-mini")


@pytest.fixture
def no_key_settings() -> Settings:
    return Settings(openai_api_key=None)


# ====================
# Database fixtures
# ====================

@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


# ====================
# Document fixtures
# ====================

@pytest.fixture
def make_pdf() -> Callable[[List[str]], bytes]:
    """Render one page per string into a real PDF with reportlab."""
    from reportlab.lib.pagesizes import A4
    from reportlab.pdfgen import canvas

    def factory(pages: List[str]) -> bytes:
        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=A4)
        for text in pages:
            y = 800
            for line in text.splitlines():
                c.drawString(72, y, line)
                y -= 16
            c.showPage()
        c.save()
        return buf.getvalue()

    return factory
