from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import TEN_QUESTION_KEYS, WATER_BLOCK, make_completion
from llmquiz.database.database import get_db
from llmquiz.generation import QuestionGenerator
from llmquiz.main import app
from llmquiz.routers.quizzes import get_question_generator, get_settings


@pytest.fixture
def api(session_factory, settings, mock_llm):
    """TestClient wired to the in-memory DB; returns (client, configure) where configure(llm, settings)."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    state = {"llm": mock_llm(WATER_BLOCK), "settings": settings}

    def override_generator():
        return QuestionGenerator(state["settings"], http_client=state["llm"].client)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_question_generator] = override_generator
    try:
        yield TestClient(app), state
    finally:
        app.dependency_overrides.clear()


FORM = {"course_id": "5", "section_id": "1"}


def test_generate_from_pasted_text_and_read_back(api):
    client, state = api

    resp = client.post("/quizzes/generate", data={**FORM, "report_content": "Water boils at 100C."})
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["question_count"] == 1
    assert body["format_error_count"] == 0
    assert body["questions"][0]["correct_key"] == "b"

    quiz = client.get(f"/quizzes/{body['quiz_id']}").json()
    assert quiz["course_id"] == 5
    assert quiz["placement_id"] == body["placement_id"]
    [item] = quiz["items"]
    assert [a["fraction"] for a in item["answers"]] == [0.0, 1.0, 0.0]
    assert state["llm"].call_count == 1


def test_generate_from_pdf_upload(api, mock_llm, make_pdf):
    client, state = api
    state["llm"] = mock_llm(make_completion(TEN_QUESTION_KEYS))
    pdf = make_pdf(["The mitochondria is the powerhouse of the cell."])

    resp = client.post(
        "/quizzes/generate",
        data=FORM,
        files={"file": ("report.pdf", pdf, "application/pdf")},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["question_count"] == 10
    assert body["quiz_name"] == "LLM Quiz - report.pdf"
    assert [q["correct_key"] for q in body["questions"]] == TEN_QUESTION_KEYS

    history = client.get("/quizzes/question-sets", params={"course_id": 5}).json()
    assert [h["quiz_id"] for h in history] == [body["quiz_id"]]


def test_missing_credential_is_reported(api, no_key_settings):
    client, state = api
    state["settings"] = no_key_settings

    resp = client.post("/quizzes/generate", data={**FORM, "report_content": "text"})
    assert resp.status_code == 503
    assert "OPENAI_API_KEY" in resp.json()["detail"]
    assert state["llm"].call_count == 0


def test_unreadable_pdf(api):
    client, state = api
    resp = client.post(
        "/quizzes/generate",
        data=FORM,
        files={"file": ("report.pdf", b"definitely not a pdf", "application/pdf")},
    )
    assert resp.status_code == 422
    assert state["llm"].call_count == 0


def test_rejects_non_pdf_upload(api):
    client, _ = api
    resp = client.post(
        "/quizzes/generate",
        data=FORM,
        files={"file": ("report.docx", b"PK\x03\x04", "application/octet-stream")},
    )
    assert resp.status_code == 400


def test_requires_some_input(api):
    client, _ = api
    resp = client.post("/quizzes/generate", data=FORM)
    assert resp.status_code == 400


def test_llm_failure_maps_to_bad_gateway(api, mock_llm):
    client, state = api
    state["llm"] = mock_llm(status_code=500, payload={"error": {"message": "upstream down"}})

    resp = client.post("/quizzes/generate", data={**FORM, "report_content": "text"})
    assert resp.status_code == 502


def test_unknown_quiz(api):
    client, _ = api
    assert client.get("/quizzes/999").status_code == 404


def test_features_descriptor(api):
    client, _ = api
    assert client.get("/quizzes/features").json() == {
        "mod_intro": True,
        "show_description": True,
        "backup": True,
        "mod_purpose": "content",
    }


def test_bad_setting_is_reported_as_unconfigured(api, monkeypatch):
    client, _ = api
    del app.dependency_overrides[get_question_generator]
    monkeypatch.setattr("llmquiz.config.load_dotenv", lambda *a, **k: False)
    monkeypatch.setenv("LLM_MAX_TOKENS", "lots")
    get_settings.cache_clear()
    try:
        resp = client.post("/quizzes/generate", data={**FORM, "report_content": "text"})
    finally:
        get_settings.cache_clear()

    assert resp.status_code == 503
    assert "LLM_MAX_TOKENS" in resp.json()["detail"]
