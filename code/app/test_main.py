from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from app.core import pipeline
from app.core.sample_payloads import SAMPLE_CHAT_REQUEST, SAMPLE_LIFE_FORM, SAMPLE_PROFILE
from app.main import app

client = TestClient(app)


@pytest.fixture
def anonymous(monkeypatch):
    monkeypatch.setattr(pipeline, "resolve_user_id", lambda token: None)


@pytest.fixture
def signed_in(monkeypatch):
    saved = []
    monkeypatch.setattr(pipeline, "resolve_user_id", lambda token: "user-1" if token == "good-token" else None)
    monkeypatch.setattr(pipeline, "fetch_profile", lambda user_id, token=None: dict(SAMPLE_PROFILE))
    monkeypatch.setattr(
        pipeline,
        "fetch_recent_history",
        lambda user_id, limit, token=None: [{"message": "stored q", "response": "stored a"}],
    )
    monkeypatch.setattr(pipeline, "save_history", lambda *args: saved.append(args))
    return saved


def _assert_timestamp(value):
    assert value.endswith("Z")
    datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


@pytest.mark.parametrize("body", [{}, {"message": ""}, {"message": None}, {"message": 42}, ["message"]])
def test_chat_rejects_missing_message(anonymous, body):
    res = client.post("/api/chat", json=body)
    assert res.status_code == 400
    assert res.json() == {"error": "Message is required"}


def test_chat_rejects_non_json_body(anonymous):
    res = client.post("/api/chat", content=b"not json", headers={"Content-Type": "application/json"})
    assert res.status_code == 400


def test_chat_accepts_whitespace_message(anonymous, monkeypatch):
    monkeypatch.setattr(pipeline, "generate_text", lambda prompt: "ok")
    res = client.post("/api/chat", json={"message": "   "})
    assert res.status_code == 200
    assert res.json()["response"] == "ok"


def test_chat_success_anonymous(anonymous, monkeypatch):
    prompts = []

    def fake_generate(prompt):
        prompts.append(prompt)
        return "Aim for cover of 10-15x your income."

    monkeypatch.setattr(pipeline, "generate_text", fake_generate)
    res = client.post("/api/chat", json=SAMPLE_CHAT_REQUEST)
    assert res.status_code == 200
    body = res.json()
    assert body["response"] == "Aim for cover of 10-15x your income."
    assert body["context"] == "insurance"
    _assert_timestamp(body["timestamp"])
    assert "USER PROFILE" not in prompts[0]
    # only the last three request turns reach the prompt
    assert "I earn 12 lakh a year." not in prompts[0]
    assert "User: I also have a 25 lakh home loan." in prompts[0]


def test_chat_generation_failure_returns_fallback(anonymous, monkeypatch):
    def broken(prompt):
        raise RuntimeError("Missing GEMINI_API_KEY")

    monkeypatch.setattr(pipeline, "generate_text", broken)
    res = client.post("/api/chat", json={"message": "Should I refinance?", "context": "loan"})
    assert res.status_code == 200
    body = res.json()
    assert body["response"] == pipeline.FALLBACK_RESPONSE
    assert body["context"] == "loan"
    _assert_timestamp(body["timestamp"])


def test_chat_empty_generation_is_unavailable(anonymous, monkeypatch):
    monkeypatch.setattr(pipeline, "generate_text", lambda prompt: "")
    res = client.post("/api/chat", json={"message": "Hi"})
    assert res.status_code == 200
    assert res.json()["response"] == pipeline.FALLBACK_RESPONSE
    assert res.json()["context"] == "general"


def test_chat_signed_in_uses_profile_and_persists(signed_in, monkeypatch):
    prompts = []
    monkeypatch.setattr(pipeline, "generate_text", lambda prompt: prompts.append(prompt) or "Start a SIP.")
    res = client.post(
        "/api/chat",
        json={"message": "Where do I start?", "context": "investment"},
        headers={"Authorization": "Bearer good-token"},
    )
    assert res.status_code == 200
    assert res.json()["response"] == "Start a SIP."
    assert "- Risk Tolerance: moderate" in prompts[0]
    # no request history, so stored exchanges fill the conversation context
    assert "User: stored q\nAssistant: stored a" in prompts[0]
    assert signed_in == [("user-1", "Where do I start?", "Start a SIP.", "investment", "good-token")]


def test_chat_collaborator_failures_are_swallowed(monkeypatch):
    def fail(*args, **kwargs):
        raise ConnectionError("supabase down")

    monkeypatch.setattr(pipeline, "resolve_user_id", lambda token: "user-1")
    monkeypatch.setattr(pipeline, "fetch_profile", fail)
    monkeypatch.setattr(pipeline, "fetch_recent_history", fail)
    monkeypatch.setattr(pipeline, "save_history", fail)
    monkeypatch.setattr(pipeline, "generate_text", lambda prompt: "Still here.")
    res = client.post("/api/chat", json={"message": "Hello"}, headers={"Authorization": "Bearer t"})
    assert res.status_code == 200
    assert res.json()["response"] == "Still here."


def test_handle_chat_outcomes(anonymous, monkeypatch):
    assert pipeline.handle_chat({"message": ""}).status == pipeline.ChatStatus.INVALID
    monkeypatch.setattr(pipeline, "generate_text", lambda prompt: "ok")
    outcome = pipeline.handle_chat({"message": "hi", "context": "nonsense"})
    assert outcome.status == pipeline.ChatStatus.OK
    assert outcome.context.value == "general"


def test_calculate_routes():
    res = client.post("/calculate/life", json=SAMPLE_LIFE_FORM)
    assert res.status_code == 200
    body = res.json()
    assert body["category"] == "life"
    assert body["result"]["type"] == "life"
    assert body["result"]["recommended_coverage"] == pytest.approx(249_100_000)

    assert client.post("/calculate/health", json={"age": "40"}).json() == {"category": "health", "result": None}
    assert client.post("/calculate/pet", json={}).status_code == 404
