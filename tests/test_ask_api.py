import pytest

from app.services.assistant import NO_REPLY, SYSTEM_PROMPT, assistant_service, extract_reply

API = "/api/v1"


@pytest.fixture
def assistant(monkeypatch):
    """Record prompts and answer with a canned reply"""
    prompts = []

    async def fake_ask(prompt):
        prompts.append(prompt)
        return "Never share your OTP with anyone."

    monkeypatch.setattr(assistant_service, "ask", fake_ask)
    return prompts


def test_ask_returns_answer(client, assistant):
    response = client.post(f"{API}/ask/", json={"prompt": "  Is this SMS from my bank real?  "})

    assert response.status_code == 200
    assert response.json() == {"answer": "Never share your OTP with anyone."}
    assert assistant == ["Is this SMS from my bank real?"]


@pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   "}])
def test_ask_requires_prompt(client, assistant, body):
    response = client.post(f"{API}/ask/", json=body)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert assistant == []


def test_ask_without_provider_key_is_upstream_error(client, monkeypatch):
    monkeypatch.setattr(assistant_service, "api_key", None)

    response = client.post(f"{API}/ask/", json={"prompt": "What is a romance scam?"})

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "UPSTREAM_ERROR"


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"choices": []},
        {"choices": [{"message": {"content": ""}}]},
        {"choices": [{"message": None}]},
    ],
)
def test_empty_provider_reply(body):
    assert extract_reply(body) == NO_REPLY


def test_provider_reply_content():
    body = {"choices": [{"message": {"role": "assistant", "content": "Hang up and call back."}}]}

    assert extract_reply(body) == "Hang up and call back."


def test_system_prompt_keeps_scope():
    assert SYSTEM_PROMPT.startswith("You are AwareGuard AI")
    assert "designed only for scam awareness" in SYSTEM_PROMPT
