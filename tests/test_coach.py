import requests

from irontrack import coach


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def test_ask_coach_returns_model_text(monkeypatch):
    calls = {}

    def fake_post(url, params=None, json=None, timeout=None):
        calls.update(url=url, params=params, body=json, timeout=timeout)
        return FakeResponse({"candidates": [{"content": {"parts": [{"text": "Desça devagar."}]}}]})

    monkeypatch.setattr(coach.requests, "post", fake_post)
    answer = coach.ask_coach("Como faço supino?", "Treino: A. Exercícios: Supino.", api_key="k", model="m")

    assert answer == "Desça devagar."
    assert calls["url"].endswith("/models/m:generateContent")
    assert calls["params"] == {"key": "k"}
    prompt = calls["body"]["contents"][0]["parts"][0]["text"]
    assert "Treino: A. Exercícios: Supino." in prompt
    assert "Como faço supino?" in prompt


def test_ask_coach_failure_is_apology(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(coach.requests, "post", boom)
    assert coach.ask_coach("q", "ctx", api_key="k") == coach.FAILURE_ANSWER

    monkeypatch.setattr(coach.requests, "post", lambda *a, **kw: FakeResponse({}, status=500))
    assert coach.ask_coach("q", "ctx", api_key="k") == coach.FAILURE_ANSWER


def test_ask_coach_without_key_does_not_call(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("should not be called")

    monkeypatch.setattr(coach.requests, "post", fail)
    assert coach.ask_coach("q", "ctx", api_key="") == coach.FAILURE_ANSWER


def test_ask_coach_empty_answer(monkeypatch):
    monkeypatch.setattr(coach.requests, "post", lambda *a, **kw: FakeResponse({"candidates": []}))
    assert coach.ask_coach("q", "ctx", api_key="k") == coach.EMPTY_ANSWER


def test_chat_drops_stale_answers():
    chat = coach.CoachChat()
    first = chat.ask("primeira")
    second = chat.ask("segunda")
    assert chat.answer(first, "velha") is False
    assert chat.answer(second, "nova") is True
    assert [m["text"] for m in chat.messages] == ["primeira", "segunda", "nova"]

    restored = coach.CoachChat.from_dict(chat.to_dict())
    assert restored.ask("terceira") == second + 1
