"""Tests for the completion backend runner."""

from __future__ import annotations

import io
import json
from urllib.error import HTTPError, URLError

import pytest

from codesum.errors import ApiKeyError, AuthError, LLMError
from codesum.llm.runner import LLMRunner


def test_llm_runner_constructs_request() -> None:
    captured = {}

    def fake_runner(request):
        captured["prompt"] = request.prompt
        captured["system"] = request.system
        captured["model"] = request.model
        captured["temperature"] = request.temperature
        captured["max_tokens"] = request.max_tokens
        captured["base_url"] = request.base_url
        captured["api_key"] = request.api_key
        captured["request_timeout"] = request.request_timeout
        return "response"

    runner = LLMRunner(
        "secret",
        model="custom-model",
        base_url="http://localhost:8080/v1/",
        temperature=0.15,
        max_tokens=256,
        request_timeout=42.0,
        runner=fake_runner,
    )
    result = runner.run("Hello world", system="system message")

    assert result == "response"
    assert captured == {
        "prompt": "Hello world",
        "system": "system message",
        "model": "custom-model",
        "temperature": 0.15,
        "max_tokens": 256,
        "base_url": "http://localhost:8080/v1",
        "api_key": "secret",
        "request_timeout": 42.0,
    }


def test_llm_runner_defaults_to_gemini_endpoint() -> None:
    runner = LLMRunner("secret", runner=lambda request: "ok")

    assert runner.model == LLMRunner.DEFAULT_MODEL
    assert runner.base_url == LLMRunner.DEFAULT_BASE_URL


@pytest.mark.parametrize("api_key", [None, "", "   "])
def test_llm_runner_requires_api_key_at_construction(api_key) -> None:
    with pytest.raises(ApiKeyError):
        LLMRunner(api_key, runner=lambda request: "unused")


class FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def test_llm_runner_http_posts_payload(monkeypatch) -> None:
    captured = {}

    def fake_urlopen(request, timeout=None):
        captured["url"] = request.full_url
        captured["headers"] = {k.lower(): v for k, v in request.header_items()}
        captured["payload"] = json.loads(request.data.decode("utf-8"))
        captured["timeout"] = timeout
        body = {"choices": [{"message": {"content": "  Parses CLI arguments.  "}}]}
        return FakeResponse(json.dumps(body).encode("utf-8"))

    monkeypatch.setattr("codesum.llm.runner.urlopen", fake_urlopen)

    runner = LLMRunner(
        "remote-key",
        model="gemini-2.0-flash",
        base_url="https://example.test/v1beta/openai/",
        temperature=0.05,
        max_tokens=128,
        request_timeout=25.0,
    )
    result = runner.run("Summarize this.", system="Be terse.")

    assert result == "Parses CLI arguments."
    assert captured["url"] == "https://example.test/v1beta/openai/chat/completions"
    headers = captured["headers"]
    assert headers["content-type"] == "application/json"
    assert headers["authorization"] == "Bearer remote-key"
    payload = captured["payload"]
    assert payload["model"] == "gemini-2.0-flash"
    assert payload["messages"] == [
        {"role": "system", "content": "Be terse."},
        {"role": "user", "content": "Summarize this."},
    ]
    assert payload["temperature"] == 0.05
    assert payload["max_tokens"] == 128
    assert captured["timeout"] == 25.0


def test_llm_runner_rejects_invalid_json(monkeypatch) -> None:
    monkeypatch.setattr(
        "codesum.llm.runner.urlopen", lambda request, timeout=None: FakeResponse(b"not json")
    )
    runner = LLMRunner("key")

    with pytest.raises(LLMError):
        runner.run("prompt")


def test_llm_runner_rejects_empty_choices(monkeypatch) -> None:
    monkeypatch.setattr(
        "codesum.llm.runner.urlopen",
        lambda request, timeout=None: FakeResponse(json.dumps({"choices": []}).encode("utf-8")),
    )
    runner = LLMRunner("key")

    with pytest.raises(LLMError, match="empty response"):
        runner.run("prompt")


def test_llm_runner_maps_http_401_to_auth_error(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise HTTPError(request.full_url, 401, "Unauthorized", {}, io.BytesIO(b"bad key"))

    monkeypatch.setattr("codesum.llm.runner.urlopen", fake_urlopen)
    runner = LLMRunner("key")

    with pytest.raises(AuthError) as excinfo:
        runner.run("prompt")
    assert excinfo.value.context == {"status": 401, "model": LLMRunner.DEFAULT_MODEL}


def test_llm_runner_marks_rate_limits_retryable(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise HTTPError(request.full_url, 429, "Too Many Requests", {}, io.BytesIO(b"quota"))

    monkeypatch.setattr("codesum.llm.runner.urlopen", fake_urlopen)
    runner = LLMRunner("key")

    with pytest.raises(LLMError) as excinfo:
        runner.run("prompt")
    assert excinfo.value.is_retryable is True
    assert "quota" in excinfo.value.message


def test_llm_runner_wraps_transport_errors(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise URLError("connection refused")

    monkeypatch.setattr("codesum.llm.runner.urlopen", fake_urlopen)
    runner = LLMRunner("key")

    with pytest.raises(LLMError, match="connection refused"):
        runner.run("prompt")
