"""Unit tests for the Ollama backend using a mocked HTTP transport."""

from __future__ import annotations

import json
import sys
import types

import httpx
import pytest

from summairpg.summarize.base import SummarizationError
from summairpg.summarize.ollama import OllamaClient
from summairpg.timestamps.models import Line, Word


def _lines() -> list[Line]:
    words = [
        Word(speaker_id="gm", text="The", start=0.0),
        Word(speaker_id="gm", text="dragon", start=0.4),
        Word(speaker_id="gm", text="wakes.", start=0.8),
    ]
    return [Line(speaker_id="gm", words=words)]


def _client(handler, model: str = "llama3:70b", **kwargs) -> OllamaClient:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return OllamaClient("ollama.local:11434", model, http_client=http, **kwargs)


def test_summarize_posts_chat_request() -> None:
    """The chat request carries both messages and the planned num_ctx."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"message": {"role": "assistant", "content": "A dragon."}})

    client = _client(handler)
    assert client.summarize(_lines()) == "A dragon."

    assert str(seen[0].url) == "http://ollama.local:11434/api/chat"
    body = json.loads(seen[0].content)
    assert body["model"] == "llama3:70b"
    assert body["stream"] is False
    assert body["options"] == {"num_ctx": 8192}
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert body["messages"][1]["content"] == "gm: The dragon wakes."


def test_context_length_override_sent_as_num_ctx() -> None:
    """A configured override replaces the table value."""
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"message": {"content": "ok"}})

    _client(handler, context_length_override=16000).summarize(_lines())
    assert bodies[0]["options"]["num_ctx"] == 16000


def test_elastic_model_raises_num_ctx() -> None:
    """An oversized prompt for an elastic model gets a larger num_ctx."""
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"message": {"content": "ok"}})

    client = _client(handler, model="llama3-gradient:8b", count=lambda _text: 10_000)
    client.summarize(_lines())
    # 2 messages * (3 + 3 * 10000) + 3 reply priming tokens, plus the reserve
    assert bodies[0]["options"]["num_ctx"] == 2 * (3 + 30_000) + 3 + 500


def test_error_status_raises() -> None:
    """Error statuses surface as SummarizationError with the status code."""

    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text='{"error":"model not found"}')

    with pytest.raises(SummarizationError) as excinfo:
        _client(handler).summarize(_lines())
    assert excinfo.value.status_code == 404
    assert "model not found" in excinfo.value.message


def test_transport_error_raises() -> None:
    """Connection problems are wrapped in SummarizationError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SummarizationError) as excinfo:
        _client(handler).summarize(_lines())
    assert excinfo.value.status_code is None


def test_undecodable_response_raises() -> None:
    """A response without a message is reported, not returned."""

    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"done": True})

    with pytest.raises(SummarizationError, match="decoding"):
        _client(handler).summarize(_lines())


def test_update_model_pulls() -> None:
    """update_model posts a non-streaming pull for the configured model."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "success"})

    _client(handler).update_model()

    assert seen[0].url.path == "/api/pull"
    assert json.loads(seen[0].content) == {"name": "llama3:70b", "insecure": False, "stream": False}


def test_default_counter_uses_tiktoken(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an explicit counter the installed tiktoken encoding is used."""

    class HugeEncoding:
        def encode(self, text: str, **_kwargs: object) -> list[int]:
            return [0] * (20_000 if text else 0)

    fake = types.ModuleType("tiktoken")
    fake.get_encoding = lambda _name: HugeEncoding()  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "tiktoken", fake)
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"message": {"content": "ok"}})

    _client(handler, model="llama3-gradient:8b").summarize(_lines())
    # role and content of both messages count 20000 each, names are empty
    assert bodies[0]["options"]["num_ctx"] == 2 * (3 + 40_000) + 3 + 500
