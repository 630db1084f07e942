"""Tests for generation.ollama_client and generation.openai_client."""

import io
import json
from urllib.error import HTTPError, URLError

import httpx
import pytest
from unittest.mock import MagicMock, patch
from openai import APIConnectionError, OpenAIError

from generation.ollama_client import OllamaChatClient, post_json
from generation.openai_client import OpenAIChatClient
from generation.prompts import RESPONSE_SCHEMA


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _http_response(payload: dict) -> MagicMock:
    response = MagicMock()
    response.read.return_value = json.dumps(payload).encode("utf-8")
    response.__enter__.return_value = response
    return response


@pytest.fixture
def urlopen():
    with patch("generation.ollama_client.request.urlopen") as mock_urlopen:
        yield mock_urlopen


@pytest.fixture
def openai_client():
    with patch("generation.openai_client.OpenAI") as MockOpenAI:
        yield MockOpenAI.return_value


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestPostJson:
    def test_success(self, urlopen):
        urlopen.return_value = _http_response({"ok": True})

        assert post_json("http://localhost:11434/api/chat", {"x": 1}, timeout=5) == {"ok": True}
        request, = urlopen.call_args.args
        assert request.get_method() == "POST"
        assert json.loads(request.data) == {"x": 1}
        assert urlopen.call_args.kwargs["timeout"] == 5

    def test_http_error(self, urlopen):
        urlopen.side_effect = HTTPError(
            "http://localhost:11434/api/chat", 500, "Server Error", {}, io.BytesIO(b"model crashed")
        )
        with pytest.raises(RuntimeError, match="HTTP 500.*model crashed"):
            post_json("http://localhost:11434/api/chat", {})

    def test_unreachable(self, urlopen):
        urlopen.side_effect = URLError("Connection refused")
        with pytest.raises(ConnectionError, match="Cannot reach"):
            post_json("http://localhost:11434/api/chat", {})


class TestOllamaChatClient:
    def test_complete(self, urlopen):
        urlopen.return_value = _http_response({"message": {"content": '{"answer": "hi"}'}})
        client = OllamaChatClient(base_url="http://ollama:11434/", model="llama3.2", output_tokens=128)

        assert client.complete("system", "user") == '{"answer": "hi"}'

        request, = urlopen.call_args.args
        assert request.full_url == "http://ollama:11434/api/chat"
        payload = json.loads(request.data)
        assert payload["model"] == "llama3.2"
        assert payload["stream"] is False
        assert payload["format"] == RESPONSE_SCHEMA
        assert payload["options"]["num_predict"] == 128
        assert payload["messages"][0] == {"role": "system", "content": "system"}

    def test_missing_message(self, urlopen):
        urlopen.return_value = _http_response({})
        assert OllamaChatClient().complete("s", "u") == ""


class TestOpenAIChatClient:
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ValueError, match="API key"):
            OpenAIChatClient()

    def test_complete(self, openai_client):
        message = MagicMock(content='{"answer": "React is a library."}')
        openai_client.chat.completions.create.return_value = MagicMock(choices=[MagicMock(message=message)])

        client = OpenAIChatClient(api_key="sk-test", model="gpt-4o-mini")
        assert client.complete("system", "user") == '{"answer": "React is a library."}'

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["response_format"] == {"type": "json_object"}

    def test_no_choices(self, openai_client):
        openai_client.chat.completions.create.return_value = MagicMock(choices=[])
        assert OpenAIChatClient(api_key="sk-test").complete("s", "u") == ""

    def test_connection_error(self, openai_client):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        openai_client.chat.completions.create.side_effect = APIConnectionError(request=request)

        with pytest.raises(ConnectionError):
            OpenAIChatClient(api_key="sk-test").complete("s", "u")

    def test_api_error(self, openai_client):
        openai_client.chat.completions.create.side_effect = OpenAIError("invalid model")

        with pytest.raises(RuntimeError, match="invalid model"):
            OpenAIChatClient(api_key="sk-test").complete("s", "u")
