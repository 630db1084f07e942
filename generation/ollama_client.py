from __future__ import annotations

import json
from typing import Any
from urllib import request
from urllib.error import HTTPError, URLError

from .prompts import RESPONSE_SCHEMA


def post_json(url: str, payload: dict, timeout: float = 60.0) -> dict[str, Any]:
    """POST a JSON body and decode the JSON reply."""
    req = request.Request(
        url,
        data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with request.urlopen(req, timeout=timeout) as resp:
            return json.loads(resp.read().decode("utf-8"))
    except HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace") if exc.fp else ""
        raise RuntimeError(f"HTTP {exc.code} calling {url}: {body}") from exc
    except URLError as exc:
        raise ConnectionError(f"Cannot reach {url}: {exc.reason}") from exc


class OllamaChatClient:
    """Chat completion against a local Ollama server, constrained to the answer schema."""

    name = "ollama"

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1:latest",
        temperature: float = 0.2,
        output_tokens: int = 512,
        timeout: float = 60.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.output_tokens = output_tokens
        self.timeout = timeout

    def build_payload(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "stream": False,
            "format": RESPONSE_SCHEMA,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "options": {"temperature": self.temperature, "num_predict": self.output_tokens},
        }

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Raw message content of one non-streaming chat call.

        Raises:
            RuntimeError: On an HTTP error status.
            ConnectionError: When the server cannot be reached.
        """
        reply = post_json(
            f"{self.base_url}/api/chat",
            self.build_payload(system_prompt, user_prompt),
            timeout=self.timeout,
        )
        message = reply.get("message") or {}
        return message.get("content", "")
