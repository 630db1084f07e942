"""
OpenAI chat client for answer generation.

Maps SDK failures onto the builtin exceptions the Answerer retries on:
connection problems and timeouts become ConnectionError, every other API
failure becomes RuntimeError.
"""

from __future__ import annotations

import os
from typing import Optional

from openai import APIConnectionError, OpenAI, OpenAIError


class OpenAIChatClient:
    name = "openai"

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        temperature: float = 0.2,
        output_tokens: int = 512,
        timeout: float = 60.0,
    ):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OpenAI API key required. Set OPENAI_API_KEY environment variable.")

        self.model = model
        self.temperature = temperature
        self.output_tokens = output_tokens
        # Retries are driven by the Answerer.
        self._client = OpenAI(api_key=self.api_key, timeout=timeout, max_retries=0)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=self.output_tokens,
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except APIConnectionError as e:
            raise ConnectionError(f"Cannot reach OpenAI: {e}") from e
        except OpenAIError as e:
            raise RuntimeError(f"OpenAI chat failed for model '{self.model}': {e}") from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
