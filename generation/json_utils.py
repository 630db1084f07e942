"""JSON parsing helpers for model output.

Chat models sometimes wrap the requested JSON object in prose or code fences.
parse_json_object pulls out the first balanced {...} block and parses it.
"""

from __future__ import annotations

import json
from typing import Any


def first_json_object(text: str) -> str:
    """Return the first balanced {...} block, or the text unchanged."""
    start = text.find("{")
    if start < 0:
        return text

    depth = 0
    for i in range(start, len(text)):
        if text[i] == "{":
            depth += 1
        elif text[i] == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return text


def parse_json_object(text: str) -> dict[str, Any]:
    """Parse a model response into a dict; {} when nothing parses."""
    if not text:
        return {}
    for candidate in (text, first_json_object(text)):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    return {}
