from __future__ import annotations

from dataclasses import dataclass, field

from chunking.token_counter import count_tokens, truncate_to_tokens
from retrieval.models import RetrievalHit


@dataclass
class ContextBuildResult:
    context_text: str
    selected_hits: list[RetrievalHit] = field(default_factory=list)
    available_tokens: int = 0
    used_tokens: int = 0


def chunk_block(hit: RetrievalHit) -> str:
    chunk = hit.chunk
    return f"Source: {chunk.title} ({chunk.url})\nContent: {chunk.content.strip()}"


def build_context(
    question: str,
    hits: list[RetrievalHit],
    max_context_tokens: int,
    system_prompt: str,
    user_template: str,
) -> ContextBuildResult:
    """
    Concatenate hit blocks in ranking order until the token budget is spent.

    The budget is what remains of max_context_tokens after the system prompt
    and the empty user prompt. When not even the first block fits, a
    truncated prefix of it is used so the model always sees some context.
    """
    system_tokens = count_tokens(system_prompt)
    base_tokens = count_tokens(user_template.format(question=question, context=""))
    available = max(max_context_tokens - system_tokens - base_tokens, 0)

    parts: list[str] = []
    selected: list[RetrievalHit] = []
    used = 0

    for hit in hits:
        block = chunk_block(hit)
        block_tokens = count_tokens(block)
        separator = 2 if parts else 0
        if block_tokens + separator <= available:
            parts.append(block)
            selected.append(hit)
            available -= block_tokens + separator
            used += block_tokens + separator
            continue

        if not parts and available > 0:
            prefix = truncate_to_tokens(block, available)
            parts.append(prefix)
            selected.append(hit)
            used += count_tokens(prefix)
            available = 0
        break

    return ContextBuildResult(
        context_text="\n\n".join(parts).strip(),
        selected_hits=selected,
        available_tokens=available,
        used_tokens=used,
    )
