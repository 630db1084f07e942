"""
Token Counter for LLM context budgets

Chunks are sized in characters, but the generation step has to fit them into
a model's context window, which is measured in tokens. tiktoken's
cl100k_base encoding is used as the common approximation for every
provider.

Usage:
    from chunking.token_counter import count_tokens, truncate_to_tokens

    n = count_tokens("React is a JavaScript library.")
    head = truncate_to_tokens(long_text, 200)
"""

import tiktoken

# Loaded lazily, shared by all callers.
_encoder: tiktoken.Encoding | None = None


def _get_encoder() -> tiktoken.Encoding:
    global _encoder
    if _encoder is None:
        _encoder = tiktoken.get_encoding("cl100k_base")
    return _encoder


def count_tokens(text: str) -> int:
    """Number of cl100k_base tokens in text (0 for empty text)."""
    if not text:
        return 0
    return len(_get_encoder().encode(text))


def truncate_to_tokens(text: str, max_tokens: int) -> str:
    """
    Cut text to at most max_tokens tokens.

    Args:
        text: The text to shorten.
        max_tokens: Token budget; 0 or less returns an empty string.

    Returns:
        The longest token prefix of text that fits the budget.
    """
    if not text or max_tokens <= 0:
        return ""
    tokens = _get_encoder().encode(text)
    if len(tokens) <= max_tokens:
        return text
    return _get_encoder().decode(tokens[:max_tokens])
