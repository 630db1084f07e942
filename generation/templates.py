"""Template answers built directly from retrieved chunks.

Used when no LLM provider is configured, or when the provider fails. The
answer points the user at the best-matching source and, for explanatory
questions, quotes the sentence of that chunk that best overlaps with the
question.
"""

from __future__ import annotations

import re
import string
from typing import Optional

from chunking.sentence_splitter import split_sentences
from retrieval.models import RetrievalHit

NO_INFO_ANSWER = (
    "I don't have enough information to answer your question. Please try ingesting "
    "some content first by adding URLs, then ask again."
)

ANSWER_PREFIX = "Based on the available content, "

EXPLAIN_WORDS = {"what", "how", "why"}
LOCATE_WORDS = {"when", "where"}

# Contractions split at the apostrophe: "what's" yields "what".
_WORD = re.compile(r"[a-z]+")


def classify_question(question: str) -> str:
    """Return "explain", "locate" or "general" from the question words."""
    words = set(_WORD.findall(question.lower()))
    if words & EXPLAIN_WORDS:
        return "explain"
    if words & LOCATE_WORDS:
        return "locate"
    return "general"


def _snippet_words(question: str) -> list[str]:
    words = []
    for raw in question.lower().split():
        word = raw.strip(string.punctuation)
        if len(word) > 3:
            words.append(word)
    return words


def extract_snippet(question: str, content: str, max_chars: int = 150) -> Optional[str]:
    """
    First sentence of content that contains at least min(2, n) of the
    question's longer words, cut to max_chars ("..." appended when cut).
    """
    words = _snippet_words(question)
    required = min(2, len(words))

    for sentence in split_sentences(content, min_chars=20):
        lowered = sentence.lower()
        matches = sum(1 for word in words if word in lowered)
        if matches >= required:
            if len(sentence) > max_chars:
                return sentence[:max_chars] + "..."
            return sentence
    return None


def synthesize_answer(question: str, hits: list[RetrievalHit], snippet_chars: int = 150) -> str:
    if not hits:
        return NO_INFO_ANSWER

    top = hits[0]
    chunk = top.chunk
    kind = classify_question(question)

    if kind == "explain":
        answer = (
            ANSWER_PREFIX
            + "I found information that might help answer your question. "
            + f'The most relevant content is from "{chunk.title}" (chunk {chunk.chunk_index + 1}) '
            + "which discusses related topics. "
        )
        snippet = extract_snippet(question, chunk.content, snippet_chars)
        if snippet:
            answer += f'Here\'s what I found: "{snippet}" '
        return answer + "You can find more details at the source URL."

    if kind == "locate":
        return (
            ANSWER_PREFIX
            + "the information you're looking for appears to be covered in the content from "
            + f'"{chunk.title}". Please refer to the source for specific details.'
        )

    answer = (
        ANSWER_PREFIX
        + "I have some relevant information from multiple sources. "
        + f'The top result is from "{chunk.title}" with a relevance score of {top.relevance:.2f}. '
    )
    if len(hits) > 1:
        answer += f"I also found {len(hits) - 1} other relevant chunks. "
    return answer + "You can explore the sources below for more detailed information."
