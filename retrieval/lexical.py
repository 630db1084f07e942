import re
import string

from vector_store.models import ContentChunk

from .models import RetrievalHit

TITLE_WEIGHT = 1.0
CONTENT_WEIGHT = 0.8
PHRASE_WEIGHT = 0.6
WORD_WEIGHT = 0.3
SYNONYM_WEIGHT = 0.2
AI_BONUS = 0.4

MIN_WORD_CHARS = 3

SYNONYMS: dict[str, list[str]] = {
    "ai": ["artificial intelligence", "machine learning", "intelligence", "smart"],
    "intelligence": ["ai", "artificial", "smart", "cognitive", "brain"],
    "artificial": ["ai", "intelligence", "synthetic", "man-made"],
    "machine": ["computer", "automated", "system", "algorithm"],
    "learning": ["training", "education", "knowledge", "understanding"],
    "neural": ["brain", "network", "cognitive", "intelligence"],
    "network": ["system", "connection", "web", "structure"],
    "algorithm": ["method", "procedure", "process", "technique"],
    "data": ["information", "facts", "details", "content"],
    "model": ["system", "framework", "structure", "approach"],
}

AI_QUERY_TERMS = ["ai", "artificial intelligence", "machine learning", "neural", "algorithm", "data science"]
AI_CONTENT_TERMS = [
    "artificial intelligence",
    "machine learning",
    "neural network",
    "algorithm",
    "data",
    "intelligence",
    "learning",
]


# Whole-word match: "ai" does not fire inside "maintain" or "email".
def _term_pattern(terms: list[str]) -> re.Pattern:
    alternatives = "|".join(re.escape(term) for term in terms)
    return re.compile(rf"\b(?:{alternatives})\b")


_AI_QUERY = _term_pattern(AI_QUERY_TERMS)
_AI_CONTENT = _term_pattern(AI_CONTENT_TERMS)


def query_words(query: str) -> list[str]:
    words = []
    for raw in query.lower().split():
        word = raw.strip(string.punctuation)
        if len(word) >= MIN_WORD_CHARS:
            words.append(word)
    return words


def lexical_score(query: str, title: str, content: str) -> float:
    """
    Additive keyword relevance of one chunk.

    Title and content containment of the whole query, 2-word phrases, single
    words and their synonyms each add a fixed weight; an AI/ML vocabulary
    match on both sides adds a bonus. Substring matching, case-insensitive.
    """
    q = query.lower().strip()
    if not q:
        return 0.0
    title = title.lower()
    content = content.lower()

    score = 0.0
    if q in title:
        score += TITLE_WEIGHT
    if q in content:
        score += CONTENT_WEIGHT

    words = query_words(q)
    for first, second in zip(words, words[1:]):
        if f"{first} {second}" in content:
            score += PHRASE_WEIGHT

    for word in words:
        if word in content:
            score += WORD_WEIGHT
        for synonym in SYNONYMS.get(word, []):
            if synonym in content:
                score += SYNONYM_WEIGHT

    if _AI_QUERY.search(q) and _AI_CONTENT.search(content):
        score += AI_BONUS

    return score


def lexical_search(query: str, chunks: list[ContentChunk]) -> list[RetrievalHit]:
    """Score every chunk and keep those with a positive score (unsorted)."""
    hits = []
    for chunk in chunks:
        score = lexical_score(query, chunk.title, chunk.content)
        if score > 0:
            hits.append(RetrievalHit(chunk=chunk, relevance=score, source="lexical"))
    return hits
