"""
Sentence Splitter for chunk snippets

Splits chunk text at runs of sentence-ending punctuation (.!?). This is a
deliberately coarse splitter: it is used to pick a quotable sentence out of
an already retrieved chunk, not to decide chunk boundaries.

Usage:
    from chunking.sentence_splitter import split_sentences

    split_sentences("React is a library for UIs. It builds on small components!")
    # ["React is a library for UIs", "It builds on small components"]
"""

import re

_TERMINATOR_RUN = re.compile(r"[.!?]+")


def split_sentences(text: str, min_chars: int = 20) -> list[str]:
    """
    Split text into sentences without their terminators.

    Args:
        text: Input text.
        min_chars: Sentences with this many stripped characters or fewer
            are dropped (headings, list bullets, stray abbreviations).

    Returns:
        Stripped sentences in order. Empty input returns an empty list.
    """
    if not text or not text.strip():
        return []

    sentences = []
    for part in _TERMINATOR_RUN.split(text):
        stripped = part.strip()
        if len(stripped) > min_chars:
            sentences.append(stripped)
    return sentences
