"""
Chunking Module - Sentence-aware sliding window chunking for web content

Splits extracted page text into overlapping character windows that prefer to
end on a sentence boundary.

Quick Start:
    from chunking import TextChunker, ChunkingConfig

    chunker = TextChunker(ChunkingConfig(chunk_size=1000, chunk_overlap=200))
    for segment in chunker.segments(text):
        print(segment.start, segment.end, segment.text[:40])
"""

__version__ = "1.0.0"

from .chunker import TextChunker, chunk_text
from .models import ChunkingConfig, TextSegment
from .sentence_splitter import split_sentences

__all__ = [
    "__version__",
    "TextChunker",
    "chunk_text",
    "ChunkingConfig",
    "TextSegment",
    "split_sentences",
]
