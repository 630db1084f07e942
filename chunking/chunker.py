"""
Text Chunker - Sentence-aware sliding window over raw page text

Splits the extracted text of a web page into overlapping segments that are
small enough to embed and cite individually.

Algorithm:
1. Take a window of chunk_size characters starting at the current position.
2. If the window does not reach the end of the text, look backwards for the
   last sentence terminator (., ! or ?) inside the window.
3. If that terminator lies beyond boundary_ratio of the window, cut right
   after it; otherwise cut at the raw window end.
4. The next window starts chunk_overlap characters before the cut.
5. Segments that are too short after stripping are dropped.

The scan is greedy and single-pass: an emitted segment is never revisited.

Usage:
    from chunking import TextChunker, ChunkingConfig

    chunker = TextChunker(ChunkingConfig(chunk_size=1000, chunk_overlap=200))
    texts = chunker.chunk(page_text)
"""

import logging
from typing import Optional

from .models import ChunkingConfig, TextSegment

logger = logging.getLogger(__name__)

_SENTENCE_TERMINATORS = ".!?"


class TextChunker:
    """
    Splits text into overlapping, sentence-aligned segments.
    """

    def __init__(self, config: Optional[ChunkingConfig] = None):
        self.config = config or ChunkingConfig()

    def chunk(self, text: str) -> list[str]:
        """
        Split text into chunk strings.

        Args:
            text: Raw text to split.

        Returns:
            Stripped, non-empty chunk texts in document order.
        """
        return [segment.text for segment in self.segments(text)]

    def segments(self, text: str) -> list[TextSegment]:
        """
        Split text into segments that remember their source span.

        Args:
            text: Raw text to split.

        Returns:
            TextSegment objects in document order.
        """
        if not text:
            return []

        size = self.config.chunk_size
        overlap = self.config.chunk_overlap
        length = len(text)

        segments: list[TextSegment] = []
        prev_end: Optional[int] = None
        start = 0

        while start < length:
            window_end = min(start + size, length)
            cut = window_end

            if window_end < length:
                window = text[start:window_end]
                last_break = max(window.rfind(char) for char in _SENTENCE_TERMINATORS)
                if last_break > size * self.config.boundary_ratio:
                    cut = start + last_break + 1

            piece = text[start:cut].strip()
            if len(piece) > self.config.min_chunk_chars:
                shared = max(0, prev_end - start) if prev_end is not None else 0
                segments.append(TextSegment(text=piece, start=start, end=cut, overlap=shared))
                prev_end = cut

            if cut >= length:
                break

            next_start = cut - overlap
            # Overlap as large as the window would stall the scan.
            if next_start <= start:
                next_start = cut
            start = next_start

        logger.debug("Chunked %d characters into %d segments", length, len(segments))
        return segments


def chunk_text(text: str, target_size: int = 1000, overlap: int = 200) -> list[str]:
    """Chunk text with the default boundary heuristics."""
    config = ChunkingConfig(chunk_size=target_size, chunk_overlap=overlap)
    return TextChunker(config).chunk(text)
