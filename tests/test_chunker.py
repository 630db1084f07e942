"""Tests for chunking.chunker - TextChunker and chunk_text."""

import pytest
from pydantic import ValidationError

from chunking import ChunkingConfig, TextChunker, chunk_text


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

SENTENCE = "React lets you build user interfaces out of individual pieces called components. "


def _long_text(sentences: int = 40) -> str:
    return SENTENCE * sentences


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestBasicChunking:
    def test_empty_text(self):
        assert chunk_text("") == []

    def test_short_text_single_chunk(self):
        text = "React is a JavaScript library. It uses components to build interfaces."
        chunks = chunk_text(text)

        assert chunks == [text]

    def test_tiny_text_dropped(self):
        """Segments of 50 stripped characters or fewer are discarded."""
        assert chunk_text("Too short to keep.") == []
        assert chunk_text("x" * 50) == []
        assert chunk_text("x" * 51) == ["x" * 51]

    def test_whitespace_is_stripped(self):
        text = "   " + "A sentence that is long enough to be kept as a chunk on its own." + "   "
        assert chunk_text(text) == [text.strip()]

    def test_long_text_multiple_chunks(self):
        chunks = chunk_text(_long_text(), target_size=1000, overlap=200)

        assert len(chunks) > 1
        for chunk in chunks:
            assert len(chunk) <= 1000
            assert len(chunk) > 50


class TestBoundaries:
    def test_cuts_after_sentence_end(self):
        chunks = chunk_text(_long_text(), target_size=1000, overlap=200)

        for chunk in chunks[:-1]:
            assert chunk.endswith(".")

    def test_early_sentence_end_ignored(self):
        """A terminator inside the first 70% of the window is not used as cut point."""
        text = "Short intro sentence here. " + "y" * 300
        chunker = TextChunker(ChunkingConfig(chunk_size=100, chunk_overlap=0))
        segments = chunker.segments(text)

        assert segments[0].end == 100

    def test_late_sentence_end_used(self):
        text = "z" * 80 + ". " + "w" * 200
        chunker = TextChunker(ChunkingConfig(chunk_size=100, chunk_overlap=0))
        segments = chunker.segments(text)

        assert segments[0].end == 81
        assert segments[0].text.endswith(".")

    def test_coverage_of_source_text(self):
        """Every character of the text lies inside some emitted window."""
        text = _long_text(30)
        chunker = TextChunker(ChunkingConfig(chunk_size=300, chunk_overlap=60))
        segments = chunker.segments(text)

        assert segments[0].start == 0
        assert segments[-1].end == len(text)
        for previous, current in zip(segments, segments[1:]):
            assert current.start <= previous.end


class TestOverlap:
    def test_first_segment_has_no_overlap(self):
        segments = TextChunker().segments(_long_text())
        assert segments[0].overlap == 0

    def test_following_segments_overlap(self):
        chunker = TextChunker(ChunkingConfig(chunk_size=500, chunk_overlap=100))
        segments = chunker.segments(_long_text())

        assert len(segments) > 2
        for segment in segments[1:]:
            assert segment.overlap == 100

    def test_overlap_text_repeated(self):
        chunker = TextChunker(ChunkingConfig(chunk_size=500, chunk_overlap=100))
        text = "abcdefghij" * 200
        segments = chunker.segments(text)

        first, second = segments[0], segments[1]
        assert text[second.start:first.end] == first.text[-100:]

    def test_overlap_not_smaller_than_size_still_progresses(self):
        chunker = TextChunker(ChunkingConfig(chunk_size=100, chunk_overlap=150, min_chunk_chars=10))
        text = "q" * 1000
        segments = chunker.segments(text)

        assert len(segments) == 10
        starts = [segment.start for segment in segments]
        assert starts == sorted(set(starts))

    def test_overlap_equal_to_size(self):
        chunker = TextChunker(ChunkingConfig(chunk_size=100, chunk_overlap=100, min_chunk_chars=10))
        segments = chunker.segments("q" * 450)

        assert [segment.end for segment in segments] == [100, 200, 300, 400, 450]


class TestConfig:
    def test_defaults(self):
        config = ChunkingConfig()
        assert config.chunk_size == 1000
        assert config.chunk_overlap == 200
        assert config.boundary_ratio == 0.7
        assert config.min_chunk_chars == 50

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValidationError):
            ChunkingConfig(chunk_size=0)

    def test_rejects_negative_overlap(self):
        with pytest.raises(ValidationError):
            ChunkingConfig(chunk_overlap=-1)

    def test_rejects_min_chars_above_size(self):
        with pytest.raises(ValueError):
            ChunkingConfig(chunk_size=40, min_chunk_chars=50)

    def test_chunk_matches_segments(self):
        chunker = TextChunker()
        text = _long_text()
        assert chunker.chunk(text) == [segment.text for segment in chunker.segments(text)]
