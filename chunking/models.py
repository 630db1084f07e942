"""
Data Models for the Chunking Pipeline

Defines:
1. ChunkingConfig - Window size, overlap and boundary heuristics
2. TextSegment - A single chunk of text with its position in the source

Design Principles:
- Pydantic v2 for validation (consistent with vector_store and retrieval)
- Sizes are measured in characters, not tokens, so chunking stays
  independent of any tokenizer or embedding model

Usage:
    config = ChunkingConfig(chunk_size=800, chunk_overlap=100)
    segments = TextChunker(config).segments(text)
"""

from typing import Any

from pydantic import BaseModel, Field


class ChunkingConfig(BaseModel):
    """
    Configuration for the chunking pipeline.

    Defaults match the web-page ingestion pipeline: ~1000 character windows
    with 200 characters carried over between consecutive chunks.
    """
    chunk_size: int = Field(
        1000,
        description="Target window size in characters",
        gt=0,
    )
    chunk_overlap: int = Field(
        200,
        description="Characters repeated from the end of the previous chunk",
        ge=0,
    )
    boundary_ratio: float = Field(
        0.7,
        description="A sentence end is only used as a cut point beyond this share of the window",
        ge=0.0,
        le=1.0,
    )
    min_chunk_chars: int = Field(
        50,
        description="Segments with this many stripped characters or fewer are dropped",
        ge=0,
    )

    def model_post_init(self, __context: Any) -> None:
        if self.min_chunk_chars >= self.chunk_size:
            raise ValueError(
                f"min_chunk_chars ({self.min_chunk_chars}) must be less than "
                f"chunk_size ({self.chunk_size})"
            )


class TextSegment(BaseModel):
    """A chunk of text plus the span it was cut from."""
    text: str = Field(
        ...,
        description="Stripped chunk text",
        min_length=1,
    )
    start: int = Field(
        ...,
        description="Start offset of the window in the source text",
        ge=0,
    )
    end: int = Field(
        ...,
        description="End offset (exclusive) of the window in the source text",
        ge=0,
    )
    overlap: int = Field(
        0,
        description="Characters shared with the previous emitted segment",
        ge=0,
    )

    @property
    def size(self) -> int:
        return len(self.text)
