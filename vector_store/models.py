"""
Data Models for the Vector Store

Defines:
1. StoreConfig - Where and how records are persisted
2. ContentItem / ContentChunk / ChunkMetadata - Ingested pages and their chunks
3. QueryRecord - One answered question (append-only history)
4. StoreStats / HealthReport - Management views of the store
5. RecordKind - The four persisted collections

Design Principles:
- Pydantic v2 for validation and JSON serialization
- A ContentItem owns its chunks; chunks point back via content_id only
- Embeddings are plain float lists of a single, store-wide dimension
"""

import time
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

DEFAULT_VECTOR_DIMENSION = 1536


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def _time_prefixed_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def new_content_id() -> str:
    return _time_prefixed_id("content")


def new_query_id() -> str:
    return _time_prefixed_id("query")


def make_chunk_id(content_id: str, chunk_index: int) -> str:
    """Chunk IDs sort in chunk order within one content item."""
    return f"{content_id}_chunk_{chunk_index:04d}"


class RecordKind(str, Enum):
    """The logical collections of the store."""
    CONTENT = "content"
    CHUNKS = "chunks"
    QUERIES = "queries"
    EMBEDDINGS = "embeddings"


class StoreConfig(BaseModel):
    """Configuration for the content store."""
    persist_directory: str = Field(
        "./data/content_qa/chroma",
        description="Directory for ChromaDB persistent storage",
    )
    in_memory: bool = Field(
        False,
        description="Use an ephemeral in-process ChromaDB instead of disk",
    )
    collection_prefix: str = Field(
        "",
        description="Prefix for all collection names (isolates stores sharing one client)",
    )
    vector_dimension: int = Field(
        DEFAULT_VECTOR_DIMENSION,
        description="Length of every stored embedding",
        gt=0,
    )
    batch_size: int = Field(
        500,
        description="Maximum records per ChromaDB write call",
        gt=0,
    )

    def collection_name(self, kind: RecordKind) -> str:
        return f"{self.collection_prefix}{kind.value}"


class ChunkMetadata(BaseModel):
    """Bookkeeping attached to every chunk."""
    chunk_size: int = Field(
        ...,
        description="Length of the chunk text in characters",
        ge=0,
    )
    overlap: int = Field(
        0,
        description="Characters shared with the previous chunk (0 for the first)",
        ge=0,
    )
    created_at: str = Field(
        default_factory=utc_now_iso,
        description="Creation timestamp (ISO-8601, UTC)",
    )


class ContentChunk(BaseModel):
    """
    A retrievable slice of an ingested page.

    url and title are copied from the parent so search results can be
    displayed without loading the ContentItem.
    """
    id: str = Field(
        ...,
        description="Unique chunk ID (format: {content_id}_chunk_{index:04d})",
    )
    content_id: str = Field(
        ...,
        description="ID of the owning ContentItem",
    )
    url: str
    title: str
    content: str = Field(
        ...,
        description="Chunk text",
        min_length=1,
    )
    chunk_index: int = Field(
        ...,
        description="Position within the parent (0-based)",
        ge=0,
    )
    embedding: list[float] = Field(
        default_factory=list,
        description="Embedding vector of the chunk text",
    )
    metadata: ChunkMetadata


class ContentItem(BaseModel):
    """An ingested page with all of its chunks."""
    id: str
    url: str
    title: str
    content: str
    chunks: list[ContentChunk] = Field(default_factory=list)
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)
    total_chunks: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_chunks(self) -> "ContentItem":
        if self.total_chunks != len(self.chunks):
            raise ValueError(
                f"total_chunks ({self.total_chunks}) does not match "
                f"the number of chunks ({len(self.chunks)})"
            )
        indices = [chunk.chunk_index for chunk in self.chunks]
        if indices != list(range(len(self.chunks))):
            raise ValueError(f"chunk indices must be contiguous from 0, got {indices}")
        for chunk in self.chunks:
            if chunk.content_id != self.id:
                raise ValueError(f"chunk {chunk.id} belongs to {chunk.content_id}, not {self.id}")
        return self

    def summary(self) -> dict[str, Any]:
        """Item fields without chunk bodies or embeddings."""
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "total_chunks": self.total_chunks,
            "content_length": len(self.content),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class QueryRecord(BaseModel):
    """One answered question. Never updated after it is written."""
    id: str = Field(default_factory=new_query_id)
    question: str
    answer: str
    timestamp: str = Field(default_factory=utc_now_iso)
    sources: list[str] = Field(default_factory=list)
    query_embedding: list[float] = Field(default_factory=list)


class StoreStats(BaseModel):
    """Counts and size of the persisted data."""
    total_content: int = 0
    total_chunks: int = 0
    total_queries: int = 0
    storage_size_bytes: int = 0
    vector_dimension: int = DEFAULT_VECTOR_DIMENSION


class HealthReport(BaseModel):
    """Result of a store health check. Problems are listed, never raised."""
    healthy: bool
    issues: list[str] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_issues(cls, issues: list[str], details: Optional[dict[str, Any]] = None) -> "HealthReport":
        return cls(healthy=not issues, issues=issues, details=details or {})
