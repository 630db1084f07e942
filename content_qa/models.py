"""Request and response models of the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from retrieval.models import RetrievalHit


class IngestUrlRequest(BaseModel):
    url: str = Field(..., min_length=1)


class IngestTextRequest(BaseModel):
    url: str = Field(..., min_length=1)
    title: str = ""
    text: str = Field(..., min_length=1)


class IngestResponse(BaseModel):
    id: str
    url: str
    title: str
    total_chunks: int


class SearchResult(BaseModel):
    """A search hit without the chunk's embedding."""
    chunk_id: str
    content_id: str
    url: str
    title: str
    chunk_index: int
    content: str
    relevance: float
    source: str

    @classmethod
    def from_hit(cls, hit: RetrievalHit) -> "SearchResult":
        chunk = hit.chunk
        return cls(
            chunk_id=chunk.id,
            content_id=chunk.content_id,
            url=chunk.url,
            title=chunk.title,
            chunk_index=chunk.chunk_index,
            content=chunk.content,
            relevance=hit.relevance,
            source=hit.source,
        )


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResult] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    id: str
    deleted: bool


class HistoryEntry(BaseModel):
    id: str
    question: str
    answer: str
    timestamp: str
    sources: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    issues: list[str] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)
