from typing import Literal

from pydantic import BaseModel, Field

from vector_store.models import ContentChunk

HitSource = Literal["lexical", "vector", "hybrid"]


class RetrievalHit(BaseModel):
    chunk: ContentChunk
    relevance: float
    source: HitSource = "lexical"

    @property
    def chunk_id(self) -> str:
        return self.chunk.id


class SearchRequest(BaseModel):
    query: str = ""
    limit: int = Field(5, ge=1, le=50)

