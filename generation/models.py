from typing import Literal

from pydantic import BaseModel, Field

AnswerMode = Literal["llm", "template", "no_results"]


class AskRequest(BaseModel):
    question: str = Field(..., min_length=1)


class SourceCitation(BaseModel):
    url: str
    title: str
    relevance: float
    content_snippet: str = ""
    chunk_index: int
    chunk_id: str
    content_id: str


class QAResponse(BaseModel):
    answer: str
    sources: list[SourceCitation] = Field(default_factory=list)
    total_chunks_considered: int = 0
    mode: AnswerMode = "template"
