"""Source citations for an answer.

Every retrieved hit becomes one citation, in retrieval order, with a short
prefix of the chunk text as its snippet.
"""

from __future__ import annotations

from retrieval.models import RetrievalHit

from .models import SourceCitation


def build_citations(hits: list[RetrievalHit], snippet_chars: int = 200) -> list[SourceCitation]:
    citations: list[SourceCitation] = []
    for hit in hits:
        chunk = hit.chunk
        text = chunk.content.strip()
        snippet = text[:snippet_chars] + "..." if len(text) > snippet_chars else text
        citations.append(
            SourceCitation(
                url=chunk.url,
                title=chunk.title,
                relevance=round(hit.relevance, 4),
                content_snippet=snippet,
                chunk_index=chunk.chunk_index,
                chunk_id=chunk.id,
                content_id=chunk.content_id,
            )
        )
    return citations


def unique_source_urls(citations: list[SourceCitation]) -> list[str]:
    """Source URLs in citation order without duplicates."""
    seen: set[str] = set()
    urls: list[str] = []
    for citation in citations:
        if citation.url not in seen:
            seen.add(citation.url)
            urls.append(citation.url)
    return urls
