from .models import RetrievalHit


def rank(hits: list[RetrievalHit]) -> list[RetrievalHit]:
    """Descending relevance, ties broken by chunk id."""
    return sorted(hits, key=lambda hit: (-hit.relevance, hit.chunk.id))


def prefer_lexical(
    lexical_hits: list[RetrievalHit],
    vector_hits: list[RetrievalHit],
    limit: int,
    vector_relevance: float = 0.5,
) -> list[RetrievalHit]:
    """
    Lexical hits when there are any; otherwise the top vector hits, ordered
    by cosine similarity and reported with a flat relevance.
    """
    if lexical_hits:
        return rank(lexical_hits)[:limit]

    top_vector = rank(vector_hits)[:limit]
    return [
        RetrievalHit(chunk=hit.chunk, relevance=vector_relevance, source="vector")
        for hit in top_vector
    ]


def weighted_merge(
    lexical_hits: list[RetrievalHit],
    vector_hits: list[RetrievalHit],
    limit: int,
    alpha: float = 0.5,
) -> list[RetrievalHit]:
    """
    alpha * normalized lexical score + (1 - alpha) * max(cosine, 0).

    Lexical scores are divided by the best lexical score so both signals
    live in [0, 1]. Chunks scoring 0 on both signals are dropped.
    """
    max_lexical = max((hit.relevance for hit in lexical_hits), default=0.0)
    lexical = {
        hit.chunk.id: hit.relevance / max_lexical for hit in lexical_hits
    } if max_lexical > 0 else {}
    vector = {hit.chunk.id: max(hit.relevance, 0.0) for hit in vector_hits}

    chunks = {hit.chunk.id: hit.chunk for hit in vector_hits}
    chunks.update({hit.chunk.id: hit.chunk for hit in lexical_hits})

    merged: list[RetrievalHit] = []
    for chunk_id, chunk in chunks.items():
        score = alpha * lexical.get(chunk_id, 0.0) + (1 - alpha) * vector.get(chunk_id, 0.0)
        if score > 0:
            merged.append(RetrievalHit(chunk=chunk, relevance=score, source="hybrid"))
    return rank(merged)[:limit]
