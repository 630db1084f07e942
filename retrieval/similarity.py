from typing import Sequence

import numpy as np

from vector_store.models import ContentChunk

from .models import RetrievalHit


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """dot(a, b) / (|a| * |b|); 0.0 for empty, zero-norm or mismatched vectors."""
    if len(a) == 0 or len(a) != len(b):
        return 0.0
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)
    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))


def vector_search(query_embedding: Sequence[float], chunks: list[ContentChunk]) -> list[RetrievalHit]:
    """Cosine similarity of every chunk with an embedding (linear scan, unsorted)."""
    return [
        RetrievalHit(
            chunk=chunk,
            relevance=cosine_similarity(query_embedding, chunk.embedding),
            source="vector",
        )
        for chunk in chunks
        if chunk.embedding
    ]
