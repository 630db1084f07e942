"""
Retrieval component for the content Q&A engine.

Keyword scoring, cosine similarity and result fusion over stored chunks,
behind one never-failing search API.
"""

__version__ = "1.0.0"

from .config import RetrievalConfig
from .hybrid import prefer_lexical, rank, weighted_merge
from .lexical import lexical_score, lexical_search
from .models import RetrievalHit, SearchRequest
from .service import Retriever
from .similarity import cosine_similarity, vector_search

__all__ = [
    "__version__",
    "RetrievalConfig",
    "Retriever",
    "RetrievalHit",
    "SearchRequest",
    "lexical_score",
    "lexical_search",
    "cosine_similarity",
    "vector_search",
    "prefer_lexical",
    "weighted_merge",
    "rank",
]
