import logging
from typing import Optional

from vector_store.embedder import Embedder
from vector_store.models import RecordKind
from vector_store.store import ContentStore

from .config import RetrievalConfig
from .hybrid import prefer_lexical, weighted_merge
from .lexical import lexical_search
from .models import RetrievalHit
from .similarity import vector_search

logger = logging.getLogger(__name__)


class Retriever:
    """
    Hybrid chunk search over a ContentStore.

    search() never raises: an empty query, an empty store or any internal
    failure yields an empty list.
    """

    def __init__(
        self,
        store: ContentStore,
        embedder: Embedder,
        config: Optional[RetrievalConfig] = None,
    ):
        self.store = store
        self.embedder = embedder
        self.config = config or RetrievalConfig()

    def search(self, query: str, limit: Optional[int] = None) -> list[RetrievalHit]:
        """At most limit hits (default_limit when None); [] for a blank query or limit < 1."""
        if not query or not query.strip():
            return []
        if limit is None:
            limit = self.config.default_limit
        if limit < 1:
            return []

        try:
            chunks = self.store.get_all(RecordKind.CHUNKS)
            if not chunks:
                return []

            lexical_hits = lexical_search(query, chunks)
            if self.config.fusion_mode == "prefer_lexical" and lexical_hits:
                return prefer_lexical(lexical_hits, [], limit)

            query_embedding = self.embedder.embed(query)
            vector_hits = vector_search(query_embedding, chunks)

            if self.config.fusion_mode == "weighted":
                return weighted_merge(lexical_hits, vector_hits, limit, self.config.fusion_alpha)
            return prefer_lexical([], vector_hits, limit, self.config.vector_default_relevance)
        except Exception:
            logger.exception("Search failed for query %r", query)
            return []
