"""Query history: every answered question, newest first."""

import logging
from typing import Optional

from vector_store.embedder import Embedder
from vector_store.exceptions import EmbeddingError
from vector_store.models import QueryRecord, RecordKind
from vector_store.store import ContentStore

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


class QueryHistory:
    def __init__(self, store: ContentStore, embedder: Embedder, default_limit: int = DEFAULT_HISTORY_LIMIT):
        self.store = store
        self.embedder = embedder
        self.default_limit = default_limit

    def record(self, question: str, answer: str, sources: list[str]) -> QueryRecord:
        """
        Persist one question/answer pair.

        Source URLs are de-duplicated in order. A failing embedder leaves the
        record without a query embedding; a failing store write propagates.
        """
        unique_sources = list(dict.fromkeys(sources))

        query_embedding: list[float] = []
        if question.strip():
            try:
                query_embedding = self.embedder.embed(question)
            except EmbeddingError as e:
                logger.warning("Storing query without embedding: %s", e)

        record = QueryRecord(
            question=question,
            answer=answer,
            sources=unique_sources,
            query_embedding=query_embedding,
        )
        self.store.put_query(record)
        return record

    def recent(self, limit: Optional[int] = None) -> list[QueryRecord]:
        limit = self.default_limit if limit is None else limit
        if limit <= 0:
            return []
        records = self.store.get_all(RecordKind.QUERIES)
        records.sort(key=lambda record: (record.timestamp, record.id), reverse=True)
        return records[:limit]
