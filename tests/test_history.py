"""Tests for content_qa.history - QueryHistory."""

import pytest

from conftest import DIMENSION
from content_qa.history import QueryHistory
from vector_store.exceptions import EmbeddingError, StorageError
from vector_store.models import QueryRecord, RecordKind


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

class BrokenEmbedder:
    name = "broken"
    dimension = DIMENSION

    def embed(self, text):
        raise EmbeddingError("provider down", provider=self.name)

    def embed_batch(self, texts):
        raise EmbeddingError("provider down", provider=self.name)


@pytest.fixture
def history(store, embedder):
    return QueryHistory(store, embedder)


def _query(question: str, timestamp: str) -> QueryRecord:
    return QueryRecord(question=question, answer="answer", timestamp=timestamp)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestRecord:
    def test_persists_record(self, history, store):
        record = history.record("What is React?", "A UI library.", ["https://react.dev"])

        assert store.count(RecordKind.QUERIES) == 1
        stored, = store.get_all(RecordKind.QUERIES)
        assert stored.id == record.id
        assert stored.question == "What is React?"
        assert stored.answer == "A UI library."
        assert stored.sources == ["https://react.dev"]
        assert len(stored.query_embedding) == DIMENSION

    def test_deduplicates_sources_in_order(self, history):
        record = history.record("q", "a", ["https://b.example", "https://a.example", "https://b.example"])
        assert record.sources == ["https://b.example", "https://a.example"]

    def test_embedding_failure_tolerated(self, store, caplog):
        record = QueryHistory(store, BrokenEmbedder()).record("What is React?", "a", [])

        assert record.query_embedding == []
        assert store.count(RecordKind.QUERIES) == 1
        assert "without embedding" in caplog.text

    def test_storage_failure_propagates(self, history, store):
        store.close()
        with pytest.raises(StorageError):
            history.record("q", "a", [])


class TestRecent:
    def test_newest_first(self, history, store):
        store.put_query(_query("first", "2024-01-01T00:00:00+00:00"))
        store.put_query(_query("third", "2024-03-01T00:00:00+00:00"))
        store.put_query(_query("second", "2024-02-01T00:00:00+00:00"))

        assert [record.question for record in history.recent()] == ["third", "second", "first"]

    def test_limit(self, history, store):
        for month in range(1, 6):
            store.put_query(_query(f"q{month}", f"2024-0{month}-01T00:00:00+00:00"))

        assert [record.question for record in history.recent(2)] == ["q5", "q4"]

    def test_default_limit(self, store, embedder):
        history = QueryHistory(store, embedder, default_limit=1)
        store.put_query(_query("old", "2024-01-01T00:00:00+00:00"))
        store.put_query(_query("new", "2024-06-01T00:00:00+00:00"))

        assert [record.question for record in history.recent()] == ["new"]

    @pytest.mark.parametrize("limit", [0, -3])
    def test_non_positive_limit(self, history, store, limit):
        store.put_query(_query("q", "2024-01-01T00:00:00+00:00"))
        assert history.recent(limit) == []

    def test_empty(self, history):
        assert history.recent() == []
