"""
Content Q&A Service - the public facade

Wires the pipeline stages together:

    ingest:  Extractor -> Chunker -> Embedder -> ContentStore
    ask:     Retriever(ContentStore, Embedder) -> Answerer -> QueryHistory

Usage:
    from content_qa import AppConfig, ContentQAService

    with ContentQAService.from_config(AppConfig(in_memory=True)) as service:
        service.ingest_text("https://react.dev/learn", "React", text)
        response = service.answer_question("What is React?")
        print(response.answer)
        for source in response.sources:
            print(source.title, source.relevance)
"""

import logging
from typing import Any, Optional

from chunking import TextChunker
from generation import Answerer, QAResponse
from generation.service import ChatClient
from retrieval import RetrievalConfig, RetrievalHit, Retriever
from vector_store import ContentStore, build_embedder
from vector_store.embedder import Embedder
from vector_store.models import ContentItem, HealthReport, QueryRecord, RecordKind, StoreStats

from .config import AppConfig
from .extractor import ContentExtractor, build_extractor
from .history import QueryHistory
from .ingestion import Ingestor

logger = logging.getLogger(__name__)


class ContentQAService:
    """
    Ingest web content and answer questions about it.

    Construct explicitly (or with from_config) and close when done; the
    service owns its store.
    """

    def __init__(
        self,
        store: ContentStore,
        embedder: Embedder,
        ingestor: Optional[Ingestor] = None,
        retriever: Optional[Retriever] = None,
        answerer: Optional[Answerer] = None,
        history: Optional[QueryHistory] = None,
        retrieval_config: Optional[RetrievalConfig] = None,
    ):
        if embedder.dimension != store.config.vector_dimension:
            raise ValueError(
                f"Embedder dimension ({embedder.dimension}) does not match "
                f"store dimension ({store.config.vector_dimension})"
            )
        self.store = store
        self.embedder = embedder
        self.retrieval_config = retrieval_config or RetrievalConfig()
        self.ingestor = ingestor or Ingestor(store, embedder)
        self.retriever = retriever or Retriever(store, embedder, self.retrieval_config)
        self.answerer = answerer or Answerer()
        self.history = history or QueryHistory(store, embedder)

    @classmethod
    def from_config(
        cls,
        config: Optional[AppConfig] = None,
        chroma_client: Optional[Any] = None,
        extractor: Optional[ContentExtractor] = None,
        chat_client: Optional[ChatClient] = None,
    ) -> "ContentQAService":
        """
        Build every component from one AppConfig.

        Args:
            config: Application config (AppConfig.from_env() if omitted).
            chroma_client: Optional pre-created ChromaDB client (for testing).
            extractor: Optional content extractor replacing the HTTP one.
            chat_client: Optional LLM client replacing the configured one.
        """
        config = config or AppConfig.from_env()

        embedder = build_embedder(
            provider=config.embedding_provider,
            dimension=config.vector_dimension,
            model=config.embedding_model,
            api_key=config.openai_api_key or None,
            ollama_base_url=config.ollama_base_url,
            timeout=config.embedding_timeout,
            allow_fallback=config.embedding_fallback,
        )
        store = ContentStore(config.store_config(), chroma_client=chroma_client)
        retrieval_config = config.retrieval_config()

        ingestor = Ingestor(
            store,
            embedder,
            chunker=TextChunker(config.chunking_config()),
            extractor=extractor or build_extractor(config.fetch_timeout, config.mock_fallback),
        )
        return cls(
            store=store,
            embedder=embedder,
            ingestor=ingestor,
            retriever=Retriever(store, embedder, retrieval_config),
            answerer=Answerer(config.generation_config(), chat_client=chat_client),
            history=QueryHistory(store, embedder, default_limit=config.history_limit),
            retrieval_config=retrieval_config,
        )

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest(self, url: str) -> ContentItem:
        return self.ingestor.ingest(url)

    def ingest_text(self, url: str, title: str, text: str) -> ContentItem:
        return self.ingestor.ingest_text(url, title, text)

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------

    def search(self, query: str, limit: Optional[int] = None) -> list[RetrievalHit]:
        """Ranked chunks for a query. Never raises; failures yield []."""
        return self.retriever.search(query, limit)

    def answer_question(self, question: str) -> QAResponse:
        """
        Answer a question from the stored content and record it in history.

        Raises:
            ValueError: If the question is empty.
            StorageError: If the history entry cannot be written.
        """
        question = (question or "").strip()
        if not question:
            raise ValueError("question must not be empty")

        hits = self.retriever.search(question, self.retrieval_config.answer_limit)
        response = self.answerer.answer(question, hits)
        self.history.record(question, response.answer, [source.url for source in response.sources])
        logger.info("Answered %r from %d chunks (%s)", question, len(hits), response.mode)
        return response

    def query_history(self, limit: Optional[int] = None) -> list[QueryRecord]:
        return self.history.recent(limit)

    # ------------------------------------------------------------------
    # Management
    # ------------------------------------------------------------------

    def list_content(self) -> list[ContentItem]:
        """Every stored item, newest first."""
        items = self.store.get_all(RecordKind.CONTENT)
        return sorted(items, key=lambda item: (item.created_at, item.id), reverse=True)

    def get_content(self, content_id: str) -> Optional[ContentItem]:
        return self.store.get_content(content_id)

    def delete_content(self, content_id: str) -> bool:
        """Delete an item with its chunks. False if it did not exist."""
        if not self.store.has_content(content_id):
            return False
        self.store.delete_content_cascade(content_id)
        return True

    def clear_all(self) -> None:
        self.store.clear_all()

    def stats(self) -> StoreStats:
        return self.store.stats()

    def health(self) -> HealthReport:
        report = self.store.health()
        describe = getattr(self.embedder, "describe", None)
        report.details["embedder"] = describe() if describe else {"name": self.embedder.name}
        chat_client = self.answerer.chat_client
        report.details["generation"] = chat_client.name if chat_client is not None else "template"
        return report

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> "ContentQAService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
