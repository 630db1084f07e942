"""
Pytest fixtures for the content Q&A tests.
"""

import logging
import uuid

import chromadb
import pytest

from content_qa import AppConfig, ContentQAService
from content_qa.extractor import MockContentExtractor
from content_qa.logging_config import PACKAGE_LOGGERS
from vector_store import ContentStore, FallbackEmbedder, StoreConfig
from vector_store.models import ChunkMetadata, ContentChunk, ContentItem, make_chunk_id

DIMENSION = 16


def unique_prefix() -> str:
    return f"t{uuid.uuid4().hex[:8]}_"


def make_chunk(
    content: str,
    content_id: str = "content_1",
    index: int = 0,
    title: str = "Example Page",
    url: str = "https://example.com/page",
    embedding: list[float] | None = None,
) -> ContentChunk:
    return ContentChunk(
        id=make_chunk_id(content_id, index),
        content_id=content_id,
        url=url,
        title=title,
        content=content,
        chunk_index=index,
        embedding=embedding if embedding is not None else [],
        metadata=ChunkMetadata(chunk_size=len(content)),
    )


def make_item(
    content_id: str = "content_1",
    texts: list[str] | None = None,
    url: str = "https://example.com/page",
    title: str = "Example Page",
    created_at: str = "2024-01-01T00:00:00+00:00",
    embedding: list[float] | None = None,
) -> ContentItem:
    """A ContentItem with one chunk per text."""
    if texts is None:
        texts = ["First chunk about React components.", "Second chunk about hooks and state."]
    chunks = [
        ContentChunk(
            id=make_chunk_id(content_id, index),
            content_id=content_id,
            url=url,
            title=title,
            content=text,
            chunk_index=index,
            embedding=list(embedding) if embedding is not None else [0.1] * DIMENSION,
            metadata=ChunkMetadata(chunk_size=len(text), overlap=0, created_at=created_at),
        )
        for index, text in enumerate(texts)
    ]
    return ContentItem(
        id=content_id,
        url=url,
        title=title,
        content=" ".join(texts),
        chunks=chunks,
        created_at=created_at,
        updated_at=created_at,
        total_chunks=len(chunks),
    )


@pytest.fixture(autouse=True)
def reset_package_loggers():
    """Undo setup_logging() so caplog sees every package logger again."""
    yield
    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


@pytest.fixture
def chroma_client():
    """Process-wide in-memory ChromaDB client (isolate with unique prefixes)."""
    return chromadb.EphemeralClient()


@pytest.fixture
def store_config():
    return StoreConfig(in_memory=True, collection_prefix=unique_prefix(), vector_dimension=DIMENSION)


@pytest.fixture
def store(chroma_client, store_config):
    """An isolated ContentStore, closed after the test."""
    content_store = ContentStore(store_config, chroma_client=chroma_client)
    yield content_store
    content_store.close()


@pytest.fixture
def embedder():
    """Offline deterministic embedder of the test dimension."""
    return FallbackEmbedder(dimension=DIMENSION)


@pytest.fixture
def app_config():
    return AppConfig(
        in_memory=True,
        collection_prefix=unique_prefix(),
        vector_dimension=DIMENSION,
        embedding_provider="hash",
    )


@pytest.fixture
def service(chroma_client, app_config):
    """A ContentQAService with hash embeddings, mock content and template answers."""
    qa_service = ContentQAService.from_config(
        app_config,
        chroma_client=chroma_client,
        extractor=MockContentExtractor(),
    )
    yield qa_service
    qa_service.close()
