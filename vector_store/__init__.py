"""
Vector Store Module - ChromaDB persistence and embedding strategies

Stores ingested pages, their chunks, document embeddings and the query
history in a local ChromaDB database.

Quick Start:
    from vector_store import ContentStore, StoreConfig, build_embedder

    embedder = build_embedder("hash")
    with ContentStore(StoreConfig(in_memory=True)) as store:
        store.put_content(item, embedding=embedder.embed(item.content))
        print(store.stats())
"""

__version__ = "1.0.0"

from .embedder import (
    Embedder,
    FallbackEmbedder,
    HashEmbedder,
    OllamaEmbedder,
    OpenAIEmbedder,
    build_embedder,
)
from .exceptions import (
    EmbeddingError,
    NotFoundError,
    ProviderError,
    StorageError,
    VectorStoreError,
)
from .models import (
    ChunkMetadata,
    ContentChunk,
    ContentItem,
    HealthReport,
    QueryRecord,
    RecordKind,
    StoreConfig,
    StoreStats,
)
from .store import ContentStore

__all__ = [
    "__version__",
    "ContentStore",
    "StoreConfig",
    "RecordKind",
    "ContentItem",
    "ContentChunk",
    "ChunkMetadata",
    "QueryRecord",
    "StoreStats",
    "HealthReport",
    "Embedder",
    "OpenAIEmbedder",
    "OllamaEmbedder",
    "HashEmbedder",
    "FallbackEmbedder",
    "build_embedder",
    "VectorStoreError",
    "StorageError",
    "NotFoundError",
    "ProviderError",
    "EmbeddingError",
]
