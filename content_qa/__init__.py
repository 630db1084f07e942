"""
Content Q&A - Ask questions about web pages you have saved

Ingests page text, splits it into overlapping chunks, embeds and stores
them in a local ChromaDB database, and answers questions with cited sources
using hybrid keyword/vector retrieval.

Quick Start:
    from content_qa import AppConfig, ContentQAService

    with ContentQAService.from_config(AppConfig.from_env()) as service:
        service.ingest("https://react.dev/learn")
        response = service.answer_question("What is React?")
        print(response.answer)

HTTP API:
    uvicorn --factory content_qa.app:create_app

CLI:
    content-qa ask "What is React?"
"""

__version__ = "1.0.0"

from .config import AppConfig
from .exceptions import (
    ContentQAError,
    EmbeddingError,
    FetchError,
    NotFoundError,
    ProviderError,
    StorageError,
    VectorStoreError,
)
from .extractor import (
    ExtractedContent,
    FallbackContentExtractor,
    HttpContentExtractor,
    MockContentExtractor,
)
from .history import QueryHistory
from .ingestion import Ingestor
from .logging_config import setup_logging
from .service import ContentQAService

__all__ = [
    "__version__",
    "AppConfig",
    "ContentQAService",
    "Ingestor",
    "QueryHistory",
    "ExtractedContent",
    "HttpContentExtractor",
    "MockContentExtractor",
    "FallbackContentExtractor",
    "setup_logging",
    "ContentQAError",
    "FetchError",
    "VectorStoreError",
    "StorageError",
    "NotFoundError",
    "ProviderError",
    "EmbeddingError",
]
