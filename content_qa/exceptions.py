"""
Custom Exceptions for the Content Q&A service.

Exception Hierarchy:
    ContentQAError (base)
    └── FetchError

Store and provider failures keep their own hierarchy (vector_store.exceptions)
and are re-exported here so callers can import every error from one place.

Usage:
    from content_qa.exceptions import FetchError, StorageError

    try:
        service.ingest("https://example.com/article")
    except FetchError as e:
        print(f"Could not fetch {e.url}: {e}")
    except StorageError as e:
        print(f"Could not save content: {e}")
"""

from __future__ import annotations

from typing import Optional

from vector_store.exceptions import (
    EmbeddingError,
    NotFoundError,
    ProviderError,
    StorageError,
    VectorStoreError,
)


class ContentQAError(Exception):
    """
    Base exception for service-level errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A content Q&A error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class FetchError(ContentQAError):
    """
    Raised when a page cannot be fetched or yields too little text.

    Attributes:
        url: The URL that was requested
    """

    def __init__(
        self,
        url: str,
        message: str = "Failed to fetch content",
        details: Optional[str] = None,
    ):
        self.url = url
        super().__init__(f"{message}: {url}", details)


__all__ = [
    "ContentQAError",
    "FetchError",
    "VectorStoreError",
    "StorageError",
    "NotFoundError",
    "ProviderError",
    "EmbeddingError",
]
