"""
Custom Exceptions for the Vector Store.

Exception Hierarchy:
    VectorStoreError (base)
    ├── StorageError
    ├── NotFoundError
    └── ProviderError
        └── EmbeddingError

Usage:
    from vector_store.exceptions import StorageError, EmbeddingError

    try:
        store.put_content(item)
    except StorageError as e:
        print(f"Write failed: {e}")
"""

from __future__ import annotations

from typing import Optional


class VectorStoreError(Exception):
    """
    Base exception for all vector store errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A vector store error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class StorageError(VectorStoreError):
    """
    Raised when the persistence layer fails (closed handle, engine error,
    rejected write).

    Attributes:
        operation: Store operation that failed (e.g. "put_content")
    """

    def __init__(
        self,
        message: str = "Storage error",
        operation: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.operation = operation
        if operation:
            message = f"{message} [{operation}]"
        super().__init__(message, details)


class NotFoundError(VectorStoreError):
    """
    Raised when an operation needs a record that does not exist.

    Attributes:
        record_id: ID that was looked up
        kind: Record kind ("content", "chunks", ...)
    """

    def __init__(self, record_id: str, kind: str = "content"):
        self.record_id = record_id
        self.kind = kind
        super().__init__(f"No {kind} record with id '{record_id}'")


class ProviderError(VectorStoreError):
    """
    Base class for failures of an external provider (network, quota, auth).

    Attributes:
        provider: Name of the provider that failed
    """

    def __init__(
        self,
        message: str = "Provider error",
        provider: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.provider = provider
        if provider:
            message = f"{message} [{provider}]"
        super().__init__(message, details)


class EmbeddingError(ProviderError):
    """Raised when an embedding provider cannot produce a valid vector."""

    def __init__(
        self,
        message: str = "Embedding failed",
        provider: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message, provider=provider, details=details)
