"""Tests for the exception hierarchies of vector_store and content_qa."""

import pytest

from content_qa.exceptions import ContentQAError, FetchError
from vector_store.exceptions import (
    EmbeddingError,
    NotFoundError,
    ProviderError,
    StorageError,
    VectorStoreError,
)


class TestVectorStoreErrors:
    def test_message_with_details(self):
        error = VectorStoreError("Something broke", details="disk full")

        assert error.message == "Something broke"
        assert error.details == "disk full"
        assert str(error) == "Something broke | Details: disk full"

    def test_storage_error_operation(self):
        error = StorageError("Store is closed", operation="put_content")

        assert error.operation == "put_content"
        assert str(error) == "Store is closed [put_content]"

    def test_not_found(self):
        error = NotFoundError("content_1", kind="chunks")
        assert str(error) == "No chunks record with id 'content_1'"

    def test_embedding_error_provider(self):
        error = EmbeddingError("quota exceeded", provider="openai", details="429")

        assert error.provider == "openai"
        assert str(error) == "quota exceeded [openai] | Details: 429"

    @pytest.mark.parametrize("error", [
        StorageError(),
        NotFoundError("x"),
        ProviderError(),
        EmbeddingError(),
    ])
    def test_hierarchy(self, error):
        assert isinstance(error, VectorStoreError)

    def test_embedding_is_provider_error(self):
        assert issubclass(EmbeddingError, ProviderError)


class TestContentQAErrors:
    def test_fetch_error(self):
        error = FetchError("https://a.example", "HTTP 404")

        assert isinstance(error, ContentQAError)
        assert error.url == "https://a.example"
        assert str(error) == "HTTP 404: https://a.example"

    def test_fetch_error_default_message(self):
        error = FetchError("https://a.example", details="timed out")
        assert str(error) == "Failed to fetch content: https://a.example | Details: timed out"

    def test_store_errors_reexported(self):
        from content_qa import exceptions

        assert exceptions.StorageError is StorageError
        assert exceptions.EmbeddingError is EmbeddingError
