"""
Embedders - Text to fixed-length vector strategies

All embedders share one small interface (name, dimension, embed,
embed_batch) so the store and retriever never care where a vector came from.

Strategies:
- OpenAIEmbedder: OpenAI embeddings API (text-embedding-3-small, 1536 dims)
- OllamaEmbedder: Local Ollama embedding model
- HashEmbedder: Deterministic offline vectors derived from a string hash
- FallbackEmbedder: Primary provider with automatic HashEmbedder fallback

The HashEmbedder is not semantically meaningful. It exists so ingestion and
tests are reproducible without network access; retrieval therefore treats
lexical matches as the primary signal.

Usage:
    from vector_store.embedder import build_embedder

    embedder = build_embedder("auto", dimension=1536)
    vector = embedder.embed("React is a JavaScript library.")
"""

import logging
import os
from typing import Callable, Optional, Protocol, TypeVar, runtime_checkable

import numpy as np
import ollama
from openai import OpenAI, OpenAIError

from .exceptions import EmbeddingError
from .models import DEFAULT_VECTOR_DIMENSION

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_OPENAI_MODEL = "text-embedding-3-small"
DEFAULT_OLLAMA_MODEL = "nomic-embed-text"


@runtime_checkable
class Embedder(Protocol):
    """Anything that turns text into vectors of a fixed dimension."""

    name: str
    dimension: int

    def embed(self, text: str) -> list[float]: ...

    def embed_batch(self, texts: list[str]) -> list[list[float]]: ...


def _check_dimensions(vectors: list[list[float]], dimension: int, provider: str) -> None:
    for vector in vectors:
        if len(vector) != dimension:
            raise EmbeddingError(
                f"Expected {dimension}-dimensional embeddings, got {len(vector)}",
                provider=provider,
            )


def _reject_empty(texts: list[str], provider: str) -> None:
    if any(not text or not text.strip() for text in texts):
        raise EmbeddingError("Cannot embed empty text", provider=provider)


class OpenAIEmbedder:
    """
    Generates embeddings with the OpenAI embeddings API.

    Every failure (network, quota, auth, malformed response) is reported as
    EmbeddingError so callers can fall back.
    """

    name = "openai"

    def __init__(
        self,
        model: str = DEFAULT_OPENAI_MODEL,
        api_key: Optional[str] = None,
        dimension: int = DEFAULT_VECTOR_DIMENSION,
        timeout: float = 10.0,
        max_retries: int = 1,
    ):
        """
        Initialize the embedder.

        Args:
            model: OpenAI embedding model name.
            api_key: API key (defaults to OPENAI_API_KEY env var).
            dimension: Expected vector length.
            timeout: Request timeout in seconds.
            max_retries: Retries performed by the OpenAI client itself.
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OpenAI API key required. Set OPENAI_API_KEY environment variable.")

        self.model = model
        self.dimension = dimension
        self._client = OpenAI(api_key=self.api_key, timeout=timeout, max_retries=max_retries)

    def embed(self, text: str) -> list[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Embed several texts in one API call.

        Raises:
            EmbeddingError: On any provider failure or a wrong vector length.
        """
        if not texts:
            return []
        _reject_empty(texts, self.name)

        try:
            response = self._client.embeddings.create(
                model=self.model,
                input=texts,
                encoding_format="float",
            )
        except OpenAIError as e:
            raise EmbeddingError(
                f"OpenAI embedding failed for model '{self.model}'",
                provider=self.name,
                details=str(e),
            ) from e

        items = sorted(response.data, key=lambda item: item.index)
        vectors = [list(item.embedding) for item in items]
        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Requested {len(texts)} embeddings, received {len(vectors)}",
                provider=self.name,
            )
        _check_dimensions(vectors, self.dimension, self.name)
        return vectors


class OllamaEmbedder:
    """
    Generates text embeddings using a local Ollama model.

    The embedder connects to a running Ollama instance and uses a specified
    embedding model to convert text into dense vector representations.
    """

    name = "ollama"

    def __init__(
        self,
        model: str = DEFAULT_OLLAMA_MODEL,
        base_url: str = "http://localhost:11434",
        dimension: int = 768,
        timeout: float = 10.0,
    ):
        """
        Initialize the embedder.

        Args:
            model: Ollama model name for embeddings.
            base_url: Ollama API base URL.
            dimension: Expected vector length (nomic-embed-text: 768).
            timeout: Request timeout in seconds.
        """
        self.model = model
        self.base_url = base_url
        self.dimension = dimension
        self._client = ollama.Client(host=base_url, timeout=timeout)

    def embed(self, text: str) -> list[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Generate embeddings for multiple texts with Ollama's batch API.

        Raises:
            EmbeddingError: If Ollama is unreachable or returns bad vectors.
        """
        if not texts:
            return []
        _reject_empty(texts, self.name)

        try:
            response = self._client.embed(model=self.model, input=texts)
            vectors = [list(vector) for vector in response["embeddings"]]
        except ollama.ResponseError as e:
            raise EmbeddingError(
                f"Ollama embedding failed for model '{self.model}'",
                provider=self.name,
                details=str(e),
            ) from e
        except Exception as e:
            raise EmbeddingError(
                f"Cannot get embeddings from Ollama at {self.base_url}. Is Ollama running?",
                provider=self.name,
                details=str(e),
            ) from e

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Requested {len(texts)} embeddings, received {len(vectors)}",
                provider=self.name,
            )
        _check_dimensions(vectors, self.dimension, self.name)
        return vectors


def text_hash(text: str) -> int:
    """
    32-bit rolling string hash (h * 31 + char), as a signed integer.

    Independent of PYTHONHASHSEED, so vectors are stable across processes.
    """
    value = 0
    for char in text:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


class HashEmbedder:
    """
    Deterministic offline embedder.

    Each dimension i is sin(hash(text) + i) * 0.1, so identical text always
    yields the identical vector.
    """

    name = "hash"

    def __init__(self, dimension: int = DEFAULT_VECTOR_DIMENSION, scale: float = 0.1):
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self.dimension = dimension
        self.scale = scale
        self._offsets = np.arange(dimension, dtype=np.float64)

    def embed(self, text: str) -> list[float]:
        seed = text_hash(text or "")
        return (np.sin(seed + self._offsets) * self.scale).tolist()

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(text) for text in texts]


class FallbackEmbedder:
    """
    Uses a primary provider and falls back to a HashEmbedder on failure.

    The strategy is fixed at construction. After every call last_strategy
    names the embedder that actually produced the vectors.
    """

    def __init__(
        self,
        primary: Optional[Embedder] = None,
        fallback: Optional[HashEmbedder] = None,
        allow_fallback: bool = True,
        dimension: int = DEFAULT_VECTOR_DIMENSION,
    ):
        self.primary = primary
        self.fallback = fallback or HashEmbedder(dimension)
        self.allow_fallback = allow_fallback
        self.last_strategy: Optional[str] = None

        if primary is not None and primary.dimension != self.fallback.dimension:
            raise ValueError(
                f"Primary embedder dimension ({primary.dimension}) does not match "
                f"fallback dimension ({self.fallback.dimension})"
            )

    @property
    def name(self) -> str:
        return self.primary.name if self.primary is not None else self.fallback.name

    @property
    def dimension(self) -> int:
        return self.fallback.dimension

    @property
    def used_fallback(self) -> bool:
        return self.last_strategy == self.fallback.name

    def embed(self, text: str) -> list[float]:
        return self._run(lambda embedder: embedder.embed(text))

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        return self._run(lambda embedder: embedder.embed_batch(texts))

    def describe(self) -> dict[str, object]:
        return {
            "primary": self.primary.name if self.primary is not None else None,
            "fallback": self.fallback.name,
            "fallback_enabled": self.allow_fallback,
            "dimension": self.dimension,
            "last_strategy": self.last_strategy,
        }

    def _run(self, call: Callable[[Embedder], T]) -> T:
        if self.primary is not None:
            try:
                result = call(self.primary)
                self.last_strategy = self.primary.name
                return result
            except EmbeddingError as e:
                if not self.allow_fallback:
                    raise
                logger.warning(
                    "Embedding provider '%s' failed, using %s fallback: %s",
                    self.primary.name,
                    self.fallback.name,
                    e,
                )
        elif not self.allow_fallback:
            raise EmbeddingError("No embedding provider configured and fallback is disabled")

        result = call(self.fallback)
        self.last_strategy = self.fallback.name
        return result


def build_embedder(
    provider: str = "auto",
    dimension: int = DEFAULT_VECTOR_DIMENSION,
    model: str = "",
    api_key: Optional[str] = None,
    ollama_base_url: str = "http://localhost:11434",
    timeout: float = 10.0,
    allow_fallback: bool = True,
) -> FallbackEmbedder:
    """
    Select the embedding strategy once, from configuration.

    Args:
        provider: "auto" (OpenAI when an API key is available, else hash),
            "openai", "ollama" or "hash".
        dimension: Store-wide vector dimension.
        model: Provider model name ("" selects the provider default).
        api_key: OpenAI API key (defaults to OPENAI_API_KEY env var).
        ollama_base_url: Ollama API base URL.
        timeout: Provider request timeout in seconds.
        allow_fallback: Use HashEmbedder when the provider fails.

    Returns:
        A FallbackEmbedder wrapping the selected provider. A provider that
        is not configured (OpenAI without a key) leaves only the hash
        fallback.

    Raises:
        EmbeddingError: If the provider is not configured and fallback is off.
        ValueError: For an unknown provider name.
    """
    provider = (provider or "auto").lower()
    primary: Optional[Embedder] = None

    if provider == "auto":
        provider = "openai" if (api_key or os.getenv("OPENAI_API_KEY")) else "hash"

    if provider == "openai" and not (api_key or os.getenv("OPENAI_API_KEY")):
        if not allow_fallback:
            raise EmbeddingError(
                "OpenAI API key required and fallback is disabled",
                provider="openai",
                details="Set OPENAI_API_KEY",
            )
        logger.warning("OpenAI embeddings requested without OPENAI_API_KEY; using hash embeddings")
    elif provider == "openai":
        primary = OpenAIEmbedder(
            model=model or DEFAULT_OPENAI_MODEL,
            api_key=api_key,
            dimension=dimension,
            timeout=timeout,
        )
    elif provider == "ollama":
        primary = OllamaEmbedder(
            model=model or DEFAULT_OLLAMA_MODEL,
            base_url=ollama_base_url,
            dimension=dimension,
            timeout=timeout,
        )
    elif provider != "hash":
        raise ValueError(f"Unsupported embedding provider: {provider}")

    logger.info(
        "Embedding strategy: %s (dimension %d, fallback %s)",
        primary.name if primary else "hash",
        dimension,
        "on" if allow_fallback else "off",
    )
    return FallbackEmbedder(
        primary=primary,
        fallback=HashEmbedder(dimension),
        allow_fallback=allow_fallback,
        dimension=dimension,
    )
