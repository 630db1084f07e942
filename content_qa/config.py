"""
Application configuration.

AppConfig gathers every tunable of the service in one dataclass and derives
the per-package configs from it. from_env() reads a .env file (if present)
and then the process environment:

    CONTENT_QA_DATA_DIR            ChromaDB directory (default ./data/content_qa/chroma)
    CONTENT_QA_IN_MEMORY           "1"/"true" for an in-memory store
    CONTENT_QA_COLLECTION_PREFIX   Prefix for collection names
    CONTENT_QA_VECTOR_DIMENSION    Embedding dimension (default 1536)
    CONTENT_QA_EMBEDDING_PROVIDER  auto | openai | ollama | hash
    CONTENT_QA_EMBEDDING_MODEL     Provider model ("" = provider default)
    CONTENT_QA_EMBEDDING_TIMEOUT   Seconds (default 10)
    CONTENT_QA_EMBEDDING_FALLBACK  Use hash embeddings on provider failure
    CONTENT_QA_CHUNK_SIZE          Characters per chunk (default 1000)
    CONTENT_QA_CHUNK_OVERLAP       Overlap in characters (default 200)
    CONTENT_QA_FETCH_TIMEOUT       Seconds (default 10)
    CONTENT_QA_MOCK_FALLBACK       Use mock content when fetching fails
    CONTENT_QA_FUSION_MODE         prefer_lexical | weighted
    CONTENT_QA_FUSION_ALPHA        Lexical weight for weighted fusion
    CONTENT_QA_SEARCH_LIMIT        Default search limit (default 5)
    CONTENT_QA_ANSWER_LIMIT        Chunks used per answer (default 3)
    CONTENT_QA_HISTORY_LIMIT       Default history page size (default 50)
    CONTENT_QA_LOG_LEVEL           Logging level (default INFO)
    OPENAI_API_KEY, OLLAMA_BASE_URL, OLLAMA_MODEL, GENERATION_*
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from chunking.models import ChunkingConfig
from generation.config import GenerationConfig
from retrieval.config import RetrievalConfig
from vector_store.models import DEFAULT_VECTOR_DIMENSION, StoreConfig

_TRUE = {"1", "true", "yes", "on"}


def _bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUE


def _int(name: str, default: int) -> int:
    value = os.environ.get(name)
    return int(value) if value else default


def _float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value else default


@dataclass
class AppConfig:
    data_dir: str = "./data/content_qa/chroma"
    in_memory: bool = False
    collection_prefix: str = ""
    vector_dimension: int = DEFAULT_VECTOR_DIMENSION

    embedding_provider: str = "auto"
    embedding_model: str = ""
    embedding_timeout: float = 10.0
    embedding_fallback: bool = True
    openai_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    chunk_size: int = 1000
    chunk_overlap: int = 200

    fetch_timeout: float = 10.0
    mock_fallback: bool = True

    fusion_mode: str = "prefer_lexical"
    fusion_alpha: float = 0.5
    search_limit: int = 5
    answer_limit: int = 3
    history_limit: int = 50

    log_level: str = "INFO"

    generation: GenerationConfig = field(default_factory=GenerationConfig)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "AppConfig":
        load_dotenv(env_file)

        return cls(
            data_dir=os.environ.get("CONTENT_QA_DATA_DIR", cls.data_dir),
            in_memory=_bool("CONTENT_QA_IN_MEMORY", cls.in_memory),
            collection_prefix=os.environ.get("CONTENT_QA_COLLECTION_PREFIX", cls.collection_prefix),
            vector_dimension=_int("CONTENT_QA_VECTOR_DIMENSION", cls.vector_dimension),
            embedding_provider=os.environ.get("CONTENT_QA_EMBEDDING_PROVIDER", cls.embedding_provider),
            embedding_model=os.environ.get("CONTENT_QA_EMBEDDING_MODEL", cls.embedding_model),
            embedding_timeout=_float("CONTENT_QA_EMBEDDING_TIMEOUT", cls.embedding_timeout),
            embedding_fallback=_bool("CONTENT_QA_EMBEDDING_FALLBACK", cls.embedding_fallback),
            openai_api_key=os.environ.get("OPENAI_API_KEY", cls.openai_api_key),
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", cls.ollama_base_url),
            chunk_size=_int("CONTENT_QA_CHUNK_SIZE", cls.chunk_size),
            chunk_overlap=_int("CONTENT_QA_CHUNK_OVERLAP", cls.chunk_overlap),
            fetch_timeout=_float("CONTENT_QA_FETCH_TIMEOUT", cls.fetch_timeout),
            mock_fallback=_bool("CONTENT_QA_MOCK_FALLBACK", cls.mock_fallback),
            fusion_mode=os.environ.get("CONTENT_QA_FUSION_MODE", cls.fusion_mode),
            fusion_alpha=_float("CONTENT_QA_FUSION_ALPHA", cls.fusion_alpha),
            search_limit=_int("CONTENT_QA_SEARCH_LIMIT", cls.search_limit),
            answer_limit=_int("CONTENT_QA_ANSWER_LIMIT", cls.answer_limit),
            history_limit=_int("CONTENT_QA_HISTORY_LIMIT", cls.history_limit),
            log_level=os.environ.get("CONTENT_QA_LOG_LEVEL", cls.log_level),
            generation=GenerationConfig.from_env(),
        )

    def store_config(self) -> StoreConfig:
        return StoreConfig(
            persist_directory=self.data_dir,
            in_memory=self.in_memory,
            collection_prefix=self.collection_prefix,
            vector_dimension=self.vector_dimension,
        )

    def chunking_config(self) -> ChunkingConfig:
        return ChunkingConfig(chunk_size=self.chunk_size, chunk_overlap=self.chunk_overlap)

    def retrieval_config(self) -> RetrievalConfig:
        return RetrievalConfig(
            default_limit=self.search_limit,
            answer_limit=self.answer_limit,
            fusion_mode=self.fusion_mode,
            fusion_alpha=self.fusion_alpha,
        )

    def generation_config(self) -> GenerationConfig:
        return self.generation
