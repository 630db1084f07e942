"""
Ingestion - page text to stored, embedded chunks

Flow for one page:
    extract (URL only) -> chunk -> embed chunks (one batch call)
    -> embed document (title + leading text) -> ContentStore.put_content

Each call creates a new ContentItem; re-ingesting a URL never overwrites an
earlier item.
"""

import logging
from typing import Optional

from chunking import ChunkingConfig, TextChunker, TextSegment
from vector_store.embedder import Embedder
from vector_store.models import (
    ChunkMetadata,
    ContentChunk,
    ContentItem,
    make_chunk_id,
    new_content_id,
    utc_now_iso,
)
from vector_store.store import ContentStore

from .extractor import ContentExtractor, build_extractor, title_from_url

logger = logging.getLogger(__name__)

MAX_DOCUMENT_EMBED_CHARS = 8000


class Ingestor:
    """Builds ContentItems from URLs or raw text and writes them to the store."""

    def __init__(
        self,
        store: ContentStore,
        embedder: Embedder,
        chunker: Optional[TextChunker] = None,
        extractor: Optional[ContentExtractor] = None,
        max_document_chars: int = MAX_DOCUMENT_EMBED_CHARS,
    ):
        self.store = store
        self.embedder = embedder
        self.chunker = chunker or TextChunker(ChunkingConfig())
        self.extractor = extractor or build_extractor()
        self.max_document_chars = max_document_chars

    def ingest(self, url: str) -> ContentItem:
        """
        Fetch a URL and ingest its text.

        Raises:
            FetchError: Only when the extractor has mock fallback disabled.
            EmbeddingError: Only when the embedder has hash fallback disabled.
            StorageError: When the store write fails.
        """
        if not url or not url.strip():
            raise ValueError("url must not be empty")
        page = self.extractor.extract(url.strip())
        if page.is_mock:
            logger.warning("Ingesting mock content for %s", url)
        return self.ingest_text(page.url, page.title, page.text)

    def ingest_text(self, url: str, title: str, text: str) -> ContentItem:
        """
        Chunk, embed and store text that is already extracted.

        Args:
            url: Source URL recorded on the item and every chunk.
            title: Page title ("" derives one from the URL).
            text: Page text.

        Returns:
            The stored ContentItem, chunks included.
        """
        url = (url or "").strip()
        text = (text or "").strip()
        if not url:
            raise ValueError("url must not be empty")
        if not text:
            raise ValueError("text must not be empty")
        title = (title or "").strip() or title_from_url(url)

        content_id = new_content_id()
        segments = self.chunker.segments(text)
        if not segments:
            # Too short for the chunker's minimum: keep the whole text as one chunk.
            logger.debug("Storing %s as a single chunk (%d characters)", url, len(text))
            segments = [TextSegment(text=text, start=0, end=len(text), overlap=0)]

        vectors = self.embedder.embed_batch([segment.text for segment in segments])
        document_vector = self.embedder.embed(f"{title}\n\n{text[:self.max_document_chars]}")
        embedder_name = getattr(self.embedder, "last_strategy", None) or self.embedder.name

        now = utc_now_iso()
        chunks = [
            ContentChunk(
                id=make_chunk_id(content_id, index),
                content_id=content_id,
                url=url,
                title=title,
                content=segment.text,
                chunk_index=index,
                embedding=vector,
                metadata=ChunkMetadata(
                    chunk_size=len(segment.text),
                    overlap=segment.overlap,
                    created_at=now,
                ),
            )
            for index, (segment, vector) in enumerate(zip(segments, vectors))
        ]
        item = ContentItem(
            id=content_id,
            url=url,
            title=title,
            content=text,
            chunks=chunks,
            created_at=now,
            updated_at=now,
            total_chunks=len(chunks),
        )

        self.store.put_content(item, embedding=document_vector, embedder_name=embedder_name)
        logger.info("Ingested %s as %s (%d chunks, %s embeddings)", url, content_id, len(chunks), embedder_name)
        return item
