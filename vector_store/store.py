"""
Content Store - ChromaDB-backed persistence for content, chunks and queries

Manages four collections in one ChromaDB client:
- content:    one record per ingested page (full text + page metadata)
- chunks:     one record per chunk, with its embedding and content_id
- embeddings: one document-level embedding per page (keyed by content_id)
- queries:    append-only question/answer history

Design:
- PersistentClient for on-disk storage, EphemeralClient for in-memory use
- Every record carries a vector of the store-wide dimension; missing
  vectors are stored as zero vectors
- Writes are serialized with a re-entrant lock, reads are lock-free
- put_content writes a page and all of its chunks as one unit; if a later
  step fails it removes what it created and restores what it overwrote
- A store that creates its own EphemeralClient gets a private collection
  prefix, so two in-memory stores never share data
- Each collection is stamped with schema_version when the store opens
- Metadata stored as flat key-value pairs (ChromaDB limitation)

Usage:
    from vector_store import ContentStore, StoreConfig

    with ContentStore(StoreConfig(in_memory=True)) as store:
        store.put_content(item, embedding=doc_vector)
        chunks = store.get_chunks(item.id)
"""

import json
import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import chromadb

from .exceptions import NotFoundError, StorageError, VectorStoreError
from .models import (
    ChunkMetadata,
    ContentChunk,
    ContentItem,
    HealthReport,
    QueryRecord,
    RecordKind,
    StoreConfig,
    StoreStats,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_FULL = ["documents", "metadatas", "embeddings"]


def _vector_list(raw: Any) -> list[float]:
    """ChromaDB may hand back numpy arrays; normalize to plain floats."""
    if raw is None:
        return []
    return [float(x) for x in raw]


def _column(result: Any, key: str, size: int) -> list:
    values = result.get(key)
    if values is None:
        return [None] * size
    return list(values)


class ContentStore:
    """
    Durable store for ContentItems, ContentChunks, document embeddings and
    QueryRecords.

    Construct it explicitly and close it when done (or use it as a context
    manager). Any operation on a closed store raises StorageError.
    """

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        chroma_client: Optional[Any] = None,
    ):
        """
        Open (or create) the store.

        Args:
            config: Store configuration. Uses defaults if not provided.
            chroma_client: Optional pre-created ChromaDB client (for testing).
                           If not provided, a PersistentClient is created
                           (or an EphemeralClient when config.in_memory).

        Raises:
            StorageError: If the database cannot be opened or its schema is
                newer than this code understands.
        """
        self.config = config or StoreConfig()
        self._lock = threading.RLock()
        self._closed = False

        try:
            if chroma_client is not None:
                self._client = chroma_client
            elif self.config.in_memory:
                # EphemeralClient state is process-wide; keep this store's collections private.
                self._client = chromadb.EphemeralClient()
                private_prefix = f"{self.config.collection_prefix}mem{uuid.uuid4().hex[:8]}_"
                self.config = self.config.model_copy(update={"collection_prefix": private_prefix})
            else:
                self._client = chromadb.PersistentClient(path=self.config.persist_directory)

            self._collections = {
                kind: self._open_collection(kind) for kind in RecordKind
            }
        except VectorStoreError:
            raise
        except Exception as e:
            raise StorageError("Cannot open ChromaDB", operation="open", details=str(e)) from e

        logger.info(
            "Content store opened (%s, prefix=%r, dimension=%d)",
            "in-memory" if self.config.in_memory else self.config.persist_directory,
            self.config.collection_prefix,
            self.config.vector_dimension,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the collection handles. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._collections = {}
            logger.info("Content store closed")

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "ContentStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def put_content(
        self,
        item: ContentItem,
        embedding: Optional[list[float]] = None,
        embedder_name: str = "",
    ) -> None:
        """
        Store a ContentItem, its document embedding and all of its chunks.

        The write is all-or-nothing from the caller's point of view: if any
        step fails, records created by this call are deleted again and
        records it overwrote are restored to their previous state.

        Args:
            item: The page to store (chunks included).
            embedding: Document-level embedding (zero vector if omitted).
            embedder_name: Strategy that produced the embeddings.

        Raises:
            StorageError: On a wrong vector dimension or any engine failure.
        """
        operation = "put_content"
        doc_vector = self._prepare_vector(embedding, operation)
        chunk_vectors = [self._prepare_vector(c.embedding, operation) for c in item.chunks]
        chunk_ids = [chunk.id for chunk in item.chunks]

        with self._lock, self._operation(operation):
            touched: list[tuple[RecordKind, list[str], dict[str, list]]] = []
            try:
                for kind, ids in (
                    (RecordKind.CONTENT, [item.id]),
                    (RecordKind.EMBEDDINGS, [item.id]),
                    (RecordKind.CHUNKS, chunk_ids),
                ):
                    touched.append((kind, ids, self._snapshot(kind, ids)))

                self._upsert(
                    RecordKind.CONTENT,
                    ids=[item.id],
                    documents=[item.content],
                    metadatas=[self._content_metadata(item)],
                    embeddings=[doc_vector],
                )
                self._upsert(
                    RecordKind.EMBEDDINGS,
                    ids=[item.id],
                    documents=[item.title],
                    metadatas=[{
                        "content_id": item.id,
                        "url": item.url,
                        "title": item.title,
                        "embedder": embedder_name,
                        "dimension": self.config.vector_dimension,
                    }],
                    embeddings=[doc_vector],
                )
                self._upsert(
                    RecordKind.CHUNKS,
                    ids=chunk_ids,
                    documents=[chunk.content for chunk in item.chunks],
                    metadatas=[self._chunk_metadata(chunk) for chunk in item.chunks],
                    embeddings=chunk_vectors,
                )
            except Exception as e:
                self._compensate(touched)
                raise StorageError(
                    f"Failed to store content '{item.id}'",
                    operation=operation,
                    details=str(e),
                ) from e

        logger.debug("Stored content %s with %d chunks", item.id, len(item.chunks))

    def put_chunk(self, chunk: ContentChunk) -> None:
        """
        Upsert a single chunk of an existing ContentItem.

        A chunk may replace an existing index or extend the item by exactly
        one (chunk_index == total_chunks), which bumps the parent's count.

        Raises:
            NotFoundError: If the parent ContentItem does not exist.
            ValueError: If the chunk index would leave a gap.
            StorageError: On a wrong vector dimension or any engine failure.
        """
        operation = "put_chunk"
        vector = self._prepare_vector(chunk.embedding, operation)

        with self._lock, self._operation(operation):
            parent = self._collection(RecordKind.CONTENT).get(
                ids=[chunk.content_id], include=["metadatas"]
            )
            if not parent["ids"]:
                raise NotFoundError(chunk.content_id, kind=RecordKind.CONTENT.value)

            parent_meta = dict(parent["metadatas"][0])
            total = int(parent_meta.get("total_chunks", 0))
            if chunk.chunk_index > total:
                raise ValueError(
                    f"chunk_index {chunk.chunk_index} leaves a gap "
                    f"(content has {total} chunks)"
                )

            self._upsert(
                RecordKind.CHUNKS,
                ids=[chunk.id],
                documents=[chunk.content],
                metadatas=[self._chunk_metadata(chunk)],
                embeddings=[vector],
            )

            if chunk.chunk_index == total:
                parent_meta["total_chunks"] = total + 1
                parent_meta["updated_at"] = utc_now_iso()
                self._collection(RecordKind.CONTENT).update(
                    ids=[chunk.content_id], metadatas=[parent_meta]
                )

    def put_query(self, record: QueryRecord) -> None:
        """
        Append a QueryRecord to the history.

        Raises:
            StorageError: On a wrong vector dimension or any engine failure.
        """
        operation = "put_query"
        vector = self._prepare_vector(record.query_embedding, operation)

        with self._lock, self._operation(operation):
            self._upsert(
                RecordKind.QUERIES,
                ids=[record.id],
                documents=[record.question],
                metadatas=[{
                    "answer": record.answer,
                    "timestamp": record.timestamp,
                    "sources": json.dumps(record.sources),
                }],
                embeddings=[vector],
            )

    def delete_content_cascade(self, content_id: str) -> int:
        """
        Delete a ContentItem, its document embedding and all of its chunks.

        Idempotent: deleting an unknown ID removes nothing and returns 0.
        QueryRecords are never touched.

        Returns:
            Number of chunks deleted.
        """
        operation = "delete_content_cascade"
        with self._lock, self._operation(operation):
            chunks = self._collection(RecordKind.CHUNKS)
            chunk_ids = chunks.get(where={"content_id": content_id}, include=[])["ids"]
            self._delete_ids(RecordKind.CHUNKS, list(chunk_ids))

            for kind in (RecordKind.EMBEDDINGS, RecordKind.CONTENT):
                existing = self._collection(kind).get(ids=[content_id], include=[])["ids"]
                self._delete_ids(kind, list(existing))

        logger.info("Deleted content %s (%d chunks)", content_id, len(chunk_ids))
        return len(chunk_ids)

    def clear_all(self) -> None:
        """Delete every record from every collection. Collections are kept."""
        with self._lock, self._operation("clear_all"):
            for kind in RecordKind:
                ids = self._collection(kind).get(include=[])["ids"]
                self._delete_ids(kind, list(ids))
        logger.info("Cleared all collections")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def has_content(self, content_id: str) -> bool:
        with self._operation("has_content"):
            result = self._collection(RecordKind.CONTENT).get(ids=[content_id], include=[])
            return bool(result["ids"])

    def get_content(self, content_id: str) -> Optional[ContentItem]:
        """Load a ContentItem with its chunks, or None if it does not exist."""
        with self._operation("get_content"):
            result = self._collection(RecordKind.CONTENT).get(
                ids=[content_id], include=["documents", "metadatas"]
            )
            if not result["ids"]:
                return None
            chunks = self._load_chunks(where={"content_id": content_id})
            return self._to_content_item(
                result["ids"][0], result["documents"][0], result["metadatas"][0], chunks
            )

    def get_chunk(self, chunk_id: str) -> Optional[ContentChunk]:
        with self._operation("get_chunk"):
            result = self._collection(RecordKind.CHUNKS).get(ids=[chunk_id], include=_FULL)
            chunks = self._to_chunks(result)
            return chunks[0] if chunks else None

    def get_chunks(self, content_id: str) -> list[ContentChunk]:
        """All chunks of one ContentItem in chunk order."""
        with self._operation("get_chunks"):
            return self._load_chunks(where={"content_id": content_id})

    def get_embedding(self, content_id: str) -> Optional[list[float]]:
        """The document-level embedding of a ContentItem."""
        with self._operation("get_embedding"):
            result = self._collection(RecordKind.EMBEDDINGS).get(
                ids=[content_id], include=["embeddings"]
            )
            if not result["ids"]:
                return None
            return _vector_list(_column(result, "embeddings", 1)[0])

    def get_all(self, kind: RecordKind) -> list[Any]:
        """
        Every record of one kind.

        Returns:
            ContentItem (with chunks) for CONTENT, ContentChunk for CHUNKS,
            QueryRecord for QUERIES and plain dicts for EMBEDDINGS.
        """
        kind = RecordKind(kind)
        with self._operation("get_all"):
            if kind == RecordKind.CHUNKS:
                return self._load_chunks()
            if kind == RecordKind.CONTENT:
                return self._load_content_items()
            if kind == RecordKind.QUERIES:
                return self._load_queries()
            return self._load_embeddings()

    def count(self, kind: RecordKind = RecordKind.CONTENT) -> int:
        with self._operation("count"):
            return self._collection(RecordKind(kind)).count()

    # ------------------------------------------------------------------
    # Management
    # ------------------------------------------------------------------

    def storage_size_bytes(self) -> int:
        """Estimated size: total length of every record serialized as JSON."""
        with self._operation("storage_size_bytes"):
            size = 0
            for item in self._load_content_items(with_chunks=False):
                size += len(item.model_dump_json(exclude={"chunks"}).encode("utf-8"))
            for chunk in self._load_chunks():
                size += len(chunk.model_dump_json().encode("utf-8"))
            for record in self._load_queries():
                size += len(record.model_dump_json().encode("utf-8"))
            for entry in self._load_embeddings():
                size += len(json.dumps(entry).encode("utf-8"))
            return size

    def stats(self) -> StoreStats:
        return StoreStats(
            total_content=self.count(RecordKind.CONTENT),
            total_chunks=self.count(RecordKind.CHUNKS),
            total_queries=self.count(RecordKind.QUERIES),
            storage_size_bytes=self.storage_size_bytes(),
            vector_dimension=self.config.vector_dimension,
        )

    def health(self) -> HealthReport:
        """
        Check that the store is usable. Never raises.

        Checks: handle open, engine responsive, every collection present and
        readable.
        """
        issues: list[str] = []
        details: dict[str, Any] = {
            "persist_directory": None if self.config.in_memory else self.config.persist_directory,
            "schema_version": SCHEMA_VERSION,
            "vector_dimension": self.config.vector_dimension,
        }

        if self._closed:
            return HealthReport.from_issues(["Database not initialized"], details)

        try:
            self._client.heartbeat()
        except Exception as e:
            issues.append(f"Database not responsive: {e}")

        try:
            existing = {
                getattr(collection, "name", collection)
                for collection in self._client.list_collections()
            }
        except Exception as e:
            issues.append(f"Cannot list object stores: {e}")
            existing = set()

        counts: dict[str, int] = {}
        for kind in RecordKind:
            name = self.config.collection_name(kind)
            if existing and name not in existing:
                issues.append(f"Missing object store: {name}")
                continue
            try:
                counts[kind.value] = self._collections[kind].count()
            except Exception as e:
                issues.append(f"Database operations test failed for {name}: {e}")

        details["counts"] = counts
        return HealthReport.from_issues(issues, details)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open_collection(self, kind: RecordKind):
        """Get or create one collection and bring its schema stamp up to date."""
        name = self.config.collection_name(kind)
        existing = {
            getattr(collection, "name", collection)
            for collection in self._client.list_collections()
        }
        if name in existing:
            collection = self._client.get_collection(name=name)
        else:
            collection = self._client.create_collection(
                name=name,
                metadata={"schema_version": SCHEMA_VERSION, "record_kind": kind.value},
            )

        metadata = dict(collection.metadata or {})
        version = int(metadata.get("schema_version", 0))
        if version > SCHEMA_VERSION:
            raise StorageError(
                f"Collection '{name}' has schema version {version}, "
                f"newer than supported version {SCHEMA_VERSION}",
                operation="open",
            )
        if version < SCHEMA_VERSION:
            metadata.update({"schema_version": SCHEMA_VERSION, "record_kind": kind.value})
            collection.modify(metadata=metadata)
            logger.info("Upgraded collection %s schema %d -> %d", name, version, SCHEMA_VERSION)

        return collection

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        """Reject closed-store access and wrap engine failures in StorageError."""
        if self._closed:
            raise StorageError("Store is closed", operation=name)
        try:
            yield
        except (VectorStoreError, ValueError):
            raise
        except Exception as e:
            raise StorageError("ChromaDB operation failed", operation=name, details=str(e)) from e

    def _collection(self, kind: RecordKind):
        return self._collections[kind]

    def _prepare_vector(self, vector: Optional[list[float]], operation: str) -> list[float]:
        dimension = self.config.vector_dimension
        if not vector:
            return [0.0] * dimension
        if len(vector) != dimension:
            raise StorageError(
                f"Embedding has dimension {len(vector)}, store expects {dimension}",
                operation=operation,
            )
        return [float(x) for x in vector]

    def _upsert(
        self,
        kind: RecordKind,
        ids: list[str],
        documents: list[str],
        metadatas: list[dict],
        embeddings: list[list[float]],
    ) -> None:
        # ChromaDB has a batch size limit
        batch_size = self.config.batch_size
        collection = self._collection(kind)
        for i in range(0, len(ids), batch_size):
            end = i + batch_size
            collection.upsert(
                ids=ids[i:end],
                documents=documents[i:end],
                metadatas=metadatas[i:end],
                embeddings=embeddings[i:end],
            )

    def _delete_ids(self, kind: RecordKind, ids: list[str]) -> None:
        collection = self._collection(kind)
        for i in range(0, len(ids), self.config.batch_size):
            collection.delete(ids=ids[i:i + self.config.batch_size])

    def _snapshot(self, kind: RecordKind, ids: list[str]) -> dict[str, list]:
        """Current state of the records among ids that already exist."""
        snapshot: dict[str, list] = {"ids": [], "documents": [], "metadatas": [], "embeddings": []}
        if not ids:
            return snapshot
        result = self._collection(kind).get(ids=ids, include=_FULL)
        found = list(result["ids"])
        snapshot["ids"] = found
        snapshot["documents"] = _column(result, "documents", len(found))
        snapshot["metadatas"] = _column(result, "metadatas", len(found))
        snapshot["embeddings"] = [_vector_list(v) for v in _column(result, "embeddings", len(found))]
        return snapshot

    def _compensate(self, touched: list[tuple[RecordKind, list[str], dict[str, list]]]) -> None:
        """Delete records a failed write created; restore the ones it overwrote."""
        for kind, ids, snapshot in reversed(touched):
            existed = set(snapshot["ids"])
            created = [record_id for record_id in ids if record_id not in existed]
            try:
                if created:
                    self._delete_ids(kind, created)
                if snapshot["ids"]:
                    self._upsert(
                        kind,
                        ids=snapshot["ids"],
                        documents=snapshot["documents"],
                        metadatas=snapshot["metadatas"],
                        embeddings=snapshot["embeddings"],
                    )
            except Exception:
                logger.exception("Rollback of %d %s records failed", len(ids), kind.value)

    @staticmethod
    def _content_metadata(item: ContentItem) -> dict:
        return {
            "url": item.url,
            "title": item.title,
            "created_at": item.created_at,
            "updated_at": item.updated_at,
            "total_chunks": item.total_chunks,
        }

    @staticmethod
    def _chunk_metadata(chunk: ContentChunk) -> dict:
        return {
            "content_id": chunk.content_id,
            "url": chunk.url,
            "title": chunk.title,
            "chunk_index": chunk.chunk_index,
            "chunk_size": chunk.metadata.chunk_size,
            "overlap": chunk.metadata.overlap,
            "created_at": chunk.metadata.created_at,
        }

    def _to_chunks(self, result: Any) -> list[ContentChunk]:
        ids = list(result["ids"])
        documents = _column(result, "documents", len(ids))
        metadatas = _column(result, "metadatas", len(ids))
        embeddings = _column(result, "embeddings", len(ids))

        chunks = []
        for chunk_id, text, meta, vector in zip(ids, documents, metadatas, embeddings):
            meta = meta or {}
            chunks.append(ContentChunk(
                id=chunk_id,
                content_id=meta.get("content_id", ""),
                url=meta.get("url", ""),
                title=meta.get("title", ""),
                content=text or "",
                chunk_index=int(meta.get("chunk_index", 0)),
                embedding=_vector_list(vector),
                metadata=ChunkMetadata(
                    chunk_size=int(meta.get("chunk_size", len(text or ""))),
                    overlap=int(meta.get("overlap", 0)),
                    created_at=meta.get("created_at") or utc_now_iso(),
                ),
            ))
        return chunks

    def _load_chunks(self, where: Optional[dict] = None) -> list[ContentChunk]:
        params: dict[str, Any] = {"include": _FULL}
        if where:
            params["where"] = where
        chunks = self._to_chunks(self._collection(RecordKind.CHUNKS).get(**params))
        chunks.sort(key=lambda c: (c.content_id, c.chunk_index))
        return chunks

    @staticmethod
    def _to_content_item(
        content_id: str,
        text: Optional[str],
        meta: Optional[dict],
        chunks: list[ContentChunk],
    ) -> ContentItem:
        meta = meta or {}
        return ContentItem(
            id=content_id,
            url=meta.get("url", ""),
            title=meta.get("title", ""),
            content=text or "",
            chunks=chunks,
            created_at=meta.get("created_at") or utc_now_iso(),
            updated_at=meta.get("updated_at") or utc_now_iso(),
            total_chunks=len(chunks),
        )

    def _load_content_items(self, with_chunks: bool = True) -> list[ContentItem]:
        result = self._collection(RecordKind.CONTENT).get(include=["documents", "metadatas"])
        ids = list(result["ids"])
        documents = _column(result, "documents", len(ids))
        metadatas = _column(result, "metadatas", len(ids))

        by_parent: dict[str, list[ContentChunk]] = {}
        if with_chunks:
            for chunk in self._load_chunks():
                by_parent.setdefault(chunk.content_id, []).append(chunk)

        items = [
            self._to_content_item(cid, text, meta, by_parent.get(cid, []))
            for cid, text, meta in zip(ids, documents, metadatas)
        ]
        items.sort(key=lambda item: (item.created_at, item.id))
        return items

    def _load_queries(self) -> list[QueryRecord]:
        result = self._collection(RecordKind.QUERIES).get(include=_FULL)
        ids = list(result["ids"])
        documents = _column(result, "documents", len(ids))
        metadatas = _column(result, "metadatas", len(ids))
        embeddings = _column(result, "embeddings", len(ids))

        records = []
        for query_id, question, meta, vector in zip(ids, documents, metadatas, embeddings):
            meta = meta or {}
            records.append(QueryRecord(
                id=query_id,
                question=question or "",
                answer=meta.get("answer", ""),
                timestamp=meta.get("timestamp") or utc_now_iso(),
                sources=json.loads(meta.get("sources") or "[]"),
                query_embedding=_vector_list(vector),
            ))
        return records

    def _load_embeddings(self) -> list[dict[str, Any]]:
        result = self._collection(RecordKind.EMBEDDINGS).get(include=["metadatas", "embeddings"])
        ids = list(result["ids"])
        metadatas = _column(result, "metadatas", len(ids))
        embeddings = _column(result, "embeddings", len(ids))
        return [
            {
                "content_id": content_id,
                "url": (meta or {}).get("url", ""),
                "title": (meta or {}).get("title", ""),
                "embedder": (meta or {}).get("embedder", ""),
                "embedding": _vector_list(vector),
            }
            for content_id, meta, vector in zip(ids, metadatas, embeddings)
        ]
