from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, HTTPException

from generation.models import AskRequest, QAResponse
from retrieval.models import SearchRequest
from vector_store.models import StoreStats

from .config import AppConfig
from .exceptions import EmbeddingError, FetchError, StorageError
from .models import (
    DeleteResponse,
    HealthResponse,
    HistoryEntry,
    IngestResponse,
    IngestTextRequest,
    IngestUrlRequest,
    SearchResponse,
    SearchResult,
)
from .service import ContentQAService

logger = logging.getLogger(__name__)


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, FetchError):
        return HTTPException(status_code=502, detail=str(exc))
    if isinstance(exc, EmbeddingError):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, ValueError):
        return HTTPException(status_code=400, detail=str(exc))
    if not isinstance(exc, StorageError):
        logger.exception("Unhandled error in request")
    return HTTPException(status_code=500, detail=str(exc))


def _ingest_response(item) -> IngestResponse:
    return IngestResponse(id=item.id, url=item.url, title=item.title, total_chunks=item.total_chunks)


def create_app(
    config: AppConfig | None = None,
    service: Optional[ContentQAService] = None,
) -> FastAPI:
    owns_service = service is None
    service = service or ContentQAService.from_config(config or AppConfig.from_env())

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if owns_service:
            service.close()

    app = FastAPI(
        title="Content Q&A Service",
        version="1.0.0",
        description="Ingest web content and ask questions about it.",
        lifespan=lifespan,
    )

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        report = service.health()
        return HealthResponse(
            status="ok" if report.healthy else "degraded",
            issues=report.issues,
            details=report.details,
        )

    @app.get("/stats", response_model=StoreStats)
    def stats() -> StoreStats:
        try:
            return service.stats()
        except Exception as exc:
            raise _http_error(exc) from exc

    @app.get("/content")
    def list_content() -> list[dict[str, Any]]:
        try:
            return [item.summary() for item in service.list_content()]
        except Exception as exc:
            raise _http_error(exc) from exc

    @app.get("/content/{content_id}")
    def get_content(content_id: str) -> dict[str, Any]:
        try:
            item = service.get_content(content_id)
        except Exception as exc:
            raise _http_error(exc) from exc
        if item is None:
            raise HTTPException(status_code=404, detail=f"Content not found: {content_id}")
        data = item.summary()
        data["content"] = item.content
        data["chunks"] = [
            {"id": chunk.id, "chunk_index": chunk.chunk_index, "content": chunk.content}
            for chunk in item.chunks
        ]
        return data

    @app.delete("/content/{content_id}", response_model=DeleteResponse)
    def delete_content(content_id: str) -> DeleteResponse:
        try:
            deleted = service.delete_content(content_id)
        except Exception as exc:
            raise _http_error(exc) from exc
        if not deleted:
            raise HTTPException(status_code=404, detail=f"Content not found: {content_id}")
        return DeleteResponse(id=content_id, deleted=True)

    @app.post("/ingest", response_model=IngestResponse)
    def ingest(request: IngestUrlRequest) -> IngestResponse:
        try:
            return _ingest_response(service.ingest(request.url))
        except Exception as exc:
            raise _http_error(exc) from exc

    @app.post("/ingest/text", response_model=IngestResponse)
    def ingest_text(request: IngestTextRequest) -> IngestResponse:
        try:
            return _ingest_response(service.ingest_text(request.url, request.title, request.text))
        except Exception as exc:
            raise _http_error(exc) from exc

    @app.post("/search", response_model=SearchResponse)
    def search(request: SearchRequest) -> SearchResponse:
        hits = service.search(request.query, request.limit)
        return SearchResponse(query=request.query, results=[SearchResult.from_hit(hit) for hit in hits])

    @app.post("/ask", response_model=QAResponse)
    def ask(request: AskRequest) -> QAResponse:
        try:
            return service.answer_question(request.question)
        except Exception as exc:
            raise _http_error(exc) from exc

    @app.get("/history", response_model=list[HistoryEntry])
    def history(limit: int = 50) -> list[HistoryEntry]:
        try:
            records = service.query_history(limit)
        except Exception as exc:
            raise _http_error(exc) from exc
        return [
            HistoryEntry(
                id=record.id,
                question=record.question,
                answer=record.answer,
                timestamp=record.timestamp,
                sources=record.sources,
            )
            for record in records
        ]

    @app.post("/clear")
    def clear() -> dict:
        try:
            service.clear_all()
        except Exception as exc:
            raise _http_error(exc) from exc
        return {"status": "cleared"}

    return app
