"""
HTTP API for the RAG demo and the blog writer.
"""

import threading

from fastapi import FastAPI, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Optional

from .schemas import (
    AskRequest,
    AskResponse,
    BlogRequest,
    BlogResponse,
    HistoryItem,
    HistoryResponse,
    HealthResponse,
    ErrorResponse
)
from ..agents.registry import ServiceRegistry
from ..core.config import VERSION, debug_enabled
from ..core.errors import (
    RagWriterError,
    DimensionMismatchError,
    EmbeddingFailure,
    GenerationFailure,
    PersistenceFailure
)
from ..util.logging import logger

# Upstream model failures are gateway errors; an unavailable store is a service error
STATUS_BY_KIND = {
    EmbeddingFailure.kind: 502,
    GenerationFailure.kind: 502,
    PersistenceFailure.kind: 503,
    DimensionMismatchError.kind: 500,
}

_registry: Optional[ServiceRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> ServiceRegistry:
    """Lazily build the process-wide service registry, once."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = ServiceRegistry()
    return _registry


# Initialize the FastAPI application
app = FastAPI(
    title="ragwriter API",
    version=VERSION,
    description="Retrieval-augmented Q&A over past interactions and a self-critiquing blog writer",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)


@app.exception_handler(RagWriterError)
async def rag_writer_error_handler(request: Request, exc: RagWriterError):
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    logger.warning(f"{request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content=ErrorResponse(**exc.to_dict()).model_dump())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(kind="invalid_request", stage="validate", detail=detail).model_dump()
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(kind="invalid_request", stage="validate", detail=str(exc)).model_dump()
    )


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint(registry: ServiceRegistry = Depends(get_registry)):
    """Check system health."""
    status = registry.get_status()
    store_health = status["store_healthy"]
    chat_status = status["chat_status"]

    if not store_health:
        overall = "unhealthy"
    elif chat_status != "ready":
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        version=VERSION,
        store_health=store_health,
        record_count=registry.store.count() if store_health else 0,
        chat_provider=status["chat_provider"],
        chat_status=chat_status,
        embedding_provider=status["embedding_provider"]
    )


@app.post("/ask", response_model=AskResponse, responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}})
def ask_endpoint(request: AskRequest, registry: ServiceRegistry = Depends(get_registry)):
    """Answer a question using previous interactions as context."""
    result = registry.rag_service.process_query(request.question)
    return AskResponse(
        answer=result.answer,
        context_count=len(result.context_records),
        record_id=result.record.id if result.record else None,
        warning=f"Interaction not saved: {result.persistence_error}" if result.persistence_error else None
    )


@app.post("/blog", response_model=BlogResponse, responses={502: {"model": ErrorResponse}})
def blog_endpoint(request: BlogRequest, registry: ServiceRegistry = Depends(get_registry)):
    """Generate a blog post through the writer/editor loop."""
    result = registry.blog_writer.write(request.topic)
    return BlogResponse(draft=result.draft, approved=result.approved, iterations=result.iterations)


@app.get("/history", response_model=HistoryResponse, responses={503: {"model": ErrorResponse}})
def history_endpoint(limit: int = Query(20, ge=1, le=1000), registry: ServiceRegistry = Depends(get_registry)):
    """Most recent stored interactions, oldest first."""
    records = list(registry.store.scan_all())
    return HistoryResponse(
        items=[
            HistoryItem(id=r.id, prompt=r.prompt, response=r.response, dimension=r.dimension)
            for r in records[-limit:]
        ],
        total=len(records)
    )
