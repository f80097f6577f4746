"""FastAPI application backing the docextract web UI."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from docextract import __version__
from docextract.catalog import find_book, load_catalog
from docextract.config import AppConfig, load_config
from docextract.errors import PipelineError
from docextract.extraction.client import build_ade_client
from docextract.extraction.orchestrator import ExtractionOrchestrator
from docextract.models import UploadedDocument
from docextract.utils.files import guess_media_type
from docextract.web.frontend import router as frontend_router
from docextract.web.proxy import build_upstream_client
from docextract.web.proxy import router as proxy_router

LOGGER = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "configuration": 503,
    "input": 400,
    "busy": 409,
    "transport": 502,
    "empty_result": 502,
    "validation": 422,
}


def _orchestrator(request: Request) -> ExtractionOrchestrator:
    return request.app.state.orchestrator


async def _pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_KIND.get(exc.kind, 500),
        content={
            "detail": exc.message,
            "kind": exc.kind,
            "state": _orchestrator(request).state.value,
        },
    )


def create_app(
    config: AppConfig | None = None, *, upstream: httpx.AsyncClient | None = None
) -> FastAPI:
    """Build the web application around one pipeline orchestrator."""
    if config is None:
        config = load_config()
    if upstream is None:
        upstream = build_upstream_client(config)

    app = FastAPI(title="docextract Web", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(frontend_router)
    app.include_router(proxy_router)
    app.add_exception_handler(PipelineError, _pipeline_error_handler)

    app.state.config = config
    app.state.ade_upstream = upstream
    app.state.orchestrator = ExtractionOrchestrator(
        build_ade_client(config, upstream=upstream),
        preview_chars=config.preview_chars,
    )

    @app.on_event("startup")
    async def startup_event() -> None:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        if config.configuration_error:
            LOGGER.error(config.configuration_error)
        else:
            LOGGER.info("ADE client ready, %d books loaded", len(load_catalog().books))

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        client = app.state.orchestrator.client
        if client is not None:
            await client.aclose()
        await upstream.aclose()

    @app.get("/status")
    async def status() -> dict[str, Any]:
        error = config.configuration_error
        return {
            "ready": not error and app.state.orchestrator.client is not None,
            "error": error,
            "book_count": len(load_catalog().books),
        }

    @app.get("/books")
    async def list_books() -> dict[str, Any]:
        return {"books": [book.model_dump(by_alias=True) for book in load_catalog().books]}

    @app.get("/books/{book_id}")
    async def get_book(book_id: str) -> dict[str, Any]:
        book = find_book(book_id)
        if book is None:
            raise HTTPException(status_code=404, detail=f"Book {book_id} not found")
        return book.model_dump(by_alias=True)

    @app.get("/workflow")
    async def workflow_state(request: Request) -> dict[str, Any]:
        return _orchestrator(request).snapshot()

    @app.post("/workflow/document")
    async def select_document(request: Request, file: UploadFile = File(...)) -> dict[str, Any]:
        name = file.filename or "document"
        media_type = guess_media_type(name) or (file.content_type or "")
        content = await file.read()
        orchestrator = _orchestrator(request)
        orchestrator.select_document(
            UploadedDocument(name=name, content=content, media_type=media_type)
        )
        return orchestrator.snapshot()

    @app.post("/workflow/parse")
    async def parse_document(request: Request) -> dict[str, Any]:
        orchestrator = _orchestrator(request)
        await orchestrator.parse()
        return orchestrator.snapshot()

    @app.post("/workflow/extract")
    async def extract_metadata(request: Request) -> dict[str, Any]:
        orchestrator = _orchestrator(request)
        await orchestrator.extract()
        return orchestrator.snapshot()

    @app.get("/workflow/export")
    async def export_markdown(request: Request, full_text: bool = True) -> Response:
        artifact = _orchestrator(request).export(include_full_text=full_text)
        return Response(
            content=artifact.content,
            media_type=artifact.media_type,
            headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
        )

    return app
