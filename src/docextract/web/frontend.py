"""Single-page HTML frontend for the docextract web UI."""

from __future__ import annotations

from functools import lru_cache
from html import escape
from importlib.resources import files

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from docextract.catalog import load_catalog

STATUS_PLACEHOLDER = "<!-- status-banner -->"

router = APIRouter()


@lru_cache(maxsize=1)
def _load_template() -> str:
    template = files("docextract.web").joinpath("templates", "index.html")
    return template.read_text(encoding="utf-8")


def render_status_banner(configuration_error: str, book_count: int) -> str:
    if configuration_error:
        return f'<div class="error-banner"><strong>Error:</strong> {escape(configuration_error)}</div>'
    return f'<div class="status-banner">ADE Client Ready | {book_count} books loaded</div>'


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    banner = render_status_banner(
        request.app.state.config.configuration_error, len(load_catalog().books)
    )
    html = _load_template().replace(STATUS_PLACEHOLDER, banner, 1)
    return HTMLResponse(content=html)
