"""Shared fixtures: a fake ADE service behind httpx.MockTransport."""

from __future__ import annotations

from typing import Any, Dict, List

import httpx
import pytest

from docextract.config import AppConfig
from docextract.models import UploadedDocument
from docextract.utils.files import PDF_MEDIA_TYPE
from docextract.web.proxy import build_upstream_client

PARSE_OK = {
    "chunks": [
        {"markdown": "# Pride and Prejudice"},
        {"markdown": "   "},
        {},
        {"markdown": "By Jane Austen"},
    ]
}
EXTRACT_OK = {
    "extraction": {
        "title": "Pride and Prejudice",
        "authors": ["Jane Austen"],
        "publishedYear": 1813,
        "pages": 432,
        "language": "English",
        "publisher": {"name": "T. Egerton", "location": "London"},
        "genres": ["Romance"],
    }
}


class FakeAde:
    """Callable MockTransport handler answering the remote /v1/ade paths."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: Dict[str, Any] = {
            "/v1/ade/parse": (200, PARSE_OK),
            "/v1/ade/extract": (200, EXTRACT_OK),
        }

    def respond(self, path: str, status_code: int, payload: Any) -> None:
        self.routes[path] = (status_code, payload)

    def fail(self, path: str, exc: Exception) -> None:
        self.routes[path] = exc

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route
        status_code, payload = route
        if isinstance(payload, str):
            return httpx.Response(status_code, text=payload)
        return httpx.Response(status_code, json=payload)


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(api_key="test-key", ade_base_url="https://ade.test")


@pytest.fixture
def fake_ade() -> FakeAde:
    return FakeAde()


@pytest.fixture
def upstream(config: AppConfig, fake_ade: FakeAde) -> httpx.AsyncClient:
    return build_upstream_client(config, transport=httpx.MockTransport(fake_ade))


@pytest.fixture
def pdf_document() -> UploadedDocument:
    return UploadedDocument(name="book.pdf", content=b"%PDF-1.7 fake", media_type=PDF_MEDIA_TYPE)
