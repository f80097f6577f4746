"""Reverse proxy forwarding the local ADE paths to the remote service.

The proxy is the only component that knows the API key: it rewrites
``/api/ade/<endpoint>`` to ``/v1/ade/<endpoint>`` and adds the bearer token.
"""

from __future__ import annotations

import logging
import re

import httpx
from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import Response

from docextract.config import AppConfig

LOGGER = logging.getLogger(__name__)

PROXY_BASE_URL = "http://ade-proxy"

PATH_REWRITES = (
    (re.compile(r"^/api/ade/parse"), "/v1/ade/parse"),
    (re.compile(r"^/api/ade/extract"), "/v1/ade/extract"),
)

_FORWARDED_REQUEST_HEADERS = ("content-type", "accept")

router = APIRouter()


def rewrite_path(path: str) -> str | None:
    """Map a local proxy path to the remote path, or None if it is not proxied."""
    for pattern, replacement in PATH_REWRITES:
        if pattern.match(path):
            return pattern.sub(replacement, path, count=1)
    return None


def auth_headers(config: AppConfig) -> dict[str, str]:
    if not config.api_key:
        return {}
    return {"Authorization": f"Bearer {config.api_key}"}


def build_upstream_client(
    config: AppConfig, *, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """HTTP client talking to the remote ADE service with the credential attached."""
    return httpx.AsyncClient(
        base_url=config.ade_base_url,
        headers=auth_headers(config),
        transport=transport,
        timeout=None,
    )


@router.post("/api/ade/{endpoint:path}")
async def forward(endpoint: str, request: Request) -> Response:
    target = rewrite_path(request.url.path)
    if target is None:
        raise HTTPException(status_code=404, detail=f"Unknown ADE endpoint: {endpoint}")

    upstream: httpx.AsyncClient = request.app.state.ade_upstream
    headers = {
        name: request.headers[name]
        for name in _FORWARDED_REQUEST_HEADERS
        if name in request.headers
    }
    body = await request.body()

    LOGGER.debug("Proxying %s -> %s (%d bytes)", request.url.path, target, len(body))
    try:
        upstream_response = await upstream.post(target, content=body, headers=headers)
    except httpx.HTTPError as exc:
        LOGGER.error("Upstream request to %s failed: %s", target, exc)
        raise HTTPException(status_code=502, detail=f"Upstream request failed: {exc}") from exc

    return Response(
        content=upstream_response.content,
        status_code=upstream_response.status_code,
        media_type=upstream_response.headers.get("content-type"),
    )


def create_proxy_app(upstream: httpx.AsyncClient) -> FastAPI:
    """Standalone ASGI app exposing only the proxy routes."""
    proxy = FastAPI(title="ADE proxy", docs_url=None, redoc_url=None, openapi_url=None)
    proxy.include_router(router)
    proxy.state.ade_upstream = upstream
    return proxy
