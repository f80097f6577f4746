"""HTTP client for the ADE parse and extract calls.

Requests go to the local proxy paths; the proxy owns the credential, so this
client never sends an ``Authorization`` header itself.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from docextract.config import AppConfig
from docextract.errors import TransportError
from docextract.extraction.schema import extraction_schema_json
from docextract.models import UploadedDocument
from docextract.web.proxy import PROXY_BASE_URL, build_upstream_client, create_proxy_app

LOGGER = logging.getLogger(__name__)

PARSE_PATH = "/api/ade/parse"
EXTRACT_PATH = "/api/ade/extract"


class AdeClient:
    """Thin wrapper issuing the two multipart calls through the proxy."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        parse_model: str,
        extract_model: str,
        parse_path: str = PARSE_PATH,
        extract_path: str = EXTRACT_PATH,
        owned: Sequence[httpx.AsyncClient] = (),
    ) -> None:
        self.http = http
        self._owned = list(owned)
        self.parse_model = parse_model
        self.extract_model = extract_model
        self.parse_path = parse_path
        self.extract_path = extract_path

    async def parse(self, document: UploadedDocument) -> Any:
        files = {"document": (document.name, document.content, document.media_type)}
        data = {"model": self.parse_model}
        LOGGER.info("Parsing %s (%d bytes)", document.name, document.size)
        return await self._post("Parse", self.parse_path, files=files, data=data)

    async def extract(self, markdown: str, *, schema_json: str | None = None) -> Any:
        # (None, value) keeps these as plain form fields inside a multipart body
        files = {
            "schema": (None, schema_json or extraction_schema_json()),
            "markdown": (None, markdown),
            "model": (None, self.extract_model),
        }
        LOGGER.info("Extracting metadata from %d characters of markdown", len(markdown))
        return await self._post("Extract", self.extract_path, files=files)

    async def aclose(self) -> None:
        await self.http.aclose()
        for client in self._owned:
            await client.aclose()

    async def _post(self, stage: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self.http.post(path, **kwargs)
        except httpx.HTTPError as exc:
            LOGGER.error("%s request failed: %s", stage, exc)
            raise TransportError(f"{stage} request failed: {exc}") from exc

        if not response.is_success:
            LOGGER.error("%s request failed with status %s", stage, response.status_code)
            raise TransportError(f"{stage} request failed: {response.text}")

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"{stage} request failed: response is not valid JSON") from exc


def build_ade_client(
    config: AppConfig, *, upstream: httpx.AsyncClient | None = None
) -> AdeClient | None:
    """Create a client routed through an in-process proxy holding the credential.

    Returns None when the configuration is incomplete; the orchestrator reports
    that as a configuration error on the first parse request.
    """
    if config.configuration_error:
        LOGGER.error(config.configuration_error)
        return None

    owned: list[httpx.AsyncClient] = []
    if upstream is None:
        upstream = build_upstream_client(config)
        owned.append(upstream)
    proxy = create_proxy_app(upstream)
    http = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=proxy),
        base_url=PROXY_BASE_URL,
        timeout=None,
    )
    LOGGER.info("ADE client initialized (remote %s)", config.ade_base_url)
    return AdeClient(
        http,
        parse_model=config.parse_model,
        extract_model=config.extract_model,
        owned=owned,
    )
