"""Tests for the ADE reverse proxy."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import FakeAde
from docextract.config import AppConfig
from docextract.web.proxy import (
    auth_headers,
    build_upstream_client,
    create_proxy_app,
    rewrite_path,
)


class TestRewritePath:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/api/ade/parse", "/v1/ade/parse"),
            ("/api/ade/extract", "/v1/ade/extract"),
            ("/api/ade/parse/jobs", "/v1/ade/parse/jobs"),
        ],
    )
    def test_proxied_paths(self, path: str, expected: str) -> None:
        assert rewrite_path(path) == expected

    @pytest.mark.parametrize("path", ["/api/ade/split", "/v1/ade/parse", "/"])
    def test_unknown_paths(self, path: str) -> None:
        assert rewrite_path(path) is None


class TestAuthHeaders:
    def test_bearer_token(self) -> None:
        assert auth_headers(AppConfig(api_key="k")) == {"Authorization": "Bearer k"}

    def test_no_key_no_header(self) -> None:
        assert auth_headers(AppConfig()) == {}


class TestForward:
    def _client(self, upstream: httpx.AsyncClient) -> TestClient:
        return TestClient(create_proxy_app(upstream))

    def test_forwards_with_credentials(self, upstream: httpx.AsyncClient, fake_ade: FakeAde) -> None:
        client = self._client(upstream)

        response = client.post(
            "/api/ade/parse",
            files={"document": ("a.pdf", b"%PDF", "application/pdf")},
            data={"model": "dpt-2"},
        )

        assert response.status_code == 200
        assert "chunks" in response.json()
        request = fake_ade.requests[0]
        assert str(request.url) == "https://ade.test/v1/ade/parse"
        assert request.headers["authorization"] == "Bearer test-key"
        assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
        assert b"%PDF" in request.content
        assert b"dpt-2" in request.content

    def test_incoming_authorization_is_not_forwarded(
        self, upstream: httpx.AsyncClient, fake_ade: FakeAde
    ) -> None:
        client = self._client(upstream)

        client.post("/api/ade/extract", data={"markdown": "x"}, headers={"Authorization": "Bearer other"})

        assert fake_ade.requests[0].headers["authorization"] == "Bearer test-key"

    def test_upstream_status_and_body_passed_through(
        self, upstream: httpx.AsyncClient, fake_ade: FakeAde
    ) -> None:
        fake_ade.respond("/v1/ade/extract", 401, "invalid api key")
        client = self._client(upstream)

        response = client.post("/api/ade/extract", data={"markdown": "x"})

        assert response.status_code == 401
        assert response.text == "invalid api key"

    def test_unknown_endpoint(self, upstream: httpx.AsyncClient, fake_ade: FakeAde) -> None:
        client = self._client(upstream)

        response = client.post("/api/ade/classify")

        assert response.status_code == 404
        assert fake_ade.requests == []

    def test_upstream_unreachable(self, upstream: httpx.AsyncClient, fake_ade: FakeAde) -> None:
        fake_ade.fail("/v1/ade/parse", httpx.ConnectError("connection refused"))
        client = self._client(upstream)

        response = client.post("/api/ade/parse")

        assert response.status_code == 502
        assert "connection refused" in response.json()["detail"]

    def test_no_key_sends_no_authorization(self, fake_ade: FakeAde) -> None:
        upstream = build_upstream_client(
            AppConfig(ade_base_url="https://ade.test"), transport=httpx.MockTransport(fake_ade)
        )
        client = self._client(upstream)

        client.post("/api/ade/parse")

        assert "authorization" not in fake_ade.requests[0].headers
