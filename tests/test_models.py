"""Tests for core data models."""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from docextract.errors import InputError
from docextract.models import Chunk, ParseResult, UploadedDocument
from docextract.utils.files import PDF_MEDIA_TYPE, PPTX_MEDIA_TYPE


class TestUploadedDocument:
    """Test UploadedDocument dataclass."""

    def test_create_document(self) -> None:
        document = UploadedDocument(name="a.pdf", content=b"abc", media_type=PDF_MEDIA_TYPE)

        assert document.size == 3
        assert document.sha256 == hashlib.sha256(b"abc").hexdigest()

    def test_rejects_unsupported_media_type(self) -> None:
        with pytest.raises(InputError, match="Unsupported document type"):
            UploadedDocument(name="a.txt", content=b"abc", media_type="text/plain")

    def test_from_path_pptx(self, tmp_path: Path) -> None:
        path = tmp_path / "slides.PPTX"
        path.write_bytes(b"deck")

        document = UploadedDocument.from_path(path)

        assert document.name == "slides.PPTX"
        assert document.media_type == PPTX_MEDIA_TYPE
        assert document.content == b"deck"

    def test_from_path_unsupported(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.docx"
        path.write_bytes(b"doc")

        with pytest.raises(InputError, match="Unsupported document"):
            UploadedDocument.from_path(path)

    def test_content_not_in_repr(self) -> None:
        document = UploadedDocument(name="a.pdf", content=b"secret", media_type=PDF_MEDIA_TYPE)

        assert "secret" not in repr(document)


class TestParseResult:
    """Test ParseResult construction from the parse response."""

    def test_from_payload(self) -> None:
        result = ParseResult.from_payload({"chunks": [{"markdown": "a"}, {}, {"markdown": "b"}]})

        assert result.chunks == [Chunk("a"), Chunk(None), Chunk("b")]

    def test_missing_chunks(self) -> None:
        assert ParseResult.from_payload({}).chunks == []

    @pytest.mark.parametrize("payload", [None, [], "text", {"chunks": "oops"}])
    def test_malformed_payload(self, payload: object) -> None:
        assert ParseResult.from_payload(payload).chunks == []

    def test_non_string_markdown_counts_as_missing(self) -> None:
        result = ParseResult.from_payload({"chunks": [{"markdown": 42}, "raw"]})

        assert result.chunks == [Chunk(None), Chunk(None)]
