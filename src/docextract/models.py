"""Core docextract data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

from docextract.errors import InputError
from docextract.utils.files import SUPPORTED_MEDIA_TYPES, compute_sha256, guess_media_type


@dataclass(slots=True)
class UploadedDocument:
    """Binary document selected for parsing."""

    name: str
    content: bytes = field(repr=False)
    media_type: str

    def __post_init__(self) -> None:
        if self.media_type not in SUPPORTED_MEDIA_TYPES:
            raise InputError(
                f"Unsupported document type {self.media_type!r}. Please choose a PDF or PPTX file."
            )

    @classmethod
    def from_path(cls, path: Path) -> "UploadedDocument":
        media_type = guess_media_type(path.name)
        if media_type is None:
            raise InputError(f"Unsupported document: {path.name}. Please choose a PDF or PPTX file.")
        return cls(name=path.name, content=path.read_bytes(), media_type=media_type)

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def sha256(self) -> str:
        return compute_sha256(self.content)


@dataclass(slots=True)
class Chunk:
    """Fragment of parsed text, possibly without markdown."""

    markdown: str | None = None


@dataclass(slots=True)
class ParseResult:
    """Ordered fragments returned by the parse call."""

    chunks: List[Chunk] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "ParseResult":
        if not isinstance(payload, dict):
            return cls()
        raw_chunks = payload.get("chunks")
        if not isinstance(raw_chunks, list):
            return cls()

        chunks: List[Chunk] = []
        for raw in raw_chunks:
            markdown = raw.get("markdown") if isinstance(raw, dict) else None
            chunks.append(Chunk(markdown=markdown if isinstance(markdown, str) else None))
        return cls(chunks=chunks)
