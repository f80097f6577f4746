"""Utility helpers for working with uploaded files."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable, Iterator

PDF_MEDIA_TYPE = "application/pdf"
PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

_MEDIA_TYPES_BY_SUFFIX = {
    ".pdf": PDF_MEDIA_TYPE,
    ".pptx": PPTX_MEDIA_TYPE,
}
SUPPORTED_MEDIA_TYPES = frozenset(_MEDIA_TYPES_BY_SUFFIX.values())


def guess_media_type(name: str) -> str | None:
    """Return the supported media type for a file name, or None."""
    return _MEDIA_TYPES_BY_SUFFIX.get(Path(name).suffix.lower())


def iter_document_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield PDF and PPTX paths from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_document_paths(
                sorted(child for child in item.rglob("*") if child.is_file())
            )
        elif item.is_file() and guess_media_type(item.name) is not None:
            yield item


def compute_sha256(content: bytes) -> str:
    """Compute SHA256 hash for an in-memory document."""
    sha = hashlib.sha256()
    view = memoryview(content)
    for start in range(0, len(view), 1 << 20):
        sha.update(view[start : start + (1 << 20)])
    return sha.hexdigest()
