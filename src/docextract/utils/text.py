"""Text helpers."""

from __future__ import annotations

from typing import Iterable


def is_blank(text: str | None) -> bool:
    return not text or not text.strip()


def join_nonblank(parts: Iterable[str | None], separator: str = "\n\n") -> str:
    """Join the non-blank parts in order, skipping missing and whitespace-only ones."""
    return separator.join(part for part in parts if not is_blank(part))  # type: ignore[misc]


def excerpt(text: str, limit: int) -> str:
    """Return at most `limit` leading characters of `text`."""
    if limit <= 0:
        return ""
    return text[:limit]
