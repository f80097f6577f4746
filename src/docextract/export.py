"""Markdown export of extracted book metadata."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import List

from docextract.extraction.schema import ExtractionRecord
from docextract.utils.text import is_blank

EXPORT_MEDIA_TYPE = "text/markdown; charset=utf-8"
UNTITLED_SLUG = "untitled-document"
EXTRACTION_METHOD = "ADE Parse & Extract"
SEPARATOR = "\n---\n"


@dataclass(slots=True, frozen=True)
class ExportArtifact:
    filename: str
    content: str
    media_type: str = EXPORT_MEDIA_TYPE


def sanitize_filename(title: str) -> str:
    """Turn a title into a lower-case, hyphen separated slug."""
    slug = title.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def build_filename(record: ExtractionRecord, today: date | None = None) -> str:
    """Return ``YYYY-MM-DD-<slug>.md`` for the record."""
    day = today or date.today()
    slug = sanitize_filename(record.title) if record.title else ""
    return f"{day.isoformat()}-{slug or UNTITLED_SLUG}.md"


def _publisher_line(record: ExtractionRecord) -> str | None:
    if record.publisher is None:
        return None
    parts: List[str] = []
    if record.publisher.name:
        parts.append(record.publisher.name)
    if record.publisher.location:
        parts.append(f"({record.publisher.location})")
    if not parts:
        return None
    return " ".join(parts)


def render_markdown(
    record: ExtractionRecord,
    full_markdown: str | None = None,
    *,
    extracted_at: datetime | None = None,
) -> str:
    """Render the record, and optionally the whole document, as markdown."""
    sections: List[str] = []

    if record.title:
        sections.append(f"# {record.title}\n")

    sections.append("## Metadata\n")

    if record.authors:
        sections.append(f"**Authors:** {', '.join(record.authors)}\n")
    if record.published_year is not None:
        sections.append(f"**Published Year:** {record.published_year}\n")
    if record.pages is not None:
        sections.append(f"**Pages:** {record.pages}\n")
    if record.language:
        sections.append(f"**Language:** {record.language}\n")
    publisher = _publisher_line(record)
    if publisher:
        sections.append(f"**Publisher:** {publisher}\n")
    if record.genres:
        sections.append(f"**Genres:** {', '.join(record.genres)}\n")

    timestamp = (extracted_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    sections.append(SEPARATOR)
    sections.append(f"*Extracted on: {timestamp}*\n")
    sections.append(f"*Extraction method: {EXTRACTION_METHOD}*\n")

    if not is_blank(full_markdown):
        sections.append(SEPARATOR)
        sections.append("## Document Content\n")
        sections.append(full_markdown)  # type: ignore[arg-type]

    return "\n".join(sections)


def build_export(
    record: ExtractionRecord,
    full_markdown: str | None = None,
    *,
    today: date | None = None,
    extracted_at: datetime | None = None,
) -> ExportArtifact:
    return ExportArtifact(
        filename=build_filename(record, today),
        content=render_markdown(record, full_markdown, extracted_at=extracted_at),
    )
