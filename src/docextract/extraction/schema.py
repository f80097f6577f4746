"""Extraction record contract and validation of ADE extraction payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, conint

StrictYear = conint(strict=True)
PageCount = conint(strict=True, gt=0)

ROOT_PATH = "extraction"

# Sent to ADE alongside the markdown; kept flat since the service only needs
# field names, types and descriptions.
EXTRACTION_JSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": "Main title of the document",
        },
        "authors": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List of author names",
        },
        "publishedYear": {
            "type": "integer",
            "description": "Year of publication",
        },
        "genres": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Book genres/categories",
        },
        "pages": {
            "type": "integer",
            "description": "Number of pages",
        },
        "language": {
            "type": "string",
            "description": "Language of the document (e.g., English, Spanish)",
        },
        "publisher": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Publisher company name",
                },
                "location": {
                    "type": "string",
                    "description": "Publisher location (city, country)",
                },
            },
            "description": "Publisher information",
        },
    },
}


def extraction_schema_json() -> str:
    return json.dumps(EXTRACTION_JSON_SCHEMA)


class Publisher(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[StrictStr] = Field(default=None, description="Publisher company name")
    location: Optional[StrictStr] = Field(
        default=None, description="Publisher location (city, country)"
    )


class ExtractionRecord(BaseModel):
    """Book metadata extracted from a document. Every field may be absent."""

    model_config = ConfigDict(frozen=True)

    title: Optional[StrictStr] = Field(default=None, description="Main title of the document")
    authors: Optional[List[StrictStr]] = Field(default=None, description="List of author names")
    published_year: Optional[StrictYear] = Field(
        default=None, alias="publishedYear", description="Year of publication"
    )
    genres: Optional[List[StrictStr]] = Field(default=None, description="Book genres/categories")
    pages: Optional[PageCount] = Field(default=None, description="Number of pages")
    language: Optional[StrictStr] = Field(
        default=None, description="Language of the document (e.g., English, Spanish)"
    )
    publisher: Optional[Publisher] = Field(default=None, description="Publisher information")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(slots=True, frozen=True)
class ValidationIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(slots=True)
class ValidationResult:
    record: ExtractionRecord | None = None
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.record is not None and not self.issues


def _format_path(location: tuple[int | str, ...]) -> str:
    if not location:
        return ROOT_PATH
    return ".".join(str(part) for part in location)


def validate_extraction(payload: Any) -> ValidationResult:
    """Validate a decoded extraction payload without raising.

    Absent and null fields are accepted. Wrong types and out-of-range values
    are collected for every field, nested publisher fields included.
    """
    try:
        record = ExtractionRecord.model_validate(payload)
    except ValidationError as exc:
        issues = [
            ValidationIssue(path=_format_path(tuple(error["loc"])), message=error["msg"])
            for error in exc.errors()
        ]
        return ValidationResult(issues=issues)
    return ValidationResult(record=record)
