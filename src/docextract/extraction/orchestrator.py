"""Pipeline state machine driving parse, extract and export."""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, NoReturn, Tuple

from docextract.errors import (
    ConfigurationError,
    EmptyResultError,
    InputError,
    PipelineBusyError,
    PipelineError,
    SchemaValidationError,
    TransportError,
)
from docextract.export import ExportArtifact, build_export
from docextract.extraction.client import AdeClient
from docextract.extraction.markdown import normalize_chunks
from docextract.extraction.schema import ExtractionRecord, validate_extraction
from docextract.models import ParseResult, UploadedDocument
from docextract.utils.text import excerpt, is_blank

LOGGER = logging.getLogger(__name__)

CLIENT_NOT_READY = "ADE client is not ready yet. Please wait a moment and retry."
NO_DOCUMENT = "Please choose a document (PDF or PPTX) before parsing."
NO_MARKDOWN = "No markdown content provided for extraction."
EMPTY_PARSE = "Parsing completed but no markdown content was returned."
EMPTY_EXTRACTION = "ADE returned an empty extraction result."
NOTHING_TO_EXPORT = "Nothing has been extracted yet."
UNKNOWN_ERROR = "An unknown error occurred during {stage}."


class PipelineState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    EXTRACTING = "extracting"
    ERROR = "error"


class PipelineEvent(str, Enum):
    SELECT = "select"
    PARSE = "parse"
    PARSE_OK = "parse_ok"
    PARSE_FAILED = "parse_failed"
    EXTRACT = "extract"
    EXTRACT_OK = "extract_ok"
    EXTRACT_FAILED = "extract_failed"


TRANSITIONS: Dict[Tuple[PipelineState, PipelineEvent], PipelineState] = {
    (PipelineState.IDLE, PipelineEvent.SELECT): PipelineState.IDLE,
    (PipelineState.ERROR, PipelineEvent.SELECT): PipelineState.IDLE,
    (PipelineState.IDLE, PipelineEvent.PARSE): PipelineState.PARSING,
    (PipelineState.ERROR, PipelineEvent.PARSE): PipelineState.PARSING,
    (PipelineState.PARSING, PipelineEvent.PARSE_OK): PipelineState.IDLE,
    (PipelineState.PARSING, PipelineEvent.PARSE_FAILED): PipelineState.ERROR,
    (PipelineState.IDLE, PipelineEvent.EXTRACT): PipelineState.EXTRACTING,
    (PipelineState.ERROR, PipelineEvent.EXTRACT): PipelineState.EXTRACTING,
    (PipelineState.EXTRACTING, PipelineEvent.EXTRACT_OK): PipelineState.IDLE,
    (PipelineState.EXTRACTING, PipelineEvent.EXTRACT_FAILED): PipelineState.ERROR,
}


def next_state(state: PipelineState, event: PipelineEvent) -> PipelineState:
    """Look up a transition; anything missing means a stage is still running."""
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise PipelineBusyError(
            f"Cannot {event.value.replace('_', ' ')} while {state.value}."
        ) from None


def _unexpected(stage: str, exc: Exception) -> TransportError:
    return TransportError(str(exc) or UNKNOWN_ERROR.format(stage=stage))


class ExtractionOrchestrator:
    """Owns one pipeline run: the selected document and everything derived from it.

    Preconditions that fail before any network call (no client, no document,
    no markdown) leave the state untouched. Failures of a running stage move
    the state to ``error``. Either way the message is kept in ``error`` and the
    exception is re-raised for the caller.
    """

    def __init__(self, client: AdeClient | None, *, preview_chars: int = 1200) -> None:
        self.client = client
        self.preview_chars = preview_chars
        self.state = PipelineState.IDLE
        self.document: UploadedDocument | None = None
        self.markdown = ""
        self.record: ExtractionRecord | None = None
        self.extracted_markdown = ""
        self.error = ""

    @property
    def busy(self) -> bool:
        return self.state in (PipelineState.PARSING, PipelineState.EXTRACTING)

    def select_document(self, document: UploadedDocument) -> None:
        self._transition(PipelineEvent.SELECT)
        self.document = document
        self.markdown = ""
        self.record = None
        self.extracted_markdown = ""
        self.error = ""
        LOGGER.info(
            "Selected %s (%s, %d bytes, sha256 %s)",
            document.name,
            document.media_type,
            document.size,
            document.sha256,
        )

    async def parse(self) -> str:
        next_state(self.state, PipelineEvent.PARSE)
        if self.client is None:
            self._reject(ConfigurationError(CLIENT_NOT_READY))
        if self.document is None:
            self._reject(InputError(NO_DOCUMENT))

        self._transition(PipelineEvent.PARSE)
        self.error = ""
        self.markdown = ""
        self.record = None
        self.extracted_markdown = ""

        try:
            payload = await self.client.parse(self.document)
            markdown = normalize_chunks(ParseResult.from_payload(payload).chunks)
            if is_blank(markdown):
                raise EmptyResultError(EMPTY_PARSE)
        except PipelineError as exc:
            self._fail(PipelineEvent.PARSE_FAILED, exc)
            raise
        except Exception as exc:
            error = _unexpected("parsing", exc)
            self._fail(PipelineEvent.PARSE_FAILED, error)
            raise error from exc

        self.markdown = markdown
        self._transition(PipelineEvent.PARSE_OK)
        LOGGER.info("Parsed %s into %d characters of markdown", self.document.name, len(markdown))
        return markdown

    async def extract(self) -> ExtractionRecord:
        next_state(self.state, PipelineEvent.EXTRACT)
        if is_blank(self.markdown):
            self._reject(InputError(NO_MARKDOWN))
        if self.client is None:
            self._reject(ConfigurationError(CLIENT_NOT_READY))

        self._transition(PipelineEvent.EXTRACT)
        self.error = ""
        self.record = None
        markdown = self.markdown

        try:
            payload = await self.client.extract(markdown)
            extraction = payload.get("extraction") if isinstance(payload, dict) else None
            if not extraction:
                raise EmptyResultError(EMPTY_EXTRACTION)
            result = validate_extraction(extraction)
            if not result.ok:
                raise SchemaValidationError(result.issues)
        except PipelineError as exc:
            self._fail(PipelineEvent.EXTRACT_FAILED, exc)
            raise
        except Exception as exc:
            error = _unexpected("extraction", exc)
            self._fail(PipelineEvent.EXTRACT_FAILED, error)
            raise error from exc

        self.record = result.record
        self.extracted_markdown = markdown
        self._transition(PipelineEvent.EXTRACT_OK)
        LOGGER.info("Extracted metadata: %s", self.record.to_payload())
        return self.record

    def export(
        self,
        *,
        include_full_text: bool = True,
        today: date | None = None,
        extracted_at: datetime | None = None,
    ) -> ExportArtifact:
        if self.record is None:
            self._reject(InputError(NOTHING_TO_EXPORT))

        artifact = build_export(
            self.record,
            self.extracted_markdown if include_full_text else None,
            today=today,
            extracted_at=extracted_at,
        )
        self.document = None
        LOGGER.info("Exported %s", artifact.filename)
        return artifact

    def snapshot(self) -> dict[str, Any]:
        document = None
        if self.document is not None:
            document = {
                "name": self.document.name,
                "size": self.document.size,
                "media_type": self.document.media_type,
                "sha256": self.document.sha256,
            }
        return {
            "state": self.state.value,
            "document": document,
            "markdown_preview": excerpt(self.markdown, self.preview_chars),
            "markdown_length": len(self.markdown),
            "record": self.record.to_payload() if self.record is not None else None,
            "error": self.error,
        }

    def _transition(self, event: PipelineEvent) -> None:
        previous = self.state
        self.state = next_state(previous, event)
        LOGGER.debug("Pipeline %s: %s -> %s", event.value, previous.value, self.state.value)

    def _reject(self, exc: PipelineError) -> NoReturn:
        self.error = exc.message
        LOGGER.warning("%s", exc.message)
        raise exc

    def _fail(self, event: PipelineEvent, exc: PipelineError) -> None:
        self.error = exc.message
        self._transition(event)
        LOGGER.error("%s", exc.message)
