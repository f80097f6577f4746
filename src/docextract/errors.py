"""Errors raised by the extraction pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from docextract.extraction.schema import ValidationIssue


class PipelineError(Exception):
    """Base class for every user-visible pipeline failure."""

    kind = "pipeline"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(PipelineError):
    """Missing credential or uninitialized ADE client."""

    kind = "configuration"


class InputError(PipelineError):
    """Nothing to work on: no document selected, no markdown, no record."""

    kind = "input"


class TransportError(PipelineError):
    """The remote call failed or answered with a non-success status."""

    kind = "transport"


class EmptyResultError(PipelineError):
    """The remote call succeeded but returned nothing usable."""

    kind = "empty_result"


class SchemaValidationError(PipelineError):
    """The extraction payload does not match the record contract."""

    kind = "validation"

    def __init__(self, issues: Sequence["ValidationIssue"]) -> None:
        self.issues = list(issues)
        details = ", ".join(str(issue) for issue in self.issues)
        super().__init__(f"Schema validation failed: {details}")


class PipelineBusyError(PipelineError):
    """A stage is already running for the current document."""

    kind = "busy"
