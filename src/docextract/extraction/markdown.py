"""Collapse parse fragments into a single markdown document."""

from __future__ import annotations

from typing import Sequence

from docextract.models import Chunk
from docextract.utils.text import join_nonblank

CHUNK_SEPARATOR = "\n\n"


def normalize_chunks(chunks: Sequence[Chunk]) -> str:
    """Join the markdown of every non-blank chunk with a blank line.

    Chunks without markdown count as empty. An empty result means the parse
    produced nothing usable.
    """
    return join_nonblank((chunk.markdown or "" for chunk in chunks), CHUNK_SEPARATOR)
