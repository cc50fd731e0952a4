"""Sliding-window chunking of transcript text on word boundaries."""

from __future__ import annotations

import logging

from meeting_summary.summarization.models import TextChunk
from meeting_summary.summarization.tokens import CHARS_PER_TOKEN

logger = logging.getLogger(__name__)


def _find_boundary(text: str, start: int, end: int) -> int:
    """Scan backward from *end* for whitespace, stopping at *start*.

    Returns the whitespace position when one lies strictly after *start*,
    otherwise *end* unchanged (the chunk is cut mid-word).
    """
    boundary = end
    while boundary > start and not text[boundary].isspace():
        boundary -= 1
    return boundary if boundary > start else end


def chunk_text(text: str, chunk_size_tokens: int, overlap_tokens: int) -> list[TextChunk]:
    """Split *text* into overlapping chunks that avoid cutting words.

    Token sizes are converted to characters with :data:`CHARS_PER_TOKEN`.
    Each window is at most ``chunk_size_tokens * 4`` characters; its end is
    pulled back to the nearest whitespace when the window stops inside the
    text. Consecutive windows start ``chunk_size - overlap`` characters apart
    (at least 1), or at the previous chunk's end if that comes first, so every
    character lands in at least one chunk.

    Example with ``chunk_size_tokens=10`` (40 chars) and ``overlap_tokens=2``
    (8 chars)::

        "The quick brown fox jumps over the lazy dog and runs away"
        -> "The quick brown fox jumps over the lazy"   [0:39]
        -> "he lazy dog and runs away"                 [32:57]

    Args:
        text: The transcript text.
        chunk_size_tokens: Maximum tokens per chunk.
        overlap_tokens: Tokens shared between neighbouring chunks.

    Returns:
        Chunks in left-to-right order; empty for empty text or a zero size.
    """
    logger.debug(
        "Chunking text with chunk_size=%d tokens, overlap=%d tokens",
        chunk_size_tokens,
        overlap_tokens,
    )
    if not text or chunk_size_tokens <= 0:
        return []

    chunk_size = chunk_size_tokens * CHARS_PER_TOKEN
    overlap = max(overlap_tokens, 0) * CHARS_PER_TOKEN
    total = len(text)

    if total <= chunk_size:
        return [TextChunk(content=text, start=0, end=total, chunk_index=0)]

    # Prevent a zero or negative step when overlap >= chunk_size
    step = max(chunk_size - overlap, 1)

    chunks: list[TextChunk] = []
    start = 0
    while start < total:
        end = min(start + chunk_size, total)
        if end < total:
            end = _find_boundary(text, start, end)

        chunks.append(
            TextChunk(
                content=text[start:end],
                start=start,
                end=end,
                chunk_index=len(chunks),
            )
        )

        if end == total:
            break
        start = min(start + step, end)

    logger.info("Created %d chunks from %d characters", len(chunks), total)
    return chunks
