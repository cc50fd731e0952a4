"""Data models for the summarization pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

from meeting_summary.pipeline_config import SummaryStrategy


@dataclass(frozen=True)
class TextChunk:
    """A contiguous slice of the transcript and its code-point span."""

    content: str
    start: int
    end: int
    chunk_index: int = 0


@dataclass(frozen=True)
class ChunkSummary:
    """The model's summary of one chunk, keyed by the chunk's position."""

    chunk_index: int
    text: str


@dataclass(frozen=True)
class ChunkFailure:
    """A chunk whose summarization call failed (logged, then skipped)."""

    chunk_index: int
    error: str


@dataclass
class ChunkRun:
    """Outcome of summarizing every chunk of a transcript in order."""

    total_chunks: int
    summaries: list[ChunkSummary] = field(default_factory=list)
    failures: list[ChunkFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.summaries)


@dataclass
class SummaryResult:
    """Final report plus the number of chunks that fed into it."""

    markdown: str
    chunk_count: int
    strategy: SummaryStrategy = SummaryStrategy.SINGLE_PASS
