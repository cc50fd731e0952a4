"""Exception hierarchy for the summarization pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meeting_summary.summarization.models import ChunkFailure


class SummaryError(Exception):
    """Base class for every fatal pipeline failure."""

    stage: str = "pipeline"


class TransportError(SummaryError):
    """A single LLM call did not succeed."""

    def __init__(
        self,
        message: str,
        provider: str = "",
        stage: str = "final",
        chunk_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.stage = stage
        self.chunk_index = chunk_index

    def with_stage(self, stage: str, chunk_index: int | None = None) -> TransportError:
        """Tag the error with the pipeline stage it surfaced in."""
        self.stage = stage
        self.chunk_index = chunk_index
        return self

    def __str__(self) -> str:
        where = self.stage if self.chunk_index is None else f"{self.stage} {self.chunk_index + 1}"
        prefix = f"{self.provider} " if self.provider else ""
        return f"{prefix}LLM call failed during {where}: {self.message}"


class NoChunksProcessedError(SummaryError):
    """Every chunk of a multi-level run failed."""

    stage = "chunk"

    def __init__(self, total_chunks: int, failures: list[ChunkFailure] | None = None) -> None:
        super().__init__(
            "Multi-level summarization failed: No chunks were processed successfully."
        )
        self.total_chunks = total_chunks
        self.failures = failures or []


class TemplateError(SummaryError):
    """A template could not be loaded or is malformed."""

    stage = "template"

    def __init__(self, template_id: str, reason: str) -> None:
        super().__init__(f"Failed to load template '{template_id}': {reason}")
        self.template_id = template_id
        self.reason = reason


class TemplateNotFoundError(TemplateError):
    """No template is registered under the requested identifier."""

    def __init__(self, template_id: str) -> None:
        super().__init__(template_id, "template not found")


class MeetingNotFoundError(SummaryError):
    """No stored meeting has the requested id."""

    stage = "storage"

    def __init__(self, meeting_id: str) -> None:
        super().__init__(f"Meeting not found: {meeting_id}")
        self.meeting_id = meeting_id
