"""Data models for transcript input."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TranscriptSegment:
    """One utterance of a transcript, with optional speaker and timing."""

    speaker: str | None
    text: str
    start_time: float | None = None
    end_time: float | None = None

    def to_line(self) -> str:
        return f"{self.speaker}: {self.text}" if self.speaker else self.text
