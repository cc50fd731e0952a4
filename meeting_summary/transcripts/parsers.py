"""Turn uploaded transcript files (VTT, plain text, JSON) into summarizable text."""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

from meeting_summary.transcripts.models import TranscriptSegment

_TIMESTAMP_RE = re.compile(
    r"(\d{1,2}:\d{2}:\d{2}[.,]\d{3})\s*-->\s*(\d{1,2}:\d{2}:\d{2}[.,]\d{3})"
)
_SPEAKER_RE = re.compile(r"^(.+?):\s+(.+)$")
# Microsoft Teams voice tag; the closing </v> is optional in WebVTT
_VOICE_TAG_RE = re.compile(r"^<v ([^>]+)>(.*?)(?:</v>)?$", re.DOTALL)


def _vtt_seconds(ts: str) -> float:
    """Convert ``HH:MM:SS.mmm`` (or ``MM:SS.mmm``) to seconds."""
    parts = ts.strip().replace(",", ".").split(":")
    if len(parts) == 2:
        parts.insert(0, "0")
    if len(parts) != 3:
        return 0.0
    hours, minutes, seconds = parts
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def _split_speaker(text: str) -> tuple[str | None, str]:
    voice = _VOICE_TAG_RE.match(text)
    if voice:
        return voice.group(1).strip(), voice.group(2).strip()
    labelled = _SPEAKER_RE.match(text)
    if labelled:
        return labelled.group(1), labelled.group(2)
    return None, text


def parse_vtt(content: str) -> list[TranscriptSegment]:
    """Parse WebVTT cues, reading ``Speaker: text`` or ``<v Speaker>text`` labels."""
    segments: list[TranscriptSegment] = []
    lines = content.strip().splitlines()
    i = 0
    while i < len(lines):
        match = _TIMESTAMP_RE.search(lines[i])
        i += 1
        if not match:
            continue

        cue: list[str] = []
        while i < len(lines) and lines[i].strip() and not _TIMESTAMP_RE.search(lines[i]):
            cue.append(lines[i].strip())
            i += 1

        speaker, text = _split_speaker(" ".join(cue))
        if text:
            segments.append(
                TranscriptSegment(
                    speaker=speaker,
                    text=text,
                    start_time=_vtt_seconds(match.group(1)),
                    end_time=_vtt_seconds(match.group(2)),
                )
            )
    return segments


def parse_plain_text(content: str) -> list[TranscriptSegment]:
    """One segment per non-blank line; a leading ``Name:`` becomes the speaker."""
    segments: list[TranscriptSegment] = []
    for line in content.strip().splitlines():
        line = line.strip()
        if not line:
            continue
        match = _SPEAKER_RE.match(line)
        if match:
            segments.append(TranscriptSegment(speaker=match.group(1), text=match.group(2)))
        else:
            segments.append(TranscriptSegment(speaker=None, text=line))
    return segments


def _seconds(value: Any, scale: float) -> float | None:
    if value is None:
        return None
    try:
        return float(value) / scale
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid timestamp in JSON transcript: {value!r}") from exc


def _segment_from(item: Any, speaker_key: str, scale: float = 1.0) -> TranscriptSegment:
    if not isinstance(item, dict):
        raise ValueError(f"Transcript entries must be objects, got {type(item).__name__}")
    if "text" not in item:
        raise ValueError(f"Transcript entry has no 'text' field: {sorted(item)}")
    speaker = item.get(speaker_key)
    return TranscriptSegment(
        speaker=str(speaker) if speaker is not None else None,
        text=str(item["text"]).strip(),
        start_time=_seconds(item.get("start_time", item.get("start")), scale),
        end_time=_seconds(item.get("end_time", item.get("end")), scale),
    )


def _segments_from(
    items: Any, container: str, speaker_key: str, scale: float = 1.0
) -> list[TranscriptSegment]:
    if not isinstance(items, list):
        raise ValueError(f"Expected '{container}' to be a list, got {type(items).__name__}")
    return [_segment_from(item, speaker_key, scale) for item in items]


def parse_json(content: str) -> list[TranscriptSegment]:
    """Parse a JSON transcript.

    Supported shapes:

    - ``{"utterances": [{"speaker", "text", "start", "end"}]}`` (times in ms)
    - ``{"transcription": [{"speaker_id", "text", "start_time", "end_time"}]}``
    - ``{"segments": [{"speaker", "text", "start_time", "end_time"}]}``
    - a bare list of ``{"speaker", "text"}`` objects

    Raises:
        ValueError: Invalid JSON, or a shape other than the ones above.
    """
    data = json.loads(content)

    if isinstance(data, list):
        return _segments_from(data, "top-level array", "speaker")
    if not isinstance(data, dict):
        raise ValueError(f"Unrecognized JSON transcript format: {type(data).__name__}")
    if "utterances" in data:
        return _segments_from(data["utterances"], "utterances", "speaker", scale=1000.0)
    if "transcription" in data:
        return _segments_from(data["transcription"], "transcription", "speaker_id")
    if "segments" in data:
        return _segments_from(data["segments"], "segments", "speaker")

    msg = f"Unrecognized JSON transcript format. Keys: {list(data.keys())}"
    raise ValueError(msg)


PARSERS: dict[str, Callable[[str], list[TranscriptSegment]]] = {
    "vtt": parse_vtt,
    "text": parse_plain_text,
    "txt": parse_plain_text,
    "json": parse_json,
}


def parse_transcript(content: str, format: str) -> list[TranscriptSegment]:
    """Dispatch to the parser for *format* (``vtt``, ``text``/``txt`` or ``json``).

    Raises:
        ValueError: Unknown format or unparseable JSON.
    """
    parser = PARSERS.get(format.lower())
    if parser is None:
        msg = f"Unknown transcript format: {format!r}. Supported: {list(PARSERS)}"
        raise ValueError(msg)
    return parser(content)


def segments_to_text(segments: list[TranscriptSegment]) -> str:
    """Flatten segments into ``Speaker: text`` lines for the summarizer."""
    return "\n".join(seg.to_line() for seg in segments if seg.text)


def load_transcript_text(content: str, format: str) -> str:
    """Parse *content* and return the flattened transcript text.

    Plain text is returned unchanged so that its original layout survives.
    """
    if format.lower() in ("text", "txt"):
        return content.strip()
    return segments_to_text(parse_transcript(content, format))


def format_for_filename(filename: str) -> str:
    """Guess the transcript format from a file name; unknown extensions are text."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return {"vtt": "vtt", "json": "json"}.get(ext, "text")
