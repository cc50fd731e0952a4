"""Post-processing of raw LLM output into clean markdown."""

from __future__ import annotations

import re

# Model-internal reasoning blocks, possibly spanning several lines
_THINKING_RE = re.compile(r"<think(?:ing)?>.*?</think(?:ing)?>", re.DOTALL)

_FENCE_PREFIXES: tuple[str, ...] = ("```markdown\n", "```\n")
_FENCE_SUFFIX = "```"


def _clean_once(text: str) -> str:
    trimmed = _THINKING_RE.sub("", text).strip()

    for prefix in _FENCE_PREFIXES:
        if (
            len(trimmed) >= len(prefix) + len(_FENCE_SUFFIX)
            and trimmed.startswith(prefix)
            and trimmed.endswith(_FENCE_SUFFIX)
        ):
            return trimmed[len(prefix) : -len(_FENCE_SUFFIX)].strip()

    return trimmed


def clean_llm_markdown_output(markdown: str) -> str:
    """Strip reasoning blocks and a wrapping code fence from LLM output.

    ``<think>``/``<thinking>`` blocks are removed, the text is trimmed, and a
    surrounding ```` ```markdown ```` or bare ```` ``` ```` fence is unwrapped.
    Cleaning repeats until nothing changes, so the result is stable under a
    second pass (e.g. a fence nested inside another fence).
    """
    cleaned = _clean_once(markdown)
    while True:
        again = _clean_once(cleaned)
        if again == cleaned:
            return cleaned
        cleaned = again


def extract_meeting_title(markdown: str) -> str | None:
    """Return the text of the first ``# `` heading in *markdown*, if any."""
    for line in markdown.splitlines():
        if line.startswith("# "):
            return line[2:].strip()
    return None
