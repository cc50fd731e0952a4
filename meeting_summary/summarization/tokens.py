"""Fast token estimate shared by the chunker and the strategy selector."""

from __future__ import annotations

# Rough estimate: 1 token ≈ 4 characters. The chunker converts token budgets
# back to characters with the same constant.
CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Approximate the token count of *text* as ``ceil(len(text) / 4)``."""
    return (len(text) + CHARS_PER_TOKEN - 1) // CHARS_PER_TOKEN
