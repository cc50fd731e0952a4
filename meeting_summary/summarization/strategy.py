"""Single-pass vs. multi-level strategy decision."""

from __future__ import annotations

from meeting_summary.pipeline_config import ProviderCapability, SummaryStrategy
from meeting_summary.summarization.tokens import estimate_tokens


def select_strategy(
    capability: ProviderCapability,
    text: str,
    token_threshold: int,
) -> SummaryStrategy:
    """Pick how *text* is fed to the final prompt.

    Unbounded-context providers always take the whole transcript in one
    call. Bounded-context providers only fall back to multi-level
    summarization once the estimate reaches *token_threshold*.
    """
    if capability is ProviderCapability.UNBOUNDED:
        return SummaryStrategy.SINGLE_PASS
    if estimate_tokens(text) < token_threshold:
        return SummaryStrategy.SINGLE_PASS
    return SummaryStrategy.MULTI_LEVEL
