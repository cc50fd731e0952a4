"""Adaptive meeting summarization: transcript -> templated markdown report."""

from __future__ import annotations

import logging
from collections.abc import Callable

from meeting_summary.config import settings
from meeting_summary.errors import TransportError
from meeting_summary.llm.client import generate_summary
from meeting_summary.pipeline_config import PipelineConfig, ProviderConfig, SummaryStrategy
from meeting_summary.summarization.models import SummaryResult
from meeting_summary.summarization.prompts import (
    PromptRole,
    fill_placeholders,
    get_prompt,
    normalize_language,
)
from meeting_summary.summarization.sanitize import clean_llm_markdown_output
from meeting_summary.summarization.strategy import select_strategy
from meeting_summary.summarization.summarizer import LLMCall, combine_summaries, summarize_chunks
from meeting_summary.summarization.templates import Template, get_template
from meeting_summary.summarization.tokens import estimate_tokens

logger = logging.getLogger(__name__)


def default_pipeline_config(token_threshold: int | None = None) -> PipelineConfig:
    """Build a :class:`PipelineConfig` from settings, optionally overriding the threshold."""
    return PipelineConfig(
        token_threshold=token_threshold or settings.token_threshold,
        prompt_reserve_tokens=settings.prompt_reserve_tokens,
        chunk_overlap_tokens=settings.chunk_overlap_tokens,
    )


def build_final_user_prompt(content: str, custom_prompt: str = "") -> str:
    """Wrap the content to summarize (and optional user context) in delimiter tags."""
    prompt = f"\n<transcript_chunks>\n{content}\n</transcript_chunks>\n"
    if custom_prompt and custom_prompt.strip():
        prompt += f"\n\nUser Provided Context:\n\n<user_context>\n{custom_prompt}\n</user_context>"
    return prompt


def build_final_system_prompt(template: Template, language: str) -> str:
    """Insert the template's section instructions and skeleton into the final prompt."""
    return fill_placeholders(
        get_prompt(PromptRole.FINAL_SYSTEM, language),
        template.to_section_instructions(),
        template.to_markdown_structure(),
    )


def generate_meeting_summary(
    text: str,
    config: ProviderConfig,
    custom_prompt: str = "",
    template_id: str = "standard_meeting",
    token_threshold: int | None = None,
    language: str = "en",
    *,
    llm: LLMCall | None = None,
    template_loader: Callable[[str], Template] | None = None,
    pipeline_config: PipelineConfig | None = None,
) -> SummaryResult:
    """Summarize a transcript into a markdown report.

    Bounded-context providers get long transcripts chunked, summarized chunk
    by chunk and combined before the final call; everything else is sent in a
    single pass. The final call fills the chosen template and its output is
    sanitized.

    Args:
        text: Full transcript text.
        config: Provider, model, credentials and context capability.
        custom_prompt: Optional free-text context from the user.
        template_id: Report template identifier.
        token_threshold: Single-pass limit in tokens (defaults to settings, 4000).
        language: Prompt language tag, e.g. ``"en"`` or ``"pt-BR"``.
        llm: Transport callable; defaults to the real provider client.
        template_loader: Resolves a template id; defaults to :func:`get_template`.
        pipeline_config: Full token budget; overrides *token_threshold*.

    Returns:
        The sanitized report and the number of chunks that fed into it.

    Raises:
        NoChunksProcessedError: Every chunk of a multi-level run failed.
        TemplateError: The template could not be resolved.
        TransportError: The combining or final LLM call failed.
    """
    llm = llm or generate_summary
    load_template = template_loader or get_template
    budget = pipeline_config or default_pipeline_config(token_threshold)
    language = normalize_language(language)

    logger.info(
        "Starting summary generation with provider: %s, model: %s",
        config.provider,
        config.model,
    )
    total_tokens = estimate_tokens(text)
    logger.info("Transcript length: %d tokens", total_tokens)

    strategy = select_strategy(config.resolved_capability, text, budget.token_threshold)
    if strategy is SummaryStrategy.SINGLE_PASS:
        logger.info(
            "Using single-pass summarization (tokens: %d, threshold: %d, capability: %s)",
            total_tokens,
            budget.token_threshold,
            config.resolved_capability,
        )
        content = text
        chunk_count = 1
    else:
        logger.info(
            "Using multi-level summarization (tokens: %d exceeds threshold: %d)",
            total_tokens,
            budget.token_threshold,
        )
        run = summarize_chunks(text, config, budget, language, llm)
        content = combine_summaries(run.summaries, config, language, llm)
        chunk_count = run.succeeded

    logger.info("Generating final markdown report with template: %s", template_id)
    template = load_template(template_id)

    system_prompt = build_final_system_prompt(template, language)
    user_prompt = build_final_user_prompt(content, custom_prompt)
    try:
        raw_markdown = llm(config, system_prompt, user_prompt)
    except TransportError as exc:
        raise exc.with_stage("final")

    markdown = clean_llm_markdown_output(raw_markdown)
    logger.info("Summary generation completed successfully")
    return SummaryResult(markdown=markdown, chunk_count=chunk_count, strategy=strategy)
