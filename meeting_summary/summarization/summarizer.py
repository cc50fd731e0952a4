"""Multi-level summarization: per-chunk summaries and their combination."""

from __future__ import annotations

import logging
from collections.abc import Callable

from meeting_summary.errors import NoChunksProcessedError, TransportError
from meeting_summary.pipeline_config import PipelineConfig, ProviderConfig
from meeting_summary.summarization.chunking import chunk_text
from meeting_summary.summarization.models import ChunkFailure, ChunkRun, ChunkSummary
from meeting_summary.summarization.prompts import PromptRole, fill_placeholders, get_prompt

logger = logging.getLogger(__name__)

# (provider config, system prompt, user prompt) -> completion text
LLMCall = Callable[[ProviderConfig, str, str], str]

SUMMARY_SEPARATOR = "\n---\n"


def summarize_chunks(
    text: str,
    config: ProviderConfig,
    pipeline_config: PipelineConfig,
    language: str,
    llm: LLMCall,
) -> ChunkRun:
    """Chunk *text* and summarize every chunk in order.

    A chunk whose call fails is logged and left out; the remaining chunks
    are still processed.

    Raises:
        NoChunksProcessedError: Not a single chunk could be summarized.
    """
    chunks = chunk_text(
        text,
        pipeline_config.chunk_size_tokens,
        pipeline_config.chunk_overlap_tokens,
    )
    run = ChunkRun(total_chunks=len(chunks))
    logger.info("Split transcript into %d chunks", run.total_chunks)

    system_prompt = get_prompt(PromptRole.CHUNK_SYSTEM, language)
    user_template = get_prompt(PromptRole.CHUNK_USER, language)

    for chunk in chunks:
        position = f"{chunk.chunk_index + 1}/{run.total_chunks}"
        logger.info("Processing chunk %s", position)
        try:
            summary = llm(config, system_prompt, fill_placeholders(user_template, chunk.content))
        except TransportError as exc:
            exc.with_stage("chunk", chunk.chunk_index)
            logger.error("Failed processing chunk %s: %s", position, exc.message)
            run.failures.append(ChunkFailure(chunk_index=chunk.chunk_index, error=exc.message))
            continue
        run.summaries.append(ChunkSummary(chunk_index=chunk.chunk_index, text=summary))
        logger.info("Chunk %s processed successfully", position)

    if not run.summaries:
        raise NoChunksProcessedError(run.total_chunks, run.failures)

    logger.info(
        "Successfully processed %d out of %d chunks", run.succeeded, run.total_chunks
    )
    return run


def combine_summaries(
    summaries: list[ChunkSummary],
    config: ProviderConfig,
    language: str,
    llm: LLMCall,
) -> str:
    """Merge chunk summaries (in chunk order) into one summary.

    A single summary is returned as-is without calling the model. A failure
    of the combining call propagates.
    """
    if not summaries:
        raise ValueError("combine_summaries needs at least one chunk summary")
    if len(summaries) == 1:
        return summaries[0].text

    logger.info("Combining %d chunk summaries into cohesive summary", len(summaries))
    ordered = sorted(summaries, key=lambda s: s.chunk_index)
    combined_text = SUMMARY_SEPARATOR.join(s.text for s in ordered)

    system_prompt = get_prompt(PromptRole.COMBINE_SYSTEM, language)
    user_prompt = fill_placeholders(get_prompt(PromptRole.COMBINE_USER, language), combined_text)
    try:
        return llm(config, system_prompt, user_prompt)
    except TransportError as exc:
        raise exc.with_stage("combine")
