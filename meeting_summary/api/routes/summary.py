"""Summary endpoints: summarize raw text, an uploaded file, or a stored meeting."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from meeting_summary.api.models import (
    ModelOptions,
    SummarizeOptions,
    SummarizeRequest,
    SummaryResponse,
)
from meeting_summary.config import settings
from meeting_summary.errors import SummaryError, TemplateError, TemplateNotFoundError
from meeting_summary.llm.client import resolve_api_key
from meeting_summary.pipeline_config import LLMProvider, ProviderCapability, ProviderConfig
from meeting_summary.storage import fetch_meeting, get_supabase_client, store_summary
from meeting_summary.summarization.pipeline import default_pipeline_config, generate_meeting_summary
from meeting_summary.summarization.sanitize import extract_meeting_title
from meeting_summary.transcripts.parsers import format_for_filename, load_transcript_text

logger = logging.getLogger(__name__)

router = APIRouter()

# 20 MB upload limit for transcript files
MAX_UPLOAD_BYTES = 20 * 1024 * 1024


def resolve_provider_config(options: ModelOptions) -> ProviderConfig:
    """Resolve provider, model and key from the request, falling back to settings."""
    provider = options.provider or LLMProvider(settings.llm_provider)
    model = options.model
    if not model:
        if provider is not LLMProvider(settings.llm_provider):
            raise HTTPException(status_code=400, detail=f"A model is required for provider {provider}")
        model = settings.llm_model

    api_key = resolve_api_key(provider, options.api_key)
    if provider.requires_api_key and not api_key:
        raise HTTPException(
            status_code=400,
            detail=f"No API key configured for provider {provider}.",
        )
    return ProviderConfig(
        provider=provider,
        model=model,
        api_key=api_key,
        endpoint=options.endpoint,
        capability=options.capability,
    )


async def _summarize(
    transcript: str,
    options: SummarizeOptions,
    meeting_id: str | None = None,
) -> SummaryResponse:
    """Run the pipeline in a worker thread and map failures to HTTP errors."""
    if not transcript.strip():
        raise HTTPException(status_code=400, detail="Transcript is empty")

    config = resolve_provider_config(options)
    template_id = options.template_id or settings.default_template
    try:
        budget = default_pipeline_config(options.token_threshold)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        # The pipeline blocks on network calls; keep it off the event loop.
        result = await asyncio.to_thread(
            generate_meeting_summary,
            transcript,
            config,
            options.custom_prompt,
            template_id,
            language=options.language or settings.default_language,
            pipeline_config=budget,
        )
    except TemplateNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except TemplateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SummaryError as exc:
        logger.error("Summary generation failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return SummaryResponse(
        markdown=result.markdown,
        meeting_title=extract_meeting_title(result.markdown),
        chunk_count=result.chunk_count,
        strategy=result.strategy,
        template_id=template_id,
        meeting_id=meeting_id,
    )


@router.post("/api/summarize", response_model=SummaryResponse)
async def summarize(request: SummarizeRequest) -> SummaryResponse:
    """Generate a markdown report from transcript text."""
    return await _summarize(request.transcript, request)


@router.post("/api/summarize/file", response_model=SummaryResponse)
async def summarize_file(
    file: Annotated[UploadFile, File(...)],
    provider: Annotated[LLMProvider | None, Form()] = None,
    model: Annotated[str | None, Form()] = None,
    capability: Annotated[ProviderCapability | None, Form()] = None,
    template_id: Annotated[str | None, Form()] = None,
    language: Annotated[str | None, Form()] = None,
    custom_prompt: Annotated[str, Form()] = "",
    token_threshold: Annotated[int | None, Form(gt=0)] = None,
) -> SummaryResponse:
    """Upload a transcript file (.vtt, .txt, .json) and generate a report from it."""
    raw = await file.read()
    if len(raw) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)} MB.",
        )

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="Transcript must be UTF-8 text") from exc

    transcript_format = format_for_filename(file.filename or "")
    try:
        transcript = load_transcript_text(content, transcript_format)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Could not parse transcript: {exc}") from exc

    options = SummarizeOptions(
        provider=provider,
        model=model,
        capability=capability,
        template_id=template_id,
        language=language,
        custom_prompt=custom_prompt,
        token_threshold=token_threshold,
    )
    return await _summarize(transcript, options)


@router.post("/api/meetings/{meeting_id}/summary", response_model=SummaryResponse)
async def summarize_meeting(
    meeting_id: str,
    options: SummarizeOptions | None = None,
) -> SummaryResponse:
    """Generate a report for a stored meeting and save it on the meeting row."""
    try:
        uuid.UUID(meeting_id)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Meeting {meeting_id} not found") from None

    client = get_supabase_client()
    meeting = fetch_meeting(client, meeting_id)
    if meeting is None:
        raise HTTPException(status_code=404, detail="Meeting not found")

    transcript = meeting.get("raw_transcript")
    if not transcript:
        raise HTTPException(status_code=400, detail="Meeting has no transcript to summarize")

    response = await _summarize(str(transcript), options or SummarizeOptions(), meeting_id)
    store_summary(client, meeting_id, response.markdown, response.meeting_title)
    logger.info("Stored summary for meeting %s (%d chunks)", meeting_id, response.chunk_count)
    return response
