"""Question-answering endpoints for stored meetings."""

from __future__ import annotations

import asyncio
import logging
import uuid

from fastapi import APIRouter, HTTPException

from meeting_summary.api.models import DeleteMessagesResponse, QuestionRequest, QuestionResponse
from meeting_summary.api.routes.summary import resolve_provider_config
from meeting_summary.chat.models import ChatMessage
from meeting_summary.chat.service import ask_question
from meeting_summary.config import settings
from meeting_summary.errors import MeetingNotFoundError, SummaryError
from meeting_summary.storage import delete_chat_messages, fetch_chat_messages, get_supabase_client

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_meeting_id(meeting_id: str) -> None:
    try:
        uuid.UUID(meeting_id)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Meeting {meeting_id} not found") from None


@router.get("/api/meetings/{meeting_id}/questions", response_model=list[ChatMessage])
async def list_questions(meeting_id: str) -> list[ChatMessage]:
    """Return the conversation about a meeting, oldest first."""
    _check_meeting_id(meeting_id)
    return fetch_chat_messages(get_supabase_client(), meeting_id)


@router.post("/api/meetings/{meeting_id}/questions", response_model=QuestionResponse)
async def post_question(meeting_id: str, request: QuestionRequest) -> QuestionResponse:
    """Answer a question from the meeting's transcript, summary and earlier turns."""
    _check_meeting_id(meeting_id)
    if not request.question.strip():
        raise HTTPException(status_code=400, detail="Question is empty")

    config = resolve_provider_config(request)
    client = get_supabase_client()
    try:
        exchange = await asyncio.to_thread(
            ask_question,
            client,
            meeting_id,
            request.question,
            config,
            request.language or settings.default_language,
        )
    except MeetingNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SummaryError as exc:
        logger.error("Question answering failed for meeting %s: %s", meeting_id, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return QuestionResponse.model_validate(exchange.model_dump())


@router.delete("/api/meetings/{meeting_id}/questions", response_model=DeleteMessagesResponse)
async def clear_questions(meeting_id: str) -> DeleteMessagesResponse:
    """Delete the conversation about a meeting."""
    _check_meeting_id(meeting_id)
    deleted = delete_chat_messages(get_supabase_client(), meeting_id)
    logger.info("Deleted %d chat messages for meeting %s", deleted, meeting_id)
    return DeleteMessagesResponse(deleted=deleted)
