"""Answer questions about a stored meeting using its transcript, summary and chat history."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from supabase import Client

from meeting_summary.chat.models import ChatExchange, ChatMessage
from meeting_summary.errors import MeetingNotFoundError, TransportError
from meeting_summary.llm.client import generate_summary
from meeting_summary.pipeline_config import ProviderConfig
from meeting_summary.storage import fetch_chat_messages, fetch_meeting, save_chat_message
from meeting_summary.summarization.prompts import PromptRole, fill_placeholders, get_prompt
from meeting_summary.summarization.sanitize import clean_llm_markdown_output
from meeting_summary.summarization.summarizer import LLMCall

logger = logging.getLogger(__name__)

UNTITLED_MEETING = "Untitled meeting"


def build_chat_system_prompt(language: str | None, today: date | None = None) -> str:
    """Localized assistant instructions with today's date filled in."""
    current = (today or date.today()).isoformat()
    return fill_placeholders(get_prompt(PromptRole.CHAT_SYSTEM, language), current)


def build_chat_context(
    meeting: dict[str, Any],
    history: list[ChatMessage],
    question: str,
) -> str:
    """Assemble the user prompt: title, transcript, summary, earlier turns, question.

    The summary and previous-conversation sections only appear when present.
    """
    title = meeting.get("title") or UNTITLED_MEETING
    parts = [
        f"# Meeting Title\n{title}\n\n",
        f"# Transcript\n{meeting.get('raw_transcript') or ''}\n\n",
    ]

    summary = meeting.get("summary")
    if summary and str(summary).strip():
        parts.append(f"# Summary\n{summary}\n\n")

    if history:
        parts.append("# Previous Conversation\n")
        for message in history:
            label = "User" if message.role == "user" else "Assistant"
            parts.append(f"{label}: {message.content}\n\n")

    parts.append(f"# Current Question\n{question}")
    return "".join(parts)


def ask_question(
    client: Client,
    meeting_id: str,
    question: str,
    config: ProviderConfig,
    language: str | None = None,
    *,
    llm: LLMCall | None = None,
    today: date | None = None,
) -> ChatExchange:
    """Answer *question* about a stored meeting and save both turns.

    Messages are only persisted once the model has answered, so a failed call
    leaves the conversation unchanged.

    Raises:
        ValueError: The question is blank.
        MeetingNotFoundError: No meeting has *meeting_id*.
        TransportError: The LLM call failed (stage ``chat``).
    """
    if not question.strip():
        raise ValueError("Question is empty")
    llm = llm or generate_summary

    meeting = fetch_meeting(client, meeting_id)
    if meeting is None:
        raise MeetingNotFoundError(meeting_id)

    history = fetch_chat_messages(client, meeting_id)
    context = build_chat_context(meeting, history, question)
    system_prompt = build_chat_system_prompt(language, today)

    logger.info(
        "Answering question for meeting %s with %s model %s (%d previous messages)",
        meeting_id,
        config.provider,
        config.model,
        len(history),
    )
    try:
        answer = clean_llm_markdown_output(llm(config, system_prompt, context))
    except TransportError as exc:
        raise exc.with_stage("chat")

    user_message = save_chat_message(client, meeting_id, "user", question)
    assistant_message = save_chat_message(client, meeting_id, "assistant", answer)
    logger.info("Saved question and answer for meeting %s", meeting_id)
    return ChatExchange(
        answer=answer,
        user_message=user_message,
        assistant_message=assistant_message,
    )
