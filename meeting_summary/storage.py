"""Supabase helpers for meetings, their summaries and the questions asked about them."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Literal, cast

from supabase import Client, create_client

from meeting_summary.chat.models import ChatMessage
from meeting_summary.config import settings


def get_supabase_client() -> Client:
    """Create and return a Supabase client from settings."""
    return create_client(settings.supabase_url, settings.supabase_key)


def fetch_meeting(client: Client, meeting_id: str) -> dict[str, Any] | None:
    """Return the ``meetings`` row for *meeting_id*, or None if it does not exist."""
    result = (
        client.table("meetings")
        .select("id, title, raw_transcript, summary")
        .eq("id", meeting_id)
        .execute()
    )
    # Supabase .data is typed as JSON (broad union); cast to concrete type.
    rows = cast(list[dict[str, Any]], result.data)
    return rows[0] if rows else None


def store_summary(
    client: Client,
    meeting_id: str,
    markdown: str,
    title: str | None = None,
) -> None:
    """Save the generated report (and the title it proposes, if any) on the meeting."""
    update: dict[str, Any] = {"summary": markdown}
    if title:
        update["title"] = title
    client.table("meetings").update(update).eq("id", meeting_id).execute()


def fetch_chat_messages(client: Client, meeting_id: str) -> list[ChatMessage]:
    """Return the conversation about *meeting_id*, oldest message first."""
    result = (
        client.table("chat_messages")
        .select("id, meeting_id, role, content, created_at")
        .eq("meeting_id", meeting_id)
        .order("created_at")
        .execute()
    )
    rows = cast(list[dict[str, Any]], result.data)
    return [ChatMessage.model_validate(row) for row in rows]


def save_chat_message(
    client: Client,
    meeting_id: str,
    role: Literal["user", "assistant"],
    content: str,
) -> ChatMessage:
    """Insert one message into ``chat_messages`` and return it."""
    message = ChatMessage(
        id=str(uuid.uuid4()),
        meeting_id=meeting_id,
        role=role,
        content=content,
        created_at=datetime.now(timezone.utc),
    )
    client.table("chat_messages").insert(message.model_dump(mode="json")).execute()
    return message


def delete_chat_messages(client: Client, meeting_id: str) -> int:
    """Delete the conversation about *meeting_id*; returns the number of rows removed."""
    result = client.table("chat_messages").delete().eq("meeting_id", meeting_id).execute()
    return len(cast(list[dict[str, Any]], result.data))
