"""Data models for questions asked about a stored meeting."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    """One stored turn of the conversation about a meeting."""

    id: str
    meeting_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime


class ChatExchange(BaseModel):
    """A question, its answer and the two messages saved for them."""

    answer: str
    user_message: ChatMessage
    assistant_message: ChatMessage
