"""Pydantic request/response schemas for the Meeting Summary API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from meeting_summary.chat.models import ChatExchange
from meeting_summary.pipeline_config import LLMProvider, ProviderCapability, SummaryStrategy


class ModelOptions(BaseModel):
    """Which model to call and in which language to prompt it.

    Unset fields fall back to the server settings.
    """

    provider: LLMProvider | None = None
    model: str | None = None
    api_key: str | None = Field(default=None, repr=False)
    endpoint: str | None = None
    capability: ProviderCapability | None = None
    language: str | None = None


class SummarizeOptions(ModelOptions):
    """Report options shared by every summarize endpoint."""

    custom_prompt: str = ""
    template_id: str | None = None
    token_threshold: int | None = Field(default=None, gt=0)


class SummarizeRequest(SummarizeOptions):
    """Request body for the /api/summarize endpoint."""

    transcript: str


class SummaryResponse(BaseModel):
    """A generated meeting report."""

    markdown: str
    meeting_title: str | None = None
    chunk_count: int
    strategy: SummaryStrategy
    template_id: str
    meeting_id: str | None = None


class QuestionRequest(ModelOptions):
    """Request body for asking a question about a stored meeting."""

    question: str


class QuestionResponse(ChatExchange):
    """The answer plus the user and assistant messages that were saved."""


class DeleteMessagesResponse(BaseModel):
    deleted: int
