"""Template listing endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from meeting_summary.summarization.templates import TemplateInfo, list_templates

router = APIRouter()


@router.get("/api/templates", response_model=list[TemplateInfo])
async def get_templates() -> list[TemplateInfo]:
    """List the report templates available to ``template_id``."""
    return list_templates()
