"""Report templates: built-ins plus optional JSON overrides on disk.

A template is a list of sections. It renders to two strings used by the
final prompt: a markdown skeleton the model fills in, and a bulleted list of
per-section instructions.

Custom templates live in ``settings.custom_templates_dir`` as
``<template_id>.json`` and take precedence over built-ins with the same id::

    {
      "name": "Client Call",
      "description": "External call with a client",
      "sections": [
        {"title": "Summary", "instruction": "Two or three sentences.", "format": "paragraph"},
        {"title": "Requests", "instruction": "What the client asked for.", "format": "list"}
      ]
    }
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from meeting_summary.config import settings
from meeting_summary.errors import TemplateError, TemplateNotFoundError

logger = logging.getLogger(__name__)

_TEMPLATE_ID_RE = re.compile(r"[A-Za-z0-9_-]+")


class TemplateSection(BaseModel):
    """One heading of the report and how to fill it."""

    title: str = Field(min_length=1)
    instruction: str = Field(min_length=1)
    format: Literal["paragraph", "list", "string"] = "paragraph"
    item_format: str | None = None


class Template(BaseModel):
    """A named report layout."""

    name: str = Field(min_length=1)
    description: str = ""
    sections: list[TemplateSection] = Field(min_length=1)

    def to_markdown_structure(self) -> str:
        """Render the empty markdown skeleton the model must fill in."""
        lines = ["# [AI-Generated Title]", ""]
        for section in self.sections:
            lines.append(f"## {section.title}")
            lines.append("")
            if section.format == "list":
                lines.append(f"- {section.item_format or '[item]'}")
            elif section.format == "string":
                lines.append("[text]")
            else:
                lines.append("[paragraph]")
            lines.append("")
        return "\n".join(lines).rstrip() + "\n"

    def to_section_instructions(self) -> str:
        """Render one instruction bullet per section."""
        lines: list[str] = []
        for section in self.sections:
            lines.append(f"- **{section.title}**: {section.instruction}")
            if section.format == "list":
                lines.append("  - Present this section as a bulleted list.")
            if section.item_format:
                lines.append(f"  - Each item must follow the format: `{section.item_format}`.")
        return "\n".join(lines)


class TemplateInfo(BaseModel):
    """Listing entry for a template."""

    id: str
    name: str
    description: str = ""


BUILTIN_TEMPLATES: dict[str, dict[str, Any]] = {
    "standard_meeting": {
        "name": "Standard Meeting Notes",
        "description": "General-purpose notes for any meeting.",
        "sections": [
            {
                "title": "Summary",
                "instruction": "A short paragraph describing the purpose and outcome of the meeting.",
                "format": "paragraph",
            },
            {
                "title": "Key Discussion Points",
                "instruction": "The main topics discussed, one bullet per topic.",
                "format": "list",
            },
            {
                "title": "Decisions",
                "instruction": "Every decision or agreement reached.",
                "format": "list",
            },
            {
                "title": "Action Items",
                "instruction": "Tasks that someone committed to, with owner and deadline when mentioned.",
                "format": "list",
                "item_format": "**[Owner]**: [Task] (due [Deadline])",
            },
            {
                "title": "Open Questions",
                "instruction": "Questions raised but not resolved.",
                "format": "list",
            },
        ],
    },
    "daily_standup": {
        "name": "Daily Standup",
        "description": "Yesterday / today / blockers per participant.",
        "sections": [
            {
                "title": "Summary",
                "instruction": "One or two sentences on the overall state of the team.",
                "format": "paragraph",
            },
            {
                "title": "Updates",
                "instruction": "What each participant finished and plans to do next.",
                "format": "list",
                "item_format": "**[Name]**: done [Yesterday]; next [Today]",
            },
            {
                "title": "Blockers",
                "instruction": "Anything blocking progress and who can unblock it.",
                "format": "list",
            },
        ],
    },
    "project_sync": {
        "name": "Project Sync",
        "description": "Status review of a project with risks and next steps.",
        "sections": [
            {
                "title": "Status",
                "instruction": "Overall project status and progress since the last sync.",
                "format": "paragraph",
            },
            {
                "title": "Milestones",
                "instruction": "Milestones discussed with their current state.",
                "format": "list",
            },
            {
                "title": "Risks",
                "instruction": "Risks or issues raised, with any mitigation agreed.",
                "format": "list",
            },
            {
                "title": "Next Steps",
                "instruction": "Agreed next steps with owners.",
                "format": "list",
                "item_format": "**[Owner]**: [Step]",
            },
        ],
    },
    "retrospective": {
        "name": "Retrospective",
        "description": "What went well, what did not, and improvements.",
        "sections": [
            {
                "title": "Went Well",
                "instruction": "Things the team wants to keep doing.",
                "format": "list",
            },
            {
                "title": "To Improve",
                "instruction": "Problems and frustrations raised.",
                "format": "list",
            },
            {
                "title": "Improvement Actions",
                "instruction": "Concrete actions the team agreed to try.",
                "format": "list",
                "item_format": "**[Owner]**: [Action]",
            },
        ],
    },
}


def _custom_dir(custom_dir: str | Path | None) -> Path | None:
    directory = custom_dir if custom_dir is not None else settings.custom_templates_dir
    return Path(directory) if directory else None


def _load_custom(template_id: str, path: Path) -> Template:
    try:
        return Template.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise TemplateError(template_id, f"cannot read {path}: {exc}") from exc
    except ValidationError as exc:
        raise TemplateError(template_id, f"invalid template file {path.name}: {exc}") from exc


def get_template(template_id: str, custom_dir: str | Path | None = None) -> Template:
    """Resolve *template_id* to a :class:`Template`.

    Looks in the custom templates directory first, then the built-ins.

    Raises:
        TemplateNotFoundError: No template has this id.
        TemplateError: The id is malformed or the custom file is invalid.
    """
    if not _TEMPLATE_ID_RE.fullmatch(template_id or ""):
        raise TemplateError(template_id, "identifier may only contain letters, digits, '_' and '-'")

    directory = _custom_dir(custom_dir)
    if directory is not None:
        path = directory / f"{template_id}.json"
        if path.is_file():
            logger.debug("Loading custom template %s from %s", template_id, path)
            return _load_custom(template_id, path)

    builtin = BUILTIN_TEMPLATES.get(template_id)
    if builtin is None:
        raise TemplateNotFoundError(template_id)
    return Template.model_validate(builtin)


def list_templates(custom_dir: str | Path | None = None) -> list[TemplateInfo]:
    """List built-in and custom templates, custom ones overriding by id."""
    infos: dict[str, TemplateInfo] = {
        template_id: TemplateInfo(
            id=template_id, name=data["name"], description=data.get("description", "")
        )
        for template_id, data in BUILTIN_TEMPLATES.items()
    }

    directory = _custom_dir(custom_dir)
    if directory is not None and directory.is_dir():
        for path in sorted(directory.glob("*.json")):
            template_id = path.stem
            if not _TEMPLATE_ID_RE.fullmatch(template_id):
                continue
            try:
                template = _load_custom(template_id, path)
            except TemplateError:
                logger.warning("Skipping malformed template file %s", path)
                continue
            infos[template_id] = TemplateInfo(
                id=template_id, name=template.name, description=template.description
            )

    return sorted(infos.values(), key=lambda info: info.id)
