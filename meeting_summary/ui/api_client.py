"""HTTP client wrapper for the Meeting Summary FastAPI backend."""

from __future__ import annotations

import os
from typing import Any

import httpx
import streamlit as st

API_URL = os.getenv("API_URL", "http://localhost:8000")

# Multi-level runs make several sequential LLM calls
SUMMARY_TIMEOUT = 900.0


def _error_detail(e: httpx.HTTPError) -> str:
    if isinstance(e, httpx.HTTPStatusError):
        try:
            return str(e.response.json().get("detail", e))
        except ValueError:
            return str(e)
    return str(e)


def check_health() -> bool:
    """Return True if the API server responds to /health."""
    try:
        r = httpx.get(f"{API_URL}/health", timeout=5.0)
        return r.status_code == 200
    except httpx.ConnectError:
        return False


def get_templates() -> list[dict]:  # type: ignore[type-arg]
    """Fetch the available report templates."""
    try:
        r = httpx.get(f"{API_URL}/api/templates", timeout=10.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError:
        return []


def summarize_text(transcript: str, options: dict[str, Any]) -> dict:  # type: ignore[type-arg]
    """Send pasted transcript text to the summarize endpoint."""
    try:
        payload = {"transcript": transcript, **{k: v for k, v in options.items() if v}}
        r = httpx.post(f"{API_URL}/api/summarize", json=payload, timeout=SUMMARY_TIMEOUT)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Summary failed: {_error_detail(e)}")
        return {}


def summarize_file(
    file_content: bytes,
    filename: str,
    options: dict[str, Any],
) -> dict:  # type: ignore[type-arg]
    """Upload a transcript file to the file summarize endpoint."""
    try:
        r = httpx.post(
            f"{API_URL}/api/summarize/file",
            files={"file": (filename, file_content)},
            data={k: str(v) for k, v in options.items() if v},
            timeout=SUMMARY_TIMEOUT,
        )
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Summary failed: {_error_detail(e)}")
        return {}


def summarize_meeting(meeting_id: str, options: dict[str, Any]) -> dict:  # type: ignore[type-arg]
    """Summarize a stored meeting and save the report on it."""
    try:
        payload = {k: v for k, v in options.items() if v}
        r = httpx.post(
            f"{API_URL}/api/meetings/{meeting_id}/summary",
            json=payload,
            timeout=SUMMARY_TIMEOUT,
        )
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Summary failed: {_error_detail(e)}")
        return {}


def get_questions(meeting_id: str) -> list[dict]:  # type: ignore[type-arg]
    """Fetch the conversation stored for a meeting."""
    try:
        r = httpx.get(f"{API_URL}/api/meetings/{meeting_id}/questions", timeout=10.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Could not load conversation: {_error_detail(e)}")
        return []


def ask_question(meeting_id: str, question: str, options: dict[str, Any]) -> dict:  # type: ignore[type-arg]
    """Ask a question about a stored meeting."""
    model_keys = ("provider", "model", "capability", "language")
    try:
        payload = {"question": question, **{k: options[k] for k in model_keys if options.get(k)}}
        r = httpx.post(
            f"{API_URL}/api/meetings/{meeting_id}/questions",
            json=payload,
            timeout=SUMMARY_TIMEOUT,
        )
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Question failed: {_error_detail(e)}")
        return {}


def clear_questions(meeting_id: str) -> int:
    """Delete the conversation stored for a meeting; returns how many messages went."""
    try:
        r = httpx.delete(f"{API_URL}/api/meetings/{meeting_id}/questions", timeout=10.0)
        r.raise_for_status()
        return int(r.json().get("deleted", 0))
    except httpx.HTTPError as e:
        st.error(f"Could not clear conversation: {_error_detail(e)}")
        return 0
