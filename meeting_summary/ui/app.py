"""Meeting Summary -- Streamlit UI.

Paste or upload a transcript (or pick a stored meeting) and generate a
templated markdown report through the API, or ask questions about a stored
meeting.
"""

from __future__ import annotations

from typing import Any

import streamlit as st

from meeting_summary.log import setup_logging
from meeting_summary.pipeline_config import LLMProvider, ProviderCapability
from meeting_summary.summarization.prompts import supported_languages
from meeting_summary.ui.api_client import (
    ask_question,
    check_health,
    clear_questions,
    get_questions,
    get_templates,
    summarize_file,
    summarize_meeting,
    summarize_text,
)

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(page_title="Meeting Summary", layout="wide")
setup_logging()


def _show_result(result: dict[str, Any]) -> None:
    if not result:
        return
    st.success(result.get("meeting_title") or "Summary generated.")
    col_a, col_b, col_c = st.columns(3)
    col_a.metric("Strategy", result.get("strategy", "N/A"))
    col_b.metric("Chunks", str(result.get("chunk_count", "N/A")))
    col_c.metric("Template", result.get("template_id", "N/A"))
    st.markdown("---")
    st.markdown(result.get("markdown", ""))
    st.download_button(
        "Download markdown",
        data=result.get("markdown", ""),
        file_name="meeting-summary.md",
        mime="text/markdown",
    )


# ---------------------------------------------------------------------------
# Sidebar -- navigation + report options + API status
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("Meeting Summary")
    st.markdown("---")

    page = st.radio(
        "Navigate",
        ["Summarize Transcript", "Stored Meeting", "Ask Questions"],
        label_visibility="collapsed",
    )

    st.markdown("---")
    st.subheader("Model")

    provider: str = st.selectbox(
        "Provider",
        options=[p.value for p in LLMProvider],
        key="sidebar_provider",
    )
    model = st.text_input("Model", placeholder="Leave empty for the server default")
    capability_choice: str = st.selectbox(
        "Context window",
        options=["auto", *[c.value for c in ProviderCapability]],
        help="'bounded' forces chunked summarization for long transcripts.",
    )

    st.subheader("Report")
    api_healthy = check_health()
    templates = get_templates() if api_healthy else []
    template_id: str | None = st.selectbox(
        "Template",
        options=[t["id"] for t in templates] or [None],
        format_func=lambda x: next((t["name"] for t in templates if t["id"] == x), "Server default"),
    )
    language: str = st.selectbox("Language", options=supported_languages())
    token_threshold = st.number_input(
        "Token threshold", min_value=500, max_value=200_000, value=4000, step=500
    )

    st.markdown("---")

    # API connection indicator
    if api_healthy:
        st.markdown(":green_circle: API connected")
    else:
        st.markdown(":red_circle: API unreachable")

options: dict[str, Any] = {
    "provider": provider,
    "model": model,
    "capability": None if capability_choice == "auto" else capability_choice,
    "template_id": template_id,
    "language": language,
    "token_threshold": int(token_threshold),
}

# ---------------------------------------------------------------------------
# Page: Summarize Transcript
# ---------------------------------------------------------------------------
if page == "Summarize Transcript":
    st.header("Summarize Transcript")
    st.write("Upload a transcript file or paste its text.")

    uploaded_file = st.file_uploader("Choose a file", type=["vtt", "txt", "json"])
    pasted = st.text_area("...or paste the transcript", height=200)
    options["custom_prompt"] = st.text_area(
        "Additional context (optional)",
        placeholder="e.g. Attendees, project names, what to focus on",
    )

    if st.button("Generate summary", disabled=uploaded_file is None and not pasted.strip()):
        if not api_healthy:
            st.error("Cannot summarize: the API server is not reachable.")
        else:
            with st.spinner("Generating summary..."):
                if uploaded_file is not None:
                    result = summarize_file(uploaded_file.getvalue(), uploaded_file.name, options)
                else:
                    result = summarize_text(pasted, options)
            # Error case is already handled inside the api_client via st.error
            _show_result(result)

# ---------------------------------------------------------------------------
# Page: Stored Meeting
# ---------------------------------------------------------------------------
elif page == "Stored Meeting":
    st.header("Stored Meeting")
    st.write("Generate (or regenerate) the report of a meeting stored in Supabase.")

    meeting_id = st.text_input("Meeting ID", placeholder="UUID of the meeting")
    options["custom_prompt"] = st.text_area("Additional context (optional)")

    if st.button("Generate summary", disabled=not meeting_id):
        if not api_healthy:
            st.error("Cannot summarize: the API server is not reachable.")
        else:
            with st.spinner("Generating summary..."):
                result = summarize_meeting(meeting_id.strip(), options)
            _show_result(result)

# ---------------------------------------------------------------------------
# Page: Ask Questions
# ---------------------------------------------------------------------------
elif page == "Ask Questions":
    st.header("Ask Questions")
    st.write("Ask about a stored meeting. Answers use its transcript, summary and this conversation.")

    meeting_id = st.text_input("Meeting ID", placeholder="UUID of the meeting").strip()

    if meeting_id and api_healthy:
        if st.button("Clear conversation"):
            deleted = clear_questions(meeting_id)
            st.info(f"Deleted {deleted} messages.")

        for message in get_questions(meeting_id):
            with st.chat_message(message["role"]):
                st.markdown(message["content"])

        question = st.chat_input("Ask a question about this meeting")
        if question:
            with st.chat_message("user"):
                st.markdown(question)
            with st.spinner("Thinking..."):
                exchange = ask_question(meeting_id, question, options)
            if exchange:
                with st.chat_message("assistant"):
                    st.markdown(exchange["answer"])
    elif meeting_id:
        st.error("Cannot ask questions: the API server is not reachable.")
