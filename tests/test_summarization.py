"""Tests for strategy selection, multi-level summarization and the full pipeline.

Every LLM call goes through a scripted FakeLLM, so no network access is needed.
"""

from __future__ import annotations

import pytest

from meeting_summary.errors import (
    NoChunksProcessedError,
    TemplateError,
    TemplateNotFoundError,
    TransportError,
)
from meeting_summary.pipeline_config import (
    LLMProvider,
    PipelineConfig,
    ProviderCapability,
    ProviderConfig,
    SummaryStrategy,
)
from meeting_summary.summarization.models import ChunkSummary
from meeting_summary.summarization.pipeline import (
    build_final_system_prompt,
    build_final_user_prompt,
    generate_meeting_summary,
)
from meeting_summary.summarization.prompts import PromptRole, get_prompt
from meeting_summary.summarization.strategy import select_strategy
from meeting_summary.summarization.summarizer import (
    SUMMARY_SEPARATOR,
    combine_summaries,
    summarize_chunks,
)
from meeting_summary.summarization.templates import get_template

# Three 40-char runs; with a 10-token chunk size and no overlap each run is one chunk
THREE_CHUNKS = "a" * 40 + "b" * 40 + "c" * 40
SMALL_BUDGET = PipelineConfig(token_threshold=20, prompt_reserve_tokens=10, chunk_overlap_tokens=0)


def _chunk_answer(user: str) -> str:
    if "aaaa" in user:
        return "summary-A"
    if "bbbb" in user:
        return "summary-B"
    return "summary-C"


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------


class TestSelectStrategy:
    def test_bounded_below_threshold_is_single_pass(self) -> None:
        text = "x" * (4 * 3999)  # 3999 tokens
        assert select_strategy(ProviderCapability.BOUNDED, text, 4000) is SummaryStrategy.SINGLE_PASS

    def test_bounded_at_threshold_is_multi_level(self) -> None:
        text = "x" * (4 * 4000)  # exactly 4000 tokens
        assert select_strategy(ProviderCapability.BOUNDED, text, 4000) is SummaryStrategy.MULTI_LEVEL

    def test_unbounded_is_always_single_pass(self) -> None:
        text = "x" * 1_000_000
        assert select_strategy(ProviderCapability.UNBOUNDED, text, 4000) is SummaryStrategy.SINGLE_PASS

    def test_empty_text_is_single_pass(self) -> None:
        assert select_strategy(ProviderCapability.BOUNDED, "", 4000) is SummaryStrategy.SINGLE_PASS


# ---------------------------------------------------------------------------
# Chunk summaries and combination
# ---------------------------------------------------------------------------


class TestSummarizeChunks:
    def test_summaries_in_chunk_order(self, bounded_config, make_llm) -> None:
        llm = make_llm(lambda role, system, user: _chunk_answer(user))
        run = summarize_chunks(THREE_CHUNKS, bounded_config, SMALL_BUDGET, "en", llm)

        assert run.total_chunks == 3
        assert [s.text for s in run.summaries] == ["summary-A", "summary-B", "summary-C"]
        assert [s.chunk_index for s in run.summaries] == [0, 1, 2]
        assert llm.roles() == ["chunk", "chunk", "chunk"]

    def test_chunk_prompt_wraps_content(self, bounded_config, make_llm) -> None:
        llm = make_llm(lambda role, system, user: "ok")
        summarize_chunks(THREE_CHUNKS, bounded_config, SMALL_BUDGET, "en", llm)

        _, system, user = llm.calls[0]
        assert system == get_prompt(PromptRole.CHUNK_SYSTEM, "en")
        assert f"<transcript_chunk>\n{'a' * 40}\n</transcript_chunk>" in user

    def test_failed_chunk_is_skipped(self, bounded_config, make_llm) -> None:
        def handler(role: str, system: str, user: str) -> str:
            if "bbbb" in user:
                raise TransportError("connection reset", provider="ollama")
            return _chunk_answer(user)

        run = summarize_chunks(THREE_CHUNKS, bounded_config, SMALL_BUDGET, "en", make_llm(handler))

        assert run.succeeded == 2
        assert [s.chunk_index for s in run.summaries] == [0, 2]
        assert len(run.failures) == 1
        assert run.failures[0].chunk_index == 1
        assert run.failures[0].error == "connection reset"

    def test_all_chunks_failing_raises(self, bounded_config, make_llm) -> None:
        def handler(role: str, system: str, user: str) -> str:
            raise TransportError("model not loaded")

        with pytest.raises(NoChunksProcessedError) as exc_info:
            summarize_chunks(THREE_CHUNKS, bounded_config, SMALL_BUDGET, "en", make_llm(handler))

        assert exc_info.value.total_chunks == 3
        assert len(exc_info.value.failures) == 3
        assert "No chunks were processed successfully" in str(exc_info.value)

    def test_other_errors_propagate(self, bounded_config, make_llm) -> None:
        def handler(role: str, system: str, user: str) -> str:
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            summarize_chunks(THREE_CHUNKS, bounded_config, SMALL_BUDGET, "en", make_llm(handler))


class TestCombineSummaries:
    def test_single_summary_returned_without_call(self, bounded_config, make_llm) -> None:
        llm = make_llm()
        result = combine_summaries([ChunkSummary(0, "only one")], bounded_config, "en", llm)
        assert result == "only one"
        assert llm.calls == []

    def test_joins_in_chunk_order(self, bounded_config, make_llm) -> None:
        llm = make_llm(lambda role, system, user: "merged")
        summaries = [ChunkSummary(2, "third"), ChunkSummary(0, "first")]

        assert combine_summaries(summaries, bounded_config, "en", llm) == "merged"
        role, system, user = llm.calls[0]
        assert role == "combine"
        assert f"<summaries>\nfirst{SUMMARY_SEPARATOR}third\n</summaries>" in user

    def test_empty_list_rejected(self, bounded_config, make_llm) -> None:
        with pytest.raises(ValueError):
            combine_summaries([], bounded_config, "en", make_llm())

    def test_failure_is_tagged_with_stage(self, bounded_config, make_llm) -> None:
        def handler(role: str, system: str, user: str) -> str:
            raise TransportError("timeout", provider="ollama")

        summaries = [ChunkSummary(0, "x"), ChunkSummary(1, "y")]
        with pytest.raises(TransportError) as exc_info:
            combine_summaries(summaries, bounded_config, "en", make_llm(handler))
        assert exc_info.value.stage == "combine"


# ---------------------------------------------------------------------------
# Prompt assembly
# ---------------------------------------------------------------------------


class TestFinalPrompts:
    def test_user_prompt_without_context(self) -> None:
        prompt = build_final_user_prompt("the notes")
        assert prompt == "\n<transcript_chunks>\nthe notes\n</transcript_chunks>\n"

    def test_user_prompt_with_context(self) -> None:
        prompt = build_final_user_prompt("the notes", "Focus on budget")
        assert "<user_context>\nFocus on budget\n</user_context>" in prompt
        assert prompt.index("</transcript_chunks>") < prompt.index("<user_context>")

    def test_blank_context_is_ignored(self) -> None:
        assert "user_context" not in build_final_user_prompt("the notes", "   \n")

    def test_system_prompt_embeds_template(self) -> None:
        template = get_template("standard_meeting")
        prompt = build_final_system_prompt(template, "en")

        assert template.to_section_instructions() in prompt
        assert f"<template>\n{template.to_markdown_structure()}\n</template>" in prompt
        assert "{}" not in prompt


# ---------------------------------------------------------------------------
# End to end
# ---------------------------------------------------------------------------


class TestGenerateMeetingSummary:
    def test_single_pass_for_unbounded_provider(self, unbounded_config, make_llm) -> None:
        llm = make_llm()
        text = "Alice: we ship on Friday. " * 5000

        result = generate_meeting_summary(text, unbounded_config, llm=llm, pipeline_config=SMALL_BUDGET)

        assert result.chunk_count == 1
        assert result.strategy is SummaryStrategy.SINGLE_PASS
        assert llm.roles() == ["final"]
        assert text in llm.calls[0][2]
        assert result.markdown == "# Weekly Sync\n\nEverything is on track."

    def test_single_pass_for_short_bounded_transcript(self, bounded_config, make_llm) -> None:
        llm = make_llm()
        result = generate_meeting_summary("Bob: quick call.", bounded_config, llm=llm)
        assert result.chunk_count == 1
        assert llm.roles() == ["final"]

    def test_capability_override_forces_multi_level(self, make_llm) -> None:
        config = ProviderConfig(
            provider=LLMProvider.OPENAI,
            model="small-proxy",
            api_key="k",
            capability=ProviderCapability.BOUNDED,
        )
        llm = make_llm(lambda role, system, user: _chunk_answer(user) if role == "chunk" else "# T")

        result = generate_meeting_summary(THREE_CHUNKS, config, llm=llm, pipeline_config=SMALL_BUDGET)

        assert result.strategy is SummaryStrategy.MULTI_LEVEL
        assert result.chunk_count == 3

    def test_multi_level_with_one_failed_chunk(self, bounded_config, make_llm) -> None:
        def handler(role: str, system: str, user: str) -> str:
            if role == "chunk":
                if "bbbb" in user:
                    raise TransportError("connection reset")
                return _chunk_answer(user)
            if role == "combine":
                return "combined notes"
            return "```markdown\n# Planning Meeting\n\n## Summary\n\nDone.\n```"

        llm = make_llm(handler)
        result = generate_meeting_summary(
            THREE_CHUNKS, bounded_config, llm=llm, pipeline_config=SMALL_BUDGET
        )

        assert llm.roles() == ["chunk", "chunk", "chunk", "combine", "final"]
        assert result.chunk_count == 2
        assert result.strategy is SummaryStrategy.MULTI_LEVEL
        combine_user = llm.calls[3][2]
        assert "summary-A\n---\nsummary-C" in combine_user
        assert "summary-B" not in combine_user
        assert "<transcript_chunks>\ncombined notes\n</transcript_chunks>" in llm.calls[4][2]
        assert result.markdown == "# Planning Meeting\n\n## Summary\n\nDone."

    def test_single_surviving_chunk_skips_combine(self, bounded_config, make_llm) -> None:
        def handler(role: str, system: str, user: str) -> str:
            if role == "chunk":
                if "aaaa" in user:
                    return "summary-A"
                raise TransportError("boom")
            return "# Report"

        llm = make_llm(handler)
        result = generate_meeting_summary(
            THREE_CHUNKS, bounded_config, llm=llm, pipeline_config=SMALL_BUDGET
        )

        assert llm.roles() == ["chunk", "chunk", "chunk", "final"]
        assert result.chunk_count == 1
        assert "<transcript_chunks>\nsummary-A\n</transcript_chunks>" in llm.calls[-1][2]

    def test_all_chunks_failing_makes_no_final_call(self, bounded_config, make_llm) -> None:
        def handler(role: str, system: str, user: str) -> str:
            if role == "chunk":
                raise TransportError("model not loaded")
            return "# Report"

        llm = make_llm(handler)
        with pytest.raises(NoChunksProcessedError):
            generate_meeting_summary(THREE_CHUNKS, bounded_config, llm=llm, pipeline_config=SMALL_BUDGET)

        assert "final" not in llm.roles()
        assert "combine" not in llm.roles()

    def test_combine_failure_is_fatal(self, bounded_config, make_llm) -> None:
        def handler(role: str, system: str, user: str) -> str:
            if role == "combine":
                raise TransportError("rate limited", provider="ollama")
            return _chunk_answer(user)

        llm = make_llm(handler)
        with pytest.raises(TransportError) as exc_info:
            generate_meeting_summary(THREE_CHUNKS, bounded_config, llm=llm, pipeline_config=SMALL_BUDGET)

        assert exc_info.value.stage == "combine"
        assert "final" not in llm.roles()

    def test_final_failure_carries_stage(self, unbounded_config, make_llm) -> None:
        def handler(role: str, system: str, user: str) -> str:
            raise TransportError("overloaded", provider="claude")

        with pytest.raises(TransportError) as exc_info:
            generate_meeting_summary("short transcript", unbounded_config, llm=make_llm(handler))

        assert exc_info.value.stage == "final"
        assert str(exc_info.value) == "claude LLM call failed during final: overloaded"

    def test_custom_prompt_reaches_final_call(self, unbounded_config, make_llm) -> None:
        llm = make_llm()
        generate_meeting_summary(
            "short transcript", unbounded_config, custom_prompt="Attendees: Ana, Raj", llm=llm
        )
        assert "<user_context>\nAttendees: Ana, Raj\n</user_context>" in llm.calls[0][2]

    def test_unknown_template(self, unbounded_config, make_llm) -> None:
        llm = make_llm()
        with pytest.raises(TemplateNotFoundError):
            generate_meeting_summary("transcript", unbounded_config, template_id="nope", llm=llm)
        assert llm.calls == []

    def test_template_loader_is_injectable(self, unbounded_config, make_llm) -> None:
        requested: list[str] = []

        def loader(template_id: str):
            requested.append(template_id)
            return get_template("retrospective")

        llm = make_llm()
        generate_meeting_summary(
            "transcript", unbounded_config, template_id="team_retro", llm=llm, template_loader=loader
        )

        assert requested == ["team_retro"]
        assert "## Went Well" in llm.calls[0][1]

    def test_template_error_propagates(self, unbounded_config, make_llm) -> None:
        def loader(template_id: str):
            raise TemplateError(template_id, "invalid template file")

        with pytest.raises(TemplateError):
            generate_meeting_summary(
                "transcript", unbounded_config, llm=make_llm(), template_loader=loader
            )

    def test_portuguese_prompts(self, bounded_config, make_llm) -> None:
        llm = make_llm(lambda role, system, user: _chunk_answer(user) if role == "chunk" else "# Ata")
        generate_meeting_summary(
            THREE_CHUNKS, bounded_config, language="pt-BR", llm=llm, pipeline_config=SMALL_BUDGET
        )

        assert llm.calls[0][1] == get_prompt(PromptRole.CHUNK_SYSTEM, "pt")
        assert llm.calls[3][1] == get_prompt(PromptRole.COMBINE_SYSTEM, "pt")
        assert "Escreva o relatório em português" in llm.calls[4][1]

    def test_output_is_sanitized(self, unbounded_config, make_llm) -> None:
        llm = make_llm(
            lambda role, system, user: "<think>draft the title</think>\n```\n# Retro\n\nBody\n```"
        )
        result = generate_meeting_summary("transcript", unbounded_config, llm=llm)
        assert result.markdown == "# Retro\n\nBody"

    def test_token_threshold_argument(self, bounded_config, make_llm) -> None:
        llm = make_llm(lambda role, system, user: _chunk_answer(user) if role == "chunk" else "# T")
        text = "word " * 400  # 500 tokens

        result = generate_meeting_summary(text, bounded_config, token_threshold=450, llm=llm)

        assert result.strategy is SummaryStrategy.MULTI_LEVEL
        assert llm.roles()[0] == "chunk"
