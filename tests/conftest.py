"""Shared fixtures: a scripted stand-in for the LLM transport and provider configs."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from meeting_summary.pipeline_config import LLMProvider, ProviderConfig
from meeting_summary.summarization.prompts import PromptRole, get_prompt, supported_languages


def role_of(system_prompt: str) -> str:
    """Tell which pipeline stage a system prompt belongs to."""
    for language in supported_languages():
        if system_prompt == get_prompt(PromptRole.CHUNK_SYSTEM, language):
            return "chunk"
        if system_prompt == get_prompt(PromptRole.COMBINE_SYSTEM, language):
            return "combine"
        # The chat prompt has the current date filled in
        chat_prefix = get_prompt(PromptRole.CHAT_SYSTEM, language).split("{}")[0]
        if system_prompt.startswith(chat_prefix):
            return "chat"
    return "final"


class FakeLLM:
    """Records every call and answers via *handler(role, system, user)*."""

    def __init__(self, handler: Callable[[str, str, str], str] | None = None) -> None:
        self.calls: list[tuple[str, str, str]] = []
        self.handler = handler

    def __call__(self, config: ProviderConfig, system_prompt: str, user_prompt: str) -> str:
        role = role_of(system_prompt)
        self.calls.append((role, system_prompt, user_prompt))
        if self.handler is not None:
            return self.handler(role, system_prompt, user_prompt)
        return "# Weekly Sync\n\nEverything is on track."

    def roles(self) -> list[str]:
        return [role for role, _, _ in self.calls]


@pytest.fixture
def bounded_config() -> ProviderConfig:
    return ProviderConfig(provider=LLMProvider.OLLAMA, model="llama3.2")


@pytest.fixture
def unbounded_config() -> ProviderConfig:
    return ProviderConfig(provider=LLMProvider.CLAUDE, model="claude-test", api_key="test-key")


@pytest.fixture
def make_llm() -> type[FakeLLM]:
    """Factory for :class:`FakeLLM` so tests can script their own answers."""
    return FakeLLM
