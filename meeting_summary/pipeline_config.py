"""Pipeline configuration: provider/strategy enums, ProviderConfig and PipelineConfig."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class ProviderCapability(StrEnum):
    """Context-window class of an LLM backend."""

    UNBOUNDED = "unbounded"  # hosted providers, whole transcript fits in one call
    BOUNDED = "bounded"  # locally hosted models with small context windows


class LLMProvider(StrEnum):
    """Supported LLM backends."""

    OPENAI = "openai"
    CLAUDE = "claude"
    GROQ = "groq"
    OPENROUTER = "openrouter"
    OLLAMA = "ollama"

    @property
    def default_capability(self) -> ProviderCapability:
        return DEFAULT_CAPABILITIES[self]

    @property
    def requires_api_key(self) -> bool:
        return self is not LLMProvider.OLLAMA


DEFAULT_CAPABILITIES: dict[LLMProvider, ProviderCapability] = {
    LLMProvider.OPENAI: ProviderCapability.UNBOUNDED,
    LLMProvider.CLAUDE: ProviderCapability.UNBOUNDED,
    LLMProvider.GROQ: ProviderCapability.UNBOUNDED,
    LLMProvider.OPENROUTER: ProviderCapability.UNBOUNDED,
    LLMProvider.OLLAMA: ProviderCapability.BOUNDED,
}


class SummaryStrategy(StrEnum):
    """How a transcript is turned into the content of the final prompt."""

    SINGLE_PASS = "single_pass"
    MULTI_LEVEL = "multi_level"


@dataclass(frozen=True)
class ProviderConfig:
    """Everything the transport needs to reach one model.

    ``capability`` defaults to the provider's usual class but can be set
    explicitly, e.g. for an OpenAI-compatible proxy in front of a small model.
    Strategy selection only ever looks at :attr:`resolved_capability`.
    """

    provider: LLMProvider
    model: str
    api_key: str = field(default="", repr=False)
    endpoint: str | None = None
    capability: ProviderCapability | None = None

    def __post_init__(self) -> None:
        # Normalise plain strings to enums
        if not isinstance(self.provider, LLMProvider):
            object.__setattr__(self, "provider", LLMProvider(self.provider))
        if self.capability is None:
            object.__setattr__(self, "capability", self.provider.default_capability)
        elif not isinstance(self.capability, ProviderCapability):
            object.__setattr__(self, "capability", ProviderCapability(self.capability))

    @property
    def resolved_capability(self) -> ProviderCapability:
        """The explicit capability, or the provider's default when none was given."""
        if self.capability is None:
            return self.provider.default_capability
        return ProviderCapability(self.capability)


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable token budget for the summarization pipeline.

    Defaults mirror the project's settings: a 4000-token single-pass
    threshold, 300 tokens reserved for prompt scaffolding on every chunk
    call, and 100 tokens of overlap between neighbouring chunks.
    """

    token_threshold: int = 4000
    prompt_reserve_tokens: int = 300
    chunk_overlap_tokens: int = 100

    def __post_init__(self) -> None:
        if self.prompt_reserve_tokens < 0 or self.chunk_overlap_tokens < 0:
            raise ValueError("Token reserve and overlap must be non-negative")
        if self.token_threshold <= self.prompt_reserve_tokens:
            msg = (
                f"token_threshold ({self.token_threshold}) must be greater than "
                f"prompt_reserve_tokens ({self.prompt_reserve_tokens})"
            )
            raise ValueError(msg)

    @property
    def chunk_size_tokens(self) -> int:
        return self.token_threshold - self.prompt_reserve_tokens
