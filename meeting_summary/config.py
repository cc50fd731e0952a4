from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Summarizer settings (providers, token budget, storage) validated via Pydantic.

    Loaded from environment variables and/or a .env file; field names map to
    upper-case variables, e.g. ``TOKEN_THRESHOLD`` or ``OLLAMA_ENDPOINT``.
    """

    # API Keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    groq_api_key: str = ""
    openrouter_api_key: str = ""

    # Local LLM host (Ollama)
    ollama_endpoint: str = "http://localhost:11434"

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # LLM defaults
    llm_provider: str = "claude"
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 4096
    llm_timeout: float = 300.0

    # Summarization pipeline
    token_threshold: int = 4000
    prompt_reserve_tokens: int = 300
    chunk_overlap_tokens: int = 100
    default_language: str = "en"
    default_template: str = "standard_meeting"
    custom_templates_dir: str = ""  # Optional: directory of <template_id>.json overrides

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
