"""LLM transport: one system+user prompt in, one text completion out.

Claude goes through the Anthropic SDK, OpenAI/Groq/OpenRouter through the
OpenAI SDK (the latter two via their OpenAI-compatible endpoints), and Ollama
through its native ``/api/chat`` REST endpoint with httpx. Every failure is
surfaced as :class:`TransportError`.
"""

from __future__ import annotations

import logging
from typing import Any

import anthropic
import httpx
import openai
from anthropic import Anthropic
from anthropic.types import TextBlock
from openai import OpenAI

from meeting_summary.config import settings
from meeting_summary.errors import TransportError
from meeting_summary.pipeline_config import LLMProvider, ProviderConfig

logger = logging.getLogger(__name__)

OPENAI_COMPATIBLE_BASE_URLS: dict[LLMProvider, str | None] = {
    LLMProvider.OPENAI: None,  # SDK default
    LLMProvider.GROQ: "https://api.groq.com/openai/v1",
    LLMProvider.OPENROUTER: "https://openrouter.ai/api/v1",
}


def _call_claude(config: ProviderConfig, system_prompt: str, user_prompt: str) -> str:
    client = Anthropic(api_key=config.api_key, timeout=settings.llm_timeout)
    response = client.messages.create(
        model=config.model,
        max_tokens=settings.llm_max_tokens,
        system=system_prompt,
        messages=[{"role": "user", "content": user_prompt}],
    )

    # Only text blocks carry the answer; we never request tools here.
    texts = [block.text for block in response.content if isinstance(block, TextBlock)]
    return "".join(texts)


def _call_openai_compatible(config: ProviderConfig, system_prompt: str, user_prompt: str) -> str:
    base_url = config.endpoint or OPENAI_COMPATIBLE_BASE_URLS[config.provider]
    client = OpenAI(api_key=config.api_key, base_url=base_url, timeout=settings.llm_timeout)
    response = client.chat.completions.create(
        model=config.model,
        max_tokens=settings.llm_max_tokens,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
    )
    if not response.choices:
        return ""
    return response.choices[0].message.content or ""


def _call_ollama(config: ProviderConfig, system_prompt: str, user_prompt: str) -> str:
    endpoint = (config.endpoint or settings.ollama_endpoint).rstrip("/")
    payload: dict[str, Any] = {
        "model": config.model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "stream": False,
    }
    r = httpx.post(f"{endpoint}/api/chat", json=payload, timeout=settings.llm_timeout)
    r.raise_for_status()
    data = r.json()
    return str(data.get("message", {}).get("content", ""))


def generate_summary(config: ProviderConfig, system_prompt: str, user_prompt: str) -> str:
    """Send one prompt pair to the configured provider and return its text.

    Args:
        config: Provider, model, credentials and optional endpoint override.
        system_prompt: Role/behaviour instructions.
        user_prompt: The content to work on.

    Returns:
        The raw completion text (not sanitized).

    Raises:
        TransportError: The request failed or the model returned nothing.
    """
    provider = config.provider
    if provider.requires_api_key and not config.api_key:
        raise TransportError(f"No API key configured for provider {provider}", provider=provider)

    logger.debug("Calling %s model %s (%d prompt chars)", provider, config.model, len(user_prompt))
    try:
        if provider is LLMProvider.CLAUDE:
            text = _call_claude(config, system_prompt, user_prompt)
        elif provider is LLMProvider.OLLAMA:
            text = _call_ollama(config, system_prompt, user_prompt)
        else:
            text = _call_openai_compatible(config, system_prompt, user_prompt)
    except anthropic.APIError as exc:
        raise TransportError(exc.message, provider=provider) from exc
    except openai.APIError as exc:
        raise TransportError(exc.message, provider=provider) from exc
    except httpx.HTTPStatusError as exc:
        msg = f"HTTP {exc.response.status_code} from {exc.request.url}"
        raise TransportError(msg, provider=provider) from exc
    except (httpx.HTTPError, ValueError) as exc:
        raise TransportError(str(exc) or type(exc).__name__, provider=provider) from exc

    if not text.strip():
        raise TransportError("Empty response from model", provider=provider)
    return text


def resolve_api_key(provider: LLMProvider, api_key: str | None = None) -> str:
    """Return *api_key* if given, else the key configured in settings for *provider*."""
    if api_key:
        return api_key
    configured = {
        LLMProvider.CLAUDE: settings.anthropic_api_key,
        LLMProvider.OPENAI: settings.openai_api_key,
        LLMProvider.GROQ: settings.groq_api_key,
        LLMProvider.OPENROUTER: settings.openrouter_api_key,
        LLMProvider.OLLAMA: "",  # Ollama does not need a key
    }
    return configured[provider]
