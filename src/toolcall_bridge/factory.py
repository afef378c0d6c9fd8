from __future__ import annotations

import logging
from typing import Any, Type

import httpx
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from toolcall_bridge.config import Settings
from toolcall_bridge.providers import KEYLESS_PROVIDERS, Provider, get_api_key
from toolcall_bridge.providers.anthropic import AnthropicLLM
from toolcall_bridge.providers.base import BaseAsyncLLM
from toolcall_bridge.providers.gemini import GeminiLLM
from toolcall_bridge.providers.ollama import OllamaLLM
from toolcall_bridge.providers.openai import OpenAILLM

# map Provider enum to its LLM implementation
_LLM_REGISTRY: dict[Provider, Type[BaseAsyncLLM]] = {
    Provider.OPENAI: OpenAILLM,
    Provider.ANTHROPIC: AnthropicLLM,
    Provider.GEMINI: GeminiLLM,
    Provider.OLLAMA: OllamaLLM,
}


def create_llm(
    provider: Provider | str,
    model: str,
    *,
    api_key: str | None = None,
    client: AsyncOpenAI | AsyncAnthropic | httpx.AsyncClient | None = None,
    logger: logging.Logger | None = None,
    **provider_kwargs: Any,
) -> BaseAsyncLLM:
    """
    Factory for creating any supported LLM.

    Args:
        provider: Which provider to use (OPENAI, ANTHROPIC, GEMINI, OLLAMA).
        model: Model identifier (e.g. "gemini-2.0-flash", "qwen2.5:3b").
        api_key: Overrides automatic lookup; if omitted, pulled from env.
            Ignored for Ollama.
        client: Optional pre-configured client instance to use.
            - For Provider.OPENAI / GEMINI: an AsyncOpenAI instance
            - For Provider.ANTHROPIC: an AsyncAnthropic instance
            - For Provider.OLLAMA: an httpx.AsyncClient with base_url set
        logger: Optional custom logger.
        **provider_kwargs: Any extra args to pass through
            (timeout, max_retries, base_url, request_timeout).
    """
    try:
        provider = Provider(provider)
        llm_cls = _LLM_REGISTRY[provider]
    except (KeyError, ValueError) as exc:
        raise ValueError(f"Unsupported provider: {provider}") from exc

    if client is not None:  # use caller-supplied client verbatim
        return llm_cls.from_client(model, client, logger=logger, **provider_kwargs)

    if provider in KEYLESS_PROVIDERS:
        return llm_cls(model, logger=logger, **provider_kwargs)

    key = api_key or get_api_key(provider)
    return llm_cls(model, api_key=key, logger=logger, **provider_kwargs)


def create_llm_from_settings(
    settings: Settings,
    *,
    logger: logging.Logger | None = None,
) -> BaseAsyncLLM:
    """Build the configured provider client."""
    kwargs: dict[str, Any] = {"request_timeout": settings.request_timeout}
    if settings.base_url:
        kwargs["base_url"] = settings.base_url
    return create_llm(settings.provider, settings.model, logger=logger, **kwargs)
