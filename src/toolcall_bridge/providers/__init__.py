from __future__ import annotations

import os
from enum import StrEnum
from typing import Final

from dotenv import load_dotenv

from toolcall_bridge._exceptions import ConfigError

load_dotenv()


class Provider(StrEnum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OLLAMA = "ollama"


_ENV_VARS: Final[dict[Provider, str]] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
    Provider.GEMINI: "GEMINI_API_KEY",
}

# Providers that authenticate without an API key
KEYLESS_PROVIDERS: Final[frozenset[Provider]] = frozenset({Provider.OLLAMA})


def get_api_key(provider: Provider) -> str:
    """Return the API key for *provider* or raise ConfigError."""
    try:
        env_var = _ENV_VARS[provider]
    except KeyError:
        raise ConfigError(f"No API key config for {provider!s}") from None

    try:
        return os.environ[env_var]
    except KeyError as exc:
        raise ConfigError(f"{env_var} missing") from exc


__all__ = ["Provider", "KEYLESS_PROVIDERS", "get_api_key"]
