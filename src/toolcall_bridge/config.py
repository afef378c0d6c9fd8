"""Process configuration read from the environment (and a local ``.env``)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from toolcall_bridge._exceptions import ConfigError
from toolcall_bridge.providers import Provider

__all__ = ["Settings", "DEFAULT_MODELS"]

DEFAULT_MODELS: dict[Provider, str] = {
    Provider.OPENAI: "gpt-4.1-mini",
    Provider.ANTHROPIC: "claude-3-5-haiku-latest",
    Provider.GEMINI: "gemini-2.0-flash",
    Provider.OLLAMA: "qwen2.5:3b",
}


@dataclass(frozen=True)
class Settings:
    provider: Provider = Provider.GEMINI
    model: str = DEFAULT_MODELS[Provider.GEMINI]
    base_url: Optional[str] = None
    request_timeout: Optional[float] = None
    max_rounds: int = 1
    environment: str = "development"
    langfuse_public_key: Optional[str] = None
    langfuse_secret_key: Optional[str] = None
    langfuse_host: Optional[str] = None

    def __post_init__(self) -> None:
        if self.max_rounds < 1:
            raise ConfigError(f"max_rounds must be >= 1, got {self.max_rounds}")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigError(f"request_timeout must be > 0, got {self.request_timeout}")

    @property
    def tracing_enabled(self) -> bool:
        return bool(self.langfuse_public_key and self.langfuse_secret_key)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        dotenv: bool = True,
    ) -> "Settings":
        """Build settings from ``TOOLBRIDGE_*`` and ``LANGFUSE_*`` variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            dotenv: Load a ``.env`` file into the process environment first.
        """
        if dotenv and environ is None:
            load_dotenv()
        env = os.environ if environ is None else environ

        raw_provider = env.get("TOOLBRIDGE_PROVIDER", Provider.GEMINI.value).lower()
        try:
            provider = Provider(raw_provider)
        except ValueError:
            choices = ", ".join(p.value for p in Provider)
            raise ConfigError(
                f"Unsupported provider {raw_provider!r} (expected one of: {choices})"
            ) from None

        base_url = env.get("TOOLBRIDGE_BASE_URL")
        if base_url is None and provider is Provider.OLLAMA:
            base_url = env.get("OLLAMA_HOST")

        return cls(
            provider=provider,
            model=env.get("TOOLBRIDGE_MODEL") or DEFAULT_MODELS[provider],
            base_url=base_url or None,
            request_timeout=_parse_number(env, "TOOLBRIDGE_TIMEOUT", float),
            max_rounds=_or_default(_parse_number(env, "TOOLBRIDGE_MAX_ROUNDS", int), 1),
            environment=env.get("TOOLBRIDGE_ENVIRONMENT", "development"),
            langfuse_public_key=env.get("LANGFUSE_PUBLIC_KEY") or None,
            langfuse_secret_key=env.get("LANGFUSE_SECRET_KEY") or None,
            langfuse_host=env.get("LANGFUSE_HOST") or env.get("LANGFUSE_URL") or None,
        )


def _parse_number(env: Mapping[str, str], key: str, kind: type):
    value = env.get(key)
    if value is None or value == "":
        return None
    try:
        return kind(value)
    except ValueError:
        raise ConfigError(f"{key} must be a {kind.__name__}, got {value!r}") from None


def _or_default(value, default):
    return default if value is None else value
