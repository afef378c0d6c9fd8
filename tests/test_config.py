"""Tests for environment driven settings, API key lookup and the factory."""

import httpx
import pytest
from openai import AsyncOpenAI

from toolcall_bridge import (
    AnthropicLLM,
    ConfigError,
    GeminiLLM,
    OllamaLLM,
    OpenAILLM,
    Provider,
    Settings,
    create_llm,
    create_llm_from_settings,
    get_api_key,
)
from toolcall_bridge.config import DEFAULT_MODELS
from toolcall_bridge.providers.gemini import DEFAULT_GEMINI_BASE_URL


class TestSettings:
    """Test settings read from environment mappings."""

    def test_defaults(self):
        """Test settings with an empty environment."""
        settings = Settings.from_env({})

        assert settings.provider is Provider.GEMINI
        assert settings.model == DEFAULT_MODELS[Provider.GEMINI]
        assert settings.max_rounds == 1
        assert settings.request_timeout is None
        assert settings.tracing_enabled is False

    def test_full_environment(self):
        """Test every supported variable is picked up."""
        settings = Settings.from_env(
            {
                "TOOLBRIDGE_PROVIDER": "OLLAMA",
                "TOOLBRIDGE_MODEL": "llama3.1",
                "OLLAMA_HOST": "http://192.168.1.5:11434",
                "TOOLBRIDGE_TIMEOUT": "12.5",
                "TOOLBRIDGE_MAX_ROUNDS": "3",
                "LANGFUSE_PUBLIC_KEY": "pk-lf-1",
                "LANGFUSE_SECRET_KEY": "sk-lf-1",
                "LANGFUSE_URL": "https://langfuse.example",
            }
        )

        assert settings.provider is Provider.OLLAMA
        assert settings.model == "llama3.1"
        assert settings.base_url == "http://192.168.1.5:11434"
        assert settings.request_timeout == 12.5
        assert settings.max_rounds == 3
        assert settings.tracing_enabled
        assert settings.langfuse_host == "https://langfuse.example"

    def test_langfuse_host_preferred_over_url(self):
        """Test LANGFUSE_HOST wins over LANGFUSE_URL."""
        settings = Settings.from_env(
            {"LANGFUSE_HOST": "https://a.example", "LANGFUSE_URL": "https://b.example"}
        )
        assert settings.langfuse_host == "https://a.example"

    @pytest.mark.parametrize(
        "env",
        [
            {"TOOLBRIDGE_PROVIDER": "cohere"},
            {"TOOLBRIDGE_TIMEOUT": "soon"},
            {"TOOLBRIDGE_TIMEOUT": "-1"},
            {"TOOLBRIDGE_MAX_ROUNDS": "0"},
        ],
    )
    def test_invalid_values(self, env):
        """Test malformed values raise ConfigError."""
        with pytest.raises(ConfigError):
            Settings.from_env(env)


class TestApiKeys:
    """Test API key lookup."""

    def test_key_from_environment(self, monkeypatch):
        """Test the key is read from the provider's variable."""
        monkeypatch.setenv("GEMINI_API_KEY", "g-key")
        assert get_api_key(Provider.GEMINI) == "g-key"

    def test_missing_key(self, monkeypatch):
        """Test a missing key names the variable."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ConfigError, match="OPENAI_API_KEY missing"):
            get_api_key(Provider.OPENAI)

    def test_ollama_has_no_key(self):
        """Test keyless providers have no key to look up."""
        with pytest.raises(ConfigError):
            get_api_key(Provider.OLLAMA)


class TestFactory:
    """Test provider client construction."""

    @pytest.mark.parametrize(
        "provider, cls",
        [
            (Provider.OPENAI, OpenAILLM),
            (Provider.ANTHROPIC, AnthropicLLM),
            (Provider.GEMINI, GeminiLLM),
        ],
    )
    def test_explicit_api_key(self, provider, cls):
        """Test each hosted provider with an explicit key."""
        llm = create_llm(provider, "some-model", api_key="key")
        assert type(llm) is cls
        assert llm.model == "some-model"
        assert llm.api_key == "key"

    def test_gemini_uses_openai_compatible_endpoint(self):
        """Test Gemini targets its OpenAI-compatible base URL."""
        llm = create_llm("gemini", "gemini-2.0-flash", api_key="key")
        assert str(llm._client.base_url) == DEFAULT_GEMINI_BASE_URL

    def test_ollama_needs_no_key(self):
        """Test Ollama is built without any key."""
        llm = create_llm(Provider.OLLAMA, "qwen2.5:3b", base_url="http://localhost:9999/")
        assert isinstance(llm, OllamaLLM)
        assert llm.base_url == "http://localhost:9999"

    def test_client_passthrough(self):
        """Test a caller-supplied client is used as is."""
        client = AsyncOpenAI(api_key="sk-test")
        llm = create_llm(Provider.OPENAI, "gpt-4.1-mini", client=client)
        assert llm._client is client

    def test_wrong_client_type(self):
        """Test a client of the wrong type is rejected."""
        with pytest.raises(TypeError):
            create_llm(Provider.ANTHROPIC, "claude", client=httpx.AsyncClient())

    def test_unsupported_provider(self):
        """Test an unknown provider name is rejected."""
        with pytest.raises(ValueError):
            create_llm("cohere", "command-r")

    def test_from_settings(self):
        """Test building a client from Settings."""
        settings = Settings(
            provider=Provider.OLLAMA,
            model="qwen2.5:3b",
            base_url="http://gpu-box:11434",
            request_timeout=5.0,
        )

        llm = create_llm_from_settings(settings)

        assert isinstance(llm, OllamaLLM)
        assert llm.base_url == "http://gpu-box:11434"
        assert llm.request_timeout == 5.0
