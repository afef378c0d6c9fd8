from __future__ import annotations

import logging
from typing import Any, Optional, Self

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from toolcall_bridge.adapters.openai import OpenAIRequestAdapter
from toolcall_bridge.providers.base import BaseAsyncLLM, RequestAdapter


class OpenAILLM(BaseAsyncLLM):
    """
    Chat Completions client for OpenAI and OpenAI-compatible endpoints.

    ``base_url`` points it at any compatible server; ``from_client`` reuses a
    configured ``AsyncOpenAI``.
    The SDK's own retries are off by default; retrying is left to the caller.
    """

    def __init__(
        self,
        model: str,
        *,
        api_key: str,
        timeout: float = 60.0,
        max_retries: int = 0,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
        base_url: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ) -> None:
        super().__init__(
            model=model, logger=logger, name=name, request_timeout=request_timeout
        )
        self.api_key = api_key
        self._client = AsyncOpenAI(
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
            base_url=base_url,
        )
        self._adapter = OpenAIRequestAdapter()

    # Alternate constructor
    @classmethod
    def from_client(
        cls,
        model: str,
        client: AsyncOpenAI,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ) -> Self:
        """
        Build an ``OpenAILLM`` around an already-configured ``AsyncOpenAI`` client.
        """
        if not isinstance(client, AsyncOpenAI):
            raise TypeError(
                f"{cls.__name__}.from_client expects AsyncOpenAI; got {type(client).__name__}"
            )

        self = cls.__new__(cls)  # bypass __init__
        BaseAsyncLLM.__init__(
            self, model=model, logger=logger, name=name, request_timeout=request_timeout
        )
        self.api_key = client.api_key or ""
        self._client = client
        self._adapter = OpenAIRequestAdapter()
        return self

    @property
    def adapter(self) -> RequestAdapter:
        """Translates conversations to Chat Completions bodies and back."""
        return self._adapter

    async def _chat_impl(self, request: dict[str, Any]) -> ChatCompletion:
        """POST one Chat Completions request."""
        args = {"model": self.model, **request}

        # Fields the SDK does not know travel in the body untouched
        passthrough_keys = ("reasoning_effort", "verbosity")
        extra_body = {k: args.pop(k) for k in passthrough_keys if k in args}
        if extra_body:
            args["extra_body"] = {**args.get("extra_body", {}), **extra_body}

        self._log(f"Sending request to {self.model}")
        return await self._client.chat.completions.create(**args)
