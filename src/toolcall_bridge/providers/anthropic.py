from __future__ import annotations

import logging
from typing import Any, Optional, Self

from anthropic import AsyncAnthropic
from anthropic.types import Message

from toolcall_bridge.adapters.anthropic import AnthropicRequestAdapter
from toolcall_bridge.providers.base import BaseAsyncLLM, RequestAdapter


class AnthropicLLM(BaseAsyncLLM):
    """
    Claude models over the Messages API, with tool_use blocks for tool calls.

    Retries are disabled unless ``max_retries`` says otherwise; pass an
    existing ``AsyncAnthropic`` through ``from_client`` to share its pool.
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
        self._client = AsyncAnthropic(
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
            base_url=base_url,
        )
        self._adapter = AnthropicRequestAdapter()

    @classmethod
    def from_client(
        cls,
        model: str,
        client: AsyncAnthropic,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ) -> Self:
        """
        Reuse a configured ``AsyncAnthropic`` (proxy, headers, retries).
        """
        if not isinstance(client, AsyncAnthropic):
            raise TypeError(
                f"AnthropicLLM.from_client expects AsyncAnthropic; got {type(client).__name__}"
            )

        self = cls.__new__(cls)  # bypass __init__
        BaseAsyncLLM.__init__(
            self, model=model, logger=logger, name=name, request_timeout=request_timeout
        )
        self.api_key = client.api_key or ""
        self._client = client
        self._adapter = AnthropicRequestAdapter()
        return self

    @property
    def adapter(self) -> RequestAdapter:
        """Translates conversations to Messages API bodies and back."""
        return self._adapter

    async def _chat_impl(self, request: dict[str, Any]) -> Message:
        """POST one Messages API request."""
        self._log(f"Sending request to Anthropic model {self.model}")
        return await self._client.messages.create(model=self.model, **request)
