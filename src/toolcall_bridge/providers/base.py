"""Base class for provider clients and the adapter protocol they rely on."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, Sequence

from toolcall_bridge._exceptions import classify_error
from toolcall_bridge.conversation import Conversation
from toolcall_bridge.params import normalize_params
from toolcall_bridge.response import ChatResponse
from toolcall_bridge.types import Message, ToolDeclaration

__all__ = ["BaseAsyncLLM", "RequestAdapter"]


class RequestAdapter(Protocol):
    """Protocol for adapting between generic chat format and provider-specific format."""

    def to_provider(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDeclaration],
        params: dict[str, Any],
    ) -> dict[str, Any]:
        """Convert generic messages, tools and normalized params to a request body."""
        ...

    def from_provider(self, raw: Any) -> ChatResponse:
        """Convert provider response to unified ChatResponse."""
        ...


class BaseAsyncLLM(ABC):
    """
    Abstract base class for async-first LLM wrappers.

    Subclasses own a provider client and implement ``_chat_impl``; all
    shape translation is delegated to ``adapter``.
    """

    def __init__(
        self,
        model: str,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ) -> None:
        """
        Initializes the base LLM client.

        Args:
            model: The identifier of the LLM model to be used.
            logger: Optional logger instance. If None, a logger named after
                    this module will be used.
            name: Optional name for this component, used in logging.
                  If None, defaults to the concrete class's name.
            request_timeout: Optional upper bound in seconds for one ``send``.
        """
        self.model = model
        self.logger = logger or logging.getLogger(__name__)
        self.name = name or self.__class__.__name__
        self.request_timeout = request_timeout

    @abstractmethod
    async def _chat_impl(self, request: dict[str, Any]) -> Any:
        """
        Send one provider request body and return the raw provider response.

        Args:
            request: Provider-specific body built by ``adapter.to_provider``
                     (without the model name).
        """
        ...

    @property
    @abstractmethod
    def adapter(self) -> RequestAdapter:
        """Request adapter for this provider."""
        ...

    async def send(
        self,
        conversation: Conversation,
        tools: Sequence[ToolDeclaration] = (),
        *,
        params: dict[str, Any] | None = None,
    ) -> ChatResponse:
        """
        Send the conversation history with the given tool declarations.

        Raises:
            TransportError: on any network, auth or provider failure, or when
                ``request_timeout`` expires. Nothing is retried.
        """
        request = self.adapter.to_provider(
            conversation.messages, tools, normalize_params(params)
        )
        self._log(
            f"Sending {len(conversation)} messages and {len(tools)} tools to {self.model}",
            logging.DEBUG,
        )

        try:
            if self.request_timeout is not None:
                raw = await asyncio.wait_for(
                    self._chat_impl(request), timeout=self.request_timeout
                )
            else:
                raw = await self._chat_impl(request)
            # a body the adapter cannot read is a provider failure too
            response = self.adapter.from_provider(raw)
        except Exception as exc:
            raise classify_error(exc, self.logger) from exc

        self._log(
            f"Received {len(response.tool_calls)} tool calls from {self.model}",
            logging.DEBUG,
        )
        return response

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self.logger.log(level, f"[{self.name}] {message}")

    # --- lifecycle ---------------------------------------------------------
    async def aclose(self) -> None:
        """
        Close underlying async HTTP clients to avoid cleanup after the loop closes.
        Safe to call multiple times.
        """
        client = getattr(self, "_client", None)
        close = getattr(client, "aclose", None) or getattr(client, "close", None)
        if close:
            await close()

    async def __aenter__(self) -> "BaseAsyncLLM":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
