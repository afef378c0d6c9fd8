from __future__ import annotations

import logging
from typing import Any, Optional, Self

import httpx

from toolcall_bridge.adapters.ollama import OllamaRequestAdapter
from toolcall_bridge.providers.base import BaseAsyncLLM, RequestAdapter

DEFAULT_OLLAMA_HOST = "http://localhost:11434"


class OllamaLLM(BaseAsyncLLM):
    """
    Locally hosted model served by Ollama, spoken to over its native chat API.

    Use ``OllamaLLM.from_client`` to share an ``httpx.AsyncClient`` whose
    ``base_url`` already points at the Ollama host.
    """

    def __init__(
        self,
        model: str,
        *,
        base_url: Optional[str] = None,
        timeout: float = 120.0,
        headers: Optional[dict[str, str]] = None,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ) -> None:
        super().__init__(
            model=model, logger=logger, name=name, request_timeout=request_timeout
        )
        self.base_url = (base_url or DEFAULT_OLLAMA_HOST).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers=headers,
        )
        self._adapter = OllamaRequestAdapter()

    @classmethod
    def from_client(
        cls,
        model: str,
        client: httpx.AsyncClient,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ) -> Self:
        if not isinstance(client, httpx.AsyncClient):
            raise TypeError(
                f"OllamaLLM.from_client expects httpx.AsyncClient; got {type(client).__name__}"
            )

        self = cls.__new__(cls)  # bypass __init__
        BaseAsyncLLM.__init__(
            self, model=model, logger=logger, name=name, request_timeout=request_timeout
        )
        self.base_url = str(client.base_url).rstrip("/")
        self._client = client
        self._adapter = OllamaRequestAdapter()
        return self

    @property
    def adapter(self) -> RequestAdapter:
        return self._adapter

    async def _chat_impl(self, request: dict[str, Any]) -> dict[str, Any]:
        self._log(f"Sending request to Ollama model {self.model} at {self.base_url}")
        response = await self._client.post(
            "/api/chat", json={"model": self.model, **request}
        )
        response.raise_for_status()
        return response.json()
