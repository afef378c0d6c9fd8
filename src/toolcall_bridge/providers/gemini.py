from __future__ import annotations

import logging
from typing import Optional

from toolcall_bridge.adapters.gemini import GeminiRequestAdapter

from .openai import OpenAILLM

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class GeminiLLM(OpenAILLM):
    """
    Gemini LLM implementation via the OpenAI-compatible endpoint.

    ``from_client`` expects an ``AsyncOpenAI`` client already configured
    with Gemini's base URL.
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
            model,
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
            logger=logger,
            name=name,
            base_url=base_url or DEFAULT_GEMINI_BASE_URL,
            request_timeout=request_timeout,
        )
        self._adapter = GeminiRequestAdapter()
