"""Ollama adapter for the native ``/api/chat`` endpoint.

Differences from the OpenAI shape:
- sampling parameters live under ``options`` (``max_tokens`` is ``num_predict``)
- tool call arguments arrive as a JSON object, not a string
- tool calls carry no ids, so ``call_<n>`` ids are synthesized per response
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Sequence

from toolcall_bridge.params import split_extra
from toolcall_bridge.response import ChatResponse
from toolcall_bridge.types import (
    Message,
    Role,
    ToolCallRequest,
    ToolCallResult,
    ToolDeclaration,
)

logger = logging.getLogger(__name__)

_OPTION_NAMES = {
    "temperature": "temperature",
    "top_p": "top_p",
    "seed": "seed",
    "stop": "stop",
    "max_tokens": "num_predict",
    "frequency_penalty": "frequency_penalty",
    "presence_penalty": "presence_penalty",
}

# Extras that are request fields rather than model options
_REQUEST_FIELDS = frozenset({"keep_alive", "format", "think"})


class OllamaRequestAdapter:
    """Adapter for converting between generic format and Ollama's chat API."""

    def to_provider(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDeclaration],
        params: dict[str, Any],
    ) -> dict[str, Any]:
        base_params, extras = split_extra(params)

        options: dict[str, Any] = {}
        for key, value in base_params.items():
            if key == "stop" and isinstance(value, str):
                value = [value]
            if key in _OPTION_NAMES:
                options[_OPTION_NAMES[key]] = value
            # tool_choice / parallel_tool_calls have no Ollama equivalent

        request: dict[str, Any] = {
            "messages": [self._message(msg) for msg in messages],
            "stream": False,
        }
        for key, value in extras.items():
            if key in _REQUEST_FIELDS:
                request[key] = value
            else:
                options.setdefault(key, value)
        if options:
            request["options"] = options
        if tools:
            request["tools"] = [tool.as_function() for tool in tools]
        return request

    def _message(self, msg: Message) -> dict[str, Any]:
        if isinstance(msg.content, ToolCallResult):
            return self.tool_result_message(msg.content)

        ollama_msg: dict[str, Any] = {"role": str(msg.role), "content": msg.content}
        if msg.role == Role.ASSISTANT and msg.tool_calls:
            ollama_msg["tool_calls"] = [
                {"function": {"name": tc.name, "arguments": tc.arguments}}
                for tc in msg.tool_calls
            ]
        return ollama_msg

    def from_provider(self, raw: Mapping[str, Any]) -> ChatResponse:
        """Convert an ``/api/chat`` JSON body to unified ChatResponse."""
        message = raw.get("message") or {}
        content = message.get("content") or ""

        tool_calls: list[ToolCallRequest] = []
        for index, tc in enumerate(message.get("tool_calls") or []):
            function = tc.get("function") or {}
            tool_calls.append(
                ToolCallRequest(
                    id=tc.get("id") or f"call_{index}",
                    name=function.get("name", ""),
                    arguments=self._parse_arguments(function.get("arguments")),
                )
            )
        return ChatResponse(content=content, tool_calls=tool_calls, raw=raw)

    @staticmethod
    def _parse_arguments(raw_args: Any) -> dict[str, Any]:
        if isinstance(raw_args, dict):
            return raw_args
        if isinstance(raw_args, str) and raw_args.strip():
            try:
                parsed = json.loads(raw_args)
            except json.JSONDecodeError:
                logger.warning("Bad JSON in tool call: %s", raw_args)
                return {}
            return parsed if isinstance(parsed, dict) else {}
        return {}

    def tool_result_message(self, result: ToolCallResult) -> dict[str, Any]:
        return {
            "role": "tool",
            "content": result.content,
            "tool_name": result.name,
        }
