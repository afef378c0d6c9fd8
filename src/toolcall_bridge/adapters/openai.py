"""OpenAI adapter for pure request/response transformations."""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from openai.types.chat import ChatCompletion

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


class OpenAIRequestAdapter:
    """Adapter for converting between generic format and OpenAI format."""

    def to_provider(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDeclaration],
        params: dict[str, Any],
    ) -> dict[str, Any]:
        """Convert generic messages, tools and params to OpenAI request format."""
        openai_messages = [self._message(msg) for msg in messages]

        base_params, extras = split_extra(params)
        # Add extra params to base_params
        for k, v in extras.items():
            base_params.setdefault(k, v)

        request: dict[str, Any] = {"messages": openai_messages, **base_params}
        if tools:
            request["tools"] = [tool.as_function() for tool in tools]
        else:
            # tool_choice without tools is rejected by the API
            request.pop("tool_choice", None)
            request.pop("parallel_tool_calls", None)
        return request

    def _message(self, msg: Message) -> dict[str, Any]:
        if isinstance(msg.content, ToolCallResult):
            return self.tool_result_message(msg.content)

        openai_msg: dict[str, Any] = {"role": str(msg.role), "content": msg.content}

        # Handle tool calls (for assistant messages with function calls)
        if msg.role == Role.ASSISTANT and msg.tool_calls:
            openai_msg["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {
                        "name": tc.name,
                        "arguments": json.dumps(tc.arguments),
                    },
                }
                for tc in msg.tool_calls
            ]
            # OpenAI expects null content alongside tool_calls
            if not msg.content:
                openai_msg["content"] = None
        return openai_msg

    def from_provider(self, raw: ChatCompletion) -> ChatResponse:
        """Convert OpenAI response to unified ChatResponse."""
        content = ""
        tool_calls: list[ToolCallRequest] = []

        if raw.choices and raw.choices[0].message:
            message = raw.choices[0].message
            content = message.content or ""

            for index, tc in enumerate(message.tool_calls or []):
                function = getattr(tc, "function", None)
                if function is None:
                    # custom (non-function) tools are never declared by us
                    logger.warning("Ignoring non-function tool call of type %s", tc.type)
                    continue
                tool_calls.append(
                    ToolCallRequest(
                        id=tc.id or f"call_{index}",
                        name=function.name,
                        arguments=self._parse_arguments(function.arguments),
                    )
                )

        return ChatResponse(content=content, tool_calls=tool_calls, raw=raw)

    def _parse_arguments(self, raw_args: Any) -> dict[str, Any]:
        # A malformed payload still yields a request so it gets a result;
        # schema validation then reports it as invalid.
        if isinstance(raw_args, dict):
            return raw_args
        if isinstance(raw_args, str) and raw_args.strip():
            try:
                parsed = json.loads(raw_args)
            except json.JSONDecodeError as exc:
                logger.warning("Bad JSON in tool call: %s", raw_args, exc_info=exc)
                return {}
            if isinstance(parsed, dict):
                return parsed
            logger.warning("Tool call arguments are not an object: %s", raw_args)
        return {}

    def tool_result_message(self, result: ToolCallResult) -> dict[str, Any]:
        """Convert ToolCallResult to an OpenAI ``tool`` message."""
        return {
            "role": "tool",
            "tool_call_id": result.id,
            "content": result.content,
        }
