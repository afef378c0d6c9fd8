"""Anthropic adapter for pure request/response transformations."""

from __future__ import annotations

from typing import Any, Sequence

from anthropic.types import Message as AnthropicMessage

from toolcall_bridge.params import split_extra
from toolcall_bridge.response import ChatResponse
from toolcall_bridge.types import (
    Message,
    Role,
    ToolCallRequest,
    ToolCallResult,
    ToolDeclaration,
)

DEFAULT_MAX_TOKENS = 4096


class AnthropicRequestAdapter:
    """Adapter for converting between generic format and Anthropic format."""

    def to_provider(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDeclaration],
        params: dict[str, Any],
    ) -> dict[str, Any]:
        """Convert generic messages, tools and params to Anthropic request format."""
        anthropic_messages: list[dict[str, Any]] = []
        system_parts: list[str] = []

        for msg in messages:
            # Every system message contributes to the single system field
            if msg.role == Role.SYSTEM:
                if msg.text:
                    system_parts.append(msg.text)
                continue

            if isinstance(msg.content, ToolCallResult):
                block = self.tool_result_block(msg.content)
                previous = anthropic_messages[-1] if anthropic_messages else None
                # Results of one batch travel together in a single user turn
                if (
                    previous is not None
                    and previous["role"] == "user"
                    and isinstance(previous["content"], list)
                    and all(b.get("type") == "tool_result" for b in previous["content"])
                ):
                    previous["content"].append(block)
                else:
                    anthropic_messages.append({"role": "user", "content": [block]})
                continue

            if msg.role == Role.ASSISTANT and msg.tool_calls:
                content: list[dict[str, Any]] = []
                if msg.content:
                    content.append({"type": "text", "text": msg.content})
                content.extend(
                    {
                        "type": "tool_use",
                        "id": tc.id,
                        "name": tc.name,
                        "input": tc.arguments,
                    }
                    for tc in msg.tool_calls
                )
                anthropic_messages.append({"role": "assistant", "content": content})
                continue

            if msg.role == Role.ASSISTANT and not msg.text:
                # Empty text is rejected on any non-final assistant turn
                continue

            anthropic_messages.append({"role": str(msg.role), "content": msg.text})

        base_params, extras = split_extra(params)

        # Anthropic requires max_tokens
        base_params.setdefault("max_tokens", DEFAULT_MAX_TOKENS)

        # Handle stop sequences
        if "stop" in base_params:
            stop = base_params.pop("stop")
            base_params["stop_sequences"] = stop if isinstance(stop, list) else [stop]

        base_params.pop("seed", None)
        base_params.pop("frequency_penalty", None)
        base_params.pop("presence_penalty", None)
        parallel = base_params.pop("parallel_tool_calls", None)

        if tools:
            base_params["tools"] = [
                {
                    "name": tool.name,
                    "description": tool.description,
                    "input_schema": tool.parameters,
                }
                for tool in tools
            ]
            choice = base_params.pop("tool_choice", None)
            if choice is not None or parallel is not None:
                base_params["tool_choice"] = self._tool_choice(choice, parallel)
        else:
            base_params.pop("tool_choice", None)

        for k, v in extras.items():
            base_params.setdefault(k, v)

        request: dict[str, Any] = {"messages": anthropic_messages, **base_params}
        if system_parts:
            request["system"] = "\n\n".join(system_parts)
        return request

    @staticmethod
    def _tool_choice(choice: Any, parallel: Any) -> dict[str, Any]:
        if isinstance(choice, dict):
            result = dict(choice)
        elif choice in ("required", "any"):
            result = {"type": "any"}
        elif choice == "none":
            result = {"type": "none"}
        else:
            result = {"type": "auto"}
        if parallel is False and result["type"] != "none":
            result["disable_parallel_tool_use"] = True
        return result

    def from_provider(self, raw: AnthropicMessage) -> ChatResponse:
        """Convert Anthropic response to unified ChatResponse."""
        text_parts: list[str] = []
        tool_calls: list[ToolCallRequest] = []

        for block in raw.content or []:
            if block.type == "text":
                text_parts.append(block.text)
            elif block.type == "tool_use":
                tool_calls.append(
                    ToolCallRequest(
                        id=block.id,
                        name=block.name,
                        arguments=dict(block.input) if hasattr(block.input, "items") else {},
                    )
                )

        return ChatResponse(content="".join(text_parts), tool_calls=tool_calls, raw=raw)

    def tool_result_block(self, result: ToolCallResult) -> dict[str, Any]:
        """Convert ToolCallResult to an Anthropic ``tool_result`` content block."""
        block: dict[str, Any] = {
            "type": "tool_result",
            "tool_use_id": result.id,
            "content": result.content,
        }
        if not result.succeeded:
            block["is_error"] = True
        return block
