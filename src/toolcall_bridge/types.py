"""
Provider-neutral dataclasses for client-side tool use.

They are intentionally minimal: everything provider-specific lives in adapters.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Awaitable, Callable, Union

__all__ = [
    "Role",
    "Message",
    "ToolDeclaration",
    "ToolHandler",
    "ToolCallRequest",
    "ToolCallResult",
]


class Role(StrEnum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


# A handler receives the call arguments as keyword arguments.
ToolHandler = Callable[..., Union[Any, Awaitable[Any]]]


@dataclass(frozen=True, slots=True)
class ToolDeclaration:
    """Name, description and JSON-schema parameters of a callable tool."""

    name: str
    description: str
    parameters: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def as_function(self) -> dict[str, Any]:
        """Return the ``{"type": "function", ...}`` shape shared by OpenAI-style APIs."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass(slots=True)
class ToolCallRequest:
    """A model-agnostic request emitted by the LLM to call a local tool."""

    id: str
    name: str
    arguments: dict[str, Any]


@dataclass(slots=True)
class ToolCallResult:
    """Outcome of running a tool, sent back to the LLM as a ``tool`` message."""

    request: ToolCallRequest
    output: Any = None
    succeeded: bool = True
    error_message: str | None = None

    @classmethod
    def failure(cls, request: ToolCallRequest, error_message: str) -> "ToolCallResult":
        return cls(request=request, succeeded=False, error_message=error_message)

    @property
    def id(self) -> str:
        # must match the request id
        return self.request.id

    @property
    def name(self) -> str:
        return self.request.name

    @property
    def content(self) -> str:
        """Payload rendered as text for the provider."""
        if not self.succeeded:
            return json.dumps({"error": self.error_message})
        if isinstance(self.output, str):
            return self.output
        return json.dumps(self.output, default=str)


@dataclass(frozen=True, slots=True)
class Message:
    """One entry of a conversation history.

    ``content`` is text for user/assistant/system messages and a
    :class:`ToolCallResult` for ``tool`` messages. Assistant messages that
    asked for tools carry them in ``tool_calls``.
    """

    role: Role
    content: str | ToolCallResult = ""
    tool_calls: tuple[ToolCallRequest, ...] = ()

    @property
    def text(self) -> str:
        if isinstance(self.content, ToolCallResult):
            return self.content.content
        return self.content
