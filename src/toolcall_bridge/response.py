from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from toolcall_bridge.types import ToolCallRequest


@dataclass
class ChatResponse:
    """Unified response object for all LLM providers."""

    content: str
    tool_calls: list[ToolCallRequest] = field(default_factory=list)
    raw: Any = None

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    def summary(self) -> dict[str, Any]:
        """Compact description used as trace output."""
        return {
            "responseText": self.content,
            "hasFunctionCalls": self.has_tool_calls,
            "functionCalls": [
                {"name": tc.name, "args": tc.arguments} for tc in self.tool_calls
            ],
        }
