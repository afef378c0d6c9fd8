"""Shared test doubles: a scripted model client and an in-memory Langfuse."""

from __future__ import annotations

from typing import Any, Callable, Sequence, Union

import pytest

from toolcall_bridge.providers.base import BaseAsyncLLM
from toolcall_bridge.response import ChatResponse
from toolcall_bridge.types import Message, ToolCallRequest, ToolDeclaration

Step = Union[ChatResponse, Exception, Callable[[dict[str, Any]], ChatResponse]]


class PassthroughAdapter:
    """Hands the neutral messages through so tests can inspect them."""

    def to_provider(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDeclaration],
        params: dict[str, Any],
    ) -> dict[str, Any]:
        return {"messages": list(messages), "tools": list(tools), "params": params}

    def from_provider(self, raw: ChatResponse) -> ChatResponse:
        return raw


class ScriptedLLM(BaseAsyncLLM):
    """Replays a fixed list of responses; exceptions in the script are raised."""

    def __init__(self, steps: Sequence[Step], **kwargs: Any) -> None:
        super().__init__("scripted-model", **kwargs)
        self._steps = list(steps)
        self._adapter = PassthroughAdapter()
        self.requests: list[dict[str, Any]] = []

    @property
    def adapter(self) -> PassthroughAdapter:
        return self._adapter

    async def _chat_impl(self, request: dict[str, Any]) -> ChatResponse:
        self.requests.append(request)
        if not self._steps:
            raise AssertionError("model called more often than scripted")
        step = self._steps.pop(0)
        if isinstance(step, Exception):
            raise step
        if callable(step):
            return step(request)
        return step


def tool_call(name: str, call_id: str = "call_1", **arguments: Any) -> ToolCallRequest:
    return ToolCallRequest(id=call_id, name=name, arguments=arguments)


def calls(*requests: ToolCallRequest, content: str = "") -> ChatResponse:
    return ChatResponse(content=content, tool_calls=list(requests))


def text(content: str) -> ChatResponse:
    return ChatResponse(content=content)


class FakeSpan:
    def __init__(self, name: str, input: Any = None, metadata: Any = None) -> None:
        self.name = name
        self.input = input
        self.metadata = metadata
        self.children: list[FakeSpan] = []
        self.events: list[dict[str, Any]] = []
        self.updates: list[dict[str, Any]] = []
        self.trace_updates: list[dict[str, Any]] = []
        self.end_calls = 0

    def start_span(self, *, name: str, input: Any = None, metadata: Any = None) -> "FakeSpan":
        child = FakeSpan(name, input, metadata)
        self.children.append(child)
        return child

    def create_event(self, *, name: str, input: Any = None) -> None:
        self.events.append({"name": name, "input": input})

    def update(self, **fields: Any) -> None:
        self.updates.append(fields)

    def update_trace(self, **fields: Any) -> None:
        self.trace_updates.append(fields)

    def end(self) -> None:
        self.end_calls += 1

    def child(self, name: str) -> "FakeSpan":
        return next(c for c in self.children if c.name == name)


class FakeLangfuse:
    def __init__(self) -> None:
        self.roots: list[FakeSpan] = []
        self.flushed = 0
        self.shut_down = 0

    def start_span(self, *, name: str, input: Any = None, metadata: Any = None) -> FakeSpan:
        root = FakeSpan(name, input, metadata)
        self.roots.append(root)
        return root

    def flush(self) -> None:
        self.flushed += 1

    def shutdown(self) -> None:
        self.shut_down += 1


class BrokenLangfuse:
    """Every call fails, like a client pointed at an unreachable backend."""

    def __getattr__(self, name: str) -> Callable[..., Any]:
        def fail(*args: Any, **kwargs: Any) -> Any:
            raise ConnectionError(f"langfuse unreachable ({name})")

        return fail


@pytest.fixture
def fake_langfuse() -> FakeLangfuse:
    return FakeLangfuse()
