"""Append-only conversation history shared between the loop and the adapters."""

from __future__ import annotations

from typing import Iterator, Optional, Sequence

from toolcall_bridge.types import Message, Role, ToolCallRequest, ToolCallResult

__all__ = ["Conversation"]


class Conversation:
    """
    Ordered message history of one session.

    Messages can only be appended; the history is exposed as a tuple so
    callers cannot reorder or drop earlier entries.
    """

    def __init__(
        self,
        messages: Sequence[Message] = (),
        *,
        system_prompt: Optional[str] = None,
    ) -> None:
        self._messages: list[Message] = []
        if system_prompt:
            self._messages.append(Message(Role.SYSTEM, system_prompt))
        self._messages.extend(messages)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def append(self, message: Message) -> Message:
        if not isinstance(message, Message):
            raise TypeError(f"expected Message, got {type(message).__name__}")
        self._messages.append(message)
        return message

    def add_user(self, text: str) -> Message:
        return self.append(Message(Role.USER, text))

    def add_assistant(
        self, text: str, tool_calls: Sequence[ToolCallRequest] = ()
    ) -> Message:
        return self.append(Message(Role.ASSISTANT, text, tuple(tool_calls)))

    def add_tool_result(self, result: ToolCallResult) -> Message:
        return self.append(Message(Role.TOOL, result))

    def copy(self) -> "Conversation":
        return Conversation(self._messages)

    def pending_tool_calls(self) -> list[ToolCallRequest]:
        """Tool calls of the last assistant message that have no result yet."""
        for index in range(len(self._messages) - 1, -1, -1):
            message = self._messages[index]
            if message.role == Role.ASSISTANT:
                answered = {
                    m.content.id
                    for m in self._messages[index + 1 :]
                    if isinstance(m.content, ToolCallResult)
                }
                return [tc for tc in message.tool_calls if tc.id not in answered]
        return []

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def __repr__(self) -> str:
        return f"Conversation(messages={len(self._messages)})"
