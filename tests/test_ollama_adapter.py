"""Tests for the Ollama request adapter and client."""

import json

import httpx
import pytest

from toolcall_bridge import Conversation, OllamaLLM, TransportError
from toolcall_bridge.adapters import OllamaRequestAdapter
from toolcall_bridge.params import normalize_params
from toolcall_bridge.sample_tools import ADD_TOOL, SUBTRACT_TOOL
from toolcall_bridge.types import Message, Role, ToolCallRequest, ToolCallResult


@pytest.fixture
def adapter():
    return OllamaRequestAdapter()


def test_sampling_params_go_under_options(adapter):
    """Test sampling params are moved under options."""
    params = normalize_params(
        {"temperature": 0.2, "max_tokens": 50, "stop": "\n", "num_ctx": 4096, "keep_alive": "5m"}
    )

    result = adapter.to_provider([Message(Role.USER, "hi")], [], params)

    assert result["options"] == {
        "temperature": 0.2,
        "num_predict": 50,
        "stop": ["\n"],
        "num_ctx": 4096,
    }
    assert result["keep_alive"] == "5m"
    assert result["stream"] is False
    assert "tools" not in result


def test_tool_history_uses_object_arguments(adapter):
    """Test tool history is sent with object arguments."""
    request = ToolCallRequest("call_0", "subtractTwoNumbers", {"a": 3, "b": 1})
    messages = [
        Message(Role.USER, "What is three minus one?"),
        Message(Role.ASSISTANT, "", (request,)),
        Message(Role.TOOL, ToolCallResult(request, output=2)),
    ]

    result = adapter.to_provider(messages, [ADD_TOOL, SUBTRACT_TOOL], normalize_params(None))

    assert result["messages"][1]["tool_calls"] == [
        {"function": {"name": "subtractTwoNumbers", "arguments": {"a": 3, "b": 1}}}
    ]
    assert result["messages"][2] == {
        "role": "tool",
        "content": "2",
        "tool_name": "subtractTwoNumbers",
    }
    assert [t["function"]["name"] for t in result["tools"]] == [
        "addTwoNumbers",
        "subtractTwoNumbers",
    ]


def test_from_provider_synthesizes_ids(adapter):
    """Test call ids are synthesized for Ollama tool calls."""
    raw = {
        "model": "qwen2.5:3b",
        "message": {
            "role": "assistant",
            "content": "",
            "tool_calls": [
                {"function": {"name": "subtractTwoNumbers", "arguments": {"a": 3, "b": 1}}},
                {"function": {"name": "addTwoNumbers", "arguments": '{"a": 1, "b": 2}'}},
            ],
        },
        "done": True,
    }

    response = adapter.from_provider(raw)

    assert [(c.id, c.name, c.arguments) for c in response.tool_calls] == [
        ("call_0", "subtractTwoNumbers", {"a": 3, "b": 1}),
        ("call_1", "addTwoNumbers", {"a": 1, "b": 2}),
    ]


def test_from_provider_text(adapter):
    """Test a plain text response."""
    response = adapter.from_provider({"message": {"role": "assistant", "content": "2"}})
    assert response.content == "2"
    assert response.tool_calls == []


class TestOllamaLLM:
    """Test the Ollama client over a mocked transport."""

    @staticmethod
    def client(handler):
        return httpx.AsyncClient(
            base_url="http://ollama.test", transport=httpx.MockTransport(handler)
        )

    @pytest.mark.asyncio
    async def test_send_posts_to_chat_endpoint(self):
        """Test requests go to /api/chat with model and tools."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200, json={"message": {"role": "assistant", "content": "Hello"}, "done": True}
            )

        conversation = Conversation()
        conversation.add_user("hi")
        async with OllamaLLM.from_client("qwen2.5:3b", self.client(handler)) as llm:
            response = await llm.send(conversation, [ADD_TOOL])

        assert response.content == "Hello"
        assert seen["path"] == "/api/chat"
        assert seen["body"]["model"] == "qwen2.5:3b"
        assert seen["body"]["messages"] == [{"role": "user", "content": "hi"}]
        assert seen["body"]["tools"][0]["function"]["name"] == "addTwoNumbers"

    @pytest.mark.asyncio
    async def test_http_error_becomes_transport_error(self):
        """Test HTTP errors are raised as TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": "model not found"})

        conversation = Conversation()
        conversation.add_user("hi")
        async with OllamaLLM.from_client("missing", self.client(handler)) as llm:
            with pytest.raises(TransportError) as info:
                await llm.send(conversation)

        assert "HTTP 404" in str(info.value)
        assert isinstance(info.value.original_exc, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_unreadable_body_becomes_transport_error(self):
        """Test a body that is not a chat object is reported as a TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=["not", "a", "chat", "response"])

        conversation = Conversation()
        conversation.add_user("hi")
        async with OllamaLLM.from_client("qwen2.5:3b", self.client(handler)) as llm:
            with pytest.raises(TransportError) as info:
                await llm.send(conversation)

        assert isinstance(info.value.original_exc, AttributeError)

    def test_from_client_type_check(self):
        """Test from_client rejects non-httpx clients."""
        with pytest.raises(TypeError):
            OllamaLLM.from_client("m", object())
