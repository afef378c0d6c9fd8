"""
toolcall-bridge - tool-calling turns over multiple LLM providers.
"""

from ._exceptions import (
    ConfigError,
    DuplicateNameError,
    HandlerError,
    InvalidArgumentsError,
    ToolBridgeError,
    TransportError,
    UnknownToolError,
)
from .config import Settings
from .conversation import Conversation
from .factory import create_llm, create_llm_from_settings
from .loop import ToolCallLoop
from .providers import Provider, get_api_key
from .providers.anthropic import AnthropicLLM
from .providers.base import BaseAsyncLLM
from .providers.gemini import GeminiLLM
from .providers.ollama import OllamaLLM
from .providers.openai import OpenAILLM
from .registry import ToolRegistry
from .response import ChatResponse
from .tracing import SpanHandle, Tracer
from .types import Message, Role, ToolCallRequest, ToolCallResult, ToolDeclaration

__version__ = "0.1.0"

__all__ = [
    "BaseAsyncLLM",
    "OpenAILLM",
    "AnthropicLLM",
    "GeminiLLM",
    "OllamaLLM",
    "create_llm",
    "create_llm_from_settings",
    "ChatResponse",
    "Conversation",
    "Message",
    "Role",
    "ToolDeclaration",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolRegistry",
    "ToolCallLoop",
    "Tracer",
    "SpanHandle",
    "Settings",
    "Provider",
    "get_api_key",
    "ToolBridgeError",
    "TransportError",
    "UnknownToolError",
    "DuplicateNameError",
    "HandlerError",
    "InvalidArgumentsError",
    "ConfigError",
]
