"""
Error taxonomy for toolcall-bridge, and translation of noisy provider
tracebacks into a unified `TransportError` that keeps the original exception
for full tracebacks.
"""

from __future__ import annotations

import logging
from typing import Final, Optional, Type

import anthropic
import httpx
import openai

__all__: tuple[str, ...] = (
    "ToolBridgeError",
    "TransportError",
    "UnknownToolError",
    "DuplicateNameError",
    "HandlerError",
    "InvalidArgumentsError",
    "ConfigError",
    "classify_error",
)


class ToolBridgeError(RuntimeError):
    """Base class for every error raised by toolcall-bridge."""


class TransportError(ToolBridgeError):
    """A model provider could not be reached or rejected the request.

    Attributes:
        original_exc: The underlying provider exception.
    """

    original_exc: Exception

    def __init__(self, message: str, original_exc: Exception) -> None:
        super().__init__(message)
        self.original_exc = original_exc
        self.__cause__ = original_exc


class UnknownToolError(ToolBridgeError, LookupError):
    """Raised when a tool name is not present in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name!r}")
        self.name = name


class DuplicateNameError(ToolBridgeError, ValueError):
    """Raised when a tool name is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool {name!r} is already registered")
        self.name = name


class HandlerError(ToolBridgeError):
    """A tool handler raised while running."""

    def __init__(self, name: str, original_exc: Exception) -> None:
        super().__init__(f"Tool {name!r} failed: {original_exc}")
        self.name = name
        self.original_exc = original_exc
        self.__cause__ = original_exc


class InvalidArgumentsError(ToolBridgeError, ValueError):
    """Tool call arguments do not match the declared parameter schema."""

    def __init__(self, name: str, detail: str) -> None:
        super().__init__(f"Invalid arguments for tool {name!r}: {detail}")
        self.name = name
        self.detail = detail


class ConfigError(ToolBridgeError, ValueError):
    """Missing or malformed configuration."""


RATE_LIMIT_ERRORS: Final[tuple[Type[Exception], ...]] = (
    openai.RateLimitError,
    anthropic.RateLimitError,
)

AUTH_ERRORS: Final[tuple[Type[Exception], ...]] = (
    openai.AuthenticationError,
    anthropic.AuthenticationError,
)

CONN_ERRORS: Final[tuple[Type[Exception], ...]] = (
    openai.APIConnectionError,
    anthropic.APIConnectionError,
    httpx.RequestError,
    TimeoutError,
    ConnectionError,
)

API_ERRORS: Final[tuple[Type[Exception], ...]] = (
    openai.APIError,
    anthropic.APIError,
)


def classify_error(
    exc: Exception,
    logger: Optional[logging.Logger] = None,
) -> TransportError:
    """Wrap an SDK exception in TransportError with a friendly, concise message."""
    log = logger or logging.getLogger("toolcall_bridge.exceptions")

    # Order matters: the SDK connection/auth errors are APIError subclasses.
    if isinstance(exc, RATE_LIMIT_ERRORS):
        msg = "Rate-limit exceeded, please retry later"
    elif isinstance(exc, AUTH_ERRORS):
        msg = "Authentication rejected by the LLM provider"
    elif isinstance(exc, CONN_ERRORS):
        msg = "Connection problem, unable to reach the LLM provider"
    elif isinstance(exc, httpx.HTTPStatusError):
        msg = f"Provider returned HTTP {exc.response.status_code}"
    elif isinstance(exc, API_ERRORS):
        status = getattr(exc, "status_code", None)
        msg = f"Provider reported an error ({status})" if status else "Provider reported an error"
    else:
        msg = exc.__class__.__name__

    log.warning("Wrapping provider exception: %s", msg, extra={"exc": exc})
    detail = str(exc) or exc.__class__.__name__
    return TransportError(f"{msg}: {detail}", exc)
