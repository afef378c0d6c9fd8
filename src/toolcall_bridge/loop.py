"""
Tool-call resolution loop.

One turn: append the user query, send the conversation, run every tool the
model asked for (in order, one at a time), append the results and send again.
Tool level failures (unknown tool, invalid arguments, handler exceptions) are
reported back to the model as failed results; only transport failures reach
the caller.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Optional

from toolcall_bridge._exceptions import (
    HandlerError,
    InvalidArgumentsError,
    UnknownToolError,
)
from toolcall_bridge.conversation import Conversation
from toolcall_bridge.providers.base import BaseAsyncLLM
from toolcall_bridge.registry import ToolRegistry
from toolcall_bridge.response import ChatResponse
from toolcall_bridge.tracing import SpanHandle, Tracer
from toolcall_bridge.types import ToolCallRequest, ToolCallResult

__all__ = ["ToolCallLoop", "TOOL_NOT_FOUND", "INVALID_ARGUMENTS"]

TOOL_NOT_FOUND = "tool not found"
INVALID_ARGUMENTS = "invalid arguments"


class ToolCallLoop:
    """
    Drives tool-calling turns for one model client and one registry.

    Args:
        llm: Provider client used for every ``send``.
        registry: Tools offered to the model. Must be fully registered.
        tracer: Optional tracer; a disabled one is used when omitted.
        params: Sampling params passed with every request.
        max_rounds: How many tool-call rounds one turn may run. With the
            default of 1 the reply that follows the tool results is final.
        validate_arguments: Check arguments against the declared schema
            before calling a handler.
    """

    def __init__(
        self,
        llm: BaseAsyncLLM,
        registry: ToolRegistry,
        *,
        tracer: Optional[Tracer] = None,
        params: Optional[dict[str, Any]] = None,
        max_rounds: int = 1,
        validate_arguments: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if max_rounds < 1:
            raise ValueError(f"max_rounds must be >= 1, got {max_rounds}")
        self.llm = llm
        self.registry = registry
        self.tracer = tracer or Tracer.disabled()
        self.params = dict(params or {})
        self.max_rounds = max_rounds
        self.validate_arguments = validate_arguments
        self.logger = logger or logging.getLogger(__name__)

    async def process_query(
        self, query: str, *, system_prompt: Optional[str] = None
    ) -> str:
        """Run one turn on a fresh conversation and return the final text."""
        return await self.run(Conversation(system_prompt=system_prompt), query)

    async def run(self, conversation: Conversation, query: str) -> str:
        """
        Run one turn of *conversation* for *query* and return the final text.

        Raises:
            TransportError: when the model cannot be reached. The conversation
                keeps everything appended before the failing request.
        """
        trace = self.tracer.start_trace(
            "process_query",
            input={"query": query},
            metadata={"model": self.llm.model, "provider": self.llm.name},
        )
        try:
            answer = await self._turn(conversation, query, trace)
        except Exception as exc:
            trace.event("error", input={"error": str(exc)})
            trace.end(error=exc)
            raise
        trace.update_trace(output={"finalResponse": answer})
        trace.end(output={"finalResponse": answer})
        return answer

    async def _turn(
        self, conversation: Conversation, query: str, trace: SpanHandle
    ) -> str:
        conversation.add_user(query)
        response = await self._send(
            conversation, trace, "send_message", {"message": query}
        )

        detected = 0
        rounds = 0
        while response.tool_calls and rounds < self.max_rounds:
            rounds += 1
            detected += len(response.tool_calls)
            trace.update_trace(metadata={"functionCallsDetected": detected})

            conversation.add_assistant(response.content, response.tool_calls)
            results = []
            for request in response.tool_calls:
                trace.event(
                    "function_call_detected",
                    input={"functionName": request.name, "args": request.arguments},
                )
                result = await self._resolve(request, trace)
                conversation.add_tool_result(result)
                results.append(result)

            response = await self._send(
                conversation,
                trace,
                "send_function_response",
                {
                    "functionResponses": [
                        {"name": r.name, "response": r.content} for r in results
                    ]
                },
            )

        if response.tool_calls:
            # Out of rounds: keep the text, drop calls that will never be answered
            self.logger.warning(
                "Stopping after %d tool-call round(s); ignoring %d further call(s): %s",
                rounds,
                len(response.tool_calls),
                ", ".join(tc.name for tc in response.tool_calls),
            )
        conversation.add_assistant(response.content)
        return response.content

    async def _send(
        self,
        conversation: Conversation,
        trace: SpanHandle,
        span_name: str,
        span_input: dict[str, Any],
    ) -> ChatResponse:
        span = trace.span(span_name, input=span_input)
        try:
            response = await self.llm.send(
                conversation, self.registry.declarations(), params=self.params
            )
        except Exception as exc:
            span.end(error=exc)
            raise
        span.end(output=response.summary())
        return response

    async def _resolve(
        self, request: ToolCallRequest, trace: SpanHandle
    ) -> ToolCallResult:
        """Run one tool call. Never raises for tool-level failures."""
        span = trace.span(request.name, input=request.arguments)

        try:
            handler = self.registry.resolve(request.name)
        except UnknownToolError:
            self.logger.warning("Model requested unknown tool %r", request.name)
            result = ToolCallResult.failure(request, TOOL_NOT_FOUND)
            span.end(error=LookupError(TOOL_NOT_FOUND))
            return result

        if self.validate_arguments:
            try:
                self.registry.validate_arguments(request.name, request.arguments)
            except InvalidArgumentsError as exc:
                self.logger.warning("%s", exc)
                span.end(error=exc)
                return ToolCallResult.failure(request, INVALID_ARGUMENTS)

        self.logger.info("Calling tool %s with %s", request.name, request.arguments)
        try:
            output = handler(**request.arguments)
            if inspect.isawaitable(output):
                output = await output
        except Exception as exc:
            error = HandlerError(request.name, exc)
            self.logger.warning("%s", error, exc_info=True)
            span.end(error=error)
            return ToolCallResult.failure(request, str(exc) or exc.__class__.__name__)

        self.logger.debug("Tool %s returned %r", request.name, output)
        span.end(output=output)
        return ToolCallResult(request=request, output=output)
