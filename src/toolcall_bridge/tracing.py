"""
Best-effort tracing of conversation turns to Langfuse.

Every call into the Langfuse client goes through ``_safely``: an unreachable
or misconfigured backend is logged and otherwise ignored, so tracing can
never change the outcome of a turn. A ``Tracer`` without a client hands out
no-op spans.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from langfuse import Langfuse

from toolcall_bridge.config import Settings

__all__ = ["Tracer", "SpanHandle"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _safely(what: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> Optional[T]:
    try:
        return func(*args, **kwargs)
    except Exception as exc:
        logger.warning(
            "Tracing %s failed: %s", what, exc, exc_info=logger.isEnabledFor(logging.DEBUG)
        )
        return None


class SpanHandle:
    """One open span. Children and events nest under it; ``end`` closes it once."""

    def __init__(self, name: str, span: Any = None) -> None:
        self.name = name
        self._span = span
        self._ended = False

    @property
    def is_recording(self) -> bool:
        return self._span is not None

    @property
    def ended(self) -> bool:
        return self._ended

    def span(
        self,
        name: str,
        input: Any = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> "SpanHandle":
        if self._span is None:
            return SpanHandle(name)
        child = _safely(
            f"start of span {name!r}",
            self._span.start_span,
            name=name,
            input=input,
            metadata=metadata,
        )
        return SpanHandle(name, child)

    def event(self, name: str, input: Any = None) -> None:
        if self._span is not None:
            _safely(f"event {name!r}", self._span.create_event, name=name, input=input)

    def update_trace(self, **fields: Any) -> None:
        """Update the enclosing trace (``output``, ``metadata``, ``tags``...)."""
        if self._span is not None:
            _safely("trace update", self._span.update_trace, **fields)

    def end(self, output: Any = None, *, error: Optional[BaseException] = None) -> None:
        """Close the span with either an output or an error. Later calls are ignored."""
        if self._ended:
            logger.debug("Span %s already ended", self.name)
            return
        self._ended = True
        if self._span is None:
            return
        if error is not None:
            _safely(
                f"error on span {self.name!r}",
                self._span.update,
                level="ERROR",
                status_message=str(error) or error.__class__.__name__,
            )
        elif output is not None:
            _safely(f"output of span {self.name!r}", self._span.update, output=output)
        _safely(f"end of span {self.name!r}", self._span.end)

    def __enter__(self) -> "SpanHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.end(error=exc)

    def __repr__(self) -> str:
        state = "ended" if self._ended else "open"
        return f"SpanHandle(name={self.name!r}, {state})"


class Tracer:
    """
    Owns the Langfuse client for the process.

    Create it once at startup, pass it to the loops that should be traced and
    call ``shutdown`` (or use it as a context manager) before exiting so
    buffered spans are delivered.
    """

    def __init__(
        self,
        client: Any = None,
        *,
        environment: Optional[str] = None,
    ) -> None:
        self._client = client
        self.environment = environment

    @classmethod
    def from_settings(cls, settings: Settings) -> "Tracer":
        """Langfuse-backed tracer when keys are configured, a disabled one otherwise."""
        if not settings.tracing_enabled:
            logger.info("Langfuse keys not configured, tracing disabled")
            return cls(environment=settings.environment)
        client = _safely(
            "client setup",
            Langfuse,
            public_key=settings.langfuse_public_key,
            secret_key=settings.langfuse_secret_key,
            host=settings.langfuse_host,
        )
        return cls(client, environment=settings.environment)

    @classmethod
    def disabled(cls) -> "Tracer":
        return cls()

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def start_trace(
        self,
        name: str,
        input: Any = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> SpanHandle:
        """Open the root span of a new trace."""
        if self._client is None:
            return SpanHandle(name)
        meta = dict(metadata or {})
        if self.environment:
            meta.setdefault("environment", self.environment)
        root = _safely(
            f"start of trace {name!r}",
            self._client.start_span,
            name=name,
            input=input,
            metadata=meta or None,
        )
        handle = SpanHandle(name, root)
        handle.update_trace(name=name, input=input, metadata=meta or None)
        return handle

    def flush(self) -> None:
        """Block until buffered spans have been sent."""
        if self._client is not None:
            _safely("flush", self._client.flush)

    def shutdown(self) -> None:
        if self._client is not None:
            _safely("shutdown", self._client.shutdown)
            self._client = None

    def __enter__(self) -> "Tracer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
