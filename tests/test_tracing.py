"""Tests for the best-effort Langfuse tracer."""

import logging

from conftest import BrokenLangfuse, FakeLangfuse

from toolcall_bridge import Settings, Tracer


def test_disabled_tracer_hands_out_noop_spans():
    """Test a disabled tracer hands out no-op spans."""
    tracer = Tracer.disabled()

    root = tracer.start_trace("process_query", input={"query": "hi"})
    child = root.span("send_message")
    child.event("function_call_detected", {"name": "x"})
    child.end(output={"ok": True})
    root.end()

    assert not tracer.enabled
    assert not root.is_recording
    assert root.ended and child.ended
    tracer.flush()
    tracer.shutdown()


def test_from_settings_without_keys_is_disabled(caplog):
    """Test incomplete keys disable tracing."""
    with caplog.at_level(logging.INFO, logger="toolcall_bridge.tracing"):
        tracer = Tracer.from_settings(Settings(langfuse_public_key="pk-only"))

    assert not tracer.enabled
    assert "tracing disabled" in caplog.text


def test_trace_carries_environment(fake_langfuse):
    """Test the environment is added to trace metadata."""
    tracer = Tracer(fake_langfuse, environment="staging")

    root = tracer.start_trace("process_query", input={"query": "hi"}, metadata={"model": "m"})

    raw = fake_langfuse.roots[0]
    assert raw.metadata == {"model": "m", "environment": "staging"}
    assert raw.trace_updates == [
        {
            "name": "process_query",
            "input": {"query": "hi"},
            "metadata": {"model": "m", "environment": "staging"},
        }
    ]
    assert root.is_recording


def test_end_is_idempotent(fake_langfuse):
    """Test ending a span twice is ignored."""
    root = Tracer(fake_langfuse).start_trace("t")

    root.end(output="first")
    root.end(output="second")

    raw = fake_langfuse.roots[0]
    assert raw.end_calls == 1
    assert raw.updates == [{"output": "first"}]


def test_span_context_manager_records_error(fake_langfuse):
    """Test the span context manager records exceptions."""
    root = Tracer(fake_langfuse).start_trace("t")

    try:
        with root.span("getStockPrice"):
            raise KeyError("symbol")
    except KeyError:
        pass

    child = fake_langfuse.roots[0].child("getStockPrice")
    assert child.end_calls == 1
    assert child.updates == [{"level": "ERROR", "status_message": "'symbol'"}]


def test_broken_backend_never_raises(caplog):
    """Test backend failures are logged and swallowed."""
    tracer = Tracer(BrokenLangfuse())

    with caplog.at_level(logging.WARNING, logger="toolcall_bridge.tracing"):
        root = tracer.start_trace("process_query", input={"query": "hi"})
        child = root.span("send_message")
        child.event("function_call_detected")
        child.end(error=RuntimeError("boom"))
        root.end(output="done")
        tracer.flush()
        tracer.shutdown()

    assert not root.is_recording
    assert "Tracing start of trace 'process_query' failed" in caplog.text
    assert "Tracing flush failed" in caplog.text


def test_shutdown_releases_client():
    """Test shutdown flushes once and releases the client."""
    client = FakeLangfuse()

    with Tracer(client) as tracer:
        tracer.flush()

    assert client.flushed == 1
    assert client.shut_down == 1
    assert not tracer.enabled
    tracer.shutdown()
    assert client.shut_down == 1
