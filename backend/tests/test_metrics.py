"""Tests for metrics helpers."""
from __future__ import annotations

from typing import Any, Dict

import pytest

from habitpal.observability import metrics
from habitpal.observability import tracing


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.ended = False

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(name, metadata or {})
        self.traces.append(trace)
        return trace


def test_log_metric_closes_trace(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    metrics.log_metric("demo_metric", 42, metadata={"foo": "bar"})

    assert dummy_client.traces, "Metric call should record a trace"
    assert dummy_client.traces[0].name == "metric:demo_metric"
    assert dummy_client.traces[0].metadata["value"] == 42
    assert dummy_client.traces[0].metadata["foo"] == "bar"
    assert dummy_client.traces[0].ended is True


def test_timed_records_latency_and_success(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    with metrics.timed("habits.create", metadata={"provider": "memory"}):
        pass

    names = [trace.name for trace in dummy_client.traces]
    assert names == ["metric:habits.create.latency_ms", "metric:habits.create.success"]
    assert dummy_client.traces[0].metadata["value"] >= 0
    assert dummy_client.traces[1].metadata["provider"] == "memory"


def test_timed_records_failure_and_reraises(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    with pytest.raises(RuntimeError):
        with metrics.timed("habits.create"):
            raise RuntimeError("boom")

    assert dummy_client.traces[-1].name == "metric:habits.create.failure"


def test_log_metric_is_noop_without_client(monkeypatch) -> None:
    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    metrics.log_metric("demo_metric", 1)
