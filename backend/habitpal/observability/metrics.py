"""Lightweight metrics helpers."""
from __future__ import annotations

from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from habitpal.observability import tracing


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a metric as a short Opik trace when tracing is enabled."""
    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update(metadata)
    with tracing.trace(f"metric:{name}", metadata=payload):
        pass


@contextmanager
def timed(name: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[None]:
    """Log ``<name>.latency_ms`` and ``<name>.success`` or ``<name>.failure``."""
    start = perf_counter()
    outcome = "failure"
    try:
        yield
        outcome = "success"
    finally:
        latency_ms = (perf_counter() - start) * 1000
        log_metric(f"{name}.latency_ms", latency_ms, metadata=metadata)
        log_metric(f"{name}.{outcome}", 1, metadata=metadata)
