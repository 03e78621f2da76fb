"""Tracing utilities wrapping Opik."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from habitpal.core.context import get_client_timezone, get_request_id
from habitpal.observability.client import get_opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace
else:  # pragma: no cover - typing helper
    Trace = object  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def _clean(metadata: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in metadata.items() if value not in (None, "", [], {})}


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """
    Open an Opik trace for the duration of the block.

    The request id and client timezone default to the values of the current
    request. When Opik is disabled the context yields ``None``.
    """
    client = get_opik_client()
    opik_trace: Optional["Trace"] = None

    if client:
        trace_metadata = dict(metadata or {})
        trace_metadata.setdefault("request_id", request_id or get_request_id())
        trace_metadata.setdefault("client_timezone", get_client_timezone())
        try:
            opik_trace = client.trace(name=name, metadata=_clean(trace_metadata) or None)
        except Exception as exc:  # pragma: no cover - tracing is best-effort
            logger.debug("Unable to start Opik trace %s: %s", name, exc)
            opik_trace = None

    try:
        yield opik_trace
    except Exception as exc:
        if opik_trace:
            try:
                opik_trace.update(error_info={"message": str(exc), "type": type(exc).__name__})
            except Exception:  # pragma: no cover
                logger.debug("Failed to attach error info to Opik trace %s", name, exc_info=True)
        raise
    finally:
        if opik_trace:
            try:
                opik_trace.end()
            except Exception:  # pragma: no cover
                logger.debug("Failed to close Opik trace %s cleanly", name, exc_info=True)


def annotate(opik_trace: Optional["Trace"], **metadata: Any) -> None:
    """Attach extra metadata to a live trace; no-op without one."""
    if not opik_trace:
        return
    try:
        opik_trace.update(metadata=_clean(metadata))
    except Exception:  # pragma: no cover - tracing is best-effort
        logger.debug("Unable to annotate Opik trace", exc_info=True)
