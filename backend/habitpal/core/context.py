"""Per-request context utilities."""
from __future__ import annotations

from contextvars import ContextVar

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)
client_timezone_ctx_var: ContextVar[str | None] = ContextVar("client_timezone", default=None)


def get_request_id() -> str | None:
    """Return the current request id if available."""
    return request_id_ctx_var.get()


def get_client_timezone() -> str | None:
    """Return the timezone hint the client sent with the current request."""
    return client_timezone_ctx_var.get()
