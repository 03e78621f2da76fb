"""Custom FastAPI middleware."""
from __future__ import annotations

from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from habitpal.core.context import client_timezone_ctx_var, request_id_ctx_var


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Expose the request id and client timezone hint to handlers and logs."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = request.headers.get("X-Request-Id") or str(uuid4())
        client_timezone = (request.headers.get("X-Timezone") or "").strip() or None
        request.state.request_id = request_id
        request.state.client_timezone = client_timezone
        request_token = request_id_ctx_var.set(request_id)
        timezone_token = client_timezone_ctx_var.set(client_timezone)

        try:
            response = await call_next(request)
        finally:
            client_timezone_ctx_var.reset(timezone_token)
            request_id_ctx_var.reset(request_token)

        response.headers["X-Request-Id"] = request_id
        return response
