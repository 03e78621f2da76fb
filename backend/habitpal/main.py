"""Main FastAPI application for the HabitPal backend."""
from fastapi import FastAPI, Request

from habitpal.api.routes.calendar import router as calendar_router
from habitpal.api.routes.habits import router as habits_router
from habitpal.core.config import settings
from habitpal.core.logging import configure_logging
from habitpal.core.middleware import RequestContextMiddleware
from habitpal.observability.client import init_opik
from habitpal.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestContextMiddleware)
app.include_router(habits_router)
app.include_router(calendar_router)


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
