"""FastAPI dependencies for collaborators that tests swap out."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import HTTPException, Request, status

from habitpal.core.config import settings
from habitpal.services.calendar.base import CalendarGateway, CalendarNotConnected
from habitpal.services.calendar.factory import get_calendar_gateway
from habitpal.services.intent.base import IntentSource
from habitpal.services.intent.factory import get_intent_source
from habitpal.services.scheduling import clock


def get_gateway() -> CalendarGateway:
    try:
        return get_calendar_gateway()
    except CalendarNotConnected as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def get_intent() -> IntentSource:
    return get_intent_source()


def get_now() -> datetime:
    """The single read of the current instant for a request."""
    return clock.now_utc()


def resolve_request_timezone(request: Request, explicit: Optional[str]) -> str:
    """Body value, then the ``X-Timezone`` header, then the configured default."""
    if explicit and explicit.strip():
        return explicit.strip()
    hinted = getattr(request.state, "client_timezone", None)
    return hinted or settings.default_timezone
