"""Calendar event routes (single events, listing, deletion)."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from habitpal.api.deps import get_gateway, get_now, resolve_request_timezone
from habitpal.api.errors import gateway_http_error, scheduling_http_error
from habitpal.api.schemas.calendar import (
    CalendarEventList,
    CalendarEventOut,
    SingleEventRequest,
    SingleEventResponse,
)
from habitpal.api.schemas.habits import SchedulePreview
from habitpal.core.config import settings
from habitpal.observability.metrics import log_metric, timed
from habitpal.observability.tracing import trace
from habitpal.services.calendar.base import CalendarGateway, CalendarGatewayError
from habitpal.services.habit_service import create_single_event
from habitpal.services.scheduling.errors import SchedulingError
from habitpal.services.scheduling.event_dates import normalize_event_date

router = APIRouter()


@router.post(
    "/calendar/events",
    response_model=SingleEventResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["calendar"],
)
def create_event(
    payload: SingleEventRequest,
    request: Request,
    gateway: CalendarGateway = Depends(get_gateway),
    now: datetime = Depends(get_now),
) -> SingleEventResponse:
    request_id = getattr(request.state, "request_id", None)
    timezone_name = resolve_request_timezone(request, payload.timezone)
    duration = payload.duration_minutes if payload.duration_minutes is not None else settings.default_duration_minutes
    with timed("calendar.create_event", metadata={"provider": gateway.name}):
        try:
            event_date = normalize_event_date(payload.date, now, timezone_name)
            result = create_single_event(
                payload.summary,
                event_date,
                payload.start_time,
                timezone_name,
                gateway,
                duration_minutes=duration,
                description=payload.description,
            )
        except SchedulingError as exc:
            raise scheduling_http_error(exc) from exc
        except CalendarGatewayError as exc:
            raise gateway_http_error(exc) from exc

    return SingleEventResponse(
        event=CalendarEventOut.from_event(result.event),
        schedule=SchedulePreview.from_occurrence(result.occurrence),
        message=result.message,
        request_id=request_id or "",
    )


@router.get("/calendar/events", response_model=CalendarEventList, tags=["calendar"])
def list_events(
    request: Request,
    max_results: int = Query(10, ge=1, le=250),
    time_min: Optional[datetime] = Query(None, description="RFC 3339 instant with offset."),
    gateway: CalendarGateway = Depends(get_gateway),
) -> CalendarEventList:
    request_id = getattr(request.state, "request_id", None)
    if time_min is not None and time_min.tzinfo is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": "time_min", "message": "time_min must include a UTC offset"},
        )
    with trace("calendar.list_events", metadata={"provider": gateway.name, "max_results": max_results}, request_id=request_id):
        try:
            events = gateway.list_events(max_results, time_min)
        except CalendarGatewayError as exc:
            raise gateway_http_error(exc) from exc

    log_metric("calendar.list_events.count", len(events), metadata={"provider": gateway.name})
    message = f"Found {len(events)} upcoming events." if events else "No upcoming events found in your calendar."
    return CalendarEventList(
        events=[CalendarEventOut.from_event(event) for event in events],
        message=message,
        request_id=request_id or "",
    )


@router.delete("/calendar/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["calendar"])
def delete_event(
    event_id: str,
    request: Request,
    gateway: CalendarGateway = Depends(get_gateway),
) -> Response:
    request_id = getattr(request.state, "request_id", None)
    with trace("calendar.delete_event", metadata={"provider": gateway.name, "event_id": event_id}, request_id=request_id):
        try:
            deleted = gateway.delete_event(event_id)
        except CalendarGatewayError as exc:
            raise gateway_http_error(exc) from exc

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    log_metric("calendar.delete_event.success", 1, metadata={"provider": gateway.name})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
