"""Habit scheduling routes."""
from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Request, status

from habitpal.api.deps import get_gateway, get_intent, get_now, resolve_request_timezone
from habitpal.api.errors import gateway_http_error, scheduling_http_error
from habitpal.api.schemas.habits import (
    ExtractedHabit,
    HabitCreateResponse,
    HabitExtractRequest,
    HabitExtractResponse,
    HabitScheduleRequest,
    SchedulePreview,
    SchedulePreviewResponse,
)
from habitpal.core.config import settings
from habitpal.observability.metrics import log_metric, timed
from habitpal.observability.tracing import annotate, trace
from habitpal.services.calendar.base import CalendarGateway, CalendarGatewayError
from habitpal.services.habit_service import create_habit_event
from habitpal.services.intent.base import IntentSource
from habitpal.services.scheduling import clock
from habitpal.services.scheduling.errors import SchedulingError
from habitpal.services.scheduling.scheduler import HabitOccurrenceRequest, schedule

router = APIRouter()


@router.post("/habits/preview", response_model=SchedulePreviewResponse, tags=["habits"])
def preview_habit(
    payload: HabitScheduleRequest,
    request: Request,
    now: datetime = Depends(get_now),
) -> SchedulePreviewResponse:
    """Compute the first occurrence and recurrence rule without touching the calendar."""
    request_id = getattr(request.state, "request_id", None)
    habit_request = _to_habit_request(payload, request)
    with trace("habits.preview", metadata={"timezone": habit_request.timezone}, request_id=request_id) as span:
        try:
            occurrence = schedule(habit_request, now)
        except SchedulingError as exc:
            log_metric("habits.preview.invalid", 1, metadata={"field": exc.field})
            raise scheduling_http_error(exc) from exc
        annotate(span, start=occurrence.start.isoformat(), recurrence=";".join(occurrence.recurrence_rule))

    log_metric("habits.preview.success", 1)
    return SchedulePreviewResponse(
        schedule=SchedulePreview.from_occurrence(occurrence),
        request_id=request_id or "",
    )


@router.post("/habits", response_model=HabitCreateResponse, status_code=status.HTTP_201_CREATED, tags=["habits"])
def create_habit(
    payload: HabitScheduleRequest,
    request: Request,
    gateway: CalendarGateway = Depends(get_gateway),
    now: datetime = Depends(get_now),
) -> HabitCreateResponse:
    """Schedule a habit and create its recurring calendar event."""
    request_id = getattr(request.state, "request_id", None)
    habit_request = _to_habit_request(payload, request)
    with timed("habits.create", metadata={"provider": gateway.name}):
        try:
            result = create_habit_event(habit_request, gateway, now=now)
        except SchedulingError as exc:
            raise scheduling_http_error(exc) from exc
        except CalendarGatewayError as exc:
            raise gateway_http_error(exc) from exc

    return HabitCreateResponse(
        event_id=result.event.id,
        event_link=result.event.html_link,
        schedule=SchedulePreview.from_occurrence(result.occurrence),
        message=result.message,
        request_id=request_id or "",
    )


@router.post("/habits/extract", response_model=HabitExtractResponse, tags=["habits"])
def extract_habits(
    payload: HabitExtractRequest,
    request: Request,
    intent_source: IntentSource = Depends(get_intent),
    now: datetime = Depends(get_now),
) -> HabitExtractResponse:
    """Find habit commitments in conversation text and preview each complete one."""
    request_id = getattr(request.state, "request_id", None)
    timezone_name = resolve_request_timezone(request, payload.timezone)
    try:
        clock.resolve_timezone(timezone_name)
    except SchedulingError as exc:
        raise scheduling_http_error(exc) from exc

    with trace(
        "habits.extract",
        metadata={"source": intent_source.name, "text_length": len(payload.text)},
        request_id=request_id,
    ) as span:
        extraction = intent_source.extract(payload.text, timezone_name)
        habits: List[ExtractedHabit] = []
        for intent in extraction.habits:
            try:
                habit_request = intent.to_request(timezone_name, settings.default_duration_minutes)
                if habit_request is None:
                    habits.append(ExtractedHabit(intent=intent))
                    continue
                preview = SchedulePreview.from_occurrence(schedule(habit_request, now))
            except SchedulingError as exc:
                habits.append(ExtractedHabit(intent=intent, error=exc.message))
                continue
            habits.append(ExtractedHabit(intent=intent, schedule=preview))
        annotate(span, habits=len(habits), needs_clarification=extraction.needs_clarification)

    log_metric("habits.extract.count", len(habits), metadata={"source": extraction.source})
    return HabitExtractResponse(
        habits=habits,
        needs_clarification=extraction.needs_clarification,
        clarification_question=extraction.clarification_question,
        source=extraction.source,
        request_id=request_id or "",
    )


def _to_habit_request(payload: HabitScheduleRequest, request: Request) -> HabitOccurrenceRequest:
    duration = payload.duration_minutes if payload.duration_minutes is not None else settings.default_duration_minutes
    return HabitOccurrenceRequest(
        activity=payload.activity,
        start_time_of_day=payload.start_time,
        timezone=resolve_request_timezone(request, payload.timezone),
        recurrence=payload.recurrence.to_pattern() if payload.recurrence else None,
        duration_minutes=duration,
        description=payload.description,
    )
