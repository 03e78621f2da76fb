"""Translate service errors into HTTP errors."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from habitpal.services.calendar.base import CalendarGatewayError, CalendarNotConnected
from habitpal.services.scheduling.errors import SchedulingError

logger = logging.getLogger(__name__)

GATEWAY_FAILURE_DETAIL = "The calendar service is unavailable right now. Please try again later."


def scheduling_http_error(exc: SchedulingError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.to_detail())


def gateway_http_error(exc: CalendarGatewayError) -> HTTPException:
    logger.warning("Calendar gateway failure (status=%s): %s", exc.status_code, exc)
    if isinstance(exc, CalendarNotConnected):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Calendar is not connected. Please reconnect your calendar.",
        )
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=GATEWAY_FAILURE_DETAIL)
