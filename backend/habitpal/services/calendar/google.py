"""Google Calendar v3 gateway over plain REST."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from habitpal.services.calendar.base import (
    CalendarEvent,
    CalendarEventRequest,
    CalendarGateway,
    CalendarGatewayError,
)
from habitpal.services.calendar.credentials import CredentialProvider

logger = logging.getLogger(__name__)

MAX_LIST_RESULTS = 250
NOT_FOUND_STATUS_CODES = {404, 410}


class GoogleCalendarGateway(CalendarGateway):
    name = "google"

    def __init__(
        self,
        credentials: CredentialProvider,
        http_client: httpx.Client,
        *,
        calendar_id: str = "primary",
        base_url: str = "https://www.googleapis.com/calendar/v3",
    ) -> None:
        self._credentials = credentials
        self._http_client = http_client
        self._calendar_id = calendar_id
        self._base_url = base_url.rstrip("/")

    @property
    def _events_path(self) -> str:
        return f"/calendars/{quote(self._calendar_id, safe='')}/events"

    def create_event(self, request: CalendarEventRequest) -> CalendarEvent:
        body: Dict[str, Any] = {
            "summary": request.summary,
            "description": request.description or "",
            "start": {"dateTime": request.start_date_time, "timeZone": request.timezone},
            "end": {"dateTime": request.end_date_time, "timeZone": request.timezone},
        }
        if request.recurrence:
            body["recurrence"] = list(request.recurrence)

        response = self._request("POST", self._events_path, json_body=body)
        _raise_for_status(response, "create event")
        event = _event_from_payload(_json(response), default_timezone=request.timezone)
        logger.info("Created calendar event %s (%s)", event.id, event.summary)
        return event

    def list_events(self, max_results: int = 10, time_min: Optional[datetime] = None) -> List[CalendarEvent]:
        if max_results < 1:
            raise ValueError("max_results must be at least 1")
        params = {
            "maxResults": min(max_results, MAX_LIST_RESULTS),
            "timeMin": _rfc3339(time_min or datetime.now(timezone.utc)),
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        response = self._request("GET", self._events_path, params=params)
        _raise_for_status(response, "list events")
        items = _json(response).get("items") or []
        return [_event_from_payload(item) for item in items if isinstance(item, dict)]

    def delete_event(self, event_id: str) -> bool:
        path = f"{self._events_path}/{quote(event_id, safe='')}"
        response = self._request("DELETE", path)
        if response.status_code in NOT_FOUND_STATUS_CODES:
            logger.info("Calendar event %s not found on delete", event_id)
            return False
        _raise_for_status(response, "delete event")
        logger.info("Deleted calendar event %s", event_id)
        return True

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        url = f"{self._base_url}{path}"
        response = self._send(method, url, self._credentials.get_access_token(), params, json_body)
        if response.status_code == 401:
            logger.info("Calendar request unauthorized; refreshing token once")
            response = self._send(method, url, self._credentials.refresh(), params, json_body)
        return response

    def _send(
        self,
        method: str,
        url: str,
        access_token: str,
        params: Optional[Dict[str, Any]],
        json_body: Optional[Dict[str, Any]],
    ) -> httpx.Response:
        try:
            return self._http_client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise CalendarGatewayError(f"Calendar request failed: {exc}") from exc


def _raise_for_status(response: httpx.Response, action: str) -> None:
    if response.is_success:
        return
    raise CalendarGatewayError(
        f"Calendar provider could not {action} ({response.status_code}): {_error_message(response)}",
        status_code=response.status_code,
    )


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return " ".join(error["message"].split())[:200]
        if isinstance(error, str) and error.strip():
            return error.strip()[:200]
    text = response.text.strip()
    return " ".join(text.split())[:200] if text else "no error payload"


def _json(response: httpx.Response) -> Dict[str, Any]:
    if response.status_code == 204:
        return {}
    try:
        payload = response.json()
    except ValueError as exc:
        raise CalendarGatewayError("Calendar provider returned invalid JSON") from exc
    if not isinstance(payload, dict):
        raise CalendarGatewayError("Calendar provider returned an unexpected payload")
    return payload


def _event_from_payload(payload: Dict[str, Any], default_timezone: str = "") -> CalendarEvent:
    start = payload.get("start") or {}
    end = payload.get("end") or {}
    return CalendarEvent(
        id=payload.get("id") or "",
        html_link=payload.get("htmlLink") or "",
        summary=payload.get("summary") or "",
        start=start.get("dateTime") or start.get("date") or "",
        end=end.get("dateTime") or end.get("date") or "",
        timezone=start.get("timeZone") or default_timezone,
        recurrence=list(payload.get("recurrence") or []),
    )


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        raise ValueError("time_min must be timezone-aware")
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
