from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from habitpal.services.calendar.base import CalendarEventRequest, CalendarGatewayError
from habitpal.services.calendar.credentials import CredentialProvider
from habitpal.services.calendar.google import GoogleCalendarGateway

BASE_URL = "https://calendar.test/v3"


class _FakeCredentials(CredentialProvider):
    def __init__(self) -> None:
        self.tokens = ["token-1", "token-2"]
        self.refreshes = 0

    def get_access_token(self) -> str:
        return self.tokens[min(self.refreshes, len(self.tokens) - 1)]

    def refresh(self) -> str:
        self.refreshes += 1
        return self.get_access_token()


def _gateway(handler, credentials=None, calendar_id="primary"):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return GoogleCalendarGateway(
        credentials or _FakeCredentials(),
        client,
        calendar_id=calendar_id,
        base_url=BASE_URL,
    )


def _event_request(recurrence=None) -> CalendarEventRequest:
    return CalendarEventRequest(
        summary="Meditate",
        description="Habit tracking for: Meditate",
        start_date_time="2025-11-25T07:00:00",
        end_date_time="2025-11-25T07:30:00",
        timezone="America/Los_Angeles",
        recurrence=recurrence if recurrence is not None else ["RRULE:FREQ=DAILY"],
    )


def test_create_event_sends_civil_times_and_recurrence() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "id": "evt-1",
                "htmlLink": "https://calendar.test/event?eid=evt-1",
                "summary": "Meditate",
                "start": {"dateTime": "2025-11-25T07:00:00-08:00", "timeZone": "America/Los_Angeles"},
                "end": {"dateTime": "2025-11-25T07:30:00-08:00", "timeZone": "America/Los_Angeles"},
                "recurrence": ["RRULE:FREQ=DAILY"],
            },
        )

    event = _gateway(handler).create_event(_event_request())

    assert seen["method"] == "POST"
    assert seen["url"] == f"{BASE_URL}/calendars/primary/events"
    assert seen["auth"] == "Bearer token-1"
    assert seen["body"] == {
        "summary": "Meditate",
        "description": "Habit tracking for: Meditate",
        "start": {"dateTime": "2025-11-25T07:00:00", "timeZone": "America/Los_Angeles"},
        "end": {"dateTime": "2025-11-25T07:30:00", "timeZone": "America/Los_Angeles"},
        "recurrence": ["RRULE:FREQ=DAILY"],
    }
    assert event.id == "evt-1"
    assert event.html_link.endswith("evt-1")
    assert event.timezone == "America/Los_Angeles"
    assert event.recurrence == ["RRULE:FREQ=DAILY"]


def test_single_event_omits_recurrence() -> None:
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "evt-2"})

    _gateway(handler).create_event(_event_request(recurrence=[]))

    assert "recurrence" not in bodies[0]


def test_calendar_id_is_url_encoded() -> None:
    urls = []

    def handler(request: httpx.Request) -> httpx.Response:
        urls.append(request.url.raw_path.decode())
        return httpx.Response(200, json={"items": []})

    _gateway(handler, calendar_id="team@group.calendar.test").list_events(3)

    assert urls[0].startswith("/v3/calendars/team%40group.calendar.test/events")


def test_list_events_orders_by_start_time() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "id": "a",
                        "summary": "Run",
                        "start": {"dateTime": "2025-11-25T07:00:00-08:00"},
                        "end": {"dateTime": "2025-11-25T07:30:00-08:00"},
                    },
                    {"id": "b", "summary": "Holiday", "start": {"date": "2025-11-27"}, "end": {"date": "2025-11-28"}},
                ]
            },
        )

    events = _gateway(handler).list_events(5, datetime(2025, 11, 24, 16, 0, tzinfo=timezone.utc))

    assert seen["params"] == {
        "maxResults": "5",
        "timeMin": "2025-11-24T16:00:00Z",
        "singleEvents": "true",
        "orderBy": "startTime",
    }
    assert [event.id for event in events] == ["a", "b"]
    assert events[1].start == "2025-11-27"


def test_unauthorized_request_refreshes_token_once() -> None:
    credentials = _FakeCredentials()
    auth_headers = []

    def handler(request: httpx.Request) -> httpx.Response:
        auth_headers.append(request.headers["Authorization"])
        if request.headers["Authorization"] == "Bearer token-1":
            return httpx.Response(401, json={"error": {"message": "Invalid Credentials"}})
        return httpx.Response(200, json={"items": []})

    assert _gateway(handler, credentials).list_events(1) == []
    assert auth_headers == ["Bearer token-1", "Bearer token-2"]
    assert credentials.refreshes == 1


def test_delete_event_reports_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        if request.url.path.endswith("/events/known"):
            return httpx.Response(204)
        return httpx.Response(404, json={"error": {"message": "Not Found"}})

    gateway = _gateway(handler)

    assert gateway.delete_event("known") is True
    assert gateway.delete_event("missing") is False


def test_provider_errors_are_opaque_gateway_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": {"message": "Rate   Limit Exceeded"}})

    with pytest.raises(CalendarGatewayError) as excinfo:
        _gateway(handler).create_event(_event_request())

    assert excinfo.value.status_code == 403
    assert "Rate Limit Exceeded" in str(excinfo.value)


def test_network_failures_are_gateway_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CalendarGatewayError):
        _gateway(handler).list_events(1)


def test_max_results_must_be_positive() -> None:
    with pytest.raises(ValueError):
        _gateway(lambda request: httpx.Response(200, json={})).list_events(0)
