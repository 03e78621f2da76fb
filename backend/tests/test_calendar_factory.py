from __future__ import annotations

import httpx
import pytest

from habitpal.core.config import settings
from habitpal.services.calendar import factory
from habitpal.services.calendar.base import CalendarNotConnected
from habitpal.services.calendar.google import GoogleCalendarGateway
from habitpal.services.calendar.memory import InMemoryCalendarGateway


class _TrackingClient(httpx.Client):
    instances: list["_TrackingClient"] = []

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        _TrackingClient.instances.append(self)


@pytest.fixture()
def google_without_credentials(monkeypatch):
    _TrackingClient.instances.clear()
    monkeypatch.setattr(httpx, "Client", _TrackingClient)
    monkeypatch.setattr(settings, "calendar_provider", "google")
    for name in ("google_client_id", "google_client_secret", "google_refresh_token", "google_access_token"):
        monkeypatch.setattr(settings, name, None)
    factory.get_calendar_gateway.cache_clear()
    yield
    factory.get_calendar_gateway.cache_clear()


def test_missing_credentials_close_the_http_client(google_without_credentials) -> None:
    for _ in range(2):
        with pytest.raises(CalendarNotConnected):
            factory.get_calendar_gateway()

    assert len(_TrackingClient.instances) == 2
    assert all(client.is_closed for client in _TrackingClient.instances)


def test_static_token_builds_google_gateway(google_without_credentials, monkeypatch) -> None:
    monkeypatch.setattr(settings, "google_access_token", "token-abc")

    gateway = factory.get_calendar_gateway()

    assert isinstance(gateway, GoogleCalendarGateway)
    assert not _TrackingClient.instances[0].is_closed
    _TrackingClient.instances[0].close()


def test_unknown_provider_uses_memory(monkeypatch) -> None:
    monkeypatch.setattr(settings, "calendar_provider", "outlook")
    factory.get_calendar_gateway.cache_clear()
    try:
        assert isinstance(factory.get_calendar_gateway(), InMemoryCalendarGateway)
    finally:
        factory.get_calendar_gateway.cache_clear()
