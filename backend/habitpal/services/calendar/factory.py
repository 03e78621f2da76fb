"""Calendar gateway factory."""
from __future__ import annotations

import logging
from functools import lru_cache

import httpx

from habitpal.core.config import settings
from habitpal.services.calendar.base import CalendarGateway, CalendarNotConnected
from habitpal.services.calendar.credentials import (
    CredentialProvider,
    RefreshTokenCredentialProvider,
    StaticTokenProvider,
)
from habitpal.services.calendar.google import GoogleCalendarGateway
from habitpal.services.calendar.memory import InMemoryCalendarGateway

logger = logging.getLogger(__name__)


def build_credential_provider(http_client: httpx.Client) -> CredentialProvider:
    if settings.google_refresh_token and settings.google_client_id and settings.google_client_secret:
        return RefreshTokenCredentialProvider(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            refresh_token=settings.google_refresh_token,
            token_url=settings.google_oauth_token_url,
            http_client=http_client,
        )
    if settings.google_access_token:
        return StaticTokenProvider(settings.google_access_token)
    raise CalendarNotConnected("Google Calendar not connected: no OAuth credentials configured")


@lru_cache
def get_calendar_gateway() -> CalendarGateway:
    provider = settings.calendar_provider.lower()
    if provider == "google":
        http_client = httpx.Client(timeout=settings.calendar_timeout_seconds)
        try:
            credentials = build_credential_provider(http_client)
        except CalendarNotConnected:
            http_client.close()
            raise
        return GoogleCalendarGateway(
            credentials,
            http_client,
            calendar_id=settings.google_calendar_id,
            base_url=settings.google_calendar_api_base_url,
        )
    if provider != "memory":
        logger.warning("Unknown calendar provider '%s'; using in-memory calendar", provider)
    return InMemoryCalendarGateway()
