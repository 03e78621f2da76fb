"""Credential providers injected into calendar gateways."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Any, Callable, Optional

import httpx

from habitpal.services.calendar.base import CalendarNotConnected

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN_SECONDS = 3600
# Tokens are treated as expired this long before the provider says so.
EXPIRY_MARGIN_SECONDS = 60


class CredentialProvider:
    """Supplies bearer tokens for calendar requests."""

    def get_access_token(self) -> str:
        raise NotImplementedError

    def refresh(self) -> str:
        """Force a new token; providers that cannot refresh return the current one."""
        return self.get_access_token()


class StaticTokenProvider(CredentialProvider):
    def __init__(self, access_token: str) -> None:
        if not access_token or not access_token.strip():
            raise CalendarNotConnected("Calendar access token is empty")
        self._access_token = access_token.strip()

    def get_access_token(self) -> str:
        return self._access_token


class RefreshTokenCredentialProvider(CredentialProvider):
    """OAuth refresh-token grant with an expiry-aware token cache."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        token_url: str,
        http_client: httpx.Client,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._token_url = token_url
        self._http_client = http_client
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._access_token: Optional[str] = None
        self._expires_at: Optional[datetime] = None
        self._lock = Lock()

    def get_access_token(self) -> str:
        with self._lock:
            if self._token_is_fresh():
                return self._access_token
            return self._refresh_locked()

    def refresh(self) -> str:
        with self._lock:
            return self._refresh_locked()

    def _token_is_fresh(self) -> bool:
        if self._access_token is None or self._expires_at is None:
            return False
        return self._clock() < self._expires_at

    def _refresh_locked(self) -> str:
        try:
            response = self._http_client.post(
                self._token_url,
                data={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "refresh_token": self._refresh_token,
                    "grant_type": "refresh_token",
                },
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise CalendarNotConnected(f"Token refresh request failed: {exc}") from exc

        if not response.is_success:
            raise CalendarNotConnected(
                f"Token refresh failed ({response.status_code})", status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise CalendarNotConnected("Token endpoint returned invalid JSON") from exc

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(access_token, str) or not access_token.strip():
            raise CalendarNotConnected("Token response is missing an access_token")

        expires_in = _coerce_expires_in(payload.get("expires_in"))
        ttl = max(expires_in - EXPIRY_MARGIN_SECONDS, 0)
        self._access_token = access_token.strip()
        self._expires_at = self._clock() + timedelta(seconds=ttl)
        logger.info("Calendar access token refreshed (valid for %ss)", ttl)
        return self._access_token


def _coerce_expires_in(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_EXPIRES_IN_SECONDS
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return DEFAULT_EXPIRES_IN_SECONDS
