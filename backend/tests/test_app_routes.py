"""Regression tests for application route registration."""
from fastapi.routing import APIRoute

from habitpal.main import app


def _routes(path: str, method: str) -> list[APIRoute]:
    return [
        route
        for route in app.routes
        if isinstance(route, APIRoute) and route.path == path and method in route.methods
    ]


def test_habit_routes_registered_once() -> None:
    assert len(_routes("/habits", "POST")) == 1
    assert len(_routes("/habits/preview", "POST")) == 1
    assert len(_routes("/habits/extract", "POST")) == 1


def test_calendar_routes_registered_once() -> None:
    assert len(_routes("/calendar/events", "GET")) == 1
    assert len(_routes("/calendar/events", "POST")) == 1
    assert len(_routes("/calendar/events/{event_id}", "DELETE")) == 1
