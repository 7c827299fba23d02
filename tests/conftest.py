from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config.settings import Settings
from src.models.events import Event
from src.services.events import EventBus


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        api_base_url="http://verify.test/",
        api_key="test-key",
        timeout_ms=5000,
        machine_id="machine-1",
        session_id="session-1",
    )


@pytest.fixture
def settings_without_key() -> Settings:
    return Settings(_env_file=None, api_base_url="http://verify.test", api_key=None)


@pytest.fixture
def make_region() -> Callable[..., dict[str, Any]]:
    """Build a per-region entry the way the service sends it."""

    def _make(
        continent: str,
        status: str = "completed",
        reachability: int | None = 100,
        usability: int | None = 95,
        **extra: Any,
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"continent": continent, "status": status}
        scores = {}
        if reachability is not None:
            scores["reachability"] = reachability
        if usability is not None:
            scores["usability"] = usability
        if scores:
            entry["scores"] = scores
        entry.update(extra)
        return entry

    return _make


@pytest.fixture
def make_snapshot() -> Callable[..., dict[str, Any]]:
    def _make(job_id: str, results: list[dict[str, Any]], **extra: Any) -> dict[str, Any]:
        return {
            "jobId": job_id,
            "status": "processing",
            "totalJobs": 6,
            "completedJobs": sum(1 for r in results if r["status"] != "pending"),
            "results": results,
            **extra,
        }

    return _make


@pytest.fixture
def mock_client() -> AsyncMock:
    """A VerifyClient stand-in whose endpoint methods are AsyncMocks."""
    client = AsyncMock()
    client.transport = MagicMock()
    client.transport.has_api_key = True
    return client


@pytest.fixture
def bus_events() -> tuple[EventBus, list[Event]]:
    bus = EventBus()
    events: list[Event] = []
    bus.subscribe(events.append)
    return bus, events
