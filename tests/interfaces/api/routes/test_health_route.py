"""Tests for the pipeline health endpoint."""

from __future__ import annotations

import threading
import time

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from kafka_doubles import FakeBroker, FakeConsumer, RecordingProducer


class _StubConsumerService:
    def __init__(self, state: str) -> None:
        self._state = state
        self.stopped = threading.Event()

    def status(self) -> dict:
        return {"state": self._state, "topic": "user-notifications"}

    async def serve(self, stop_event: threading.Event) -> None:
        self.stopped = stop_event


def _client(service):
    from main import create_app

    return TestClient(create_app(producer=RecordingProducer(), consumer_service=service))


def test_health_ok_when_consumer_disabled() -> None:
    with _client(None) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["consumer"] == {"state": "disabled"}


def test_health_ok_while_polling() -> None:
    with _client(_StubConsumerService("polling")) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["consumer"]["state"] == "polling"


def test_health_unavailable_when_consumer_failed() -> None:
    with _client(_StubConsumerService("failed")) as client:
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"


def test_shutdown_signals_consumer_to_stop() -> None:
    service = _StubConsumerService("polling")

    with _client(service):
        pass

    assert service.stopped.is_set()


def test_health_unavailable_when_store_url_is_unusable() -> None:
    from projectpulse.infrastructure.messaging import (
        ConsumerState,
        NotificationConsumerService,
        NotificationStoreProvider,
    )

    service = NotificationConsumerService(
        topic="user-notifications",
        consumer_factory=lambda: FakeConsumer(FakeBroker()),
        store=NotificationStoreProvider("not-a-database-url"),
        poll_timeout=0.01,
    )

    with _client(service) as client:
        deadline = time.monotonic() + 5
        while service.state is not ConsumerState.FAILED and time.monotonic() < deadline:
            time.sleep(0.01)
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"
    assert response.json()["consumer"]["state"] == "failed"
