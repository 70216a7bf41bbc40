"""Tests for the standalone consumer process entry point."""

from __future__ import annotations

import signal
import threading

from projectpulse.domain.exceptions import ConsumerFatalError
from projectpulse.workers import notification_consumer


class _StubService:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.ran_with: threading.Event | None = None

    def run(self, stop_event: threading.Event) -> None:
        self.ran_with = stop_event
        if self.error is not None:
            raise self.error


def test_parse_args_defaults_come_from_settings() -> None:
    args = notification_consumer.parse_args([])

    assert args.topic == "user-notifications"
    assert args.group == "user-service-group"
    assert args.bootstrap_servers == "localhost:9092"


def test_main_returns_one_on_fatal_error(monkeypatch) -> None:
    service = _StubService(ConsumerFatalError("no brokers"))
    captured = {}

    def from_settings(settings):
        captured["settings"] = settings
        return service

    monkeypatch.setattr(
        notification_consumer.NotificationConsumerService, "from_settings", from_settings
    )
    monkeypatch.setattr(notification_consumer, "install_signal_handlers", lambda event: None)

    exit_code = notification_consumer.main(["--topic", "other-topic"])

    assert exit_code == 1
    assert service.ran_with is not None
    assert captured["settings"].kafka_notification_topic == "other-topic"


def test_main_returns_zero_after_clean_stop(monkeypatch) -> None:
    service = _StubService()
    monkeypatch.setattr(
        notification_consumer.NotificationConsumerService,
        "from_settings",
        lambda settings: service,
    )
    monkeypatch.setattr(notification_consumer, "install_signal_handlers", lambda event: None)

    assert notification_consumer.main([]) == 0


def test_signal_handler_sets_stop_event() -> None:
    previous = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    stop_event = threading.Event()
    try:
        notification_consumer.install_signal_handlers(stop_event)
        handler = signal.getsignal(signal.SIGTERM)
        handler(signal.SIGTERM, None)
    finally:
        for sig, original in previous.items():
            signal.signal(sig, original)

    assert stop_event.is_set()
