"""Tests for environment driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from projectpulse.config import Settings


def test_defaults_match_deployment(monkeypatch) -> None:
    monkeypatch.delenv("KAFKA_BOOTSTRAP_SERVERS", raising=False)

    settings = Settings(_env_file=None)

    assert settings.kafka_bootstrap_servers == "kafka:9092"
    assert settings.kafka_notification_topic == "user-notifications"
    assert settings.kafka_consumer_group == "user-service-group"
    assert settings.notification_deduplicate_events is False


def test_notification_store_falls_back_to_database_url(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///main.db")
    monkeypatch.delenv("NOTIFICATION_DATABASE_URL", raising=False)

    assert Settings(_env_file=None).notification_store_url == "sqlite:///main.db"

    monkeypatch.setenv("NOTIFICATION_DATABASE_URL", "sqlite:///notifications.db")

    assert Settings(_env_file=None).notification_store_url == "sqlite:///notifications.db"


def test_log_level_is_normalized(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert Settings(_env_file=None).log_level == "DEBUG"


def test_unknown_log_level_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
