"""Shared pytest configuration: environment, database and Kafka doubles."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

TEST_DB_PATH = Path(tempfile.mkdtemp(prefix="projectpulse-tests-")) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["NOTIFICATION_CONSUMER_ENABLED"] = "false"
os.environ["KAFKA_BOOTSTRAP_SERVERS"] = "localhost:9092"
os.environ.pop("NOTIFICATION_DATABASE_URL", None)

from projectpulse import config as app_config  # noqa: E402

app_config.get_settings.cache_clear()


@pytest.fixture(autouse=True)
def database():
    """Give every test empty tables."""

    from projectpulse.infrastructure import database as database_module

    database_module.initialize_database()
    database_module.Base.metadata.drop_all(bind=database_module.engine, checkfirst=True)
    database_module.Base.metadata.create_all(bind=database_module.engine)
    yield database_module


@pytest.fixture()
def session(database):
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def store(database):
    """Notification store sharing the test engine."""

    from projectpulse.infrastructure.messaging import NotificationStoreProvider

    return NotificationStoreProvider(
        app_config.get_settings().database_url, engine=database.engine
    )
