"""Background service turning broker events into stored notifications.

Delivery is at-least-once. The store write and the offset commit are two
independent steps: a crash between them replays the message and stores a
second, identical notification row. Malformed payloads and content the
store refuses are dropped (offset committed); store outages are retried
(offset not committed, position rewound). A message that fails for any other
reason is logged, counted and skipped.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from anyio import to_thread
from confluent_kafka import Consumer, KafkaError, KafkaException, TopicPartition

from projectpulse.config import Settings
from projectpulse.domain.entities import Notification
from projectpulse.domain.exceptions import (
    ConsumerFatalError,
    EventDeserializationError,
    NotificationPersistenceError,
    NotificationRejectedError,
)
from projectpulse.utils import now_in_app_timezone

from .serialization import decode_envelope
from .store import NotificationStoreProvider

logger = logging.getLogger(__name__)

_RAW_PAYLOAD_PREVIEW = 200


class ConsumerState(str, Enum):
    """Lifecycle of :class:`NotificationConsumerService`."""

    STOPPED = "stopped"
    SUBSCRIBING = "subscribing"
    POLLING = "polling"
    PROCESSING = "processing"
    COMMITTING = "committing"
    FAILED = "failed"


class MessageOutcome(str, Enum):
    """What a single poll-process-commit cycle did."""

    IDLE = "idle"
    PERSISTED = "persisted"
    DROPPED = "dropped"
    RETRY = "retry"
    BROKER_ERROR = "broker_error"
    FAILED = "failed"


@dataclass
class ConsumerMetrics:
    """Counters tracked by the consumer service."""

    messages_consumed: int = 0
    notifications_persisted: int = 0
    events_dropped: int = 0
    persistence_failures: int = 0
    processing_errors: int = 0
    commit_failures: int = 0
    broker_errors: int = 0
    started_at: datetime | None = None
    last_message_at: datetime | None = None
    last_error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "messages_consumed": self.messages_consumed,
            "notifications_persisted": self.notifications_persisted,
            "events_dropped": self.events_dropped,
            "persistence_failures": self.persistence_failures,
            "processing_errors": self.processing_errors,
            "commit_failures": self.commit_failures,
            "broker_errors": self.broker_errors,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "last_message_at": (
                self.last_message_at.isoformat() if self.last_message_at else None
            ),
            "last_error": self.last_error,
        }


def build_consumer_config(settings: Settings) -> dict[str, Any]:
    """Return the librdkafka configuration of the notification consumer group."""

    return {
        "bootstrap.servers": settings.kafka_bootstrap_servers,
        "group.id": settings.kafka_consumer_group,
        "auto.offset.reset": "earliest",
        "enable.auto.commit": False,  # Offsets are committed after each stored notification
        "max.poll.interval.ms": 300000,
        "session.timeout.ms": 45000,
    }


class NotificationConsumerService:
    """Poll the notification topic and persist one notification per event.

    The service owns a single broker client and a single store provider,
    both created in :meth:`start` and released in :meth:`close`. :meth:`run`
    blocks the calling thread until ``stop_event`` is set; the event is
    observed at least once per poll interval and never interrupts a message
    that is already being stored.

    Usage:
        service = NotificationConsumerService.from_settings(settings)
        stop_event = threading.Event()
        await service.serve(stop_event)
    """

    def __init__(
        self,
        *,
        topic: str,
        consumer_factory: Callable[[], Any],
        store: NotificationStoreProvider,
        poll_timeout: float = 1.0,
        retry_backoff: float = 2.0,
        deduplicate: bool = False,
    ) -> None:
        self._topic = topic
        self._consumer_factory = consumer_factory
        self._store = store
        self._poll_timeout = poll_timeout
        self._retry_backoff = retry_backoff
        self._deduplicate = deduplicate
        self._consumer: Any = None
        self._state = ConsumerState.STOPPED
        self.metrics = ConsumerMetrics()

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotificationConsumerService":
        config = build_consumer_config(settings)
        return cls(
            topic=settings.kafka_notification_topic,
            consumer_factory=lambda: Consumer(config),
            store=NotificationStoreProvider(settings.notification_store_url),
            poll_timeout=settings.consumer_poll_timeout_seconds,
            retry_backoff=settings.consumer_retry_backoff_seconds,
            deduplicate=settings.notification_deduplicate_events,
        )

    @property
    def state(self) -> ConsumerState:
        return self._state

    @property
    def topic(self) -> str:
        return self._topic

    def status(self) -> dict[str, Any]:
        return {"state": self._state.value, "topic": self._topic, **self.metrics.as_dict()}

    def start(self) -> None:
        """Open the store, create the broker client and join the consumer group."""

        self._state = ConsumerState.SUBSCRIBING
        try:
            self._store.open()
            self._consumer = self._consumer_factory()
            self._consumer.subscribe(
                [self._topic], on_assign=self._on_assign, on_revoke=self._on_revoke
            )
        except Exception as exc:
            # Any startup failure is terminal and must be visible through status().
            self._fail(exc)
            raise ConsumerFatalError(f"Consumer could not start: {exc}") from exc

        self.metrics.started_at = now_in_app_timezone()
        self._state = ConsumerState.POLLING
        logger.info("Notification consumer subscribed to %s", self._topic)

    def run(self, stop_event: threading.Event) -> None:
        """Run the poll loop until ``stop_event`` is set or a fatal error occurs."""

        try:
            self.start()
            while not stop_event.is_set():
                outcome = self.poll_once()
                if outcome is MessageOutcome.RETRY:
                    stop_event.wait(self._retry_backoff)
        except ConsumerFatalError as exc:
            if self._state is not ConsumerState.FAILED:
                self._fail(exc)
            raise
        finally:
            self.close()
        logger.info("Notification consumer stopped")

    async def serve(self, stop_event: threading.Event) -> None:
        """Run :meth:`run` on a worker thread so the event loop is never blocked."""

        await to_thread.run_sync(self.run, stop_event)

    def poll_once(self) -> MessageOutcome:
        """Execute one poll-process-commit cycle."""

        if self._consumer is None:
            raise ConsumerFatalError("Consumer has not been started")

        self._state = ConsumerState.POLLING
        try:
            message = self._consumer.poll(self._poll_timeout)
        except KafkaException as exc:
            return self._handle_broker_error(exc.args[0] if exc.args else exc)

        if message is None:
            return MessageOutcome.IDLE

        error = message.error()
        if error is not None:
            return self._handle_broker_error(error)

        self.metrics.messages_consumed += 1
        self.metrics.last_message_at = now_in_app_timezone()
        self._state = ConsumerState.PROCESSING
        try:
            return self._process(message)
        except ConsumerFatalError:
            raise
        except Exception as exc:
            self.metrics.processing_errors += 1
            self.metrics.last_error = str(exc)
            logger.exception(
                "Unexpected error handling message %s; skipping it",
                _describe(message),
            )
            self._commit(message)
            return MessageOutcome.FAILED
        finally:
            if self._state is not ConsumerState.FAILED:
                self._state = ConsumerState.POLLING

    def close(self) -> None:
        """Leave the consumer group and release the store connections."""

        consumer, self._consumer = self._consumer, None
        if consumer is not None:
            try:
                consumer.close()
                logger.info("Kafka consumer closed")
            except KafkaException as exc:
                logger.warning("Kafka consumer did not close cleanly: %s", exc)
        self._store.close()
        if self._state is not ConsumerState.FAILED:
            self._state = ConsumerState.STOPPED

    def _process(self, message: Any) -> MessageOutcome:
        try:
            envelope = decode_envelope(message.value())
        except EventDeserializationError as exc:
            self.metrics.events_dropped += 1
            self.metrics.last_error = str(exc)
            logger.warning(
                "Dropped undecodable event at %s: %s (payload=%r)",
                _describe(message),
                exc,
                _preview(message.value()),
            )
            self._commit(message)
            return MessageOutcome.DROPPED

        notification = Notification.from_envelope(envelope)
        try:
            with self._store.repository() as repository:
                notification_id = repository.append(
                    notification, deduplicate=self._deduplicate
                )
        except NotificationPersistenceError as exc:
            self.metrics.persistence_failures += 1
            self.metrics.last_error = str(exc)
            logger.error(
                "Could not store notification for event %s at %s; will retry: %s",
                envelope.event_id,
                _describe(message),
                exc,
            )
            self._rewind(message)
            return MessageOutcome.RETRY
        except NotificationRejectedError as exc:
            self.metrics.events_dropped += 1
            self.metrics.last_error = str(exc)
            logger.warning(
                "Dropped event %s at %s, the store refused its content: %s",
                envelope.event_id,
                _describe(message),
                exc,
            )
            self._commit(message)
            return MessageOutcome.DROPPED

        self.metrics.notifications_persisted += 1
        logger.info(
            "Stored notification %s (%s) for user %s",
            notification_id,
            envelope.event_type.value,
            envelope.subject_user_id,
        )
        self._commit(message)
        return MessageOutcome.PERSISTED

    def _commit(self, message: Any) -> None:
        self._state = ConsumerState.COMMITTING
        try:
            self._consumer.commit(message=message, asynchronous=False)
        except KafkaException as exc:
            # The message will be replayed after a rebalance or restart.
            self.metrics.commit_failures += 1
            self.metrics.last_error = str(exc)
            logger.warning("Offset commit failed at %s: %s", _describe(message), exc)

    def _rewind(self, message: Any) -> None:
        partition = TopicPartition(message.topic(), message.partition(), message.offset())
        try:
            self._consumer.seek(partition)
        except KafkaException as exc:
            logger.warning(
                "Could not rewind to %s, message returns after rebalance: %s",
                _describe(message),
                exc,
            )

    def _handle_broker_error(self, error: Any) -> MessageOutcome:
        if isinstance(error, KafkaError):
            if error.code() == KafkaError._PARTITION_EOF:
                return MessageOutcome.IDLE
            if error.fatal():
                raise ConsumerFatalError(f"Fatal Kafka error: {error}")
        self.metrics.broker_errors += 1
        self.metrics.last_error = str(error)
        logger.error("Kafka consumer error: %s", error)
        return MessageOutcome.BROKER_ERROR

    def _fail(self, exc: Exception) -> None:
        self._state = ConsumerState.FAILED
        self.metrics.last_error = str(exc)
        logger.critical("Notification consumer failed: %s", exc)

    def _on_assign(self, consumer: Any, partitions: list[Any]) -> None:
        logger.info(
            "Assigned partitions %s", [partition.partition for partition in partitions]
        )

    def _on_revoke(self, consumer: Any, partitions: list[Any]) -> None:
        logger.info(
            "Revoked partitions %s", [partition.partition for partition in partitions]
        )


def _describe(message: Any) -> str:
    return f"{message.topic()}[{message.partition()}]@{message.offset()}"


def _preview(raw: Any) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    text = str(raw)
    if len(text) > _RAW_PAYLOAD_PREVIEW:
        return text[:_RAW_PAYLOAD_PREVIEW] + "..."
    return text


__all__ = [
    "ConsumerMetrics",
    "ConsumerState",
    "MessageOutcome",
    "NotificationConsumerService",
    "build_consumer_config",
]
