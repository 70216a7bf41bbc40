"""Kafka adapter that publishes notification events."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable

from confluent_kafka import KafkaException, Producer

from projectpulse.application.ports import PublishResponse, PublishResult
from projectpulse.config import Settings
from projectpulse.domain.entities import EventEnvelope
from projectpulse.domain.exceptions import PublishError

from .serialization import encode_envelope

logger = logging.getLogger(__name__)


@dataclass
class ProducerMetrics:
    """Counters exposed by :class:`KafkaEventProducer`."""

    events_queued: int = 0
    publish_failures: int = 0
    deliveries_confirmed: int = 0
    delivery_failures: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "events_queued": self.events_queued,
            "publish_failures": self.publish_failures,
            "deliveries_confirmed": self.deliveries_confirmed,
            "delivery_failures": self.delivery_failures,
        }


def build_producer_config(settings: Settings) -> dict[str, Any]:
    """Return the librdkafka configuration used for notification events."""

    return {
        "bootstrap.servers": settings.kafka_bootstrap_servers,
        "acks": "all",
        "enable.idempotence": True,
        "message.timeout.ms": 30000,
        "linger.ms": 5,
        "client.id": "projectpulse-notification-producer",
    }


class KafkaEventProducer:
    """Publish :class:`EventEnvelope` messages without waiting for broker acks.

    ``publish`` only enqueues the message in the client; librdkafka retries
    delivery in the background and the delivery callback records the result.
    Failures are logged and reported through :class:`PublishResponse`, never
    raised to the caller.

    Usage:
        producer = KafkaEventProducer(topic="user-notifications",
                                      config=build_producer_config(settings))
        producer.publish(envelope)
        ...
        producer.close()
    """

    def __init__(
        self,
        *,
        topic: str,
        config: dict[str, Any] | None = None,
        producer_factory: Callable[[dict[str, Any]], Any] = Producer,
        flush_timeout: float = 10.0,
    ) -> None:
        self._topic = topic
        self._config = config or {}
        self._producer_factory = producer_factory
        self._flush_timeout = flush_timeout
        self._producer: Any = None
        self._lock = threading.Lock()
        self.metrics = ProducerMetrics()

    @classmethod
    def from_settings(cls, settings: Settings) -> "KafkaEventProducer":
        return cls(
            topic=settings.kafka_notification_topic,
            config=build_producer_config(settings),
            flush_timeout=settings.kafka_producer_flush_timeout_seconds,
        )

    @property
    def topic(self) -> str:
        return self._topic

    def _get_producer(self) -> Any:
        """Get or create the Kafka producer."""

        with self._lock:
            if self._producer is None:
                self._producer = self._producer_factory(self._config)
                logger.info("Kafka producer created for topic %s", self._topic)
            return self._producer

    def publish(self, envelope: EventEnvelope) -> PublishResponse:
        """Enqueue ``envelope`` keyed by its recipient so per-user order is kept."""

        try:
            self._enqueue(envelope)
        except PublishError as exc:
            self.metrics.publish_failures += 1
            logger.error(
                "Failed to publish %s event %s for user %s: %s",
                envelope.event_type.value,
                envelope.event_id,
                envelope.subject_user_id,
                exc,
            )
            return PublishResponse(
                result=PublishResult.FAILED,
                event_id=envelope.event_id,
                error_message=str(exc),
            )

        self.metrics.events_queued += 1
        logger.debug(
            "Queued %s event %s for user %s",
            envelope.event_type.value,
            envelope.event_id,
            envelope.subject_user_id,
        )
        return PublishResponse(result=PublishResult.QUEUED, event_id=envelope.event_id)

    def _enqueue(self, envelope: EventEnvelope) -> None:
        try:
            producer = self._get_producer()
            producer.produce(
                topic=self._topic,
                key=envelope.partition_key.encode("utf-8"),
                value=encode_envelope(envelope),
                on_delivery=self._on_delivery,
            )
            # Serve delivery callbacks of earlier messages without blocking.
            producer.poll(0)
        except BufferError as exc:
            raise PublishError("Local producer queue is full") from exc
        except KafkaException as exc:
            raise PublishError(str(exc)) from exc
        except (TypeError, ValueError) as exc:
            raise PublishError(f"Event could not be encoded: {exc}") from exc

    def _on_delivery(self, err: Any, msg: Any) -> None:
        if err is not None:
            self.metrics.delivery_failures += 1
            logger.error("Kafka delivery failed for topic %s: %s", self._topic, err)
            return
        self.metrics.deliveries_confirmed += 1
        logger.debug(
            "Kafka delivered message to %s[%s] at offset %s",
            msg.topic(),
            msg.partition(),
            msg.offset(),
        )

    def close(self) -> None:
        """Flush queued messages so the client attempts every pending delivery."""

        with self._lock:
            producer, self._producer = self._producer, None
        if producer is None:
            return
        remaining = producer.flush(self._flush_timeout)
        if remaining:
            logger.warning(
                "Kafka producer closed with %d undelivered notification events",
                remaining,
            )
        else:
            logger.info("Kafka producer flushed")


__all__ = ["KafkaEventProducer", "ProducerMetrics", "build_producer_config"]
