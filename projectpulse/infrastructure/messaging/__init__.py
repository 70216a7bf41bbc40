"""Kafka adapters of the notification pipeline."""

from .consumer import (
    ConsumerMetrics,
    ConsumerState,
    MessageOutcome,
    NotificationConsumerService,
    build_consumer_config,
)
from .producer import KafkaEventProducer, ProducerMetrics, build_producer_config
from .serialization import EnvelopeMessage, decode_envelope, encode_envelope
from .store import NotificationStoreProvider

__all__ = [
    "ConsumerMetrics",
    "ConsumerState",
    "EnvelopeMessage",
    "KafkaEventProducer",
    "MessageOutcome",
    "NotificationConsumerService",
    "NotificationStoreProvider",
    "ProducerMetrics",
    "build_consumer_config",
    "build_producer_config",
    "decode_envelope",
    "encode_envelope",
]
