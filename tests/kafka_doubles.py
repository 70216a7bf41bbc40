"""In-memory stand-ins mimicking the confluent-kafka client API used by the pipeline."""

from __future__ import annotations

import threading
from typing import Any

from projectpulse.application.ports import PublishResponse, PublishResult
from projectpulse.domain.entities import EventEnvelope


class FakeMessage:
    def __init__(
        self,
        value: bytes | None,
        *,
        offset: int,
        topic: str = "user-notifications",
        partition: int = 0,
        key: bytes | None = None,
        error: Any = None,
    ) -> None:
        self._value = value
        self._offset = offset
        self._topic = topic
        self._partition = partition
        self._key = key
        self._error = error

    def value(self) -> bytes | None:
        return self._value

    def key(self) -> bytes | None:
        return self._key

    def error(self) -> Any:
        return self._error

    def topic(self) -> str:
        return self._topic

    def partition(self) -> int:
        return self._partition

    def offset(self) -> int:
        return self._offset


class FakeBroker:
    """Single-partition log shared by fake producers and consumers."""

    def __init__(self, topic: str = "user-notifications") -> None:
        self.topic = topic
        self.log: list[FakeMessage] = []

    def append(self, value: bytes | None, *, key: bytes | None = None) -> FakeMessage:
        message = FakeMessage(value, offset=len(self.log), topic=self.topic, key=key)
        self.log.append(message)
        return message


class FakeProducer:
    def __init__(self, broker: FakeBroker, *, fail_with: Exception | None = None) -> None:
        self.broker = broker
        self.fail_with = fail_with
        self.flushed = False
        self._pending: list[tuple[Any, FakeMessage]] = []

    def produce(self, topic, value=None, key=None, on_delivery=None) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        message = self.broker.append(value, key=key)
        if on_delivery is not None:
            self._pending.append((on_delivery, message))

    def poll(self, timeout: float = 0) -> int:
        served = len(self._pending)
        for callback, message in self._pending:
            callback(None, message)
        self._pending.clear()
        return served

    def flush(self, timeout: float = 0) -> int:
        self.poll(0)
        self.flushed = True
        return 0


class FakeConsumer:
    """Reads a :class:`FakeBroker` log, recording commits and seeks.

    ``stop_event`` is set once the log is drained so ``run`` loops end.
    """

    def __init__(
        self,
        broker: FakeBroker,
        *,
        stop_event: threading.Event | None = None,
    ) -> None:
        self.broker = broker
        self.stop_event = stop_event
        self.position = 0
        self.subscriptions: list[str] = []
        self.committed: list[int] = []
        self.seeks: list[int] = []
        self.closed = False

    def subscribe(self, topics, on_assign=None, on_revoke=None) -> None:
        self.subscriptions.extend(topics)

    def poll(self, timeout: float = 1.0) -> FakeMessage | None:
        if self.position >= len(self.broker.log):
            if self.stop_event is not None:
                self.stop_event.set()
            return None
        message = self.broker.log[self.position]
        self.position += 1
        return message

    def commit(self, message=None, asynchronous: bool = True) -> None:
        self.committed.append(message.offset())

    def seek(self, partition) -> None:
        self.seeks.append(partition.offset)
        self.position = partition.offset

    def close(self) -> None:
        self.closed = True


class RecordingProducer:
    """``EventProducer`` that keeps every published envelope."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.published: list[EventEnvelope] = []

    def publish(self, envelope: EventEnvelope) -> PublishResponse:
        if self.fail:
            return PublishResponse(
                result=PublishResult.FAILED,
                event_id=envelope.event_id,
                error_message="broker unavailable",
            )
        self.published.append(envelope)
        return PublishResponse(result=PublishResult.QUEUED, event_id=envelope.event_id)
