"""Run the notification consumer as its own process.

Usage:
    projectpulse-consumer [--topic user-notifications] [--group user-service-group]
"""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import Sequence

from projectpulse.config import get_settings
from projectpulse.domain.exceptions import ConsumerFatalError
from projectpulse.infrastructure.messaging import NotificationConsumerService

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line overrides for the consumer settings."""

    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Consume notification events and store them for their recipients.",
    )
    parser.add_argument(
        "--bootstrap-servers",
        default=settings.kafka_bootstrap_servers,
        help=f"Kafka bootstrap servers (default: {settings.kafka_bootstrap_servers})",
    )
    parser.add_argument(
        "--topic",
        default=settings.kafka_notification_topic,
        help=f"Notification topic (default: {settings.kafka_notification_topic})",
    )
    parser.add_argument(
        "--group",
        default=settings.kafka_consumer_group,
        help=f"Consumer group id (default: {settings.kafka_consumer_group})",
    )
    return parser.parse_args(argv)


def install_signal_handlers(stop_event: threading.Event) -> None:
    """Set ``stop_event`` on SIGINT or SIGTERM."""

    def _handle(signum: int, _frame: object) -> None:
        logger.info("Received %s, stopping after the current message", signal.Signals(signum).name)
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _handle)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings().model_copy(
        update={
            "kafka_bootstrap_servers": args.bootstrap_servers,
            "kafka_notification_topic": args.topic,
            "kafka_consumer_group": args.group,
        }
    )
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    stop_event = threading.Event()
    install_signal_handlers(stop_event)

    service = NotificationConsumerService.from_settings(settings)
    try:
        service.run(stop_event)
    except ConsumerFatalError as exc:
        logger.error("Consumer exited: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
