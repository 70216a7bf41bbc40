"""Utility script to create the notification topic on the Kafka cluster.

Usage:
    python scripts/create_notification_topic.py [--partitions 3] [--dry-run]
"""

from __future__ import annotations

import argparse

from confluent_kafka import KafkaException
from confluent_kafka.admin import AdminClient, NewTopic

from projectpulse.config import get_settings


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for topic creation."""

    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Create the Kafka topic carrying user notification events.",
    )
    parser.add_argument(
        "--bootstrap-servers",
        default=settings.kafka_bootstrap_servers,
        help=f"Kafka bootstrap servers (default: {settings.kafka_bootstrap_servers})",
    )
    parser.add_argument(
        "--topic",
        default=settings.kafka_notification_topic,
        help=f"Topic name (default: {settings.kafka_notification_topic})",
    )
    parser.add_argument(
        "--partitions",
        type=int,
        default=settings.kafka_topic_partitions,
        help=f"Partition count (default: {settings.kafka_topic_partitions})",
    )
    parser.add_argument(
        "--replication-factor",
        type=int,
        default=1,
        help="Replication factor (default: 1)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print what would be created without contacting the cluster",
    )
    return parser.parse_args()


def create_topic(
    bootstrap_servers: str,
    *,
    topic: str,
    partitions: int,
    replication_factor: int,
) -> bool:
    """Create ``topic`` unless it already exists. Return ``True`` on success."""

    admin_client = AdminClient({"bootstrap.servers": bootstrap_servers})
    metadata = admin_client.list_topics(timeout=10)
    if topic in metadata.topics:
        partition_count = len(metadata.topics[topic].partitions)
        print(f"SKIP: {topic} already exists ({partition_count} partitions)")
        return True

    new_topic = NewTopic(
        topic=topic,
        num_partitions=partitions,
        replication_factor=replication_factor,
        config={"cleanup.policy": "delete"},
    )
    futures = admin_client.create_topics([new_topic], operation_timeout=30)
    try:
        futures[topic].result()
    except KafkaException as exc:
        print(f"FAILED: {topic} - {exc}")
        return False
    print(f"OK: {topic} ({partitions} partitions)")
    return True


def main() -> int:
    args = parse_args()
    if args.dry_run:
        print(f"DRY RUN: would create {args.topic} on {args.bootstrap_servers}")
        print(f"  Partitions: {args.partitions}")
        print(f"  Replication factor: {args.replication_factor}")
        return 0

    created = create_topic(
        args.bootstrap_servers,
        topic=args.topic,
        partitions=args.partitions,
        replication_factor=args.replication_factor,
    )
    return 0 if created else 1


if __name__ == "__main__":
    raise SystemExit(main())
